"""Helpers shared by the built-in commands"""

from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from ..filesystem import FsNode, split_path
from ..process import Process


def human_readable_size(size: int) -> str:
    """Convert size in bytes to human-readable format"""
    units = ['B', 'K', 'M', 'G', 'T', 'P']
    unit_index = 0
    size_float = float(size)

    while size_float >= 1024.0 and unit_index < len(units) - 1:
        size_float /= 1024.0
        unit_index += 1

    if unit_index == 0:
        # Bytes - no decimal
        return f"{int(size_float)}"
    elif size_float >= 10:
        # >= 10 - no decimal places
        return f"{int(size_float)}{units[unit_index]}"
    else:
        # < 10 - one decimal place
        return f"{size_float:.1f}{units[unit_index]}"


def format_mtime(iso: str) -> str:
    """Render an ISO timestamp the way ``ls -l`` does (``Oct 25 10:00``)"""
    try:
        stamp = datetime.fromisoformat(iso)
    except (TypeError, ValueError):
        return 'Jan  1 00:00'
    return f"{stamp:%b} {stamp.day:>2} {stamp:%H:%M}"


def split_parent(abs_path: str) -> Tuple[str, str]:
    """Split an absolute path into (parent path, base name)"""
    parts = split_path(abs_path)
    if not parts:
        return '/', ''
    return '/' + '/'.join(parts[:-1]), parts[-1]


def split_lines(text: str) -> List[str]:
    """Lines of ``text``; a trailing newline does not add an empty line"""
    if not text:
        return []
    lines = text.split('\n')
    if text.endswith('\n'):
        lines.pop()
    return lines


def iter_sources(process: Process, files: List[str],
                 missing: str = "{cmd}: {name}: No such file or directory",
                 is_dir: str = "{cmd}: {name}: Is a directory",
                 ) -> Iterator[Tuple[Optional[str], str]]:
    """
    Yield ``(name, content)`` for every readable file, or stdin when ``files`` is empty

    Unreadable targets get one error line each and are skipped; the caller
    checks ``process.stderr.has_errors`` for the exit status.
    """
    if not files:
        yield None, process.stdin.read()
        return

    for name in files:
        node = process.resolve(name)
        if node is None:
            process.stderr.writeline(missing.format(cmd=process.command, name=name))
            continue
        if node.is_dir:
            process.stderr.writeline(is_dir.format(cmd=process.command, name=name))
            continue
        yield name, node.content or ''


def require_file(process: Process, name: str) -> Optional[FsNode]:
    """Resolve ``name`` to a file node, reporting the usual errors"""
    node = process.resolve(name)
    if node is None:
        process.stderr.writeline(f"{process.command}: {name}: No such file or directory")
        return None
    if node.is_dir:
        process.stderr.writeline(f"{process.command}: {name}: Is a directory")
        return None
    return node
