"""Archive commands: tar, zip and unzip"""

import re
from typing import Dict, List, Optional, Tuple

from ..archive import ArchiveBlob, ArchiveFormat, entry_key
from ..command_decorators import command
from ..exceptions import CorruptArchive, FsError
from ..filesystem import FsNode, ensure_dirs, write_file
from ..parser import CommandParser
from ..process import Process
from ..result import ASYNC_UNZIP, ASYNC_ZIP


def _snapshot(process: Process, targets: List[str], missing: str) -> Dict[str, FsNode]:
    """Collect ``{entry key: node}`` for the targets, one error line per missing one"""
    entries: Dict[str, FsNode] = {}
    for target in targets:
        node = process.resolve(target)
        if node is None:
            process.stderr.writeline(missing.format(target=target))
            continue
        entries[entry_key(target, node)] = node
    return entries


def _read_archive(process: Process, name: str,
                  fmt: ArchiveFormat) -> Tuple[Optional[ArchiveBlob], Optional[str]]:
    """Load an archive file; second item names the failure"""
    node = process.resolve(name)
    if node is None:
        return None, 'missing'
    if node.is_dir:
        return None, 'directory'
    if not ArchiveBlob.is_archive(node.content, fmt):
        return None, 'corrupt'
    try:
        return ArchiveBlob.decode(node.content), None
    except CorruptArchive:
        return None, 'corrupt'


# ---------------------------------------------------------------------------
# tar
# ---------------------------------------------------------------------------

_OLD_STYLE_TAR = re.compile(r'^[cxtvfzjpC]+$')


@command(value_options='fC', category='Archives')
def cmd_tar(process: Process) -> int:
    """
    Create, extract or list tar archives

    Usage: tar -c [-v] -f ARCHIVE path...
           tar -x [-v] -f ARCHIVE [-C DIR]
           tar -t [-v] -f ARCHIVE

    The leading dash may be omitted (tar cvf out.tar dir).

    Options:
        -c    Create a new archive
        -x    Extract files from an archive
        -t    List the contents of an archive
        -v    List files as they are processed
        -f    Archive file name
        -C    Extract into DIR
    """
    flags, values, params = process.flags, process.values, process.params
    if process.args and _OLD_STYLE_TAR.match(process.args[0]):
        parsed = CommandParser.parse_args(['-' + process.args[0]] + process.args[1:],
                                          frozenset('fC'))
        flags, values, params = parsed.flags, parsed.values, parsed.params

    modes = [mode for mode in 'cxt' if mode in flags]
    if len(modes) != 1:
        if modes:
            return process.error("tar: You may not specify more than one "
                                 "'-Acdtrux', '--delete' or  '--test-label' option", 2)
        return process.error("tar: You must specify one of the '-Acdtrux', "
                             "'--delete' or '--test-label' options", 2)
    mode = modes[0]
    verbose = 'v' in flags
    archive_name = values.get('f')

    if mode == 'c':
        if not archive_name:
            return process.error(
                "tar: Refusing to write archive contents to terminal (missing -f option?)", 2)
        if not params:
            return process.error("tar: Cowardly refusing to create an empty archive", 2)
        entries = _snapshot(process, params,
                            "tar: {target}: Cannot stat: No such file or directory")
        blob = ArchiveBlob(ArchiveFormat.TAR, entries)
        process.fs = write_file(process.fs, process.cwd, archive_name, blob.encode(),
                                home=process.home)
        if verbose:
            for name in blob.list_names():
                process.stdout.writeline(name)
        if process.stderr.has_errors:
            return process.error("tar: Exiting with failure status due to previous errors", 2)
        return 0

    if not archive_name:
        return process.error(
            "tar: Refusing to read archive contents from terminal (missing -f option?)", 2)

    blob, problem = _read_archive(process, archive_name, ArchiveFormat.TAR)
    if problem == 'missing':
        process.stderr.writeline(f"tar: {archive_name}: Cannot open: No such file or directory")
        return process.error("tar: Error is not recoverable: exiting now", 2)
    if problem == 'directory':
        process.stderr.writeline(f"tar: {archive_name}: Cannot read: Is a directory")
        return process.error("tar: Error is not recoverable: exiting now", 2)
    if problem:
        process.stderr.writeline("tar: This does not look like a tar archive")
        return process.error("tar: Exiting with failure status due to previous errors", 2)

    if mode == 't':
        for name in blob.list_names():
            process.stdout.writeline(name)
        return 0

    dest = values.get('C', '.')
    dest_node = process.resolve(dest)
    if dest_node is None or not dest_node.is_dir:
        return process.error(f"tar: {dest}: Cannot open: No such file or directory", 2)
    process.fs = blob.extract_into(process.fs, process.abspath(dest))
    if verbose:
        for name in blob.list_names():
            process.stdout.writeline(name)
    return 0


# ---------------------------------------------------------------------------
# zip / unzip
# ---------------------------------------------------------------------------

def _zip_line(verb: str, name: str, node: FsNode) -> str:
    if node.is_dir or not node.content:
        return f"  {verb}: {name} (stored 0%)"
    return f"  {verb}: {name} (deflated 0%)"


@command(category='Archives')
def cmd_zip(process: Process) -> int:
    """
    Package files into a zip archive

    Usage: zip [-r] [-q] archive[.zip] path...

    Options:
        -r    Recurse into directories (always done; accepted for compatibility)
        -q    Quiet operation

    Adding to an existing archive updates entries with the same name.
    """
    if not process.params:
        return process.error("zip error: Nothing to do!", 12)

    archive_name = process.params[0]
    if not archive_name.endswith('.zip'):
        archive_name += '.zip'
    targets = process.params[1:]
    if not targets:
        return process.error(f"zip error: Nothing to do! ({archive_name})", 12)

    existing, problem = _read_archive(process, archive_name, ArchiveFormat.ZIP)
    if problem in ('directory', 'corrupt'):
        return process.error(f"zip error: Zip file structure invalid ({archive_name})", 3)

    entries = _snapshot(process, targets,
                        "\tzip warning: name not matched: {target}")
    if not entries:
        return process.error(f"zip error: Nothing to do! ({archive_name})", 12)

    added = ArchiveBlob(ArchiveFormat.ZIP, entries)
    blob = existing.merged(added) if existing is not None else added
    old_names = set(existing.list_names()) if existing is not None else set()

    process.fs = write_file(process.fs, process.cwd, archive_name, blob.encode(),
                            home=process.home)
    if not process.has_flag('q', 'quiet'):
        for name, node in added.members():
            verb = 'updating' if name in old_names else 'adding'
            process.stdout.writeline(_zip_line(verb, name, node))
    process.mark_async(ASYNC_ZIP, list(entries))
    return 0


def _unzip_listing(process: Process, archive_name: str, blob: ArchiveBlob) -> None:
    process.stdout.writeline(f"Archive:  {archive_name}")
    process.stdout.writeline("  Length      Date    Time    Name")
    process.stdout.writeline("---------  ---------- -----   ----")
    total = 0
    count = 0
    for name, node in blob.members():
        size = 0 if node.is_dir else node.size
        total += size
        count += 1
        stamp = node.updated_at[:16].replace('T', ' ')
        process.stdout.writeline(f"{size:>9}  {stamp:<16}   {name}")
    process.stdout.writeline("---------                     -------")
    process.stdout.writeline(f"{total:>9}                     {count} file{'' if count == 1 else 's'}")


@command(value_options='d', category='Archives')
def cmd_unzip(process: Process) -> int:
    """
    Extract files from a zip archive

    Usage: unzip [-l] [-q] archive[.zip] [-d DIR]

    Options:
        -l    List the archive contents without extracting
        -q    Quiet operation
        -d    Extract into DIR (created when missing)
    """
    if not process.params:
        return process.error("UnZip: usage: unzip [-Z] [-opts[modifiers]] file[.zip] "
                             "[list] [-x xlist] [-d exdir]", 10)

    name = process.params[0]
    candidates = [name] if name.endswith('.zip') else [name, name + '.zip']
    blob = None
    archive_name = name
    for candidate in candidates:
        blob, problem = _read_archive(process, candidate, ArchiveFormat.ZIP)
        if problem != 'missing':
            archive_name = candidate
            break
    if problem == 'missing':
        return process.error(
            f"unzip:  cannot find or open {name}, {name}.zip or {name}.ZIP.", 9)
    if problem:
        process.stderr.writeline(f"Archive:  {archive_name}")
        return process.error(
            f"  End-of-central-directory signature not found.  {archive_name} is not a zipfile.", 9)

    if process.has_flag('l'):
        _unzip_listing(process, archive_name, blob)
        return 0

    dest = process.values.get('d', '.')
    try:
        process.fs = ensure_dirs(process.fs, process.abspath(dest))
    except FsError:
        return process.error(f"checkdir:  cannot create extraction directory: {dest}", 3)

    dest_path = process.abspath(dest)
    quiet = process.has_flag('q', 'quiet')
    if not quiet:
        process.stdout.writeline(f"Archive:  {archive_name}")
        prefix = '' if dest in ('.', './') else dest.rstrip('/') + '/'
        for member, node in blob.members():
            verb = '   creating' if node.is_dir else '  inflating'
            process.stdout.writeline(f"{verb}: {prefix}{member}")

    process.fs = blob.extract_into(process.fs, dest_path)
    process.mark_async(ASYNC_UNZIP, list(blob.entries))
    return 0
