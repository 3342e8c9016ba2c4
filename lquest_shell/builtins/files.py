"""File and directory commands"""

import fnmatch
import re
from typing import List, Optional

from ..archive import ArchiveBlob, ArchiveFormat
from ..command_decorators import command
from ..exceptions import FsError, FileExists, IsADirectory, NoSuchFileOrDirectory, NotADirectory
from ..filesystem import (
    LINK_PERMISSIONS,
    FsNode,
    count_nodes,
    ensure_dirs,
    insert_node,
    join_path,
    lookup,
    make_dir,
    make_file,
    remove_empty_dir,
    remove_node,
    split_path,
    tree_size,
    update_node,
    write_file,
)
from ..process import Process
from ..result import OpenEditor
from .helpers import format_mtime, human_readable_size, iter_sources, split_lines, split_parent


# ---------------------------------------------------------------------------
# Navigation and listing
# ---------------------------------------------------------------------------

@command(category='File Ops')
def cmd_pwd(process: Process) -> int:
    """
    Print working directory

    Usage: pwd
    """
    process.stdout.writeline(process.cwd)
    return 0


def _long_line(process: Process, node: FsNode, name: str) -> str:
    size = node.size
    size_str = human_readable_size(size) if process.has_flag('h') else str(size)
    user = process.config.user
    line = f"{node.permissions} 1 {user} {user} {size_str:>5} {format_mtime(node.updated_at)} {name}"
    if node.is_link:
        line += f" {node.content}"
    return line


def _list_dir(process: Process, path: str, node: FsNode, header: bool) -> str:
    items = node.sorted_children(include_hidden=process.has_flag('a', 'all'))
    lines = []
    if header:
        lines.append(f"{path}:")
    if process.has_flag('l'):
        lines.extend(_long_line(process, child, child.name) for child in items)
    elif items:
        separator = '\n' if process.piped else '  '
        lines.append(separator.join(child.name for child in items))
    text = '\n'.join(lines)

    if process.has_flag('R'):
        for child in items:
            if child.is_dir:
                text += '\n\n' + _list_dir(process, join_path(path, child.name), child, True)
    return text


@command(category='File Ops')
def cmd_ls(process: Process) -> int:
    """
    List directory contents

    Usage: ls [-a] [-l] [-h] [-R] [path...]

    Options:
        -a    Include entries starting with .
        -l    Use long listing format
        -h    Print human-readable sizes (with -l)
        -R    List subdirectories recursively
    """
    targets = process.params or ['.']
    show_header = len(targets) > 1 or process.has_flag('R')
    blocks = []
    exit_code = 0

    for target in targets:
        node = process.resolve(target)
        if node is None:
            process.stderr.writeline(f"ls: cannot access '{target}': No such file or directory")
            exit_code = 2
            continue
        if node.is_dir:
            blocks.append(_list_dir(process, target, node, show_header))
        elif process.has_flag('l'):
            blocks.append(_long_line(process, node, target))
        else:
            blocks.append(target)

    if blocks:
        process.stdout.writeline(('\n\n' if show_header else '\n').join(blocks))
    return exit_code


@command(category='File Ops')
def cmd_cd(process: Process) -> int:
    """
    Change directory

    Usage: cd [path | -]

    With no argument, changes to the home directory; "cd -" returns to the
    previous directory and prints it.
    """
    if len(process.params) > 1:
        return process.error("bash: cd: too many arguments")

    target = process.params[0] if process.params else process.home
    announce = False
    if target == '-':
        if not process.old_pwd:
            return process.error("bash: cd: OLDPWD not set")
        target = process.old_pwd
        announce = True

    node = process.resolve(target)
    if node is None:
        return process.error(f"bash: cd: {target}: No such file or directory")
    if not node.is_dir:
        return process.error(f"bash: cd: {target}: Not a directory")

    process.cwd = process.abspath(target)
    if announce:
        process.stdout.writeline(process.cwd)
    return 0


# ---------------------------------------------------------------------------
# Creating and removing
# ---------------------------------------------------------------------------

def _add_node(process: Process, path: str, node: FsNode) -> None:
    parent_path, _ = split_parent(path)
    parent = lookup(process.fs, split_path(parent_path))
    if parent is None:
        raise NoSuchFileOrDirectory(path)
    if not parent.is_dir:
        raise NotADirectory(path)
    process.fs = insert_node(process.fs, parent_path, node, overwrite=False)


@command(category='File Ops')
def cmd_mkdir(process: Process) -> int:
    """
    Make directories

    Usage: mkdir [-p] directory...

    Options:
        -p    Create parent directories as needed, no error if existing
    """
    if not process.params:
        return process.error("mkdir: missing operand")

    exit_code = 0
    for target in process.params:
        path = process.abspath(target)
        try:
            if process.has_flag('p', 'parents'):
                process.fs = ensure_dirs(process.fs, path)
            else:
                if lookup(process.fs, split_path(path)) is not None:
                    raise FileExists(path)
                _add_node(process, path, make_dir(split_parent(path)[1]))
        except FsError as e:
            process.stderr.writeline(f"mkdir: cannot create directory '{target}': {e.reason}")
            exit_code = 1
    return exit_code


@command(category='File Ops')
def cmd_rmdir(process: Process) -> int:
    """
    Remove empty directories

    Usage: rmdir directory...
    """
    if not process.params:
        return process.error("rmdir: missing operand")

    exit_code = 0
    for target in process.params:
        try:
            process.fs = remove_empty_dir(process.fs, process.abspath(target))
        except FsError as e:
            process.stderr.writeline(f"rmdir: failed to remove '{target}': {e.reason}")
            exit_code = 1
    return exit_code


@command(category='File Ops')
def cmd_touch(process: Process) -> int:
    """
    Create empty files or refresh their timestamps

    Usage: touch file...
    """
    if not process.params:
        return process.error("touch: missing file operand")

    exit_code = 0
    for target in process.params:
        path = process.abspath(target)
        try:
            if lookup(process.fs, split_path(path)) is not None:
                process.fs = update_node(process.fs, path, lambda node: node.touched())
            else:
                _add_node(process, path, make_file(split_parent(path)[1]))
        except FsError as e:
            process.stderr.writeline(f"touch: cannot touch '{target}': {e.reason}")
            exit_code = 1
    return exit_code


@command(category='File Ops')
def cmd_rm(process: Process) -> int:
    """
    Remove files or directories

    Usage: rm [-r] [-f] path...

    Options:
        -r, -R   Remove directories and their contents recursively
        -f       Ignore nonexistent files, never complain about them
    """
    recursive = process.has_flag('r', 'R', 'recursive')
    force = process.has_flag('f', 'force')

    if not process.params:
        if force:
            return 0
        return process.error("rm: missing operand")

    exit_code = 0
    for target in process.params:
        path = process.abspath(target)
        node = lookup(process.fs, split_path(path))
        if path == '/':
            if recursive:
                process.stderr.writeline("rm: it is dangerous to operate recursively on '/'")
            else:
                process.stderr.writeline("rm: cannot remove '/': Is a directory")
            exit_code = 1
            continue
        if node is None:
            if not force:
                process.stderr.writeline(f"rm: cannot remove '{target}': No such file or directory")
                exit_code = 1
            continue
        if node.is_dir and not recursive:
            process.stderr.writeline(f"rm: cannot remove '{target}': Is a directory")
            exit_code = 1
            continue
        process.fs = remove_node(process.fs, path)
    return exit_code


# ---------------------------------------------------------------------------
# Copy and move
# ---------------------------------------------------------------------------

def _is_inside(path: str, ancestor: str) -> bool:
    return path == ancestor or path.startswith(ancestor.rstrip('/') + '/')


def _transfer_target(process: Process, node: FsNode, dest: str, dest_is_dir: bool) -> str:
    if dest_is_dir:
        return join_path(process.abspath(dest), node.name)
    return process.abspath(dest)


@command(category='File Ops')
def cmd_cp(process: Process) -> int:
    """
    Copy files and directories

    Usage: cp [-r] source... dest

    Options:
        -r, -R   Copy directories recursively
    """
    params = process.params
    if not params:
        return process.error("cp: missing file operand")
    if len(params) < 2:
        return process.error(f"cp: missing destination file operand after '{params[0]}'")

    *sources, dest = params
    dest_node = process.resolve(dest)
    dest_is_dir = dest_node is not None and dest_node.is_dir
    if len(sources) > 1 and not dest_is_dir:
        return process.error(f"cp: target '{dest}' is not a directory")

    recursive = process.has_flag('r', 'R', 'recursive', 'a')
    exit_code = 0
    for src in sources:
        node = process.resolve(src)
        if node is None:
            process.stderr.writeline(f"cp: cannot stat '{src}': No such file or directory")
            exit_code = 1
            continue
        if node.is_dir and not recursive:
            process.stderr.writeline(f"cp: -r not specified; omitting directory '{src}'")
            exit_code = 1
            continue

        target_path = _transfer_target(process, node, dest, dest_is_dir)
        if node.is_dir and _is_inside(target_path, process.abspath(src)):
            process.stderr.writeline(f"cp: cannot copy a directory, '{src}', into itself, '{dest}'")
            exit_code = 1
            continue

        existing = lookup(process.fs, split_path(target_path))
        if existing is not None and existing.is_dir and not node.is_dir:
            process.stderr.writeline(
                f"cp: cannot overwrite directory '{dest}' with non-directory")
            exit_code = 1
            continue

        parent_path, name = split_parent(target_path)
        parent = lookup(process.fs, split_path(parent_path))
        if parent is None or not parent.is_dir:
            process.stderr.writeline(
                f"cp: cannot create regular file '{dest}': No such file or directory")
            exit_code = 1
            continue
        # nodes are immutable, so the copy can share the whole subtree
        process.fs = insert_node(process.fs, parent_path, node.renamed(name).touched())
    return exit_code


@command(category='File Ops')
def cmd_mv(process: Process) -> int:
    """
    Move or rename files and directories

    Usage: mv source... dest
    """
    params = process.params
    if not params:
        return process.error("mv: missing file operand")
    if len(params) < 2:
        return process.error(f"mv: missing destination file operand after '{params[0]}'")

    *sources, dest = params
    dest_node = process.resolve(dest)
    dest_is_dir = dest_node is not None and dest_node.is_dir
    if len(sources) > 1 and not dest_is_dir:
        return process.error(f"mv: target '{dest}' is not a directory")

    exit_code = 0
    for src in sources:
        node = process.resolve(src)
        if node is None:
            process.stderr.writeline(f"mv: cannot stat '{src}': No such file or directory")
            exit_code = 1
            continue

        src_path = process.abspath(src)
        target_path = _transfer_target(process, node, dest, dest_is_dir)
        if target_path == src_path:
            process.stderr.writeline(f"mv: '{src}' and '{dest}' are the same file")
            exit_code = 1
            continue
        if node.is_dir and _is_inside(target_path, src_path):
            process.stderr.writeline(
                f"mv: cannot move '{src}' to a subdirectory of itself, '{dest}'")
            exit_code = 1
            continue

        existing = lookup(process.fs, split_path(target_path))
        if existing is not None and existing.is_dir != node.is_dir:
            if existing.is_dir:
                message = f"mv: cannot overwrite directory '{dest}' with non-directory"
            else:
                message = f"mv: cannot overwrite non-directory '{dest}' with directory '{src}'"
            process.stderr.writeline(message)
            exit_code = 1
            continue

        parent_path, name = split_parent(target_path)
        fs = remove_node(process.fs, src_path)
        parent = lookup(fs, split_path(parent_path))
        if parent is None or not parent.is_dir:
            process.stderr.writeline(
                f"mv: cannot move '{src}' to '{dest}': No such file or directory")
            exit_code = 1
            continue
        process.fs = insert_node(fs, parent_path, node.renamed(name))
    return exit_code


@command(category='File Ops')
def cmd_ln(process: Process) -> int:
    """
    Make links between files

    Usage: ln -s target link_name

    Options:
        -s    Make a symbolic link (hard links are not supported)
        -f    Replace an existing link_name
    """
    if len(process.params) < 2:
        if not process.params:
            return process.error("ln: missing file operand")
        return process.error(f"ln: missing destination file operand after '{process.params[0]}'")
    if not process.has_flag('s', 'symbolic'):
        return process.error("ln: hard links are not supported (use -s)")

    target, link_name = process.params[0], process.params[1]
    link_node = process.resolve(link_name)
    if link_node is not None and link_node.is_dir:
        link_path = join_path(process.abspath(link_name), split_parent(process.abspath(target))[1])
    else:
        link_path = process.abspath(link_name)

    if lookup(process.fs, split_path(link_path)) is not None and not process.has_flag('f', 'force'):
        return process.error(f"ln: failed to create symbolic link '{link_name}': File exists")

    parent_path, name = split_parent(link_path)
    parent = lookup(process.fs, split_path(parent_path))
    if parent is None or not parent.is_dir:
        return process.error(
            f"ln: failed to create symbolic link '{link_name}': No such file or directory")
    process.fs = insert_node(process.fs, parent_path,
                             make_file(name, f"-> {target}", LINK_PERMISSIONS))
    return 0


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------

OCTAL_MODE = re.compile(r'^[0-7]{3}$')
SYMBOLIC_CLAUSE = re.compile(r'^([ugoa]*)([+\-=])([rwx]+)$')
_CLASS_OFFSETS = {'u': 1, 'g': 4, 'o': 7}


def _mode_to_rwx(mode: str) -> str:
    """Convert a 3-digit octal mode to its 9-character rwx string"""

    def _triple(val):
        """Convert 3-bit value to rwx"""
        r = 'r' if val & 4 else '-'
        w = 'w' if val & 2 else '-'
        x = 'x' if val & 1 else '-'
        return r + w + x

    return ''.join(_triple(int(digit)) for digit in mode)


def rwx_to_octal(permissions: str) -> str:
    """Octal digits of a permission string, e.g. '-rwxr-xr-x' -> '755'"""
    digits = []
    for offset in (1, 4, 7):
        triple = permissions[offset:offset + 3]
        value = 0
        if triple[0:1] == 'r':
            value += 4
        if triple[1:2] == 'w':
            value += 2
        if triple[2:3] in ('x', 's', 't'):
            value += 1
        digits.append(str(value))
    return ''.join(digits)


def apply_mode(permissions: str, mode: str) -> str:
    """
    Apply a chmod mode to a permission string

    Args:
        permissions: Current string, e.g. '-rw-r--r--'
        mode: Octal ('755') or symbolic ('u+x', 'go-w', 'a=r,u+w')

    Returns:
        The new 10-character permission string

    Raises:
        ValueError: the mode is not valid
    """
    kind = permissions[:1] or '-'
    if OCTAL_MODE.match(mode):
        return kind + _mode_to_rwx(mode)

    bits = {
        cls: {letter: permissions[offset + i:offset + i + 1] not in ('', '-')
              for i, letter in enumerate('rwx')}
        for cls, offset in _CLASS_OFFSETS.items()
    }
    for clause in mode.split(','):
        match = SYMBOLIC_CLAUSE.match(clause)
        if not match:
            raise ValueError(mode)
        who, op, perms = match.groups()
        classes = 'ugo' if not who or 'a' in who else who
        for cls in classes:
            if op == '=':
                for letter in 'rwx':
                    bits[cls][letter] = letter in perms
            else:
                for letter in perms:
                    bits[cls][letter] = op == '+'

    rendered = ''.join(
        ''.join(letter if bits[cls][letter] else '-' for letter in 'rwx')
        for cls in 'ugo'
    )
    return kind + rendered


def _chmod_tree(node: FsNode, mode: str) -> FsNode:
    node = node.with_permissions(apply_mode(node.permissions, mode))
    if node.is_dir and node.children:
        node = node.with_children(
            {name: _chmod_tree(child, mode) for name, child in node.children.items()},
            touch=False)
    return node


@command(category='File Ops')
def cmd_chmod(process: Process) -> int:
    """
    Change file mode bits

    Usage: chmod [-R] MODE file...

    MODE is three octal digits (755) or symbolic [ugoa][+-=][rwx], with
    clauses separated by commas.
    """
    params = list(process.params)
    # "chmod -x file": the mode looks like an option
    dash_modes = [opt for opt in process.options if re.match(r'^-[rwx]+$', opt)]
    if dash_modes:
        mode = dash_modes[-1]
    elif params:
        mode = params.pop(0)
    else:
        return process.error("chmod: missing operand")

    if not params:
        return process.error(f"chmod: missing operand after '{mode}'")

    try:
        apply_mode('----------', mode)
    except ValueError:
        return process.error(f"chmod: invalid mode: '{mode}'")

    recursive = process.has_flag('R', 'recursive')
    exit_code = 0
    for target in params:
        path = process.abspath(target)
        if lookup(process.fs, split_path(path)) is None:
            process.stderr.writeline(f"chmod: cannot access '{target}': No such file or directory")
            exit_code = 1
            continue
        if recursive:
            process.fs = update_node(process.fs, path, lambda node: _chmod_tree(node, mode))
        else:
            process.fs = update_node(
                process.fs, path,
                lambda node: node.with_permissions(apply_mode(node.permissions, mode)))
    return exit_code


# ---------------------------------------------------------------------------
# Searching and inspecting
# ---------------------------------------------------------------------------

def _find_walk(node: FsNode, path: str, depth: int, max_depth: Optional[int]):
    yield path, node, depth
    if max_depth is not None and depth >= max_depth:
        return
    for child in node.sorted_children():
        yield from _find_walk(child, join_path(path, child.name), depth + 1, max_depth)


@command(category='File Ops')
def cmd_find(process: Process) -> int:
    """
    Search for files in a directory hierarchy

    Usage: find [path...] [-name PATTERN] [-iname PATTERN] [-type f|d] [-maxdepth N]

    PATTERN may use the shell wildcards * and ?; without wildcards it must
    match the whole name.
    """
    starts: List[str] = []
    pattern = None
    ignore_case = False
    type_filter = None
    max_depth = None

    args = process.args
    i = 0
    while i < len(args):
        arg = args[i]
        i += 1
        if arg in ('-name', '-iname', '-type', '-maxdepth'):
            if i >= len(args):
                return process.error(f"find: missing argument to `{arg}'")
            value = args[i]
            i += 1
            if arg == '-type':
                if value not in ('f', 'd'):
                    return process.error(f"find: Unknown argument to -type: {value}")
                type_filter = value
            elif arg == '-maxdepth':
                if not value.isdigit():
                    return process.error(
                        f"find: Expected a positive decimal integer argument to -maxdepth, but got '{value}'")
                max_depth = int(value)
            else:
                pattern = value
                ignore_case = arg == '-iname'
        elif arg.startswith('-') and len(arg) > 1:
            return process.error(f"find: unknown predicate `{arg}'")
        else:
            starts.append(arg)

    exit_code = 0
    for start in starts or ['.']:
        root = process.resolve(start)
        if root is None:
            process.stderr.writeline(f"find: '{start}': No such file or directory")
            exit_code = 1
            continue
        for path, node, _ in _find_walk(root, start, 0, max_depth):
            if type_filter == 'f' and node.is_dir:
                continue
            if type_filter == 'd' and not node.is_dir:
                continue
            if pattern is not None:
                name = node.name if path != start else split_parent(process.abspath(start))[1]
                if ignore_case:
                    matched = fnmatch.fnmatchcase(name.lower(), pattern.lower())
                else:
                    matched = fnmatch.fnmatchcase(name, pattern)
                if not matched:
                    continue
            process.stdout.writeline(path)
    return exit_code


def _tree_lines(node: FsNode, prefix: str, show_hidden: bool) -> List[str]:
    lines = []
    children = node.sorted_children(include_hidden=show_hidden)
    for idx, child in enumerate(children):
        is_last = idx == len(children) - 1
        lines.append(f"{prefix}{'└── ' if is_last else '├── '}{child.name}")
        if child.is_dir:
            lines.extend(_tree_lines(child, prefix + ('    ' if is_last else '│   '),
                                     show_hidden))
    return lines


@command(category='File Ops')
def cmd_tree(process: Process) -> int:
    """
    List contents of directories in a tree-like format

    Usage: tree [-a] [directory]
    """
    target = process.params[0] if process.params else '.'
    node = process.resolve(target)
    if node is None or not node.is_dir:
        process.stdout.writeline(f"{target} [error opening dir]\n\n0 directories, 0 files")
        return 2

    show_hidden = process.has_flag('a')
    lines = [target]
    lines.extend(_tree_lines(node, '', show_hidden))
    dirs, files = count_nodes(node, show_hidden)
    lines.append('')
    lines.append(f"{dirs} director{'y' if dirs == 1 else 'ies'}, "
                 f"{files} file{'' if files == 1 else 's'}")
    process.stdout.writeline('\n'.join(lines))
    return 0


def _du_size(process: Process, size: int) -> str:
    if process.has_flag('h'):
        return human_readable_size(size)
    return str(-(-size // 1024))


def _du_lines(process: Process, node: FsNode, path: str) -> List[str]:
    lines = []
    for child in node.sorted_children():
        if child.is_dir:
            lines.extend(_du_lines(process, child, join_path(path, child.name)))
    lines.append(f"{_du_size(process, tree_size(node))}\t{path}")
    return lines


@command(category='File Ops')
def cmd_du(process: Process) -> int:
    """
    Estimate file space usage

    Usage: du [-h] [-s] [path...]

    Options:
        -h    Print sizes in human readable format
        -s    Display only a total for each argument
    """
    exit_code = 0
    for target in process.params or ['.']:
        node = process.resolve(target)
        if node is None:
            process.stderr.writeline(f"du: cannot access '{target}': No such file or directory")
            exit_code = 1
            continue
        if node.is_dir and not process.has_flag('s'):
            process.stdout.writeline('\n'.join(_du_lines(process, node, target)))
        else:
            process.stdout.writeline(f"{_du_size(process, tree_size(node))}\t{target}")
    return exit_code


@command(category='File Ops')
def cmd_stat(process: Process) -> int:
    """
    Display file status

    Usage: stat file...
    """
    if not process.params:
        return process.error("stat: missing operand")

    exit_code = 0
    for target in process.params:
        node = process.resolve(target)
        if node is None:
            process.stderr.writeline(
                f"stat: cannot statx '{target}': No such file or directory")
            exit_code = 1
            continue
        if node.is_dir:
            kind = 'directory'
        elif node.is_link:
            kind = 'symbolic link'
        elif not node.content:
            kind = 'regular empty file'
        else:
            kind = 'regular file'
        user = process.config.user
        modified = node.updated_at.replace('T', ' ')
        process.stdout.writeline('\n'.join([
            f"  File: {target}",
            f"  Size: {node.size:<10}\tBlocks: {-(-node.size // 512):<10} IO Block: 4096   {kind}",
            f"Access: (0{rwx_to_octal(node.permissions)}/{node.permissions})  "
            f"Uid: ( 1000/ {user})   Gid: ( 1000/ {user})",
            f"Modify: {modified}",
        ]))
    return exit_code


def _describe(node: FsNode) -> str:
    if node.is_dir:
        return 'directory'
    content = node.content or ''
    if node.is_link:
        return f"symbolic link to {content[3:] if content.startswith('-> ') else content}"
    blob_format = ArchiveBlob.sniff(content)
    if blob_format is ArchiveFormat.ZIP:
        return 'Zip archive data, at least v2.0 to extract'
    if blob_format is ArchiveFormat.TAR:
        return 'POSIX tar archive (GNU)'
    if not content:
        return 'empty'
    charset = 'ASCII' if content.isascii() else 'Unicode UTF-8'
    if content.startswith('#!'):
        interpreter = content[2:].split('\n', 1)[0].strip().split('/')[-1].split(' ')[-1]
        return f"{interpreter} script, {charset} text executable"
    return f"{charset} text"


@command(category='File Ops')
def cmd_file(process: Process) -> int:
    """
    Determine file type

    Usage: file path...
    """
    if not process.params:
        return process.error("Usage: file [-bcEhikLlNnprsSvzZ0] [--apple] [--extension] "
                             "[--mime-encoding] [--mime-type] file ...")

    exit_code = 0
    for target in process.params:
        node = process.resolve(target)
        if node is None:
            process.stderr.writeline(
                f"{target}: cannot open `{target}' (No such file or directory)")
            exit_code = 1
            continue
        process.stdout.writeline(f"{target}: {_describe(node)}")
    return exit_code


# ---------------------------------------------------------------------------
# Viewing and editing
# ---------------------------------------------------------------------------

@command(category='File Ops')
def cmd_cat(process: Process) -> int:
    """
    Concatenate files and print them

    Usage: cat [-n] [file...]

    Options:
        -n    Number all output lines

    With no file, reads the piped input.
    """
    if not process.params and not process.stdin.is_piped:
        return process.error("cat: missing operand")

    number = process.has_flag('n', 'number')
    line_no = 0
    for _, content in iter_sources(process, process.params):
        if number:
            numbered = []
            for line in split_lines(content):
                line_no += 1
                numbered.append(f"{line_no:>6}\t{line}")
            content = '\n'.join(numbered)
        if content:
            process.stdout.write(content if content.endswith('\n') else content + '\n')
    return 1 if process.stderr.has_errors else 0


@command(category='File Ops')
def cmd_less(process: Process) -> int:
    """
    View file contents one page at a time

    Usage: less file
    """
    if not process.params:
        if process.stdin.is_piped:
            process.stdout.write(process.stdin.read())
            return 0
        return process.error("Missing filename (\"less --help\" for help)")

    for name in process.params:
        node = process.resolve(name)
        if node is None:
            process.stderr.writeline(f"{name}: No such file or directory")
        elif node.is_dir:
            process.stderr.writeline(f"{name} is a directory")
        else:
            process.stdout.writeline(node.content or '')
    return 1 if process.stderr.has_errors else 0


@command(category='File Ops')
def cmd_nano(process: Process) -> int:
    """
    Open a file in the text editor

    Usage: nano file

    Piped input becomes the initial buffer.
    """
    if not process.params:
        return process.error("nano: missing filename")

    name = process.params[0]
    node = process.resolve(name)
    if node is not None and node.is_dir:
        return process.error(f"nano: {name}: Is a directory")

    if process.stdin.is_piped:
        seed = process.stdin.read()
        process.stdin_content = seed
    else:
        seed = (node.content or '') if node is not None else ''
    process.action = OpenEditor(process.abspath(name), seed)
    return 0


@command(category='File Ops')
def cmd_tee(process: Process) -> int:
    """
    Copy piped input to files and to the output

    Usage: tee [-a] file...

    Options:
        -a    Append to the files instead of overwriting
    """
    data = process.stdin.read()
    append = process.has_flag('a', 'append')
    exit_code = 0
    for name in process.params:
        try:
            process.fs = write_file(process.fs, process.cwd, name, data,
                                    append=append, home=process.home)
        except (IsADirectory, NoSuchFileOrDirectory, NotADirectory) as e:
            process.stderr.writeline(f"tee: {name}: {e.reason}")
            exit_code = 1
    process.stdout.write(data)
    return exit_code
