"""In-memory filesystem tree

Nodes are immutable. Every mutating helper copies only the directories on the
path from the root to the changed node and returns a new root, so any root a
caller still holds keeps describing the old state.
"""

import enum
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .exceptions import (
    DirectoryNotEmpty,
    FileExists,
    InvalidPath,
    IsADirectory,
    NoSuchFileOrDirectory,
    NotADirectory,
)

logger = logging.getLogger(__name__)

DEFAULT_HOME = '/home/student'
DIR_PERMISSIONS = 'drwxr-xr-x'
FILE_PERMISSIONS = '-rw-r--r--'
LINK_PERMISSIONS = 'lrwxrwxrwx'
DIR_SIZE = 4096


class NodeKind(enum.Enum):
    FILE = 'file'
    DIRECTORY = 'directory'


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string"""
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


_EMPTY_CHILDREN = MappingProxyType({})


@dataclass(frozen=True)
class FsNode:
    """One file or directory of the virtual tree"""

    name: str
    kind: NodeKind
    content: Optional[str] = None
    children: Optional[Mapping[str, 'FsNode']] = None
    permissions: str = ''
    updated_at: str = field(default_factory=now_iso, compare=False)

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def is_link(self) -> bool:
        return self.permissions.startswith('l')

    @property
    def size(self) -> int:
        """Size shown by ``ls -l``: 4096 for directories, byte length for files"""
        if self.is_dir:
            return DIR_SIZE
        return len((self.content or '').encode('utf-8'))

    def child(self, name: str) -> Optional['FsNode']:
        if not self.is_dir:
            return None
        return self.children.get(name)

    def sorted_children(self, include_hidden: bool = True) -> List['FsNode']:
        if not self.is_dir:
            return []
        return [
            self.children[name] for name in sorted(self.children)
            if include_hidden or not name.startswith('.')
        ]

    def with_children(self, children: Mapping[str, 'FsNode'], touch: bool = True) -> 'FsNode':
        kwargs = {'children': MappingProxyType(dict(children))}
        if touch:
            kwargs['updated_at'] = now_iso()
        return replace(self, **kwargs)

    def with_content(self, content: str) -> 'FsNode':
        return replace(self, content=content, updated_at=now_iso())

    def renamed(self, name: str) -> 'FsNode':
        return replace(self, name=name)

    def touched(self) -> 'FsNode':
        return replace(self, updated_at=now_iso())

    def with_permissions(self, permissions: str) -> 'FsNode':
        return replace(self, permissions=permissions, updated_at=now_iso())


def make_file(name: str, content: str = '', permissions: str = None,
              updated_at: str = None) -> FsNode:
    """Create a file node"""
    return FsNode(
        name=name,
        kind=NodeKind.FILE,
        content=content,
        permissions=permissions or FILE_PERMISSIONS,
        updated_at=updated_at or now_iso(),
    )


def make_dir(name: str, children: Iterable[FsNode] = (), permissions: str = None,
             updated_at: str = None) -> FsNode:
    """Create a directory node from an iterable of child nodes"""
    return FsNode(
        name=name,
        kind=NodeKind.DIRECTORY,
        children=MappingProxyType({c.name: c for c in children}) if children else _EMPTY_CHILDREN,
        permissions=permissions or DIR_PERMISSIONS,
        updated_at=updated_at or now_iso(),
    )


# ---------------------------------------------------------------------------
# Path handling
# ---------------------------------------------------------------------------

def expand_home(path: str, home: str = DEFAULT_HOME) -> str:
    """Expand a leading ``~`` or ``~/`` to the home directory"""
    if path == '~':
        return home
    if path.startswith('~/'):
        return home.rstrip('/') + path[1:]
    return path


def normalize(cwd: str, path: str, home: str = DEFAULT_HOME) -> str:
    """
    Compose ``path`` onto ``cwd`` without touching the tree

    Args:
        cwd: Absolute working directory
        path: Absolute, relative or home-relative path
        home: Directory ``~`` expands to

    Returns:
        Normalized absolute path ("/" for the root)
    """
    path = expand_home(path, home)
    if path.startswith('/'):
        stack = []
    else:
        stack = [p for p in cwd.split('/') if p]

    for part in path.split('/'):
        if not part or part == '.':
            continue
        if part == '..':
            if stack:
                stack.pop()
            continue
        stack.append(part)

    return '/' + '/'.join(stack)


def split_path(path: str) -> List[str]:
    """Split a normalized absolute path into its components"""
    return [p for p in path.split('/') if p]


def join_path(parent: str, name: str) -> str:
    if parent.endswith('/'):
        return parent + name
    return parent + '/' + name


def lookup(root: FsNode, parts: List[str]) -> Optional[FsNode]:
    """Walk ``parts`` from ``root``; None when a segment is missing"""
    current = root
    for part in parts:
        if not current.is_dir:
            return None
        current = current.children.get(part)
        if current is None:
            return None
    return current


def resolve(root: FsNode, cwd: str, target: str, home: str = DEFAULT_HOME) -> Optional[FsNode]:
    """
    Resolve a path expression to a node

    Args:
        root: Filesystem root
        cwd: Absolute working directory
        target: Path expression
        home: Directory ``~`` expands to

    Returns:
        The node, or None when any segment is missing or not a directory
    """
    return lookup(root, split_path(normalize(cwd, target, home)))


# ---------------------------------------------------------------------------
# Persistent updates
# ---------------------------------------------------------------------------

def _update(node: FsNode, parts: List[str], fn: Callable[[FsNode], Optional[FsNode]],
            walked: List[str]) -> FsNode:
    if not parts:
        return fn(node)
    if not node.is_dir:
        raise NotADirectory('/' + '/'.join(walked))
    head, rest = parts[0], parts[1:]
    child = node.children.get(head)
    if child is None:
        raise NoSuchFileOrDirectory('/' + '/'.join(walked + [head]))
    new_child = _update(child, rest, fn, walked + [head])
    if new_child is child:
        return node
    children = dict(node.children)
    children[head] = new_child
    return node.with_children(children, touch=False)


def update_node(root: FsNode, path: str, fn: Callable[[FsNode], FsNode]) -> FsNode:
    """
    Replace the node at ``path`` with ``fn(node)``

    Only the directories between the root and the node are copied.

    Raises:
        NoSuchFileOrDirectory: a segment is missing
        NotADirectory: an intermediate segment is a file
    """
    return _update(root, split_path(path), fn, [])


def insert_node(root: FsNode, parent_path: str, node: FsNode, overwrite: bool = True) -> FsNode:
    """Insert ``node`` as a child of the directory at ``parent_path``"""

    def _insert(parent: FsNode) -> FsNode:
        if not parent.is_dir:
            raise NotADirectory(parent_path)
        if not overwrite and node.name in parent.children:
            raise FileExists(join_path(parent_path, node.name))
        children = dict(parent.children)
        children[node.name] = node
        return parent.with_children(children)

    return update_node(root, parent_path, _insert)


def remove_node(root: FsNode, path: str) -> FsNode:
    """Remove the node at ``path`` (and its subtree)"""
    parts = split_path(path)
    if not parts:
        raise InvalidPath('/')
    parent_path = '/' + '/'.join(parts[:-1])
    name = parts[-1]

    def _remove(parent: FsNode) -> FsNode:
        if not parent.is_dir or name not in parent.children:
            raise NoSuchFileOrDirectory(path)
        children = dict(parent.children)
        del children[name]
        return parent.with_children(children)

    return update_node(root, parent_path, _remove)


def remove_empty_dir(root: FsNode, path: str) -> FsNode:
    """Remove the directory at ``path`` only if it has no entries (``rmdir``)"""
    parts = split_path(path)
    node = lookup(root, parts)
    if node is None:
        raise NoSuchFileOrDirectory(path)
    if not node.is_dir:
        raise NotADirectory(path)
    if node.children:
        raise DirectoryNotEmpty(path)
    return remove_node(root, path)


def ensure_dirs(root: FsNode, path: str) -> FsNode:
    """Create every missing directory along ``path`` (``mkdir -p``)"""
    parts = split_path(path)

    def _ensure(node: FsNode, rest: List[str], walked: List[str]) -> FsNode:
        if not rest:
            return node
        if not node.is_dir:
            raise NotADirectory('/' + '/'.join(walked))
        head = rest[0]
        child = node.children.get(head)
        if child is None:
            child = make_dir(head)
        elif not child.is_dir:
            raise FileExists('/' + '/'.join(walked + [head]))
        new_child = _ensure(child, rest[1:], walked + [head])
        if head in node.children and new_child is node.children[head]:
            return node
        children = dict(node.children)
        children[head] = new_child
        return node.with_children(children)

    return _ensure(root, parts, [])


def write_file(root: FsNode, cwd: str, path: str, content: str, append: bool = False,
               create_parents: bool = False, home: str = DEFAULT_HOME) -> FsNode:
    """
    Write ``content`` to the file at ``path``

    An existing file keeps its permissions. With ``append`` a single newline
    separates old and new content unless the old content is empty or already
    ends with one.

    Args:
        root: Filesystem root
        cwd: Working directory for relative paths
        path: Target path
        content: Text to write
        append: Append instead of replacing
        create_parents: Create missing parent directories

    Returns:
        The new root

    Raises:
        IsADirectory: the target is a directory
        NoSuchFileOrDirectory: the parent directory is missing
    """
    abs_path = normalize(cwd, path, home)
    parts = split_path(abs_path)
    if not parts:
        raise IsADirectory(path)
    parent_path = '/' + '/'.join(parts[:-1])
    name = parts[-1]

    if create_parents:
        root = ensure_dirs(root, parent_path)

    parent = lookup(root, parts[:-1])
    if parent is None:
        raise NoSuchFileOrDirectory(path)
    if not parent.is_dir:
        raise NotADirectory(path)

    existing = parent.children.get(name)
    if existing is not None and existing.is_dir:
        raise IsADirectory(path)

    if existing is None:
        new_node = make_file(name, content)
    else:
        if append:
            old = existing.content or ''
            if old and not old.endswith('\n'):
                old += '\n'
            content = old + content
        new_node = existing.with_content(content)

    logger.debug("write %s (%d chars, append=%s)", abs_path, len(content), append)
    return insert_node(root, parent_path, new_node)


def walk(node: FsNode, path: str) -> Iterator[Tuple[str, FsNode]]:
    """Depth-first traversal yielding ``(path, node)``, children in name order"""
    yield path, node
    for child in node.sorted_children():
        yield from walk(child, join_path(path, child.name))


def tree_size(node: FsNode) -> int:
    """Recursive size used by ``du``"""
    if node.is_file:
        return len((node.content or '').encode('utf-8'))
    return DIR_SIZE + sum(tree_size(c) for c in node.children.values())


def count_nodes(node: FsNode, include_hidden: bool = True) -> Tuple[int, int]:
    """Return ``(directories, files)`` below ``node``"""
    dirs = files = 0
    for child in node.sorted_children(include_hidden):
        if child.is_dir:
            dirs += 1
            d, f = count_nodes(child, include_hidden)
            dirs += d
            files += f
        else:
            files += 1
    return dirs, files


# ---------------------------------------------------------------------------
# Interchange
# ---------------------------------------------------------------------------

def to_dict(node: FsNode) -> Dict:
    """Convert a node to the JSON-shaped dictionary callers persist"""
    data = {
        'name': node.name,
        'type': node.kind.value,
        'permissions': node.permissions,
        'updatedAt': node.updated_at,
    }
    if node.is_dir:
        data['children'] = {name: to_dict(child) for name, child in node.children.items()}
    else:
        data['content'] = node.content or ''
    return data


def from_dict(data: Mapping, name: Optional[str] = None) -> FsNode:
    """Build a node from its dictionary form"""
    # the key a child is stored under wins over its embedded name
    node_name = name if name is not None else data.get('name', '')
    kind = NodeKind(data.get('type', 'file'))
    updated_at = data.get('updatedAt') or now_iso()
    if kind is NodeKind.DIRECTORY:
        children = [
            from_dict(child, key) for key, child in (data.get('children') or {}).items()
        ]
        return make_dir(node_name, children, data.get('permissions'), updated_at)
    return make_file(node_name, data.get('content') or '', data.get('permissions'), updated_at)
