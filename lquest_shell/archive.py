"""Simulated zip and tar containers

An archive is an ordinary file whose content is a format marker followed by
the JSON form of the archived subtrees. ``ArchiveBlob`` gives typed access to
that content so commands never parse the marker themselves.
"""

import enum
import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .exceptions import CorruptArchive
from .filesystem import (
    FsNode,
    ensure_dirs,
    from_dict,
    insert_node,
    join_path,
    lookup,
    split_path,
    to_dict,
    update_node,
)

logger = logging.getLogger(__name__)


class ArchiveFormat(enum.Enum):
    ZIP = '__ZIP_DATA__'
    TAR = '__TAR_DATA__'

    @property
    def marker(self) -> str:
        return self.value


def entry_key(target: str, node: FsNode) -> str:
    """
    Name an archived target is stored under

    The target path as typed, minus empty, ``.`` and ``..`` segments, so
    ``./docs/`` is stored as ``docs`` and ``../x`` as ``x``.
    """
    parts = [p for p in target.split('/') if p not in ('', '.', '..')]
    return '/'.join(parts) or node.name


@dataclass(frozen=True)
class ArchiveBlob:
    """Decoded archive: format plus ``{entry key: node}`` in insertion order"""

    format: ArchiveFormat
    entries: Mapping[str, FsNode]

    @staticmethod
    def sniff(content: Optional[str]) -> Optional[ArchiveFormat]:
        """Format marked at the start of ``content``, if any"""
        for fmt in ArchiveFormat:
            if (content or '').startswith(fmt.marker):
                return fmt
        return None

    @staticmethod
    def is_archive(content: Optional[str], fmt: Optional[ArchiveFormat] = None) -> bool:
        found = ArchiveBlob.sniff(content)
        if fmt is None:
            return found is not None
        return found is fmt

    @classmethod
    def decode(cls, content: Optional[str]) -> Optional['ArchiveBlob']:
        """
        Parse archive content

        Returns:
            The blob, or None when ``content`` carries no archive marker

        Raises:
            CorruptArchive: the marker is present but the payload is not valid
        """
        fmt = cls.sniff(content)
        if fmt is None:
            return None
        payload = content[len(fmt.marker):]
        try:
            data = json.loads(payload)
            entries = {key: from_dict(value, name=key.rsplit('/', 1)[-1])
                       for key, value in data.items()}
        except (ValueError, TypeError, AttributeError, KeyError) as e:
            raise CorruptArchive(f"invalid {fmt.name.lower()} archive: {e}") from e
        return cls(fmt, entries)

    def encode(self) -> str:
        """Stored form: marker followed by the JSON entries"""
        data = {key: to_dict(node) for key, node in self.entries.items()}
        return self.format.marker + json.dumps(data, ensure_ascii=False)

    def members(self) -> Iterator[Tuple[str, FsNode]]:
        """Every stored path, directories suffixed with ``/``, depth first"""

        def _walk(prefix: str, node: FsNode):
            if node.is_dir:
                yield prefix + '/', node
                for child in node.sorted_children():
                    yield from _walk(f"{prefix}/{child.name}", child)
            else:
                yield prefix, node

        for key, node in self.entries.items():
            yield from _walk(key, node)

    def list_names(self) -> List[str]:
        return [name for name, _ in self.members()]

    def merged(self, other: 'ArchiveBlob') -> 'ArchiveBlob':
        """This blob with ``other``'s entries added or replacing existing keys"""
        entries = dict(self.entries)
        entries.update(other.entries)
        return ArchiveBlob(self.format, entries)

    def extract_into(self, root: FsNode, dir_path: str) -> FsNode:
        """
        Merge every entry below ``dir_path``

        Missing parent directories are created. A directory entry is merged
        with an existing directory of the same name; anything else replaces
        what was there.

        Returns:
            The new root
        """
        for key, node in self.entries.items():
            target = dir_path
            for part in key.split('/'):
                target = join_path(target, part)
            parent_path = '/' + '/'.join(split_path(target)[:-1])
            root = ensure_dirs(root, parent_path)
            existing = lookup(root, split_path(target))
            if existing is not None and existing.is_dir and node.is_dir:
                root = update_node(root, target, lambda old, new=node: _merge_dirs(old, new))
            else:
                root = insert_node(root, parent_path, node)
        logger.debug("extracted %d %s entries into %s", len(self.entries),
                     self.format.name.lower(), dir_path)
        return root


def _merge_dirs(old: FsNode, new: FsNode) -> FsNode:
    children: Dict[str, FsNode] = dict(old.children)
    for name, child in new.children.items():
        current = children.get(name)
        if current is not None and current.is_dir and child.is_dir:
            children[name] = _merge_dirs(current, child)
        else:
            children[name] = child
    return old.with_children(children)
