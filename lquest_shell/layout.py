"""Base directory layout and seeding of new filesystems"""

import logging
from typing import Iterable, Mapping, Optional, Union

from .filesystem import FsNode, from_dict, write_file

logger = logging.getLogger(__name__)


def _d(name, children=(), permissions='drwxr-xr-x'):
    return {
        'name': name,
        'type': 'directory',
        'permissions': permissions,
        'children': {c['name']: c for c in children},
    }


def _f(name, content='', permissions='-rw-r--r--'):
    return {'name': name, 'type': 'file', 'permissions': permissions, 'content': content}


DEFAULT_LAYOUT = _d('root', [
    _d('bin', [
        _f(name, permissions='-rwxr-xr-x')
        for name in ('bash', 'ls', 'cp', 'mv', 'rm', 'cat')
    ]),
    _d('etc', [
        _f('passwd', 'root:x:0:0:root:/root:/bin/bash\n'
                     'student:x:1000:1000:Student:/home/student:/bin/bash'),
        _f('group', 'root:x:0:\nsudo:x:27:student\nstudent:x:1000:'),
        _f('os-release', 'NAME="L-Quest Linux"\nVERSION="1.0"\nID=lquest\n'
                         'PRETTY_NAME="L-Quest Linux 1.0"'),
        _f('shadow', 'root:$6$...\nstudent:$6$...', permissions='-rw-r-----'),
        _f('hostname', 'l-quest'),
        _f('hosts', '127.0.0.1\tlocalhost'),
        _d('nginx', [
            _f('nginx.conf', 'user www-data;\nworker_processes auto;\n\n'
                             'events {\n    worker_connections 768;\n}\n\n'
                             'http {\n    include /etc/nginx/sites-enabled/*;\n}'),
        ]),
    ]),
    _d('home', [
        _d('student', [
            _d('documents', [
                _f('notes.txt', 'Linux is awesome.'),
            ]),
        ]),
    ]),
    _d('root', permissions='drwx------'),
    _d('tmp', permissions='drwxrwxrwt'),
    _d('usr', [
        _d('bin', [_f('python3', permissions='-rwxr-xr-x')]),
        _d('lib'),
        _d('local', [_d('bin')]),
        _d('share'),
    ]),
    _d('var', [
        _d('log', [
            _f('syslog', 'May 10 10:00:01 l-quest systemd[1]: Started Session 1 of user student.',
               permissions='-rw-r-----'),
            _f('auth.log', 'May 10 10:00:00 l-quest sshd[1234]: Accepted publickey for student',
               permissions='-rw-r-----'),
        ]),
        _d('www', [
            _d('html', [
                _f('index.html', '<html><body>Welcome to L-Quest!</body></html>'),
            ]),
        ]),
    ]),
])


SeedEntry = Union[Mapping[str, str], tuple]


def build_filesystem(seed: Optional[Iterable[SeedEntry]] = None,
                     template: Optional[Mapping] = None) -> FsNode:
    """
    Build a fresh filesystem root

    Args:
        seed: ``{"path": ..., "content": ...}`` mappings (or ``(path, content)``
            pairs) written in order; missing parent directories are created
        template: Base tree in dictionary form (default: ``DEFAULT_LAYOUT``)

    Returns:
        The seeded root node
    """
    root = from_dict(template if template is not None else DEFAULT_LAYOUT, name='root')
    count = 0
    for entry in seed or ():
        if isinstance(entry, Mapping):
            path, content = entry['path'], entry.get('content', '')
        else:
            path, content = entry
        root = write_file(root, '/', path, content or '', create_parents=True)
        count += 1
    if count:
        logger.debug("seeded filesystem with %d entries", count)
    return root
