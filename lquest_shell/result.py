"""Result objects handed back to the caller"""

import re
import time
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .filesystem import FsNode

STATUS_SUCCESS = 'success'
STATUS_ERROR = 'error'

ASYNC_ZIP = 'zip'
ASYNC_UNZIP = 'unzip'

_ERROR_MARKERS = re.compile(r'error|cannot|No such|denied|not found')


@dataclass(frozen=True)
class ClearScreen:
    """The caller should wipe its displayed scrollback"""


@dataclass(frozen=True)
class OpenEditor:
    """
    The caller should open a text editor on ``path``

    ``seed`` is the initial text; on save the caller writes the buffer back
    with ``filesystem.write_file``.
    """
    path: str
    seed: str = ''


Action = Union[ClearScreen, OpenEditor]


@dataclass
class CommandResult:
    """Outcome of one command line"""

    output: str = ''
    new_fs: Optional[FsNode] = None
    new_cwd: Optional[str] = None
    stdin_content: Optional[str] = None
    is_async: bool = False
    async_type: Optional[str] = None
    async_targets: List[str] = field(default_factory=list)
    action: Optional[Action] = None
    exit_code: int = 0

    @property
    def status(self) -> str:
        return STATUS_SUCCESS if self.exit_code == 0 else STATUS_ERROR

    @property
    def clears_screen(self) -> bool:
        return isinstance(self.action, ClearScreen)

    @property
    def opens_editor(self) -> bool:
        return isinstance(self.action, OpenEditor)


@dataclass(frozen=True)
class HistoryEntry:
    """One line of the caller's command log"""

    command: str
    output: str
    cwd: str
    status: str = STATUS_SUCCESS
    timestamp: float = field(default_factory=time.time)


def looks_like_error(text: str) -> bool:
    """Colouring rule callers use to show a line as a failure"""
    return bool(_ERROR_MARKERS.search(text or ''))
