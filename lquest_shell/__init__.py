"""lquest-shell: a sandboxed Linux shell over an in-memory filesystem"""

from .layout import build_filesystem
from .pipeline import run_line
from .result import ClearScreen, CommandResult, HistoryEntry, OpenEditor
from .shell import Shell
from .version import __version__

__all__ = [
    'ClearScreen',
    'CommandResult',
    'HistoryEntry',
    'OpenEditor',
    'Shell',
    'build_filesystem',
    'run_line',
    '__version__',
]
