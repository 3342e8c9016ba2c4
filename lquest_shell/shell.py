"""Shell session: owns the state that command lines read and replace"""

import logging
from typing import Dict, Iterable, List, Optional

from .config import Config
from .filesystem import FsNode, lookup, split_path, to_dict, write_file
from .layout import build_filesystem
from .pipeline import run_line
from .result import CommandResult, HistoryEntry, OpenEditor

logger = logging.getLogger(__name__)


class Shell:
    """
    Reference caller of the interpreter

    Holds the filesystem root, working directory, previous directory and
    command log between lines, and applies each CommandResult to them.
    """

    def __init__(self, config: Optional[Config] = None, fs: Optional[FsNode] = None,
                 cwd: Optional[str] = None, seed: Optional[Iterable] = None):
        self.config = config or Config.from_env()
        self.fs = fs if fs is not None else build_filesystem(seed)
        start = cwd or self.config.home
        node = lookup(self.fs, split_path(start))
        self.cwd = start if node is not None and node.is_dir else '/'
        self.old_pwd: Optional[str] = None
        self.history: List[HistoryEntry] = []
        self.pending: Optional[CommandResult] = None

    @property
    def prompt(self) -> str:
        """bash-style prompt, e.g. ``student@l-quest:~/docs$ ``"""
        home = self.config.home
        if self.cwd == home:
            where = '~'
        elif self.cwd.startswith(home.rstrip('/') + '/'):
            where = '~' + self.cwd[len(home.rstrip('/')):]
        else:
            where = self.cwd
        sigil = '#' if self.config.user == 'root' else '$'
        return f"{self.config.user}@{self.config.hostname}:{where}{sigil} "

    def execute(self, line: str, defer_async: bool = False) -> CommandResult:
        """
        Run a command line against the session state

        Args:
            line: Raw command line
            defer_async: Keep zip/unzip results pending until ``commit()``
                so the caller can show progress first

        Returns:
            The CommandResult (already applied unless deferred)
        """
        result = run_line(line, self.fs, self.cwd, self.old_pwd, self.history, self.config)
        if line.strip():
            self.history.append(HistoryEntry(
                command=line,
                output=result.output,
                cwd=self.cwd,
                status=result.status,
            ))

        if result.is_async and defer_async:
            logger.debug("deferring %s result for %s", result.async_type, result.async_targets)
            self.pending = result
        else:
            self.commit(result)
        return result

    def commit(self, result: Optional[CommandResult] = None) -> None:
        """Apply a result's filesystem and directory changes (the pending one by default)"""
        if result is None:
            result = self.pending
        if result is None:
            return
        if result.new_fs is not None:
            self.fs = result.new_fs
        if result.new_cwd is not None and result.new_cwd != self.cwd:
            self.old_pwd = self.cwd
            self.cwd = result.new_cwd
        if result is self.pending:
            self.pending = None

    def save_editor(self, action: OpenEditor, content: str) -> None:
        """
        Write back an editor buffer

        Raises:
            FsError: the file cannot be written
        """
        self.fs = write_file(self.fs, '/', action.path, content,
                             home=self.config.home, create_parents=True)

    def snapshot(self) -> Dict:
        """Filesystem in its dictionary form, for callers that persist it"""
        return to_dict(self.fs)
