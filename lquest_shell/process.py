"""Process class for command execution in pipelines"""

import logging
from typing import Callable, List, Optional, Sequence, Union

from .command_decorators import CommandMetadata
from .config import Config, DEFAULT_CONFIG
from .exceptions import FsError
from .filesystem import FsNode, normalize, resolve
from .parser import CommandParser
from .result import Action, CommandResult, HistoryEntry
from .streams import ErrorStream, InputStream, OutputStream

logger = logging.getLogger(__name__)


class Process:
    """Represents a single command in a pipeline"""

    def __init__(
        self,
        command: str,
        args: List[str],
        fs: FsNode,
        cwd: str,
        stdin: Union[InputStream, str, None] = None,
        old_pwd: Optional[str] = None,
        history: Optional[Sequence[HistoryEntry]] = None,
        executor: Optional[Callable] = None,
        config: Optional[Config] = None,
        piped: bool = False,
    ):
        """
        Initialize a process

        Args:
            command: Command name
            args: Command arguments
            fs: Filesystem root the command starts from
            cwd: Working directory
            stdin: Output of the previous stage (None when not piped)
            old_pwd: Previous working directory, for ``cd -``
            history: Caller's command log (read only)
            executor: Handler that runs the command
            config: Shell configuration
            piped: True when this stage's output feeds another stage
        """
        self.command = command
        self.args = list(args)
        self.executor = executor
        self.config = config or DEFAULT_CONFIG

        parsed = CommandParser.parse_args(self.args, CommandMetadata.of(executor).value_options)
        self.options = parsed.options
        self.flags = parsed.flags
        self.values = parsed.values
        self.params = parsed.params

        if not isinstance(stdin, InputStream):
            stdin = InputStream.from_string(stdin)
        self.stdin = stdin
        self.stdout = OutputStream.to_buffer()
        self.stderr = ErrorStream(self.stdout)

        self.initial_fs = fs
        self.fs = fs
        self.initial_cwd = cwd
        self.cwd = cwd
        self.old_pwd = old_pwd
        self.history = list(history or [])
        self.piped = piped

        self.action: Optional[Action] = None
        self.stdin_content: Optional[str] = None
        self.async_type: Optional[str] = None
        self.async_targets: List[str] = []
        self.exit_code = 0

    # -- helpers used by handlers --------------------------------------

    @property
    def home(self) -> str:
        return self.config.home

    def abspath(self, path: str) -> str:
        """Absolute, normalized form of ``path`` relative to the cwd"""
        return normalize(self.cwd, path, self.home)

    def resolve(self, path: str) -> Optional[FsNode]:
        """Node at ``path`` in the current (possibly already modified) tree"""
        return resolve(self.fs, self.cwd, path, self.home)

    def has_flag(self, *flags: str) -> bool:
        return any(flag in self.flags for flag in flags)

    def mark_async(self, async_type: str, targets: List[str]) -> None:
        """Flag the result so the caller may pace its display"""
        self.async_type = async_type
        self.async_targets = list(targets)

    def error(self, message: str, code: int = 1) -> int:
        """Write ``message`` to stderr and return ``code``"""
        self.stderr.writeline(message)
        return code

    # -- execution -------------------------------------------------------

    def execute(self) -> CommandResult:
        """
        Execute the process

        Returns:
            CommandResult describing output and state changes
        """
        if self.executor is None:
            self.stderr.writeline(f"bash: {self.command}: command not found")
            self.exit_code = 127
            return self.to_result()

        try:
            self.exit_code = self.executor(self) or 0
        except FsError as e:
            self.stderr.writeline(f"{self.command}: {e}")
            self.exit_code = 1
        except Exception as e:
            logger.error("Unexpected error in %s: %s", self.command, e, exc_info=True)
            self.stderr.writeline(f"{self.command}: {e}")
            self.exit_code = 1

        self.stdout.flush()
        self.stderr.flush()
        return self.to_result()

    def get_stdout(self) -> str:
        """Regular output without trailing newlines (what a pipe or redirection carries)"""
        return self.stdout.get_output().rstrip('\n')

    def get_stderr(self) -> str:
        """Error messages without trailing newlines"""
        return self.stdout.get_errors().rstrip('\n')

    def get_output(self) -> str:
        """Output and errors in the order they were written"""
        return self.stdout.get_value().rstrip('\n')

    def to_result(self) -> CommandResult:
        return CommandResult(
            output=self.get_output(),
            new_fs=self.fs if self.fs is not self.initial_fs else None,
            new_cwd=self.cwd if self.cwd != self.initial_cwd else None,
            stdin_content=self.stdin_content,
            is_async=self.async_type is not None,
            async_type=self.async_type,
            async_targets=list(self.async_targets),
            action=self.action,
            exit_code=self.exit_code,
        )

    def __repr__(self):
        args_str = ' '.join(self.args) if self.args else ''
        return f"Process({self.command} {args_str})"
