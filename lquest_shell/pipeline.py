"""Pipeline class for chaining processes together"""

import logging
from typing import List, Optional, Sequence, Tuple

from .config import Config, DEFAULT_CONFIG
from .dispatcher import make_process
from .exceptions import FsError
from .filesystem import FsNode, write_file
from .parser import CommandParser, Redirection
from .process import Process
from .result import CommandResult, HistoryEntry

logger = logging.getLogger(__name__)


class Pipeline:
    """Manages a pipeline of processes connected via stdin/stdout"""

    def __init__(self, commands: List[Tuple[str, List[str]]], fs: FsNode, cwd: str,
                 old_pwd: Optional[str] = None,
                 history: Optional[Sequence[HistoryEntry]] = None,
                 config: Optional[Config] = None):
        """
        Initialize a pipeline

        Args:
            commands: List of (command, args) stages
            fs: Filesystem root the first stage sees
            cwd: Working directory the first stage sees
            old_pwd: Previous working directory
            history: Caller's command log
            config: Shell configuration
        """
        self.commands = commands
        self.fs = fs
        self.cwd = cwd
        self.old_pwd = old_pwd
        self.history = history
        self.config = config
        self.processes: List[Process] = []
        self.exit_codes: List[int] = []

    def execute(self) -> CommandResult:
        """
        Execute the entire pipeline

        Each stage reads the previous stage's regular output and starts from
        the filesystem and working directory the previous stage left behind.
        A stage that asks the caller for a screen action ends the pipeline.

        Returns:
            Result of the last stage that ran, with the accumulated
            filesystem, working directory and async flags
        """
        self.processes = []
        self.exit_codes = []
        fs, cwd = self.fs, self.cwd
        stdin = None
        async_result = None
        last_result = CommandResult()

        for i, (command, args) in enumerate(self.commands):
            process = make_process(command, args, fs, cwd, stdin=stdin,
                                   old_pwd=self.old_pwd, history=self.history,
                                   config=self.config, piped=i < len(self.commands) - 1)
            self.processes.append(process)
            last_result = process.execute()
            self.exit_codes.append(last_result.exit_code)

            if last_result.new_fs is not None:
                fs = last_result.new_fs
            if last_result.new_cwd is not None:
                cwd = last_result.new_cwd
            if last_result.is_async:
                async_result = last_result
            if last_result.action is not None:
                break
            stdin = process.get_stdout()

        # errors of earlier stages are not piped; they still reach the screen
        earlier_errors = [p.get_stderr() for p in self.processes[:-1] if p.get_stderr()]
        result = CommandResult(
            output='\n'.join(filter(None, earlier_errors + [last_result.output])),
            new_fs=fs if fs is not self.fs else None,
            new_cwd=cwd if cwd != self.cwd else None,
            stdin_content=last_result.stdin_content,
            action=last_result.action,
            exit_code=last_result.exit_code,
        )
        if async_result is not None:
            result.is_async = True
            result.async_type = async_result.async_type
            result.async_targets = list(async_result.async_targets)
        return result

    @property
    def short_circuited(self) -> bool:
        return bool(self.processes) and self.processes[-1].action is not None

    def get_stdout(self) -> str:
        """Regular output of the last process"""
        if not self.processes:
            return ''
        return self.processes[-1].get_stdout()

    def get_stderr(self) -> str:
        """Errors of all processes, in stage order"""
        return '\n'.join(p.get_stderr() for p in self.processes if p.get_stderr())

    def get_exit_code(self) -> int:
        """Get exit code of the last process"""
        return self.exit_codes[-1] if self.exit_codes else 0

    def __repr__(self):
        pipeline_str = ' | '.join(
            ' '.join([cmd] + [CommandParser.quote_arg(a) for a in args])
            for cmd, args in self.commands)
        return f"Pipeline({pipeline_str})"


def _apply_redirection(result: CommandResult, redirection: Redirection, content: str,
                       fs: FsNode, cwd: str, config: Optional[Config]) -> CommandResult:
    home = (config or DEFAULT_CONFIG).home
    try:
        new_fs = write_file(fs, cwd, redirection.target, content,
                            append=redirection.append, home=home)
    except FsError as e:
        message = f"bash: {redirection.target}: {e.reason}"
        result.output = '\n'.join(filter(None, [result.output, message]))
        result.exit_code = 1
        return result
    logger.debug("redirect %s %s (%d chars)", redirection.operator, redirection.target,
                 len(content))
    result.new_fs = new_fs
    return result


def run_pipeline(line: str, fs: FsNode, cwd: str, old_pwd: Optional[str] = None,
                 history: Optional[Sequence[HistoryEntry]] = None,
                 config: Optional[Config] = None) -> CommandResult:
    """
    Run one pipeline (no ``;`` or ``&&``) with optional output redirection

    ``>`` and ``>>`` on the last stage are stripped before it runs and
    applied to its regular output afterwards; errors stay on screen.
    """
    stages = CommandParser.split_pipeline(line)
    if not stages:
        return CommandResult()

    commands = []
    for stage in stages[:-1]:
        tokens = CommandParser.tokenize(stage)
        commands.append((tokens[0], tokens[1:]) if tokens else ('', []))

    try:
        words, redirection = CommandParser.extract_redirection(CommandParser.scan(stages[-1]))
    except ValueError as e:
        return CommandResult(output=f"bash: {e}", exit_code=2)
    if words:
        commands.append((words[0], words[1:]))

    if not commands:
        # a bare "> file" truncates or creates the file
        return _apply_redirection(CommandResult(), redirection, '', fs, cwd, config)

    pipeline = Pipeline(commands, fs, cwd, old_pwd, history, config)
    result = pipeline.execute()
    if redirection is None or pipeline.short_circuited:
        return result

    if not words:
        # "cmd | > file": the redirection has no command of its own
        content = ''
    else:
        content = pipeline.processes[-1].get_stdout()
    result.output = pipeline.get_stderr()
    final_fs = result.new_fs if result.new_fs is not None else fs
    final_cwd = result.new_cwd if result.new_cwd is not None else cwd
    return _apply_redirection(result, redirection, content, final_fs, final_cwd, config)


def run_line(line: str, fs: FsNode, cwd: str, old_pwd: Optional[str] = None,
             history: Optional[Sequence[HistoryEntry]] = None,
             config: Optional[Config] = None) -> CommandResult:
    """
    Execute a full command line

    Pipelines separated by ``;`` run in order; after ``&&`` the next one
    runs only when the previous one succeeded. Filesystem and working
    directory changes carry over from one pipeline to the next.

    Args:
        line: Raw command line
        fs: Filesystem root
        cwd: Working directory
        old_pwd: Previous working directory, for ``cd -``
        history: Caller's command log
        config: Shell configuration

    Returns:
        CommandResult for the whole line
    """
    segments = CommandParser.split_sequence(line)
    if not segments:
        return CommandResult()

    outputs = []
    cur_fs, cur_cwd, cur_old = fs, cwd, old_pwd
    last = CommandResult()
    async_result = None

    for segment, operator in segments:
        if operator == '&&' and last.exit_code != 0:
            continue
        last = run_pipeline(segment, cur_fs, cur_cwd, cur_old, history, config)
        if last.output:
            outputs.append(last.output)
        if last.new_fs is not None:
            cur_fs = last.new_fs
        if last.new_cwd is not None:
            cur_old, cur_cwd = cur_cwd, last.new_cwd
        if last.is_async:
            async_result = last
        if last.action is not None:
            break

    result = CommandResult(
        output='\n'.join(outputs),
        new_fs=cur_fs if cur_fs is not fs else None,
        new_cwd=cur_cwd if cur_cwd != cwd else None,
        stdin_content=last.stdin_content,
        action=last.action,
        exit_code=last.exit_code,
    )
    if async_result is not None:
        result.is_async = True
        result.async_type = async_result.async_type
        result.async_targets = list(async_result.async_targets)
    return result
