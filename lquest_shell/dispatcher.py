"""Run one command through its registered handler"""

import logging
from typing import List, Optional, Sequence

from .builtins import get_builtin
from .config import Config
from .filesystem import FsNode
from .process import Process
from .result import CommandResult, HistoryEntry

logger = logging.getLogger(__name__)


def make_process(command: str, args: List[str], fs: FsNode, cwd: str,
                 stdin: Optional[str] = None, old_pwd: Optional[str] = None,
                 history: Optional[Sequence[HistoryEntry]] = None,
                 config: Optional[Config] = None, piped: bool = False) -> Process:
    """Build a Process bound to the handler registered for ``command``"""
    return Process(
        command=command,
        args=args,
        fs=fs,
        cwd=cwd,
        stdin=stdin,
        old_pwd=old_pwd,
        history=history,
        executor=get_builtin(command),
        config=config,
        piped=piped,
    )


def dispatch(command: str, args: List[str], fs: FsNode, cwd: str,
             stdin: Optional[str] = None, old_pwd: Optional[str] = None,
             history: Optional[Sequence[HistoryEntry]] = None,
             config: Optional[Config] = None, piped: bool = False) -> CommandResult:
    """
    Execute a single command

    Args:
        command: Command name
        args: Arguments after the name, already tokenized
        fs: Filesystem root
        cwd: Working directory
        stdin: Output of the previous pipeline stage, if any
        old_pwd: Previous working directory
        history: Caller's command log
        config: Shell configuration
        piped: True when the output feeds another stage

    Returns:
        CommandResult; unknown commands report ``command not found`` with
        exit code 127
    """
    logger.debug("dispatch %s %s (cwd=%s, piped=%s)", command, args, cwd, piped)
    return make_process(command, args, fs, cwd, stdin, old_pwd, history, config, piped).execute()
