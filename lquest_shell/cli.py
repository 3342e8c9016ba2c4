"""Main CLI Entry Point"""

import json
import logging
import os
import sys
import tempfile
import time

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn

from .builtins import BUILTINS
from .config import Config
from .exceptions import FsError
from .filesystem import resolve
from .result import ASYNC_ZIP, CommandResult, looks_like_error
from .shell import Shell
from .version import get_version_string

console = Console()
logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ShellCompleter(Completer):
    """Completer for command names and paths of the in-memory filesystem"""

    def __init__(self, shell: Shell):
        self.shell = shell
        self.command_names = sorted(BUILTINS)

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        stage = text.rsplit('|', 1)[-1].lstrip()
        words = stage.split()

        # If we're at the start of a stage or only typing the command
        if len(words) == 0 or (len(words) == 1 and not stage.endswith(" ")):
            word = words[0] if words else ""
            for cmd in self.command_names:
                if cmd.startswith(word):
                    yield Completion(cmd, start_position=-len(word))
            return

        current_word = "" if text.endswith(" ") else words[-1]
        if "/" in current_word:
            last_slash = current_word.rfind("/")
            dir_part = current_word[: last_slash + 1]
            file_part = current_word[last_slash + 1:]
        else:
            dir_part = ""
            file_part = current_word

        node = resolve(self.shell.fs, self.shell.cwd, dir_part or '.', self.shell.config.home)
        if node is None or not node.is_dir:
            return
        for child in node.sorted_children(include_hidden=file_part.startswith('.')):
            if child.name.startswith(file_part):
                display_name = child.name + "/" if child.is_dir else child.name
                yield Completion(
                    dir_part + display_name,
                    start_position=-len(current_word),
                    display=display_name,
                )


def load_seed(path: str):
    """
    Read seed entries from a JSON file

    Accepts a list of ``{"path": ..., "content": ...}`` objects or a single
    object mapping paths to contents.
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        return [{'path': p, 'content': c} for p, c in data.items()]
    if not isinstance(data, list):
        raise click.BadParameter(f"{path}: expected a JSON list or object", param_hint='--seed')
    return data


def show_progress(result: CommandResult, duration: float) -> None:
    """Pace a zip/unzip result with a percentage bar before it is committed"""
    verb = 'deflating' if result.async_type == ASYNC_ZIP else 'inflating'
    targets = ', '.join(result.async_targets)
    steps = 20
    with Progress(
        TextColumn("[cyan]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"{verb}: {targets}", total=steps)
        for _ in range(steps):
            time.sleep(max(duration, 0) / steps)
            progress.advance(task)


def print_output(output: str) -> None:
    for line in output.split('\n'):
        if looks_like_error(line):
            console.print(line, style="red", highlight=False, markup=False)
        else:
            console.print(line, highlight=False, markup=False)


def run_command(shell: Shell, line: str) -> CommandResult:
    """Execute one line, then show its output and perform any requested action"""
    result = shell.execute(line, defer_async=True)

    if result.is_async:
        show_progress(result, shell.config.async_duration)
        shell.commit(result)

    if result.clears_screen:
        console.clear()
        return result

    if result.output:
        print_output(result.output)

    if result.opens_editor:
        action = result.action
        edited = click.edit(action.seed, extension=os.path.splitext(action.path)[1] or '.txt')
        if edited is not None:
            try:
                shell.save_editor(action, edited)
            except FsError as e:
                console.print(f"nano: {e}", style="red", highlight=False, markup=False)
    return result


def start_repl(shell: Shell) -> None:
    """Start interactive REPL session"""
    console.print(f"[dim]{get_version_string()}[/dim]", highlight=False)
    console.print("Type 'help' for the command list, 'exit' to leave", highlight=False)

    history_path = os.path.expanduser(shell.config.history_file)
    try:
        os.makedirs(os.path.dirname(history_path) or '.', exist_ok=True)
        with open(history_path, "a"):
            pass
        history = FileHistory(history_path)
    except OSError:
        temp_history = tempfile.NamedTemporaryFile(
            mode="w", delete=False, suffix="_lquest_shell_history"
        )
        temp_history_path = temp_history.name
        temp_history.close()
        console.print(
            f"[yellow]Warning: Cannot use {history_path}, using temporary history file[/yellow]",
            highlight=False
        )
        history = FileHistory(temp_history_path)

    session = PromptSession(
        history=history,
        auto_suggest=AutoSuggestFromHistory(),
        completer=ShellCompleter(shell),
        complete_while_typing=True,
    )

    while True:
        try:
            line = session.prompt(shell.prompt)
            if line.strip() in ('exit', 'quit', 'logout'):
                break
            run_command(shell, line)
        except KeyboardInterrupt:
            console.print("^C", highlight=False)
            continue
        except EOFError:
            console.print("\nlogout", highlight=False)
            break
        except Exception as e:
            logger.error("Unexpected error: %s", e, exc_info=True)
            console.print(f"Unexpected error: {e}", highlight=False)


@click.command()
@click.version_option(version=get_version_string(), prog_name="lquest-shell")
@click.option("-c", "command_string", default=None, help="Execute a command line and exit")
@click.option(
    "--seed",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file of {path, content} entries written onto the base layout",
)
@click.option("--cwd", default=None, help="Starting directory (default: the home directory)")
@click.option("--user", default=None, help="User name (can also set via LQUEST_USER)")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (can also set via LQUEST_LOG_LEVEL)",
)
@click.option(
    "--async-duration",
    type=float,
    default=None,
    help="Seconds spent showing zip/unzip progress",
)
def main(command_string, seed, cwd, user, log_level, async_duration):
    """lquest-shell - a sandboxed Linux shell over an in-memory filesystem"""
    config = Config.from_args(user=user, log_level=log_level, async_duration=async_duration)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    logger.debug("starting with %r", config)

    shell = Shell(config, cwd=cwd, seed=load_seed(seed) if seed else None)

    if command_string is not None:
        result = run_command(shell, command_string)
        sys.exit(result.exit_code)

    start_repl(shell)


if __name__ == "__main__":
    main()
