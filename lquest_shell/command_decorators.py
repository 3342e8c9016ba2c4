"""Metadata attached to built-in command handlers"""

from typing import Callable, FrozenSet, Optional

CATEGORIES = ('File Ops', 'Text Ops', 'Archives', 'System/Info')


class CommandMetadata:
    """Static facts about a handler that the dispatcher needs before running it"""

    def __init__(self, value_options: str = '', category: str = 'System/Info'):
        self.value_options: FrozenSet[str] = frozenset(value_options)
        self.category = category

    @staticmethod
    def of(func: Optional[Callable]) -> 'CommandMetadata':
        """Metadata of ``func`` (defaults when it was not decorated)"""
        return getattr(func, '_command_metadata', None) or _DEFAULT

    @staticmethod
    def summary(func: Callable) -> str:
        """First docstring line of a handler"""
        doc = (func.__doc__ or '').strip()
        return doc.splitlines()[0] if doc else ''


_DEFAULT = CommandMetadata()


def command(value_options: str = '', category: str = 'System/Info'):
    """
    Mark a function as a built-in command handler

    Args:
        value_options: Short option letters that consume a value
            (e.g. ``'m'`` makes ``grep -m 3`` store ``{'m': '3'}``)
        category: Group shown by ``help``

    Example:
        @command(value_options='n', category='Text Ops')
        def cmd_head(process: Process) -> int:
            ...
    """
    if category not in CATEGORIES:
        raise ValueError(f"unknown command category: {category}")

    def decorator(func):
        func._command_metadata = CommandMetadata(value_options, category)
        return func

    return decorator
