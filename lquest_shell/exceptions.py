"""Errors raised by the in-memory filesystem layer.

Handlers catch these and turn them into shell-style messages; they never reach
the caller of ``run_line``.
"""


class ShellError(Exception):
    """Base class for interpreter errors"""


class FsError(ShellError):
    """A filesystem operation failed for ``path``"""

    reason = 'Input/output error'

    def __init__(self, path: str, reason: str = None):
        self.path = path
        if reason:
            self.reason = reason
        super().__init__(f"{path}: {self.reason}")


class NoSuchFileOrDirectory(FsError):
    reason = 'No such file or directory'


class NotADirectory(FsError):
    reason = 'Not a directory'


class IsADirectory(FsError):
    reason = 'Is a directory'


class FileExists(FsError):
    reason = 'File exists'


class DirectoryNotEmpty(FsError):
    reason = 'Directory not empty'


class InvalidPath(FsError):
    reason = 'Invalid argument'


class CorruptArchive(ShellError):
    """Archive content carries a format marker but cannot be decoded"""
