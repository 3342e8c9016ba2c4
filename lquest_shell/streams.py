"""Text streams connecting pipeline stages"""

from typing import List, Optional


class InputStream:
    """Read side of a stage: piped text from the previous stage, if any"""

    def __init__(self, data: Optional[str] = None):
        self._data = data

    @classmethod
    def from_string(cls, data: Optional[str]) -> 'InputStream':
        return cls(data)

    @property
    def is_piped(self) -> bool:
        """True when a previous stage feeds this one"""
        return self._data is not None

    def read(self) -> str:
        return self._data or ''

    def readlines(self) -> List[str]:
        """Lines without their trailing newline"""
        data = self.read()
        if not data:
            return []
        return data.split('\n')

    def get_value(self) -> Optional[str]:
        return self._data


class OutputStream:
    """
    Buffer collecting everything a stage prints

    Chunks remember whether they came from the error side so the merged
    text keeps the order of writes while pipes and redirections can still
    take the regular output alone.
    """

    def __init__(self):
        self._chunks = []

    @classmethod
    def to_buffer(cls) -> 'OutputStream':
        return cls()

    def _append(self, data: str, is_error: bool) -> None:
        self._chunks.append((data, is_error))

    def write(self, data: str) -> None:
        if data:
            self._append(data, False)

    def writeline(self, line: str = '') -> None:
        self._append(line + '\n', False)

    def flush(self) -> None:
        pass

    def get_value(self) -> str:
        """Everything written, errors included"""
        return ''.join(data for data, _ in self._chunks)

    def get_output(self) -> str:
        """Regular output only"""
        return ''.join(data for data, is_error in self._chunks if not is_error)

    def get_errors(self) -> str:
        return ''.join(data for data, is_error in self._chunks if is_error)


class ErrorStream:
    """Error side of a stage, writing into the stage's output buffer"""

    def __init__(self, target: OutputStream):
        self._target = target
        self.error_count = 0

    def write(self, data: str) -> None:
        if data:
            self.error_count += 1
            self._target._append(data, True)

    def writeline(self, line: str) -> None:
        self.error_count += 1
        self._target._append(line + '\n', True)

    def flush(self) -> None:
        pass

    def get_value(self) -> str:
        return self._target.get_errors()

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0
