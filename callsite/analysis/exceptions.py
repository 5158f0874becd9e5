"""
Reader Exceptions

Signals raised while reading symbolic expressions. Only MalformedSyntax
describes broken input; the other two are normal termination signals.
"""


class SexpReadError(Exception):
    """Base exception for reader signals"""

    def __init__(self, message: str, offset: int = None):
        self.message = message
        self.offset = offset
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.offset is None:
            return self.message
        return f"{self.message} | offset={self.offset}"


class EndOfInput(SexpReadError):
    """Nothing but whitespace and comments left to read"""
    pass


class ReadBoundary(SexpReadError):
    """A closing delimiter was found where a value was expected"""

    def __init__(self, message: str, offset: int = None, delimiter: str = None):
        self.delimiter = delimiter
        super().__init__(message, offset)


class MalformedSyntax(SexpReadError):
    """Unterminated compound, invalid token or unexpected character"""
    pass
