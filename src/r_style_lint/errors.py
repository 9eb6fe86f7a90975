class RStyleLintError(Exception):
    """Base class for all r-style-lint errors."""


class ParseError(RStyleLintError):
    def __init__(self, message: str, line: int = 1, column: int = 0) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class SourceReadError(RStyleLintError):
    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(RStyleLintError):
    """Invalid configuration. Fatal: raised before any file is processed."""
