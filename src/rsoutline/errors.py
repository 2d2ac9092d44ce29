# src/rsoutline/errors.py
from __future__ import annotations


class OutlineError(Exception):
    """Base exception for all rsoutline errors."""
    code: str = "RSOUTLINE-UNKNOWN"
    exit_code: int = 1

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class ConfigError(OutlineError):
    code = "RSOUTLINE-CONFIG"
    exit_code = 4


class GrammarError(OutlineError):
    """Raised when the tree-sitter grammar module cannot be loaded."""
    code = "RSOUTLINE-GRAMMAR"
    exit_code = 4


class SourceReadError(OutlineError):
    code = "RSOUTLINE-READ"
    exit_code = 1


class ParseError(OutlineError):
    """Raised when the source text does not parse cleanly."""
    code = "RSOUTLINE-PARSE"
    exit_code = 3

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.line = line
        self.column = column


class NestingTooDeepError(OutlineError):
    """Raised when inline modules nest deeper than the configured ceiling."""
    code = "RSOUTLINE-NESTING"
    exit_code = 5


__all__ = [
    "OutlineError",
    "ConfigError",
    "GrammarError",
    "SourceReadError",
    "ParseError",
    "NestingTooDeepError",
]
