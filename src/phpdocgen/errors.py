"""Exceptions raised while generating documentation."""

from __future__ import annotations

from pathlib import Path


class DocGenError(Exception):
    """Base exception for phpdocgen operations."""

    pass


class DocCommentError(DocGenError):
    """Raised when a comment is missing or is not a /** doc-comment */."""

    pass


class ReflectionError(DocGenError):
    """Raised when a function cannot be located in the symbol table."""

    pass


class SourceParseError(DocGenError):
    """Raised when a PHP file contains syntax errors."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path


class TargetFileError(DocGenError):
    """Raised when a regeneration target lacks the declaration it needs."""

    pass
