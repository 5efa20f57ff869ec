"""Custom exceptions for langref."""

from __future__ import annotations


class LangrefError(Exception):
    """Base exception for langref operations."""


class LoadError(LangrefError):
    """Error while reading or fetching a document."""


class SourceNotFoundError(LoadError):
    """Document path or URL does not exist."""


class ParseError(LangrefError):
    """Document is structurally malformed."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class UnterminatedFenceError(ParseError):
    """A fenced code block is never closed."""


class DuplicateAnchorError(ParseError):
    """Two headings claim the same anchor."""

    def __init__(self, anchor: str, *, first_line: int | None, line: int | None) -> None:
        where = f" (first defined on line {first_line})" if first_line is not None else ""
        super().__init__(f"duplicate anchor {anchor!r}{where}", line=line)
        self.anchor = anchor
        self.first_line = first_line


class RenderError(LangrefError):
    """Error during output rendering."""
