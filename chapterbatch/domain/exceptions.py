"""Errors raised by the chunking domain."""


class ChapterBatchError(Exception):
    """Base exception for the chunking domain."""


class SplitPatternError(ChapterBatchError, ValueError):
    """Raised when a boundary pattern is empty or not a valid regular expression."""

    def __init__(self, pattern: str, detail: str):
        self.pattern = pattern
        self.detail = detail
        super().__init__(f"Invalid split pattern {pattern!r}: {detail}")


class SessionNotLoadedError(ChapterBatchError, RuntimeError):
    """Raised when an operation needs a loaded document and none is present."""
