"""
Domain layer containing the segmentation, batching, and session logic.

This package is intentionally free of web framework dependencies so it can be
driven by any dispatch loop.
"""

from . import chunking, exceptions, session

__all__ = [
    "chunking",
    "exceptions",
    "session",
]
