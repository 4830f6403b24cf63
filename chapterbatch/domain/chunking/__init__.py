"""
Chunking utilities that operate independently of any web interface.
"""

from .batching import DEFAULT_BATCH_SIZE, batch_at, batch_count, batch_label, batches, clamp_batch_size
from .core import (
    DEFAULT_SPLIT_PATTERN,
    PREAMBLE_TITLE,
    WHOLE_DOCUMENT_TITLE,
    compile_pattern,
    find_boundaries,
    split,
    split_by_characters,
    split_by_lines,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_SPLIT_PATTERN",
    "PREAMBLE_TITLE",
    "WHOLE_DOCUMENT_TITLE",
    "batch_at",
    "batch_count",
    "batch_label",
    "batches",
    "clamp_batch_size",
    "compile_pattern",
    "find_boundaries",
    "split",
    "split_by_characters",
    "split_by_lines",
]
