"""Core segmentation primitives: boundary matching and offset-based slicing."""

import logging
import os
import re
from dataclasses import dataclass
from typing import List, Union

from chapterbatch.domain.exceptions import SplitPatternError
from chapterbatch.schemas import Segment

logger = logging.getLogger(__name__)

# "第一章", "第12节", "第三十回" ... followed by the rest of the heading line.
NUMERAL_CHAPTER_PATTERN = r"第[零一二三四五六七八九十百千万\d]+[章节回][^\n]*"

DEFAULT_SPLIT_PATTERN = os.getenv("CHAPTERBATCH_SPLIT_PATTERN") or NUMERAL_CHAPTER_PATTERN

PREAMBLE_TITLE = "preamble"
WHOLE_DOCUMENT_TITLE = "whole document"

PatternLike = Union[str, re.Pattern[str]]


@dataclass
class BoundaryMatch:
    """
    A detected segment start.

    Attributes:
        start: 0-based character offset of the match in the source text.
        title: Matched marker text with surrounding whitespace removed.
    """

    start: int
    title: str


def compile_pattern(pattern: PatternLike) -> re.Pattern[str]:
    """
    Compile a boundary pattern, raising `SplitPatternError` for configuration
    mistakes instead of deferring them to split time.
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    if pattern is None or not str(pattern):
        raise SplitPatternError(str(pattern or ""), "pattern must not be empty")
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise SplitPatternError(pattern, str(exc)) from exc


def find_boundaries(text: str, pattern: PatternLike) -> List[BoundaryMatch]:
    """Return every non-overlapping boundary match in document order."""
    regex = compile_pattern(pattern)
    return [BoundaryMatch(start=m.start(), title=m.group().strip()) for m in regex.finditer(text)]


def _whole_document(text: str) -> List[Segment]:
    return [Segment(title=WHOLE_DOCUMENT_TITLE, content=text.strip(), ordinal=0)]


def split(text: str, pattern: PatternLike = DEFAULT_SPLIT_PATTERN) -> List[Segment]:
    """
    Partition text into ordered segments at each boundary match.

    Args:
        text: Document contents; may be empty.
        pattern: Regular expression (string or compiled) whose matches mark
            the start of a new segment.

    Returns:
        Segments with contiguous ordinals starting at 0. Empty text yields an
        empty list; text without any match yields a single whole-document
        segment. Leading text before the first match becomes a preamble
        segment when it is not blank.
    """
    regex = compile_pattern(pattern)
    if not text:
        return []

    boundaries = find_boundaries(text, regex)
    if not boundaries:
        logger.debug("Segmenter: no boundary matches for %r; using whole document", regex.pattern)
        return _whole_document(text)

    pieces: List[tuple[str, str]] = []

    preamble = text[: boundaries[0].start].strip()
    if preamble:
        pieces.append((PREAMBLE_TITLE, preamble))

    for i, boundary in enumerate(boundaries):
        end = boundaries[i + 1].start if i + 1 < len(boundaries) else len(text)
        content = text[boundary.start:end].strip()
        if content:
            pieces.append((boundary.title, content))

    if not pieces:
        # only blank text around the markers
        return _whole_document(text)

    segments = [Segment(title=title, content=content, ordinal=i) for i, (title, content) in enumerate(pieces)]
    logger.debug(
        "Segmenter: %d boundary match(es) -> %d segment(s) (preamble=%s)",
        len(boundaries),
        len(segments),
        bool(preamble),
    )
    return segments


def split_by_lines(text: str, lines_per_segment: int = 100) -> List[Segment]:
    """Group consecutive lines into fixed-size segments titled by their line range."""
    if not text:
        return []
    size = max(1, int(lines_per_segment))
    lines = text.split("\n")

    segments: List[Segment] = []
    for first in range(0, len(lines), size):
        run = lines[first:first + size]
        content = "\n".join(run).strip()
        if not content:
            continue
        title = f"lines {first + 1}-{first + len(run)}"
        segments.append(Segment(title=title, content=content, ordinal=len(segments)))
    return segments


def split_by_characters(text: str, chars_per_segment: int = 5000) -> List[Segment]:
    """
    Cut text into fixed-width slices.

    Slices are kept verbatim so their concatenation is the original text.
    """
    if not text:
        return []
    size = max(1, int(chars_per_segment))
    segments: List[Segment] = []
    for start in range(0, len(text), size):
        end = min(start + size, len(text))
        segments.append(Segment(title=f"chars {start}-{end}", content=text[start:end], ordinal=len(segments)))
    return segments
