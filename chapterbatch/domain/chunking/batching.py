"""Group ordered segments into fixed-size batches for incremental dispatch."""

import logging
import math
import os
from typing import List, Optional, Sequence

from chapterbatch.schemas import Batch, Segment

logger = logging.getLogger(__name__)

LABEL_SEPARATOR = " ~ "
CONTENT_SEPARATOR = "\n\n"


def _env_batch_size() -> int:
    try:
        return max(1, int(os.getenv("CHAPTERBATCH_BATCH_SIZE", "5")))
    except ValueError:
        return 5


DEFAULT_BATCH_SIZE = _env_batch_size()


def clamp_batch_size(value) -> int:
    """Coerce caller-supplied batch sizes to an int >= 1; junk falls back to the default."""
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        logger.warning("Batcher: invalid batch size %r; using default %d", value, DEFAULT_BATCH_SIZE)
        return DEFAULT_BATCH_SIZE


def batch_label(members: Sequence[Segment]) -> str:
    """Single-member batches use the member title, wider ones `first ~ last`."""
    if not members:
        return ""
    if len(members) == 1:
        return members[0].title
    return f"{members[0].title}{LABEL_SEPARATOR}{members[-1].title}"


def batch_count(segments: Sequence[Segment], batch_size: int) -> int:
    return math.ceil(len(segments) / clamp_batch_size(batch_size))


def batches(segments: Sequence[Segment], batch_size: int) -> List[Batch]:
    """
    Partition segments into consecutive runs of `batch_size`.

    The last run may be shorter. Each batch's content joins member contents
    with one blank line; `index` is the batch's position in the returned list.
    """
    size = clamp_batch_size(batch_size)
    out: List[Batch] = []
    for start in range(0, len(segments), size):
        members = segments[start:start + size]
        content = CONTENT_SEPARATOR.join(seg.content for seg in members).strip()
        out.append(
            Batch(
                index=len(out),
                label=batch_label(members),
                content=content,
                start_ordinal=members[0].ordinal,
                segment_count=len(members),
            )
        )
    return out


def batch_at(segments: Sequence[Segment], batch_size: int, index: int) -> Optional[Batch]:
    """Return `batches(segments, batch_size)[index]`, or None when out of range."""
    produced = batches(segments, batch_size)
    if 0 <= index < len(produced):
        return produced[index]
    return None
