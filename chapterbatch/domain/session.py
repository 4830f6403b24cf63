"""Session facade binding one loaded document to its segmentation and batches."""

import logging
from typing import Callable, List, Optional, Tuple

from chapterbatch.domain.chunking import batching, core
from chapterbatch.domain.exceptions import SessionNotLoadedError
from chapterbatch.schemas import Batch, FileAttachment, LoadResult, Segment, SessionSummary

logger = logging.getLogger(__name__)

# (text, filename) -> rejection reason, or None to accept
DocumentValidator = Callable[[str, Optional[str]], Optional[str]]

SEND_ALL_INDEX = -1
SEND_ALL_LABEL = "Send entire document"


class DocumentSession:
    """
    Owns one source text and the segments derived from it.

    Segments are replaced wholesale on every (re)split. Batches are derived
    from the current segment list on each query and never cached.
    """

    def __init__(
        self,
        pattern: core.PatternLike = core.DEFAULT_SPLIT_PATTERN,
        batch_size: int = batching.DEFAULT_BATCH_SIZE,
        validator: Optional[DocumentValidator] = None,
    ):
        self._default_pattern = core.compile_pattern(pattern)
        self._default_batch_size = batching.clamp_batch_size(batch_size)
        self._pattern = self._default_pattern
        self._batch_size = self._default_batch_size
        self._split_mode = "pattern"
        self._validator = validator
        self._text: Optional[str] = None
        self._filename: Optional[str] = None
        self._segments: List[Segment] = []

    # ---------------- State ----------------

    @property
    def is_loaded(self) -> bool:
        return self._text is not None

    @property
    def text(self) -> Optional[str]:
        return self._text

    @property
    def filename(self) -> Optional[str]:
        return self._filename

    @property
    def pattern(self) -> str:
        return self._pattern.pattern

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def segments(self) -> List[Segment]:
        return list(self._segments)

    def clear(self) -> None:
        if self.is_loaded:
            logger.info("Session: cleared document (filename=%s)", self._filename)
        self._text = None
        self._filename = None
        self._segments = []

    def load(self, text: Optional[str], filename: Optional[str] = None) -> LoadResult:
        """
        Replace the current document with `text`.

        Prior state is discarded before validation, so a rejected load leaves
        the session empty. Failures are returned, never raised.
        """
        self.clear()

        if text is None:
            return self._reject("No content was provided", filename)
        if not isinstance(text, str):
            return self._reject(f"Document text must be a string, got {type(text).__name__}", filename)

        if self._validator is not None:
            try:
                reason = self._validator(text, filename)
            except Exception as exc:
                logger.exception("Session: document validator failed (filename=%s)", filename)
                return self._reject(f"Validation failed: {exc}", filename)
            if reason:
                return self._reject(reason, filename)

        # Nothing becomes visible until the segments exist.
        segments = core.split(text, self._default_pattern)
        self._pattern = self._default_pattern
        self._batch_size = self._default_batch_size
        self._split_mode = "pattern"
        self._filename = filename
        self._segments = segments
        self._text = text
        logger.info(
            "Session: loaded document (filename=%s, chars=%d, segments=%d)",
            filename,
            len(text),
            len(segments),
        )
        return LoadResult(
            ok=True,
            filename=filename,
            segment_count=len(segments),
            char_count=len(text),
        )

    def load_attachment(self, attachment: FileAttachment) -> LoadResult:
        if attachment.has_error:
            self.clear()
            return self._reject(attachment.error, attachment.filename)
        return self.load(attachment.content, attachment.filename)

    def _reject(self, reason: str, filename: Optional[str]) -> LoadResult:
        logger.warning("Session: rejected document (filename=%s): %s", filename, reason)
        return LoadResult(ok=False, reason=reason, filename=filename)

    # ---------------- Re-splitting ----------------

    def _require_text(self) -> str:
        if self._text is None:
            raise SessionNotLoadedError("No document is loaded")
        return self._text

    def set_batch_size(self, value) -> int:
        self._batch_size = batching.clamp_batch_size(value)
        return self._batch_size

    def resplit(self, pattern: Optional[core.PatternLike] = None, batch_size: Optional[int] = None) -> int:
        """
        Re-segment the loaded text with a new pattern and/or batch size.

        A malformed pattern raises `SplitPatternError` before any state
        changes. Coming back from a line or character split without an
        explicit `batch_size` restores the configured batch size. Returns the
        new segment count.
        """
        text = self._require_text()
        regex = core.compile_pattern(pattern) if pattern is not None else self._pattern
        segments = core.split(text, regex)

        if batch_size is not None:
            size = batching.clamp_batch_size(batch_size)
        elif self._split_mode != "pattern":
            size = self._default_batch_size
        else:
            size = self._batch_size
        self._pattern = regex
        self._batch_size = size
        self._split_mode = "pattern"
        self._segments = segments
        logger.info(
            "Session: re-split by pattern %r (segments=%d, batch_size=%d)",
            regex.pattern,
            len(segments),
            self._batch_size,
        )
        return len(segments)

    def resplit_by_lines(self, lines_per_segment: int) -> int:
        text = self._require_text()
        segments = core.split_by_lines(text, lines_per_segment)
        self._batch_size = 1
        self._split_mode = "lines"
        self._segments = segments
        logger.info("Session: re-split by lines (lines=%s, segments=%d)", lines_per_segment, len(segments))
        return len(segments)

    def resplit_by_characters(self, chars_per_segment: int) -> int:
        text = self._require_text()
        segments = core.split_by_characters(text, chars_per_segment)
        self._batch_size = 1
        self._split_mode = "chars"
        self._segments = segments
        logger.info("Session: re-split by characters (chars=%s, segments=%d)", chars_per_segment, len(segments))
        return len(segments)

    # ---------------- Queries ----------------

    def batches(self) -> List[Batch]:
        return batching.batches(self._segments, self._batch_size)

    def batch_at(self, index: int) -> Optional[Batch]:
        return batching.batch_at(self._segments, self._batch_size, index)

    def content_for_sending(self, batch_index: int) -> Optional[str]:
        """
        Body text to transmit for `batch_index`.

        A negative index means the whole source text, untouched by
        segmentation. Labels are never included.
        """
        if self._text is None:
            return None
        if batch_index < 0:
            return self._text
        batch = self.batch_at(batch_index)
        return batch.content if batch is not None else None

    def summary(self) -> SessionSummary:
        return SessionSummary(
            loaded=self.is_loaded,
            segment_count=len(self._segments),
            batch_count=batching.batch_count(self._segments, self._batch_size),
            batch_size=self._batch_size,
            char_count=len(self._text or ""),
        )

    def file_info(self) -> Optional[str]:
        if self._text is None:
            return None
        # Only "\n" separates lines; an empty document still counts as one line.
        lines = self._text.count("\n") + 1
        return f"Characters: {len(self._text):,} | Lines: {lines:,}"

    def split_info(self) -> Optional[str]:
        if self._text is None:
            return None
        summary = self.summary()
        if summary.segment_count <= 1:
            return "No chapters detected; the document will be sent as a whole"
        return f"Detected {summary.segment_count} chapters in {summary.batch_count} batches"

    def batch_choices(self) -> List[Tuple[int, str]]:
        """Options offered to whoever picks what to send next."""
        if self._text is None:
            return []
        choices = [(SEND_ALL_INDEX, SEND_ALL_LABEL)]
        choices.extend((batch.index, batch.label) for batch in self.batches())
        return choices
