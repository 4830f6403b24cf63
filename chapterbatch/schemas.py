from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------- Segments & batches ----------------

class Segment(BaseModel):
    """One structurally delimited unit of a document (e.g. one chapter)."""
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    ordinal: int = Field(ge=0)


class Batch(BaseModel):
    """Consecutive segments bundled for a single outbound transmission."""
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    label: str
    content: str

    # position of the batch inside the segment sequence
    start_ordinal: int = Field(default=0, ge=0)
    segment_count: int = Field(default=0, ge=0)


# ---------------- Session ----------------

class LoadResult(BaseModel):
    ok: bool
    reason: Optional[str] = None
    filename: Optional[str] = None
    segment_count: int = 0
    char_count: int = 0


class SessionSummary(BaseModel):
    loaded: bool = False
    segment_count: int = 0
    batch_count: int = 0
    batch_size: int = 1
    char_count: int = 0


class FileAttachment(BaseModel):
    """Text read by the file-access layer, or the reason it could not be read."""
    filename: str
    content: Optional[str] = None
    size_bytes: int = 0
    error: Optional[str] = None

    @property
    def has_error(self) -> bool:
        return bool(self.error)


# ---------------- API payloads ----------------

SplitMode = Literal["pattern", "lines", "chars"]


class DocumentLoadRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    text: str
    filename: Optional[str] = None


class SplitRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    mode: SplitMode = "pattern"

    # pattern mode; None keeps the current pattern
    pattern: Optional[str] = None
    batch_size: Optional[int] = None

    lines: int = Field(default=100, ge=1)
    chars: int = Field(default=5000, ge=1)


class SummaryOut(SessionSummary):
    file_info: Optional[str] = None
    split_info: Optional[str] = None
    filename: Optional[str] = None


class BatchChoice(BaseModel):
    index: int
    label: str


class ContentOut(BaseModel):
    batch: int
    content: str


class UploadOut(LoadResult):
    size: Optional[str] = None
    batches: List[BatchChoice] = Field(default_factory=list)
