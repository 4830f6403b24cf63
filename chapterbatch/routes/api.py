"""Public JSON API routes for driving a document session.

These handlers translate HTTP requests into session calls and return
validated responses for whatever dispatch loop sends the batches onward.
Keep the logic thin and delegate to the domain modules.
"""

import logging
from typing import Iterator, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile

from chapterbatch.domain.exceptions import SessionNotLoadedError, SplitPatternError
from chapterbatch.domain.session import DocumentSession
from chapterbatch.schemas import (
    Batch,
    BatchChoice,
    ContentOut,
    DocumentLoadRequest,
    LoadResult,
    Segment,
    SplitRequest,
    SummaryOut,
    UploadOut,
)
from chapterbatch.upload_store import format_size, read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


# ---------------- Helpers ----------------

def get_session(request: Request) -> Iterator[DocumentSession]:
    """Yield the application's session, holding its lock for the whole request.

    Handlers run concurrently in the threadpool; the lock keeps a load or
    re-split from being observed half done.
    """
    state = request.app.state
    with state.session_lock:
        yield state.session


def _require_loaded(session: DocumentSession) -> DocumentSession:
    if not session.is_loaded:
        raise HTTPException(status_code=409, detail="No document loaded")
    return session


def _summary_out(session: DocumentSession) -> SummaryOut:
    return SummaryOut(
        **session.summary().model_dump(),
        file_info=session.file_info(),
        split_info=session.split_info(),
        filename=session.filename,
    )


def _choices(session: DocumentSession) -> List[BatchChoice]:
    return [BatchChoice(index=i, label=label) for i, label in session.batch_choices()]


# ---------------- Document lifecycle ----------------

@router.post("/document", response_model=LoadResult)
def document_load(payload: DocumentLoadRequest, session: DocumentSession = Depends(get_session)):
    """Load raw text into the session; rejections are reported in the body, not as errors."""
    return session.load(payload.text, payload.filename)


@router.post("/document/upload", response_model=UploadOut)
async def document_upload(file: UploadFile = File(...), session: DocumentSession = Depends(get_session)):
    """Accept an uploaded text file, decode it, and load it into the session."""
    data = await file.read()
    attachment = read_upload(file.filename, data)
    result = session.load_attachment(attachment)
    return UploadOut(
        **result.model_dump(),
        size=format_size(attachment.size_bytes),
        batches=_choices(session),
    )


@router.delete("/document")
def document_clear(session: DocumentSession = Depends(get_session)):
    """Drop the loaded document and every derived segment."""
    session.clear()
    return {"ok": True}


@router.get("/document/summary", response_model=SummaryOut)
def document_summary(session: DocumentSession = Depends(get_session)):
    """Segment/batch counts plus the human-readable file and split descriptions."""
    return _summary_out(session)


@router.post("/document/split", response_model=SummaryOut)
def document_split(payload: SplitRequest, session: DocumentSession = Depends(get_session)):
    """Re-split the loaded document by pattern, line count, or character count."""
    _require_loaded(session)
    try:
        if payload.mode == "lines":
            session.resplit_by_lines(payload.lines)
        elif payload.mode == "chars":
            session.resplit_by_characters(payload.chars)
        else:
            session.resplit(pattern=payload.pattern or None, batch_size=payload.batch_size)
    except SplitPatternError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SessionNotLoadedError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _summary_out(session)


# ---------------- Segments & batches ----------------

@router.get("/document/segments", response_model=List[Segment])
def document_segments(session: DocumentSession = Depends(get_session)):
    """List the current segments in ordinal order."""
    return _require_loaded(session).segments


@router.get("/document/batches", response_model=List[Batch])
def document_batches(session: DocumentSession = Depends(get_session)):
    """List every batch for the current segments and batch size."""
    return _require_loaded(session).batches()


@router.get("/document/choices", response_model=List[BatchChoice])
def document_choices(session: DocumentSession = Depends(get_session)):
    """Selectable send options: the whole document followed by each batch label."""
    return _choices(_require_loaded(session))


@router.get("/document/batches/{index}", response_model=Batch)
def document_batch(index: int, session: DocumentSession = Depends(get_session)):
    """Retrieve a single batch or return 404 when the index is out of range."""
    batch = _require_loaded(session).batch_at(index)
    if batch is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    return batch


@router.get("/document/content", response_model=ContentOut)
def document_content(
    batch: int = Query(default=-1, description="Batch index; negative sends the entire document"),
    session: DocumentSession = Depends(get_session),
):
    """Return the body text to send for a batch, without its display label."""
    content: Optional[str] = _require_loaded(session).content_for_sending(batch)
    if content is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    return ContentOut(batch=batch, content=content)
