"""Utilities for accepting uploads and extracting their text content."""

import logging
import os
from typing import Optional

from chapterbatch.schemas import FileAttachment

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({
    "txt", "md", "json", "xml", "html", "htm", "csv",
    "java", "kt", "py", "js", "ts", "c", "cpp", "h", "hpp",
    "cs", "go", "rs", "rb", "php", "swift", "scala", "sh", "bat",
})

MAX_DOCUMENT_CHARS = int(os.getenv("CHAPTERBATCH_MAX_DOCUMENT_CHARS", "20000000"))


def file_extension(filename: Optional[str]) -> Optional[str]:
    """Return the lower-cased extension, or None when the name has none."""
    if not filename:
        return None
    base = os.path.basename(filename)
    dot = base.rfind(".")
    if dot < 0 or dot == len(base) - 1:
        return None
    return base[dot + 1:].lower()


def is_supported_file(filename: Optional[str]) -> bool:
    return file_extension(filename) in SUPPORTED_EXTENSIONS


def extract_text_from_bytes(data: bytes) -> str:
    """Best-effort UTF-8 decoding of uploaded content."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        text = data.decode("utf-8", errors="ignore")
    return text.removeprefix("\ufeff")


def format_size(num_bytes: int) -> str:
    """Human-readable byte count: `512 B`, `1.5 KB`, `2.0 MB`."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


def check_document(text: Optional[str], filename: Optional[str] = None) -> Optional[str]:
    """
    Default acceptance policy for documents handed to a session.

    Returns a human-readable rejection reason, or None when the document is
    acceptable.
    """
    if text is None:
        return "No content was provided"
    if filename is not None and not is_supported_file(filename):
        return f"Unsupported file type: {os.path.basename(filename) or filename}"
    if len(text) > MAX_DOCUMENT_CHARS:
        return f"Document is too large ({len(text):,} characters, limit {MAX_DOCUMENT_CHARS:,})"
    return None


def read_upload(filename: Optional[str], data: Optional[bytes]) -> FileAttachment:
    """
    Turn raw upload bytes into a `FileAttachment`.

    Failures are reported in `FileAttachment.error`; this never raises for
    bad input.
    """
    safe_name = os.path.basename(filename or "") or "unknown_file"
    if not is_supported_file(safe_name):
        logger.info("Upload store: rejected unsupported file %s", safe_name)
        return FileAttachment(filename=safe_name, error="Unsupported file type")
    if data is None:
        return FileAttachment(filename=safe_name, error="Unable to open file")

    text = extract_text_from_bytes(data)
    if data and not text:
        return FileAttachment(filename=safe_name, size_bytes=len(data), error="File is empty or unreadable")

    return FileAttachment(filename=safe_name, content=text, size_bytes=len(data))
