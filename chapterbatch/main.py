"""FastAPI app wiring for chapterbatch.

This module owns the public ASGI `app` instance, the router wiring, and the
single document session handed to request handlers.
"""

import logging
import os
import threading
from typing import Optional

from fastapi import FastAPI

from chapterbatch.domain.session import DocumentSession
from chapterbatch.routes.api import router as api_router
from chapterbatch.upload_store import check_document

LOG_LEVEL = os.getenv("CHAPTERBATCH_LOG_LEVEL", "INFO").upper()

logging.basicConfig(level=LOG_LEVEL)


def create_application(session: Optional[DocumentSession] = None) -> FastAPI:
    """Build an app bound to `session`, or to a fresh session using the default policy."""
    application = FastAPI(title="chapterbatch")
    application.state.session = session or DocumentSession(validator=check_document)
    application.state.session_lock = threading.Lock()
    application.include_router(api_router)
    return application


app = create_application()
