"""
Shared fixtures for the chapterbatch test suite.

Notes:
  - Every test gets its own session/app so no state leaks between tests.
  - Sample documents use the default numeral-chapter markers.
"""

import pytest
from fastapi.testclient import TestClient

from chapterbatch.domain.session import DocumentSession
from chapterbatch.main import create_application
from chapterbatch.upload_store import check_document

THREE_CHAPTERS = "第一章 Intro\nA\n第二章 Body\nB\n第三章 End\nC"
WITH_PREAMBLE = "Preface text\n第一章 Start\nBody"


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")
    config.addinivalue_line("markers", "api: HTTP-level tests through the FastAPI test client")


@pytest.fixture
def three_chapters() -> str:
    return THREE_CHAPTERS


@pytest.fixture
def with_preamble() -> str:
    return WITH_PREAMBLE


@pytest.fixture
def session() -> DocumentSession:
    return DocumentSession(validator=check_document)


@pytest.fixture
def loaded_session(session: DocumentSession, three_chapters: str) -> DocumentSession:
    result = session.load(three_chapters, "novel.txt")
    assert result.ok
    return session


@pytest.fixture
def client() -> TestClient:
    app = create_application(DocumentSession(validator=check_document))
    with TestClient(app) as test_client:
        yield test_client
