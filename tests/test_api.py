"""
Name: JSON API Tests

Responsibilities:
  - Route wiring to the document session
  - Status codes for missing documents, bad patterns, and unknown batches
"""

import threading

import pytest

from chapterbatch.domain.chunking import core

pytestmark = pytest.mark.api


def _load(client, text, filename=None):
    resp = client.post("/api/document", json={"text": text, "filename": filename})
    assert resp.status_code == 200
    return resp.json()


def test_load_and_summary(client, three_chapters):
    body = _load(client, three_chapters, "novel.txt")

    assert body["ok"] is True
    assert body["segment_count"] == 3

    summary = client.get("/api/document/summary").json()
    assert summary["loaded"] is True
    assert summary["filename"] == "novel.txt"
    assert summary["file_info"].startswith("Characters:")


def test_rejected_load_is_reported_in_body(client):
    body = _load(client, "binary", "tool.exe")

    assert body["ok"] is False
    assert "Unsupported file type" in body["reason"]
    assert client.get("/api/document/summary").json()["loaded"] is False


def test_queries_before_load_conflict(client):
    assert client.get("/api/document/segments").status_code == 409
    assert client.get("/api/document/content").status_code == 409
    assert client.post("/api/document/split", json={"batch_size": 2}).status_code == 409


def test_split_and_batches(client, three_chapters):
    _load(client, three_chapters)

    resp = client.post("/api/document/split", json={"batch_size": 2})
    assert resp.status_code == 200
    assert resp.json()["batch_count"] == 2
    assert resp.json()["split_info"] == "Detected 3 chapters in 2 batches"

    batches = client.get("/api/document/batches").json()
    assert [b["label"] for b in batches] == ["第一章 Intro ~ 第二章 Body", "第三章 End"]

    one = client.get("/api/document/batches/1").json()
    assert one == batches[1]

    assert client.get("/api/document/batches/2").status_code == 404


def test_split_with_bad_pattern(client, three_chapters):
    _load(client, three_chapters)

    resp = client.post("/api/document/split", json={"mode": "pattern", "pattern": "第["})
    assert resp.status_code == 400
    assert client.get("/api/document/summary").json()["segment_count"] == 3


def test_split_by_lines(client):
    _load(client, "a\nb\nc")

    resp = client.post("/api/document/split", json={"mode": "lines", "lines": 1})
    assert resp.json()["segment_count"] == 3
    assert resp.json()["batch_size"] == 1


def test_content_for_sending(client, three_chapters):
    _load(client, three_chapters)
    client.post("/api/document/split", json={"batch_size": 2})

    whole = client.get("/api/document/content").json()
    assert whole == {"batch": -1, "content": three_chapters}

    last = client.get("/api/document/content", params={"batch": 1}).json()
    assert last["content"] == "第三章 End\nC"

    assert client.get("/api/document/content", params={"batch": 7}).status_code == 404


def test_segments_and_choices(client, with_preamble):
    _load(client, with_preamble)

    segments = client.get("/api/document/segments").json()
    assert [s["title"] for s in segments] == ["preamble", "第一章 Start"]
    assert [s["ordinal"] for s in segments] == [0, 1]

    choices = client.get("/api/document/choices").json()
    assert choices[0] == {"index": -1, "label": "Send entire document"}
    assert len(choices) == 2


def test_upload(client, three_chapters):
    files = {"file": ("novel.txt", three_chapters.encode("utf-8"), "text/plain")}
    body = client.post("/api/document/upload", files=files).json()

    assert body["ok"] is True
    assert body["filename"] == "novel.txt"
    assert body["segment_count"] == 3
    assert body["size"].endswith("B")
    assert body["batches"][0]["label"] == "Send entire document"


def test_upload_unsupported(client):
    files = {"file": ("picture.png", b"\x89PNG", "image/png")}
    body = client.post("/api/document/upload", files=files).json()

    assert body["ok"] is False
    assert body["reason"] == "Unsupported file type"
    assert body["batches"] == []


def test_clear(client, three_chapters):
    _load(client, three_chapters)

    assert client.delete("/api/document").json() == {"ok": True}
    assert client.get("/api/document/summary").json()["loaded"] is False


def test_queries_wait_for_a_load_in_progress(client, three_chapters, monkeypatch):
    splitting = threading.Event()
    release = threading.Event()
    real_split = core.split

    def slow_split(text, pattern):
        splitting.set()
        release.wait(timeout=5)
        return real_split(text, pattern)

    monkeypatch.setattr(core, "split", slow_split)
    responses = {}

    loader = threading.Thread(
        target=lambda: responses.update(load=client.post("/api/document", json={"text": three_chapters}))
    )
    loader.start()
    assert splitting.wait(timeout=5)

    readers = [
        threading.Thread(target=lambda: responses.update(summary=client.get("/api/document/summary"))),
        threading.Thread(
            target=lambda: responses.update(content=client.get("/api/document/content", params={"batch": 0}))
        ),
    ]
    for reader in readers:
        reader.start()
    readers[0].join(timeout=0.2)
    assert readers[0].is_alive()

    release.set()
    loader.join(timeout=5)
    for reader in readers:
        reader.join(timeout=5)

    assert responses["load"].json()["ok"] is True
    summary = responses["summary"].json()
    assert summary["loaded"] is True
    assert summary["segment_count"] == 3
    assert responses["content"].status_code == 200
    assert responses["content"].json()["content"].startswith("第一章 Intro")
