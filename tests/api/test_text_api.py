import base64


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_chunk(client):
    payload = {"text": "abcdefghijklmnopqrstuvwxyz", "chunk_size": 10, "overlap": 2}

    resp = client.post("/api/text/chunk", json=payload)

    assert resp.status_code == 200
    data = resp.json()
    assert data["chunks"] == ["abcdefghij", "ijklmnopqr", "qrstuvwxyz"]
    assert data["count"] == 3


def test_chunk_clamps_out_of_range_arguments(client):
    resp = client.post(
        "/api/text/chunk",
        json={"text": "abcdef", "chunk_size": 0, "overlap": -3, "max_chunks": 2},
    )

    assert resp.status_code == 200
    assert resp.json()["chunks"] == ["a", "b"]


def test_merge(client):
    resp = client.post("/api/text/merge", json={"outputs": [" one ", None, "", "two"]})

    assert resp.status_code == 200
    assert resp.json()["text"] == "one\n\ntwo"


def test_word_count_with_text_documents(client):
    payload = {
        "documents": [
            {"filename": "a.txt", "text": "one two three"},
            {"filename": "scan.pdf", "text": "title page", "byte_size": 900_000},
        ]
    }

    resp = client.post("/api/text/word-count", json=payload)

    assert resp.status_code == 200
    data = resp.json()
    assert data["total_words"] == 5
    assert data["files"][0] == {"filename": "a.txt", "words": 3, "warning": None}
    assert "image-based" in data["files"][1]["warning"]


def test_word_count_with_file_content(client):
    encoded = base64.b64encode("alpha beta".encode("utf-8")).decode("ascii")
    payload = {
        "documents": [
            {"filename": "notes.txt", "content_base64": encoded},
            {"filename": "book.docx", "content_base64": encoded},
        ]
    }

    resp = client.post("/api/text/word-count", json=payload)

    assert resp.status_code == 200
    data = resp.json()
    assert data["total_words"] == 2
    assert data["files"][1]["words"] == 0
    assert data["files"][1]["warning"].startswith("Failed to extract text")


def test_word_count_requires_one_source(client):
    resp = client.post(
        "/api/text/word-count",
        json={"documents": [{"filename": "a.txt"}]},
    )

    assert resp.status_code == 422


def test_word_count_rejects_bad_base64(client):
    resp = client.post(
        "/api/text/word-count",
        json={"documents": [{"filename": "a.txt", "content_base64": "***"}]},
    )

    assert resp.status_code == 400
