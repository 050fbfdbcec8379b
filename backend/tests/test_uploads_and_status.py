from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from portal.config import settings
from portal.main import app
from portal.utils import uploads
from portal.utils.uploads import InvalidUploadError

client = TestClient(app)


@pytest.mark.parametrize("content_type, allowed", [
    ("image/jpeg", True),
    ("image/jpg", True),
    ("image/png", True),
    ("image/gif", True),
    ("image/webp", False),
    ("application/pdf", False),
    ("", False),
    (None, False),
])
def test_image_mime_filter(content_type, allowed):
    assert uploads.is_allowed_image(content_type) is allowed


def test_timestamped_name():
    assert uploads.timestamped_name("cat.png", now_ms=1700000000123) == "1700000000123_cat.png"
    prefix, _, rest = uploads.timestamped_name("cat.png").partition("_")
    assert prefix.isdigit() and rest == "cat.png"


def test_store_image_writes_file(upload_dir):
    stored = uploads.store_image(b"\x89PNG fake", "pic.png", "image/png")
    path = Path(stored)
    assert path.parent == upload_dir
    assert path.read_bytes() == b"\x89PNG fake"


def test_store_image_refusals(monkeypatch):
    with pytest.raises(InvalidUploadError):
        uploads.store_image(b"x", "doc.pdf", "application/pdf")
    with pytest.raises(InvalidUploadError):
        uploads.store_image(b"x", "../escape.png", "image/png")
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 4)
    with pytest.raises(InvalidUploadError, match="file too large"):
        uploads.store_image(b"12345", "big.png", "image/png")


def test_root_reports_running():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == "Server is running."


def test_request_id_header_exists():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert "X-Request-ID" in r.headers
    echoed = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert echoed.headers["X-Request-ID"] == "abc123"


def test_unknown_route_uses_error_body():
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}


def test_invalid_institution_id_is_a_client_error():
    r = client.delete("/institutions/not-a-number")
    assert r.status_code == 400
