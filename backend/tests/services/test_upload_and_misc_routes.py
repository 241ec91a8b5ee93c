"""Uploads, health probes and the dev email preview routes.

Tests:
    - Uploads need auth, accept only image/video, reject empty files
    - Uploaded assets land under the requested directory with a unique name
    - Liveness always answers; readiness checks the database and upload directory
    - An unwritable upload directory leaves readiness 200 with storage degraded
    - Oversized uploads are refused from the declared size without reading the body
    - Upload status resolves stored URLs and 404s for missing files
    - Unknown routes answer in the standard error envelope
    - Dev email previews are hidden (404) outside development
"""

import io

import pytest
from fastapi import UploadFile

from boothboss.api.deps import get_app_settings, get_storage
from boothboss.api.routes.uploads import read_within_limit
from boothboss.config import Settings
from boothboss.core.domain_types import StorageProviderName
from boothboss.core.errors import ValidationFailedError
from boothboss.infrastructure.storage import LocalStorageProvider, StorageRegistry
from boothboss.main import app


async def test_upload_requires_auth(client):
    res = await client.post(
        "/api/v1/uploads", files={"file": ("logo.png", b"png", "image/png")},
    )
    assert res.status_code == 401


async def test_upload_logo(client, customer_headers, storage):
    res = await client.post(
        "/api/v1/uploads",
        data={"directory": "logos"},
        files={"file": ("My Logo.PNG", b"\x89PNG-bytes", "image/png")},
        headers=customer_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["provider"] == "local"
    assert body["url"].startswith("/uploads/logos/")
    assert body["url"].endswith("-my-logo.png")
    assert body["content_type"] == "image/png"
    assert await storage.local.file_exists(body["url"])


async def test_upload_rejects_other_types(client, customer_headers):
    res = await client.post(
        "/api/v1/uploads",
        files={"file": ("notes.pdf", b"%PDF", "application/pdf")},
        headers=customer_headers,
    )
    assert res.status_code == 400


async def test_upload_rejects_empty_file(client, customer_headers):
    res = await client.post(
        "/api/v1/uploads",
        files={"file": ("empty.jpg", b"", "image/jpeg")},
        headers=customer_headers,
    )
    assert res.status_code == 400


async def test_upload_rejects_unknown_directory(client, customer_headers):
    res = await client.post(
        "/api/v1/uploads",
        data={"directory": "../etc"},
        files={"file": ("a.jpg", b"jpeg", "image/jpeg")},
        headers=customer_headers,
    )
    assert res.status_code == 400


async def test_upload_size_limit(client, customer_headers):
    app.dependency_overrides[get_app_settings] = lambda: Settings(max_upload_bytes=4)
    res = await client.post(
        "/api/v1/uploads",
        files={"file": ("big.jpg", b"0123456789", "image/jpeg")},
        headers=customer_headers,
    )
    assert res.status_code == 400


async def test_health_probes(client):
    res = await client.get("/api/v1/health/")
    assert res.json()["status"] == "healthy"
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    checks = res.json()["checks"]
    assert checks["database"] == "healthy"
    assert checks["storage"] == "healthy"
    assert checks["blob_configured"] is False


async def test_dev_emails_hidden_outside_development(client):
    res = await client.get("/api/v1/dev/emails")
    assert res.status_code == 404


async def test_dev_emails_listed_in_development(client):
    app.dependency_overrides[get_app_settings] = lambda: Settings(environment="development")
    res = await client.get("/api/v1/dev/emails")
    assert res.status_code == 200
    assert "emails" in res.json()


async def test_upload_status(client, customer_headers):
    res = await client.post(
        "/api/v1/uploads",
        data={"directory": "splash"},
        files={"file": ("splash.jpg", b"jpeg-bytes", "image/jpeg")},
        headers=customer_headers,
    )
    url = res.json()["url"]

    res = await client.get("/api/v1/uploads/status", params={"url": url}, headers=customer_headers)
    assert res.status_code == 200
    assert res.json()["exists"] is True
    assert res.json()["size"] == len(b"jpeg-bytes")

    res = await client.get(
        "/api/v1/uploads/status", params={"url": "/uploads/splash/gone.jpg"},
        headers=customer_headers,
    )
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/api/v1/does-not-exist")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    res = await client.delete("/api/v1/health/")
    assert res.status_code == 405
    assert res.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


class _UnreadableFile(io.BytesIO):
    def read(self, *args):
        raise AssertionError("body should not be read")


async def test_declared_size_over_limit_is_refused_before_reading():
    upload = UploadFile(file=_UnreadableFile(), filename="big.mp4", size=50 * 1024 * 1024)
    with pytest.raises(ValidationFailedError):
        await read_within_limit(upload, 1024, "File is too large", "media")


async def test_undeclared_size_reads_at_most_one_byte_past_limit():
    upload = UploadFile(file=io.BytesIO(b"x" * 100), filename="big.jpg")
    with pytest.raises(ValidationFailedError):
        await read_within_limit(upload, 10, "File is too large", "media")
    assert upload.file.tell() == 11


async def test_oversized_capture_is_400(client, event_url):
    app.dependency_overrides[get_app_settings] = lambda: Settings(max_upload_bytes=4)
    res = await client.post(
        "/api/v1/booth/capture",
        data={"name": "Jane", "email": "jane@guests.com", "url_path": "summer-party"},
        files={"photo": ("capture.jpg", b"0123456789", "image/jpeg")},
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "File is too large"


async def test_readiness_reports_degraded_storage(client, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("occupied")
    app.dependency_overrides[get_storage] = lambda: StorageRegistry({
        StorageProviderName.LOCAL: LocalStorageProvider(str(blocker), "uploads"),
    })
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ready"
    assert body["checks"]["database"] == "healthy"
    assert body["checks"]["storage"] == "degraded"
