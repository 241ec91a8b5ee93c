"""Media Storage — local filesystem and Vercel Blob providers behind one Protocol.

Invariants:
    - Both providers return StorageResult with provider set to their name
    - Local files live under <public_dir>/<upload_path>/...; public URLs start with /<upload_path>/
    - Local paths resolving outside the upload root are rejected (no traversal)
    - upload_file raises StorageError; read paths (exists/info/list/delete) degrade
      to False/None/[] and log instead of raising
    - determine_provider: explicit local/vercel wins; auto picks vercel only on
      Vercel with blob enabled and a token configured

Design Decisions:
    - httpx.AsyncClient per call for the Blob REST API: no client lifecycle to manage
    - aiofiles for writes; stat/remove/walk run in a worker thread
"""

import asyncio
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import cast
from urllib.parse import quote, urlparse

import aiofiles
import aiofiles.os
import httpx

from boothboss.config import Settings
from boothboss.core.domain_types import StorageProviderName
from boothboss.core.errors import StorageError
from boothboss.core.media_naming import content_type_for
from boothboss.core.repository_protocols import (
    StorageProvider, StorageResult, UploadOptions,
)

logger = logging.getLogger(__name__)


class LocalStorageProvider:
    """Writes media to the local public directory served by StaticFiles."""

    name = StorageProviderName.LOCAL.value

    def __init__(self, public_dir: str, upload_path: str = "uploads"):
        self.upload_path = upload_path.strip("/") or "uploads"
        self.root = (Path(public_dir) / self.upload_path).resolve()

    def _resolve(self, url_or_path: str) -> Path:
        """Map a public URL (/uploads/x/y.jpg) or relative path (x/y.jpg) to disk."""
        path = urlparse(url_or_path).path.lstrip("/")
        prefix = self.upload_path + "/"
        if path.startswith(prefix):
            path = path[len(prefix):]
        target = (self.root / path).resolve()
        if target != self.root and self.root not in target.parents:
            raise StorageError("path escapes the upload directory", self.name)
        return target

    def _result(self, target: Path, size: int, uploaded_at: datetime) -> StorageResult:
        relative = target.relative_to(self.root).as_posix()
        return StorageResult(
            url=f"/{self.upload_path}/{relative}",
            pathname=relative,
            size=size,
            content_type=content_type_for(target.name),
            uploaded_at=uploaded_at,
            provider=self.name,
        )

    async def upload_file(
        self, data: bytes, filename: str, options: UploadOptions,
    ) -> StorageResult:
        relative = f"{options.directory.strip('/')}/{filename}" if options.directory else filename
        target = self._resolve(relative)
        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error(f"Local upload failed: {e}", extra={"provider": self.name})
            raise StorageError(str(e), self.name)
        logger.info(f"Stored {relative} ({len(data)} bytes)", extra={"provider": self.name})
        return self._result(target, len(data), datetime.now(timezone.utc))

    async def file_exists(self, url_or_path: str) -> bool:
        try:
            return await aiofiles.os.path.isfile(self._resolve(url_or_path))
        except StorageError:
            return False

    async def delete_file(self, url_or_path: str) -> bool:
        try:
            await aiofiles.os.remove(self._resolve(url_or_path))
            return True
        except (OSError, StorageError) as e:
            logger.warning(f"Local delete failed for {url_or_path}: {e}")
            return False

    async def get_file_info(self, url_or_path: str) -> StorageResult | None:
        try:
            target = self._resolve(url_or_path)
            stat = await aiofiles.os.stat(target)
        except (OSError, StorageError):
            return None
        return self._result(
            target, stat.st_size, datetime.fromtimestamp(stat.st_mtime, timezone.utc),
        )

    def _walk(self, base: Path) -> list[StorageResult]:
        results = []
        for dirpath, _, filenames in os.walk(base):
            for name in sorted(filenames):
                target = Path(dirpath) / name
                stat = target.stat()
                results.append(self._result(
                    target, stat.st_size,
                    datetime.fromtimestamp(stat.st_mtime, timezone.utc),
                ))
        return results

    async def list_files(self, prefix: str = "") -> list[StorageResult]:
        try:
            base = self._resolve(prefix) if prefix else self.root
        except StorageError:
            return []
        if not await aiofiles.os.path.isdir(base):
            return []
        return await asyncio.to_thread(self._walk, base)

    async def ensure_writable(self) -> bool:
        """Create the upload root if needed and confirm the process can write to it."""
        try:
            await aiofiles.os.makedirs(self.root, exist_ok=True)
        except OSError as e:
            logger.error(f"Upload directory {self.root} unavailable: {e}")
            return False
        return os.access(self.root, os.W_OK)


class VercelBlobStorageProvider:
    """Vercel Blob REST API client (PUT upload, metadata, list, delete)."""

    name = StorageProviderName.VERCEL.value

    def __init__(self, token: str, api_url: str = "https://blob.vercel-storage.com",
                 timeout: float = 30.0):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _headers(self, **extra: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", **extra}

    def _to_result(self, blob: dict, fallback_size: int = 0) -> StorageResult:
        uploaded = blob.get("uploadedAt")
        pathname = blob.get("pathname", "")
        return StorageResult(
            url=blob["url"],
            pathname=pathname,
            size=int(blob.get("size", fallback_size)),
            content_type=blob.get("contentType") or content_type_for(pathname),
            uploaded_at=(
                datetime.fromisoformat(uploaded.replace("Z", "+00:00"))
                if uploaded else datetime.now(timezone.utc)
            ),
            provider=self.name,
        )

    async def upload_file(
        self, data: bytes, filename: str, options: UploadOptions,
    ) -> StorageResult:
        if not self.token:
            raise StorageError("BLOB_READ_WRITE_TOKEN not configured", self.name)
        pathname = f"{options.directory.strip('/')}/{filename}" if options.directory else filename
        content_type = options.content_type or content_type_for(filename)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.put(
                    f"{self.api_url}/{quote(pathname)}",
                    content=data,
                    headers=self._headers(**{
                        "X-Content-Type": content_type,
                        "X-Add-Random-Suffix": "0",
                    }),
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Vercel Blob upload failed: {e}", extra={"provider": self.name})
            raise StorageError("upload rejected by blob store", self.name)
        blob = response.json()
        blob.setdefault("pathname", pathname)
        blob.setdefault("contentType", content_type)
        logger.info(f"Uploaded {pathname} to Vercel Blob", extra={"provider": self.name})
        return self._to_result(blob, fallback_size=len(data))

    async def get_file_info(self, url_or_path: str) -> StorageResult | None:
        if not self.token:
            return None
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.api_url, params={"url": url_or_path}, headers=self._headers(),
                )
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return self._to_result(response.json())
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning(f"Vercel Blob lookup failed: {e}", extra={"provider": self.name})
            return None

    async def file_exists(self, url_or_path: str) -> bool:
        return await self.get_file_info(url_or_path) is not None

    async def delete_file(self, url_or_path: str) -> bool:
        if not self.token:
            return False
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_url}/delete",
                    json={"urls": [url_or_path]},
                    headers=self._headers(),
                )
                response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"Vercel Blob delete failed: {e}", extra={"provider": self.name})
            return False

    async def list_files(self, prefix: str = "") -> list[StorageResult]:
        if not self.token:
            return []
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.api_url, params={"prefix": prefix} if prefix else None,
                    headers=self._headers(),
                )
                response.raise_for_status()
            return [self._to_result(b) for b in response.json().get("blobs", [])]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning(f"Vercel Blob list failed: {e}", extra={"provider": self.name})
            return []


def determine_provider(
    configured: str | None, blob_enabled: bool, app_settings: Settings,
) -> StorageProviderName:
    """Resolve which backend to write to for a tenant's storage settings."""
    choice = (configured or app_settings.storage_provider or "auto").lower()
    if choice == StorageProviderName.LOCAL.value:
        return StorageProviderName.LOCAL
    if choice == StorageProviderName.VERCEL.value:
        return StorageProviderName.VERCEL
    if (
        app_settings.running_on_vercel
        and blob_enabled
        and app_settings.blob_read_write_token
    ):
        return StorageProviderName.VERCEL
    return StorageProviderName.LOCAL


class StorageRegistry:
    """Hands out providers by name; the local provider doubles as the fallback."""

    def __init__(self, providers: dict[StorageProviderName, StorageProvider]):
        self._providers = providers

    def get(self, name: StorageProviderName) -> StorageProvider:
        return self._providers[name]

    @property
    def local(self) -> LocalStorageProvider:
        return cast(LocalStorageProvider, self._providers[StorageProviderName.LOCAL])

    def for_url(self, url: str) -> StorageProvider:
        """Provider owning an already-stored media URL."""
        if url.startswith("http") and "vercel-storage.com" in url:
            return self._providers[StorageProviderName.VERCEL]
        return self.local


def build_storage_registry(app_settings: Settings, local_upload_path: str | None = None) -> StorageRegistry:
    return StorageRegistry({
        StorageProviderName.LOCAL: LocalStorageProvider(
            app_settings.public_dir, local_upload_path or app_settings.local_upload_path,
        ),
        StorageProviderName.VERCEL: VercelBlobStorageProvider(
            app_settings.blob_read_write_token, app_settings.blob_api_url,
        ),
    })
