"""Boundary Protocols — contracts between services and IO adapters.

Invariants:
    - Services depend on these Protocols, never on a concrete storage or mail class
    - Boundary value types (StorageResult, SmtpConfig, MailAttachment) are plain dataclasses
    - Implementations live in infrastructure/; tests substitute in-memory fakes

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes need no inheritance
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class StorageResult:
    url: str
    pathname: str
    size: int
    content_type: str
    uploaded_at: datetime
    provider: str

    def as_dict(self) -> dict:
        return {
            "url": self.url,
            "pathname": self.pathname,
            "size": self.size,
            "content_type": self.content_type,
            "uploaded_at": self.uploaded_at.isoformat(),
            "provider": self.provider,
        }


@dataclass(frozen=True)
class UploadOptions:
    directory: str = ""
    content_type: str | None = None


class StorageProvider(Protocol):
    """Contract for media storage backends (local filesystem, Vercel Blob)."""
    name: str

    async def upload_file(
        self, data: bytes, filename: str, options: UploadOptions,
    ) -> StorageResult: ...
    async def file_exists(self, url_or_path: str) -> bool: ...
    async def delete_file(self, url_or_path: str) -> bool: ...
    async def get_file_info(self, url_or_path: str) -> StorageResult | None: ...
    async def list_files(self, prefix: str = "") -> list[StorageResult]: ...


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    user: str
    password: str
    from_name: str
    from_address: str

    @property
    def use_ssl(self) -> bool:
        return self.port == 465


@dataclass(frozen=True)
class MailAttachment:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class MailResult:
    message_id: str
    delivered: bool
    preview_id: str | None = None


@dataclass
class OutgoingMail:
    to: str
    subject: str
    html: str
    attachments: list[MailAttachment] = field(default_factory=list)


class MailTransport(Protocol):
    """Contract for outbound mail — implemented by infrastructure/mailer.py."""
    async def send(
        self, mail: OutgoingMail, smtp: SmtpConfig | None = None,
    ) -> MailResult: ...
