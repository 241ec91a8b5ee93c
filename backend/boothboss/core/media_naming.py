"""Media Naming — deterministic file names and MIME types for stored media.

Invariants:
    - Capture file names never contain characters outside [a-z0-9-.]
    - generate_unique_filename keeps the original extension (lowercased)
    - content_type_for falls back to application/octet-stream
"""

import random
import re
import string
from datetime import datetime

MIME_TYPES: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mov": "video/quicktime",
    "pdf": "application/pdf",
    "txt": "text/plain",
    "json": "application/json",
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
}

_BASE36 = string.ascii_lowercase + string.digits
_UNSAFE = re.compile(r"[^a-z0-9]+")


def content_type_for(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return MIME_TYPES.get(ext, "application/octet-stream")


def safe_slug(value: str, fallback: str = "guest") -> str:
    """Lowercase, collapse non-alphanumerics to single hyphens."""
    slug = _UNSAFE.sub("-", value.lower()).strip("-")
    return slug or fallback


def capture_filename(attendee_name: str, is_video: bool, now: datetime) -> str:
    """boothboss-<name>-<iso timestamp with ':' and '.' as '-'>.<jpg|mp4>"""
    stamp = now.isoformat().replace(":", "-").replace(".", "-").replace("+", "-")
    ext = "mp4" if is_video else "jpg"
    return f"boothboss-{safe_slug(attendee_name)}-{stamp}.{ext}"


def generate_unique_filename(
    original: str, now: datetime, rng: random.Random | None = None,
) -> str:
    """<ms timestamp>-<6 base36 chars>-<sanitized base>.<ext>"""
    rng = rng or random.Random()
    base, _, ext = original.rpartition(".")
    if not base:
        base, ext = ext, ""
    suffix = "".join(rng.choice(_BASE36) for _ in range(6))
    stamp = int(now.timestamp() * 1000)
    name = f"{stamp}-{suffix}-{safe_slug(base, 'file')}"
    return f"{name}.{ext.lower()}" if ext else name
