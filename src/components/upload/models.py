"""Upload component models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UploadRules:
    """Image upload limits."""

    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_extensions: tuple[str, ...] = ("jpg", "jpeg", "png", "webp")
    allowed_mime_types: tuple[str, ...] = ("image/jpeg", "image/png", "image/webp")
    folder: str = "images"


@dataclass(frozen=True)
class UploadImageInput:
    filename: str
    content_type: str | None
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class UploadOutput:
    url: str
    public_id: str
    format: str
    bytes: int
