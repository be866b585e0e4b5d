"""
Upload component - image upload to the file store.

Invariants:
- extension must be in the allowlist
- content type, when given, must be in the allowlist
- size must not exceed the configured limit
- stored names are generated; the client filename only supplies the extension
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from uuid import uuid4

from src.domain.errors import NotFoundError, ValidationError

from .models import UploadImageInput, UploadOutput, UploadRules
from .ports import FileStorePort

logger = logging.getLogger(__name__)


def _extension(filename: str) -> str:
    return PurePosixPath(filename or "").suffix.lstrip(".").lower()


def validate_image(inp: UploadImageInput, rules: UploadRules) -> str:
    """Check the upload against the rules and return its normalised extension."""
    if not inp.data:
        raise ValidationError("No file uploaded")

    ext = _extension(inp.filename)
    if ext not in rules.allowed_extensions:
        allowed = ", ".join(rules.allowed_extensions)
        raise ValidationError(f"Invalid file type: .{ext or '?'}. Allowed: {allowed}")

    if inp.content_type and inp.content_type.lower() not in rules.allowed_mime_types:
        raise ValidationError(f"Invalid content type: {inp.content_type}")

    if len(inp.data) > rules.max_upload_bytes:
        limit_mb = rules.max_upload_bytes / (1024 * 1024)
        raise ValidationError(f"File too large. Maximum size is {limit_mb:g}MB")

    return "jpg" if ext == "jpeg" else ext


def run_upload_image(
    inp: UploadImageInput, store: FileStorePort, rules: UploadRules
) -> UploadOutput:
    ext = validate_image(inp, rules)
    public_id = f"{rules.folder}/{uuid4().hex}"
    path = store.save(f"{public_id}.{ext}", inp.data)
    logger.info("Image uploaded: %s", public_id)
    return UploadOutput(
        url=store.url_for(path),
        public_id=public_id,
        format=ext,
        bytes=len(inp.data),
    )


def run_delete_image(public_id: str, store: FileStorePort, rules: UploadRules) -> None:
    """Remove a stored image by public id. NotFoundError if nothing matched."""
    for ext in dict.fromkeys("jpg" if e == "jpeg" else e for e in rules.allowed_extensions):
        try:
            deleted = store.delete(f"{public_id}.{ext}")
        except ValueError as e:
            raise ValidationError(f"Invalid public id: {public_id}") from e
        if deleted:
            logger.info("Image deleted: %s", public_id)
            return
    raise NotFoundError("Image", public_id)
