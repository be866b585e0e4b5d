"""
Upload component unit tests.

Uses the real FileSystemStore on a temporary directory.
"""

from __future__ import annotations

import pytest

from src.adapters.fs.filestore import FileSystemStore
from src.components.upload import (
    UploadImageInput,
    UploadRules,
    run_delete_image,
    run_upload_image,
    validate_image,
)
from src.domain.errors import NotFoundError, ValidationError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def store(tmp_path) -> FileSystemStore:
    return FileSystemStore(str(tmp_path / "media"))


@pytest.fixture
def rules() -> UploadRules:
    return UploadRules(max_upload_bytes=1024, folder="sahambagus")


class TestValidateImage:
    def test_accepts_png(self, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="chart.PNG", content_type="image/png", data=PNG_BYTES)
        assert validate_image(inp, rules) == "png"

    def test_normalises_jpeg(self, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="photo.jpeg", content_type="image/jpeg", data=b"x")
        assert validate_image(inp, rules) == "jpg"

    def test_rejects_empty(self, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="chart.png", content_type="image/png", data=b"")
        with pytest.raises(ValidationError, match="No file uploaded"):
            validate_image(inp, rules)

    def test_rejects_extension(self, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="notes.pdf", content_type="application/pdf", data=b"x")
        with pytest.raises(ValidationError, match="Invalid file type: .pdf"):
            validate_image(inp, rules)

    def test_rejects_mime(self, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="chart.png", content_type="text/html", data=b"x")
        with pytest.raises(ValidationError, match="Invalid content type"):
            validate_image(inp, rules)

    def test_missing_content_type_allowed(self, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="chart.webp", content_type=None, data=b"x")
        assert validate_image(inp, rules) == "webp"

    def test_rejects_oversize(self) -> None:
        rules = UploadRules()
        data = b"x" * (rules.max_upload_bytes + 1)
        inp = UploadImageInput(filename="big.jpg", content_type="image/jpeg", data=data)
        with pytest.raises(ValidationError, match="Maximum size is 10MB"):
            validate_image(inp, rules)

    def test_size_limit_is_inclusive(self, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="a.png", content_type="image/png", data=b"x" * 1024)
        assert validate_image(inp, rules) == "png"


class TestUploadImage:
    def test_upload_stores_file(self, store: FileSystemStore, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="chart.png", content_type="image/png", data=PNG_BYTES)

        out = run_upload_image(inp, store, rules)

        assert out.public_id.startswith("sahambagus/")
        assert out.format == "png"
        assert out.bytes == len(PNG_BYTES)
        assert out.url == f"/media/{out.public_id}.png"
        assert store.get(f"{out.public_id}.png") == PNG_BYTES

    def test_client_filename_not_used(self, store: FileSystemStore, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="../../etc/x.png", content_type="image/png", data=b"x")
        out = run_upload_image(inp, store, rules)
        assert "etc" not in out.public_id

    def test_delete_image(self, store: FileSystemStore, rules: UploadRules) -> None:
        inp = UploadImageInput(filename="photo.jpeg", content_type="image/jpeg", data=b"x")
        out = run_upload_image(inp, store, rules)

        run_delete_image(out.public_id, store, rules)

        with pytest.raises(FileNotFoundError):
            store.get(f"{out.public_id}.jpg")

    def test_delete_missing(self, store: FileSystemStore, rules: UploadRules) -> None:
        with pytest.raises(NotFoundError):
            run_delete_image("sahambagus/missing", store, rules)

    def test_delete_traversal(self, store: FileSystemStore, rules: UploadRules) -> None:
        with pytest.raises(ValidationError, match="Invalid public id"):
            run_delete_image("../../outside", store, rules)
