"""Upload component port definitions."""

from src.ports.filestore import FileStorePort

__all__ = ["FileStorePort"]
