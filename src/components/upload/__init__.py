"""
Upload component - image uploads for featured images.
"""

from .component import run_delete_image, run_upload_image, validate_image
from .models import UploadImageInput, UploadOutput, UploadRules
from .ports import FileStorePort

__all__ = [
    # Entry points
    "run_delete_image",
    "run_upload_image",
    "validate_image",
    # Models
    "UploadImageInput",
    "UploadOutput",
    "UploadRules",
    # Ports
    "FileStorePort",
]
