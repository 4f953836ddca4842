"""DocVault Upload Adapter — MIME/size boundary checks in front of the catalog."""

from docvault.upload.validator import (
    UploadAdapter,
    UploadValidator,
    detect_mime_type,
    file_ref_from_path,
)

__all__ = [
    "UploadAdapter",
    "UploadValidator",
    "detect_mime_type",
    "file_ref_from_path",
]
