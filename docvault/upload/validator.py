"""
DocVault Upload Adapter — boundary checks before a file reaches the catalog.

Handles:
- MIME allow-list check (exact types, "image/*" wildcards, "*/*")
- Maximum size check
- Building a FileRef from a local path (size from the filesystem,
  MIME type guessed from the name)
- Handing (file_ref, raw metadata) to the CatalogStore

A rejection raises DocVaultUploadError and never touches the store.

Platform config:
    docvault.yaml → upload.allowed_mime_types, upload.max_size_mb
"""

from __future__ import annotations

import logging
import mimetypes
import os
from typing import Any, Dict, List, Optional, Tuple, Union

from docvault.catalog.models import Document, FileRef, RawMetadata
from docvault.catalog.store import CatalogStore
from docvault.engine.config import UploadConfig
from docvault.engine.errors import DocVaultUploadError

logger = logging.getLogger("docvault.upload.validator")


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from filename."""
    mime, _ = mimetypes.guess_type(filename)
    return mime or "application/octet-stream"


def file_ref_from_path(path: str, mime_type: Optional[str] = None) -> FileRef:
    """Describe a local file as a FileRef without reading its content."""
    return FileRef(
        name=os.path.basename(path),
        mime_type=mime_type or detect_mime_type(path),
        size_bytes=os.path.getsize(path),
    )


class UploadValidator:
    """Checks a candidate file against the MIME allow-list and size limit."""

    def __init__(
        self,
        allowed_mime_types: Optional[List[str]] = None,
        max_size_mb: Optional[int] = None,
    ):
        defaults = UploadConfig()
        self._allowed = list(allowed_mime_types or defaults.allowed_mime_types)
        self._max_size_mb = max_size_mb if max_size_mb is not None else defaults.max_size_mb

    @classmethod
    def from_config(cls, config: Optional[UploadConfig] = None) -> "UploadValidator":
        if config is None:
            from docvault.engine.config import get_config
            config = get_config().upload
        return cls(config.allowed_mime_types, config.max_size_mb)

    @property
    def allowed_mime_types(self) -> List[str]:
        return list(self._allowed)

    @property
    def max_size_bytes(self) -> int:
        return self._max_size_mb * 1024 * 1024

    def accepts_mime_type(self, mime_type: str) -> bool:
        """
        Check if a MIME type is allowed.

        Supports:
        - Exact match: "application/pdf"
        - Wildcard category: "image/*"
        - Universal: "*/*"
        """
        if "*/*" in self._allowed:
            return True

        for allowed in self._allowed:
            if allowed == mime_type:
                return True
            if allowed.endswith("/*"):
                category = allowed.split("/")[0]
                if mime_type.startswith(category + "/"):
                    return True

        return False

    def check(self, file_ref: FileRef) -> Tuple[bool, Optional[str]]:
        """Returns (is_valid, error_message_or_None)."""
        if not self.accepts_mime_type(file_ref.mime_type):
            return False, (
                f"Unsupported file type '{file_ref.mime_type}'. "
                f"Allowed: {', '.join(self._allowed)}"
            )

        if file_ref.size_bytes > self.max_size_bytes:
            return False, (
                f"File is too large ({file_ref.size_bytes / 1024 / 1024:.1f} MB). "
                f"Max size is {self._max_size_mb}MB."
            )

        return True, None

    def validate(self, file_ref: FileRef) -> FileRef:
        """Return ``file_ref`` unchanged or raise DocVaultUploadError."""
        valid, error = self.check(file_ref)
        if not valid:
            raise DocVaultUploadError(
                error or "Upload validation failed",
                reason="mime_type" if error and error.startswith("Unsupported") else "size",
                file_name=file_ref.name,
            )
        return file_ref


class UploadAdapter:
    """Validates candidate files, then catalogues them in a CatalogStore."""

    def __init__(self, store: CatalogStore, validator: Optional[UploadValidator] = None):
        self._store = store
        self._validator = validator or UploadValidator.from_config()

    @property
    def validator(self) -> UploadValidator:
        return self._validator

    def submit(
        self,
        file_ref: Union[FileRef, Dict[str, Any]],
        metadata: Union[RawMetadata, Dict[str, Any]],
    ) -> Document:
        """
        Validate and catalogue one file.

        Raises DocVaultUploadError on rejection; catalog errors
        (empty title, unknown folder) propagate from the store.
        """
        if not isinstance(file_ref, FileRef):
            file_ref = FileRef(**file_ref)
        self._validator.validate(file_ref)
        logger.debug(f"Upload accepted: {file_ref.name} ({file_ref.size_bytes} bytes)")
        return self._store.add_document(file_ref, metadata)

    def submit_path(
        self,
        path: str,
        metadata: Union[RawMetadata, Dict[str, Any]],
        mime_type: Optional[str] = None,
    ) -> Document:
        return self.submit(file_ref_from_path(path, mime_type), metadata)
