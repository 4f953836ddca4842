"""
DocVault Error Hierarchy — Structured exceptions for catalog operations.

Every error carries the offending ids as keyword context so that callers
(presentation layer, CLI, tests) can render or serialize it without parsing
the message. The store validates before mutating: when one of these is
raised, store state is unchanged.

Hierarchy:
    DocVaultError
    ├── DocVaultValidationError  — Caller-supplied data fails a precondition
    ├── DocVaultNotFoundError    — Referenced folder/document does not exist
    ├── DocVaultCycleError       — Folder re-parent would create a cycle
    ├── DocVaultUploadError      — Upload adapter rejected a candidate file
    └── DocVaultConfigError      — Invalid docvault.yaml
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


class DocVaultError(Exception):
    """
    Base error for all DocVault failures.

    Subclasses list in ``promoted`` the context keys that become attributes
    and top-level keys of ``to_dict()``. Missing keys default to None.
    """

    promoted: Tuple[str, ...] = ()

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context
        self.object_type: Optional[str] = context.get("object_type")
        self.object_id: Optional[str] = context.get("object_id")
        self.error_type = type(self).__name__
        self.timestamp = datetime.now(timezone.utc).isoformat()
        for key in self.promoted:
            setattr(self, key, context.get(key))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible view; leftover context values are stringified."""
        skip = {"object_type", "object_id", *self.promoted}
        data: Dict[str, Any] = {
            "error_type": self.error_type,
            "message": self.message,
            "object_type": self.object_type,
            "object_id": self.object_id,
            "timestamp": self.timestamp,
            "context": {k: str(v) for k, v in self.context.items() if k not in skip},
        }
        data.update((key, getattr(self, key)) for key in self.promoted)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        labels = [f"{key}={getattr(self, key)}" for key in ("object_type", "object_id") if getattr(self, key)]
        return " | ".join([f"{self.error_type}: {self.message}", *labels])


class DocVaultValidationError(DocVaultError):
    """
    Input validation failed (empty name/title, unknown permission level).
    Always preventable by the caller.
    """

    promoted = ("field",)


class DocVaultNotFoundError(DocVaultError):
    """A referenced folder or document id does not exist in the store."""


class DocVaultCycleError(DocVaultError):
    """A folder re-parent operation would make a folder its own ancestor."""

    promoted = ("folder_id", "parent_id")


class DocVaultUploadError(DocVaultError):
    """Candidate file rejected by the upload adapter (MIME type, size)."""

    promoted = ("reason", "file_name")


class DocVaultConfigError(DocVaultError):
    """Invalid docvault.yaml: unreadable YAML, wrong shape, or failed validation."""
