"""
DocVault Catalog Models — Pydantic definitions for folders, documents and ACLs.

Folder: One node of the folder forest (parent_id None = root level).
Document: Opaque file handle + descriptive metadata + per-document ACL.
AclEntry: One (user_id, permission) pair; at most one per user per document.

Entities are owned by the CatalogStore and mutated only through its
operations. Reads hand out deep copies.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


def new_id() -> str:
    """Generate a fresh entity id."""
    return uuid.uuid4().hex


class Permission(str, Enum):
    """Per-user access level on a document."""

    VIEW = "view"
    EDIT = "edit"
    DOWNLOAD = "download"


# ---------------------------------------------------------------------------
# Folder
# ---------------------------------------------------------------------------

class Folder(BaseModel):
    """A named node in the folder forest."""

    id: str = Field(default_factory=new_id, description="Immutable folder id")
    name: str = Field(min_length=1, description="Folder display name (trimmed)")
    parent_id: Optional[str] = Field(default=None, description="Parent folder id; None = root")

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class FileRef(BaseModel):
    """
    Opaque handle to uploaded content. The catalog never reads the content;
    name, MIME type and size are what the upload adapter checked.
    """

    name: str
    mime_type: str = "application/octet-stream"
    size_bytes: int = Field(default=0, ge=0)


class DocumentMetadata(BaseModel):
    """Normalized descriptive metadata of a stored document."""

    title: str
    description: Optional[str] = None
    folder_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class RawMetadata(BaseModel):
    """
    Metadata as handed over by the upload adapter, before normalization.

    ``tags`` is either the comma-separated text of the upload form or a list.
    An empty ``folder_id`` means "no folder".
    """

    title: Optional[str] = ""
    description: Optional[str] = None
    folder_id: Optional[str] = None
    tags: Union[str, List[str], None] = ""

    @field_validator("title", "tags", mode="before")
    @classmethod
    def missing_is_empty(cls, v):
        # An empty YAML value or an omitted form field arrives as None
        return "" if v is None else v

    @field_validator("folder_id", mode="before")
    @classmethod
    def blank_folder_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class AclEntry(BaseModel):
    user_id: str
    permission: Permission


class Document(BaseModel):
    """
    A catalogued document.

    Each document owns its ``acl`` list; new documents start with an empty one.
    """

    id: str = Field(default_factory=new_id, description="Immutable document id")
    file_ref: FileRef
    metadata: DocumentMetadata
    acl: List[AclEntry] = Field(default_factory=list)

    @property
    def display_title(self) -> str:
        return self.metadata.title or self.file_ref.name


# ---------------------------------------------------------------------------
# Read projections
# ---------------------------------------------------------------------------

class PermissionView(BaseModel):
    """An ACL entry joined against the user directory."""

    user_id: str
    user_name: str
    permission: Permission
    known: bool = True


class FolderRow(BaseModel):
    """Folder listing row: the folder plus its parent's display name."""

    id: str
    name: str
    parent_id: Optional[str] = None
    parent_name: str = "None"
    path: List[str] = Field(default_factory=list)


class DocumentRow(BaseModel):
    """Document listing row with the joined folder path."""

    id: str
    title: str
    file_name: str
    description: str = "N/A"
    folder_id: Optional[str] = None
    folder_label: str = "No folder assigned"
    tags: List[str] = Field(default_factory=list)
    acl: List[AclEntry] = Field(default_factory=list)
