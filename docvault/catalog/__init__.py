"""
DocVault Catalog — folder tree, document catalog, tags and ACLs.

The CatalogStore is the single entry point; the other modules hold the
pieces it composes.
"""

from docvault.catalog.models import (
    AclEntry,
    Document,
    DocumentMetadata,
    FileRef,
    Folder,
    Permission,
    RawMetadata,
)
from docvault.catalog.store import CatalogStore, get_store, reset_store
from docvault.engine.errors import (
    DocVaultCycleError as CycleError,
    DocVaultNotFoundError as NotFoundError,
    DocVaultValidationError as ValidationError,
)

__all__ = [
    "AclEntry",
    "CatalogStore",
    "CycleError",
    "Document",
    "DocumentMetadata",
    "FileRef",
    "Folder",
    "NotFoundError",
    "Permission",
    "RawMetadata",
    "ValidationError",
    "get_store",
    "reset_store",
]
