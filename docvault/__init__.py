"""
DocVault — Folder tree & document catalog store.

Organizes uploaded documents into a folder forest, attaches metadata
(title, description, tags) and keeps a per-document access-control list.

    from docvault.catalog import CatalogStore
"""

__version__ = "1.0.0"
__all__ = ["catalog", "engine", "security", "upload"]
