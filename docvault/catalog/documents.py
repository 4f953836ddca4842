"""
DocVault Document Catalog — the document collection and its metadata.

Folder references are validated against a FolderTree at assignment time.
Tag and ACL sub-mutations live in ``docvault.catalog.tags`` and
``docvault.catalog.acl``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from docvault.catalog.folders import FolderTree
from docvault.catalog.models import Document, DocumentMetadata, FileRef, RawMetadata
from docvault.catalog.tags import parse_tags
from docvault.engine.errors import DocVaultNotFoundError, DocVaultValidationError

logger = logging.getLogger("docvault.catalog.documents")

# Sentinel for "argument not given" where None is a meaningful value
_UNSET: Any = object()


def _clean_title(title: Optional[str]) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise DocVaultValidationError("Document title must not be empty", field="title")
    return cleaned


class DocumentCatalog:
    """Insertion-ordered collection of documents."""

    def __init__(self, folders: FolderTree):
        self._folders = folders
        self._documents: Dict[str, Document] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def _check_folder(self, folder_id: Optional[str]) -> Optional[str]:
        if folder_id is None or not folder_id.strip():
            return None
        self._folders.get_folder(folder_id)
        return folder_id

    def get_document(self, document_id: str) -> Document:
        """Return the stored document. Raises DocVaultNotFoundError if unknown."""
        try:
            return self._documents[document_id]
        except KeyError:
            raise DocVaultNotFoundError(
                f"Document '{document_id}' not found",
                object_type="document",
                object_id=document_id,
            ) from None

    def list_documents(self) -> List[Document]:
        return list(self._documents.values())

    def add_document(
        self,
        file_ref: Union[FileRef, Dict[str, Any]],
        metadata: Union[RawMetadata, Dict[str, Any]],
    ) -> Document:
        """
        Catalogue an uploaded file.

        Tags are parsed from the raw comma-separated input and de-duplicated.
        The new document starts with an empty ACL.

        Raises:
            DocVaultValidationError: If the title is empty after trimming or
                the input does not fit FileRef / RawMetadata.
            DocVaultNotFoundError: If ``folder_id`` is given and unknown.
        """
        try:
            if not isinstance(file_ref, FileRef):
                file_ref = FileRef(**file_ref)
            if not isinstance(metadata, RawMetadata):
                metadata = RawMetadata(**metadata)
        except ValidationError as e:
            first = e.errors()[0]
            raise DocVaultValidationError(
                f"Invalid document input: {first['msg']}",
                field=".".join(str(part) for part in first["loc"]),
                validation_errors=e.errors(),
            ) from e

        title = _clean_title(metadata.title)
        folder_id = self._check_folder(metadata.folder_id)

        document = Document(
            file_ref=file_ref,
            metadata=DocumentMetadata(
                title=title,
                description=metadata.description or None,
                folder_id=folder_id,
                tags=parse_tags(metadata.tags),
            ),
        )
        self._documents[document.id] = document

        logger.debug(f"Added document {document.id} '{title}' (folder={folder_id})")
        return document

    def update_metadata(
        self,
        document_id: str,
        *,
        title: Optional[str] = _UNSET,
        description: Optional[str] = _UNSET,
        folder_id: Optional[str] = _UNSET,
    ) -> List[str]:
        """
        Edit title, description and/or folder of a document.

        Only the given fields change; ``folder_id=None`` detaches the
        document from its folder. Returns the names of the changed fields.
        """
        document = self.get_document(document_id)
        updates: Dict[str, Any] = {}
        if title is not _UNSET:
            updates["title"] = _clean_title(title)
        if description is not _UNSET:
            updates["description"] = description or None
        if folder_id is not _UNSET:
            updates["folder_id"] = self._check_folder(folder_id)

        changed = [k for k, v in updates.items() if getattr(document.metadata, k) != v]
        for key in changed:
            setattr(document.metadata, key, updates[key])
        return changed

    def delete_document(self, document_id: str) -> Document:
        """Remove a document. Raises DocVaultNotFoundError if unknown."""
        document = self.get_document(document_id)
        del self._documents[document_id]
        logger.debug(f"Deleted document {document_id}")
        return document

    def list_by_folder(self, folder_id: Optional[str] = None) -> List[Document]:
        """Documents whose folder is exactly ``folder_id`` (None or "" = folder-less)."""
        if folder_id is not None and not folder_id.strip():
            folder_id = None
        return [d for d in self._documents.values() if d.metadata.folder_id == folder_id]

    def detach_folders(self, folder_ids: Iterable[str]) -> List[str]:
        """Clear ``folder_id`` on every document pointing into ``folder_ids``."""
        doomed = set(folder_ids)
        detached: List[str] = []
        for document in self._documents.values():
            if document.metadata.folder_id in doomed:
                document.metadata.folder_id = None
                detached.append(document.id)
        return detached
