"""
DocVault Catalog Store — single owner of the folder tree and document catalog.

Handles:
- Folder create / edit / delete with cycle rejection and cascading delete
- Document add / edit / delete and folder listing
- Tag and ACL mutations on a document
- Read projections for the presentation layer (paths, rows, joined ACLs)

Every operation validates before it mutates, so a raised DocVault error
leaves the store exactly as it was. Entities handed back to callers are deep
copies; the only way to change state is through the operations below.

The store is synchronous and single-owner: share it across threads only
behind external serialization.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from docvault.catalog import acl as acl_manager
from docvault.catalog import tags as tag_manager
from docvault.catalog.documents import DocumentCatalog
from docvault.catalog.folders import FolderTree
from docvault.catalog.models import (
    Document,
    DocumentRow,
    FileRef,
    Folder,
    FolderRow,
    Permission,
    PermissionView,
    RawMetadata,
)
from docvault.engine.config import CatalogConfig, get_config
from docvault.engine.logging import (
    FileLogger,
    LogEntry,
    log_acl_event,
    log_document_event,
    log_folder_event,
)
from docvault.security.directory import StaticUserDirectory, UserDirectory

logger = logging.getLogger("docvault.catalog.store")

_UNSET: Any = object()


def _snapshot(entity: BaseModel) -> Any:
    return entity.model_copy(deep=True)


class CatalogStore:
    """
    In-memory catalog of folders and documents.

    Args:
        directory: User directory used to label ACL entries. Defaults to an
            empty directory (every ACL user shows as unknown).
        config: Catalog display settings (unknown-user label, path separator).
        activity_log: Optional FileLogger receiving one entry per successful
            mutation.
    """

    def __init__(
        self,
        directory: Optional[UserDirectory] = None,
        config: Optional[CatalogConfig] = None,
        activity_log: Optional[FileLogger] = None,
    ):
        self._folders = FolderTree()
        self._documents = DocumentCatalog(self._folders)
        self._directory = directory if directory is not None else StaticUserDirectory()
        self._config = config or CatalogConfig()
        self._activity_log = activity_log

    def _record(self, entry: LogEntry) -> None:
        # A failed log write never fails the mutation it describes
        if self._activity_log is None:
            return
        try:
            self._activity_log.write(entry)
        except OSError as e:
            logger.warning(
                f"Activity log write failed for {entry.data.get('event')} "
                f"({entry.data.get('object_id')}): {e}"
            )

    @property
    def directory(self) -> UserDirectory:
        return self._directory

    @directory.setter
    def directory(self, directory: UserDirectory) -> None:
        self._directory = directory

    @property
    def activity_log(self) -> Optional[FileLogger]:
        return self._activity_log

    # -------------------------------------------------------------------
    # Folder Tree
    # -------------------------------------------------------------------

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> Folder:
        folder = self._folders.create_folder(name, parent_id)
        self._record(log_folder_event(
            "folder_created", folder.id, name=folder.name, parent_id=folder.parent_id,
        ))
        logger.info(f"Folder created: '{folder.name}' ({folder.id})")
        return _snapshot(folder)

    def edit_folder(
        self,
        folder_id: str,
        new_name: str,
        new_parent_id: Optional[str] = None,
    ) -> Folder:
        folder = self._folders.edit_folder(folder_id, new_name, new_parent_id)
        self._record(log_folder_event(
            "folder_edited", folder.id, name=folder.name, parent_id=folder.parent_id,
        ))
        logger.info(f"Folder edited: '{folder.name}' ({folder.id})")
        return _snapshot(folder)

    def delete_folder(self, folder_id: str) -> List[str]:
        """
        Delete a folder and its whole sub-tree.

        Documents filed anywhere in the removed sub-tree become folder-less;
        they are not moved to the surviving ancestor. Returns the removed
        folder ids.
        """
        removed = self._folders.delete_folder(folder_id)
        detached = self._documents.detach_folders(removed)
        self._record(log_folder_event(
            "folder_deleted", folder_id, removed_ids=removed, detached_documents=detached,
        ))
        logger.info(
            f"Folder deleted: {folder_id} ({len(removed)} folder(s) removed, "
            f"{len(detached)} document(s) detached)"
        )
        return removed

    def get_folder(self, folder_id: str) -> Folder:
        return _snapshot(self._folders.get_folder(folder_id))

    def list_folders(self) -> List[Folder]:
        return [_snapshot(f) for f in self._folders.list_folders()]

    def child_folders(self, folder_id: str) -> List[Folder]:
        return [_snapshot(f) for f in self._folders.children(folder_id)]

    def resolve_path(self, folder_id: Optional[str]) -> List[str]:
        return self._folders.resolve_path(folder_id)

    def available_parents(self, folder_id: Optional[str] = None) -> List[Folder]:
        return [_snapshot(f) for f in self._folders.available_parents(folder_id)]

    # -------------------------------------------------------------------
    # Document Catalog
    # -------------------------------------------------------------------

    def add_document(
        self,
        file_ref: Union[FileRef, Dict[str, Any]],
        metadata: Union[RawMetadata, Dict[str, Any]],
    ) -> Document:
        document = self._documents.add_document(file_ref, metadata)
        self._record(log_document_event(
            "document_added",
            document.id,
            title=document.metadata.title,
            folder_id=document.metadata.folder_id,
            tags=list(document.metadata.tags),
        ))
        logger.info(f"Document added: '{document.metadata.title}' ({document.id})")
        return _snapshot(document)

    def update_document(
        self,
        document_id: str,
        *,
        title: Optional[str] = _UNSET,
        description: Optional[str] = _UNSET,
        folder_id: Optional[str] = _UNSET,
    ) -> Document:
        """Edit title, description or folder; omitted fields are left alone."""
        fields: Dict[str, Any] = {}
        if title is not _UNSET:
            fields["title"] = title
        if description is not _UNSET:
            fields["description"] = description
        if folder_id is not _UNSET:
            fields["folder_id"] = folder_id

        changed = self._documents.update_metadata(document_id, **fields)
        document = self._documents.get_document(document_id)
        if changed:
            self._record(log_document_event(
                "document_updated",
                document_id,
                title=document.metadata.title,
                folder_id=document.metadata.folder_id,
                fields_changed=changed,
            ))
        return _snapshot(document)

    def delete_document(self, document_id: str) -> None:
        document = self._documents.delete_document(document_id)
        self._record(log_document_event(
            "document_deleted", document_id, title=document.metadata.title,
        ))
        logger.info(f"Document deleted: '{document.metadata.title}' ({document_id})")

    def get_document(self, document_id: str) -> Document:
        return _snapshot(self._documents.get_document(document_id))

    def list_documents(self) -> List[Document]:
        return [_snapshot(d) for d in self._documents.list_documents()]

    def list_by_folder(self, folder_id: Optional[str] = None) -> List[Document]:
        return [_snapshot(d) for d in self._documents.list_by_folder(folder_id)]

    # -------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------

    def add_tag(self, document_id: str, raw_tag: str) -> Document:
        document = self._documents.get_document(document_id)
        if tag_manager.add_tag(document, raw_tag):
            self._record(log_document_event(
                "tag_added", document_id, tags=list(document.metadata.tags),
            ))
        return _snapshot(document)

    def remove_tag(self, document_id: str, tag: str) -> Document:
        document = self._documents.get_document(document_id)
        if tag_manager.remove_tag(document, tag):
            self._record(log_document_event(
                "tag_removed", document_id, tags=list(document.metadata.tags),
            ))
        return _snapshot(document)

    # -------------------------------------------------------------------
    # Access Control
    # -------------------------------------------------------------------

    def assign_permission(
        self,
        document_id: str,
        user_id: str,
        permission: Union[Permission, str],
    ) -> Document:
        document = self._documents.get_document(document_id)
        previous = acl_manager.permission_for(document, (user_id or "").strip())
        entry = acl_manager.assign_permission(document, user_id, permission)
        self._record(log_acl_event(
            "permission_assigned",
            document_id,
            entry.user_id,
            permission=entry.permission.value,
            previous=previous.value if previous else None,
        ))
        return _snapshot(document)

    def revoke_permission(self, document_id: str, user_id: str) -> Document:
        document = self._documents.get_document(document_id)
        previous = acl_manager.permission_for(document, user_id)
        if acl_manager.revoke_permission(document, user_id):
            self._record(log_acl_event(
                "permission_revoked",
                document_id,
                user_id,
                previous=previous.value if previous else None,
            ))
        return _snapshot(document)

    def list_permissions(
        self,
        document_id: str,
        directory: Optional[UserDirectory] = None,
    ) -> List[PermissionView]:
        """ACL of a document joined against ``directory`` (or the store's)."""
        document = self._documents.get_document(document_id)
        return acl_manager.list_permissions(
            document,
            directory if directory is not None else self._directory,
            unknown_label=self._config.unknown_user_label,
        )

    # -------------------------------------------------------------------
    # Read projections
    # -------------------------------------------------------------------

    def folder_path_label(self, folder_id: Optional[str]) -> str:
        return self._config.path_separator.join(self._folders.resolve_path(folder_id))

    def list_folder_rows(self) -> List[FolderRow]:
        rows = []
        for folder in self._folders.list_folders():
            parent = (
                self._folders.get_folder(folder.parent_id)
                if self._folders.has_folder(folder.parent_id) else None
            )
            rows.append(FolderRow(
                id=folder.id,
                name=folder.name,
                parent_id=folder.parent_id,
                parent_name=parent.name if parent else "None",
                path=self._folders.resolve_path(folder.id),
            ))
        return rows

    def list_document_rows(self, folder_id: Any = _UNSET) -> List[DocumentRow]:
        """Document rows, optionally restricted to one folder (None = folder-less)."""
        if folder_id is _UNSET:
            documents = self._documents.list_documents()
        else:
            documents = self._documents.list_by_folder(folder_id)

        rows = []
        for doc in documents:
            folder_id_ = doc.metadata.folder_id
            rows.append(DocumentRow(
                id=doc.id,
                title=doc.display_title,
                file_name=doc.file_ref.name,
                description=doc.metadata.description or "N/A",
                folder_id=folder_id_,
                folder_label=(
                    self.folder_path_label(folder_id_) if folder_id_ else "No folder assigned"
                ),
                tags=list(doc.metadata.tags),
                acl=[e.model_copy() for e in doc.acl],
            ))
        return rows

    def __repr__(self) -> str:
        return f"<CatalogStore folders={len(self._folders)} documents={len(self._documents)}>"


# ---------------------------------------------------------------------------
# Process-wide default store
# ---------------------------------------------------------------------------

_store: Optional[CatalogStore] = None


def get_store() -> CatalogStore:
    """Return the session's store, creating it empty on first use."""
    global _store
    if _store is None:
        config = get_config()
        activity_log = None
        if config.logging.activity_log:
            activity_log = FileLogger(log_dir=config.logging.directory)
        _store = CatalogStore(
            directory=StaticUserDirectory.from_config(config),
            config=config.catalog,
            activity_log=activity_log,
        )
    return _store


def reset_store() -> None:
    """Discard the session's store; the next get_store() starts empty."""
    global _store
    _store = None
