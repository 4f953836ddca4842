"""
DocVault Folder Tree — the folder forest and its structural invariants.

Folders live in an insertion-ordered mapping; the parent → child relation is
mirrored incrementally in a NetworkX DiGraph so that sub-tree queries are a
single iterative traversal, whatever the depth of the tree.

Invariant: the graph is a forest. Every mutation checks first and mutates
second, so a raised error leaves the tree untouched.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Set

import networkx as nx

from docvault.catalog.models import Folder
from docvault.engine.errors import (
    DocVaultCycleError,
    DocVaultNotFoundError,
    DocVaultValidationError,
)

logger = logging.getLogger("docvault.catalog.folders")


def _clean_parent(parent_id: Optional[str]) -> Optional[str]:
    # The folder form submits "" for "no parent"
    if parent_id is None or not parent_id.strip():
        return None
    return parent_id


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise DocVaultValidationError("Folder name must not be empty", field="name")
    return cleaned


class FolderTree:
    """Forest of folders keyed by id, listed in creation order."""

    def __init__(self):
        self._folders: Dict[str, Folder] = {}
        self._graph = nx.DiGraph()

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._folders)

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self._folders

    def __iter__(self) -> Iterator[Folder]:
        return iter(self._folders.values())

    def has_folder(self, folder_id: Optional[str]) -> bool:
        return folder_id is not None and folder_id in self._folders

    def get_folder(self, folder_id: str) -> Folder:
        """Return the stored folder. Raises DocVaultNotFoundError if unknown."""
        try:
            return self._folders[folder_id]
        except KeyError:
            raise DocVaultNotFoundError(
                f"Folder '{folder_id}' not found",
                object_type="folder",
                object_id=folder_id,
            ) from None

    def list_folders(self) -> List[Folder]:
        return list(self._folders.values())

    def children(self, folder_id: str) -> List[Folder]:
        """Direct sub-folders, in creation order."""
        if folder_id not in self._folders:
            return []
        child_ids = set(self._graph.successors(folder_id))
        return [f for f in self._folders.values() if f.id in child_ids]

    def descendants(self, folder_id: str) -> Set[str]:
        """Ids of every folder below ``folder_id`` (excluding itself)."""
        if folder_id not in self._folders:
            return set()
        return set(nx.descendants(self._graph, folder_id))

    def subtree(self, folder_id: str) -> List[str]:
        """``folder_id`` followed by all its descendants, depth-first."""
        if folder_id not in self._folders:
            return []
        return list(nx.dfs_preorder_nodes(self._graph, folder_id))

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> Folder:
        """
        Create a folder at root level or under ``parent_id``.

        Raises:
            DocVaultValidationError: If ``name`` is empty after trimming.
            DocVaultNotFoundError: If ``parent_id`` is given and unknown.
        """
        cleaned = _clean_name(name)
        parent_id = _clean_parent(parent_id)
        if parent_id is not None:
            self.get_folder(parent_id)

        folder = Folder(name=cleaned, parent_id=parent_id)
        self._folders[folder.id] = folder
        self._graph.add_node(folder.id)
        if parent_id is not None:
            self._graph.add_edge(parent_id, folder.id)

        logger.debug(f"Created folder {folder.id} '{cleaned}' (parent={parent_id})")
        return folder

    def edit_folder(
        self,
        folder_id: str,
        new_name: str,
        new_parent_id: Optional[str] = None,
    ) -> Folder:
        """
        Rename and/or re-parent a folder in one step.

        Raises:
            DocVaultNotFoundError: If ``folder_id`` (or a non-cyclic
                ``new_parent_id``) is unknown.
            DocVaultValidationError: If ``new_name`` is empty after trimming.
            DocVaultCycleError: If ``new_parent_id`` is the folder itself or
                one of its descendants.
        """
        folder = self.get_folder(folder_id)
        cleaned = _clean_name(new_name)
        new_parent_id = _clean_parent(new_parent_id)

        if new_parent_id is not None:
            if new_parent_id == folder_id or new_parent_id in self.descendants(folder_id):
                raise DocVaultCycleError(
                    f"Cannot move folder '{folder.name}' under itself or one of its sub-folders",
                    object_type="folder",
                    object_id=folder_id,
                    folder_id=folder_id,
                    parent_id=new_parent_id,
                )
            self.get_folder(new_parent_id)

        if folder.parent_id is not None:
            self._graph.remove_edge(folder.parent_id, folder_id)
        if new_parent_id is not None:
            self._graph.add_edge(new_parent_id, folder_id)
        folder.name = cleaned
        folder.parent_id = new_parent_id

        logger.debug(f"Edited folder {folder_id}: name='{cleaned}', parent={new_parent_id}")
        return folder

    def delete_folder(self, folder_id: str) -> List[str]:
        """
        Remove a folder together with every folder below it.

        Returns the removed ids (the folder first, then its sub-tree
        depth-first). Detaching documents is the caller's concern.
        """
        self.get_folder(folder_id)
        removed = self.subtree(folder_id)
        self._graph.remove_nodes_from(removed)
        for fid in removed:
            del self._folders[fid]

        logger.debug(f"Deleted folder {folder_id} and {len(removed) - 1} sub-folder(s)")
        return removed

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------

    def resolve_path(self, folder_id: Optional[str]) -> List[str]:
        """
        Folder names from the root down to ``folder_id``.

        Unknown ids resolve to an empty list; this backs display only.
        """
        names: List[str] = []
        seen: Set[str] = set()
        current = self._folders.get(folder_id) if folder_id is not None else None
        while current is not None and current.id not in seen:
            seen.add(current.id)
            names.append(current.name)
            current = self._folders.get(current.parent_id) if current.parent_id else None
        names.reverse()
        return names

    def available_parents(self, folder_id: Optional[str] = None) -> List[Folder]:
        """
        Folders that can become the parent of ``folder_id`` without a cycle.

        With no ``folder_id`` (creating a folder) every folder qualifies.
        """
        excluded = set(self.subtree(folder_id)) if folder_id else set()
        return [f for f in self._folders.values() if f.id not in excluded]
