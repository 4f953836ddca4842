"""
DocVault ACL Manager — per-document access-control lists.

Invariant: at most one entry per user. Re-assigning replaces the user's
entry and moves it to the end of the list (last-write-wins, not additive).

The ACL is the source of truth; the user directory only supplies display
names. Entries for users the directory does not know are kept and shown
with a sentinel label.
"""

from __future__ import annotations

from typing import List, Optional, Union

from docvault.catalog.models import AclEntry, Document, Permission, PermissionView
from docvault.engine.errors import DocVaultValidationError
from docvault.security.directory import UserDirectory


UNKNOWN_USER_LABEL = "Unknown"


def parse_permission(value: Union[Permission, str, None]) -> Permission:
    """
    Coerce a permission level. Only the exact values "view", "edit" and
    "download" are accepted. Raises DocVaultValidationError otherwise.
    """
    if isinstance(value, Permission):
        return value
    try:
        return Permission(value)
    except ValueError:
        allowed = ", ".join(p.value for p in Permission)
        raise DocVaultValidationError(
            f"Unknown permission '{value}' (expected one of: {allowed})",
            field="permission",
        ) from None


def _clean_user_id(user_id: Optional[str]) -> str:
    cleaned = (user_id or "").strip()
    if not cleaned:
        raise DocVaultValidationError("User id must not be empty", field="user_id")
    return cleaned


def permission_for(document: Document, user_id: str) -> Optional[Permission]:
    for entry in document.acl:
        if entry.user_id == user_id:
            return entry.permission
    return None


def assign_permission(
    document: Document,
    user_id: str,
    permission: Union[Permission, str],
) -> AclEntry:
    """
    Give ``user_id`` exactly ``permission`` on ``document``.

    Raises:
        DocVaultValidationError: Empty user id or unknown permission level.
    """
    user_id = _clean_user_id(user_id)
    level = parse_permission(permission)

    entry = AclEntry(user_id=user_id, permission=level)
    document.acl = [e for e in document.acl if e.user_id != user_id]
    document.acl.append(entry)
    return entry


def revoke_permission(document: Document, user_id: str) -> bool:
    """Drop the user's entry. Returns False (no-op) when there was none."""
    remaining = [e for e in document.acl if e.user_id != user_id]
    if len(remaining) == len(document.acl):
        return False
    document.acl = remaining
    return True


def list_permissions(
    document: Document,
    directory: Optional[UserDirectory] = None,
    unknown_label: str = UNKNOWN_USER_LABEL,
) -> List[PermissionView]:
    """Join the document's ACL against the user directory, in ACL order."""
    views: List[PermissionView] = []
    for entry in document.acl:
        user = directory.get_user(entry.user_id) if directory is not None else None
        views.append(
            PermissionView(
                user_id=entry.user_id,
                user_name=user.name if user else unknown_label,
                permission=entry.permission,
                known=user is not None,
            )
        )
    return views
