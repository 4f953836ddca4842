"""Tag normalization and set semantics over a document's tag list."""

from __future__ import annotations

from typing import Iterable, List, Union

from docvault.catalog.models import Document


def normalize_tag(raw: str) -> str:
    """Trim surrounding whitespace; case is preserved."""
    return (raw or "").strip()


def parse_tags(raw: Union[str, Iterable[str], None]) -> List[str]:
    """
    Turn upload-form tag input into a clean tag list.

    A string is split on commas. Segments are trimmed, empty ones dropped and
    repeats removed (first occurrence wins).
    """
    if raw is None:
        return []
    segments = raw.split(",") if isinstance(raw, str) else list(raw)

    tags: List[str] = []
    for segment in segments:
        tag = normalize_tag(segment)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def add_tag(document: Document, raw_tag: str) -> bool:
    """
    Append a tag unless it is empty or already present (exact match).

    Returns True if the document changed.
    """
    tag = normalize_tag(raw_tag)
    if not tag or tag in document.metadata.tags:
        return False
    document.metadata.tags.append(tag)
    return True


def remove_tag(document: Document, tag: str) -> bool:
    """Remove an exact-match tag. Absent tags are a no-op; returns True if removed."""
    if tag not in document.metadata.tags:
        return False
    document.metadata.tags.remove(tag)
    return True
