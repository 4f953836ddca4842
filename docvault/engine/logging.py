"""
DocVault Logging — stdlib logger setup plus a JSON-lines activity log.

The activity log is append-only and split into streams: one directory per
object type and category, one file per day::

    {log_dir}/folders/execution/2026-10-19.jsonl
    {log_dir}/documents/security/2026-10-19.jsonl

The store writes an entry synchronously inside every successful mutation.
Failed operations never reach the log; their errors propagate to the caller.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime, timedelta, timezone
from itertools import islice
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional

logger = logging.getLogger("docvault.engine.logging")

# Object type → categories it may log under
ACTIVITY_STREAMS = {
    "folders": ("execution",),
    "documents": ("execution", "security"),
    "system": ("execution",),
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class LogEntry(NamedTuple):
    """One activity record and the stream it belongs to."""

    object_type: str
    category: str
    data: Dict[str, Any]

    def to_json(self) -> str:
        return json.dumps(self.data, default=str, separators=(",", ":"))


def _read_lines(path: Path) -> Iterator[Dict[str, Any]]:
    with path.open("r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                logger.warning(f"Skipping malformed activity entry {path}:{lineno}")


class FileLogger:
    """Append-only activity log rooted at ``log_dir``."""

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = Path(log_dir)
        for object_type, categories in ACTIVITY_STREAMS.items():
            for category in categories:
                self.log_dir.joinpath(object_type, category).mkdir(parents=True, exist_ok=True)

    def path_for(self, object_type: str, category: str, day: Optional[date] = None) -> Path:
        """File holding ``object_type``/``category`` entries for ``day`` (default today)."""
        if category not in ACTIVITY_STREAMS.get(object_type, ()):
            raise ValueError(f"Unknown activity stream '{object_type}/{category}'")
        return self.log_dir / object_type / category / f"{(day or date.today()).isoformat()}.jsonl"

    def write(self, entry: LogEntry) -> None:
        self.write_batch([entry])

    def write_batch(self, entries: Iterable[LogEntry]) -> None:
        """Append entries, opening each target file once."""
        pending: Dict[Path, List[str]] = {}
        for entry in entries:
            path = self.path_for(entry.object_type, entry.category)
            pending.setdefault(path, []).append(entry.to_json())
        for path, lines in pending.items():
            with path.open("a", encoding="utf-8") as fh:
                fh.writelines(f"{line}\n" for line in lines)

    def iter_entries(
        self,
        object_type: str,
        category: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Yield entries day by day, oldest first. The window defaults to the last week."""
        end = end_date or date.today()
        day = start_date or end - timedelta(days=7)
        base = self.log_dir / object_type / category
        while day <= end:
            path = base / f"{day.isoformat()}.jsonl"
            if path.is_file():
                yield from _read_lines(path)
            day += timedelta(days=1)

    def query(
        self,
        object_type: str,
        category: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 500,
    ) -> List[Dict[str, Any]]:
        """
        Read back activity entries in chronological order.

        Args:
            object_type: "folders", "documents" or "system".
            category: "execution" or "security".
            start_date: First day to read (defaults to a week before end_date).
            end_date: Last day to read (defaults to today).
            filters: Keep only entries whose top-level keys equal all of these.
            limit: Stop after this many matches.
        """
        wanted = filters or {}
        matches = (
            entry
            for entry in self.iter_entries(object_type, category, start_date, end_date)
            if all(entry.get(key) == value for key, value in wanted.items())
        )
        return list(islice(matches, limit))


# ---------------------------------------------------------------------------
# Entry builders
# ---------------------------------------------------------------------------

def _entry(
    object_type: str,
    category: str,
    event: str,
    object_id: Optional[str] = None,
    level: str = "INFO",
    **fields: Any,
) -> LogEntry:
    # None-valued fields are left out of the record
    data: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "event": event,
    }
    if object_id is not None:
        data["object_id"] = object_id
    data.update((k, v) for k, v in fields.items() if v is not None)
    return LogEntry(object_type, category, data)


def log_folder_event(
    event: str,
    folder_id: str,
    name: Optional[str] = None,
    parent_id: Optional[str] = None,
    removed_ids: Optional[List[str]] = None,
    detached_documents: Optional[List[str]] = None,
) -> LogEntry:
    """folder_created / folder_edited / folder_deleted."""
    return _entry(
        "folders", "execution", event, folder_id,
        name=name,
        parent_id=parent_id,
        removed_ids=removed_ids or None,
        detached_documents=detached_documents or None,
    )


def log_document_event(
    event: str,
    document_id: str,
    title: Optional[str] = None,
    folder_id: Optional[str] = None,
    tags: Optional[List[str]] = None,
    fields_changed: Optional[List[str]] = None,
) -> LogEntry:
    """document_added / document_updated / document_deleted / tag_added / tag_removed.

    ``tags`` is recorded even when empty, so a removal down to no tags shows.
    """
    return _entry(
        "documents", "execution", event, document_id,
        title=title,
        folder_id=folder_id,
        tags=tags,
        fields_changed=fields_changed or None,
    )


def log_acl_event(
    event: str,
    document_id: str,
    user_id: str,
    permission: Optional[str] = None,
    previous: Optional[str] = None,
) -> LogEntry:
    return _entry(
        "documents", "security", event, document_id,
        user_id=user_id,
        permission=permission,
        previous=previous,
    )


def log_system_event(
    event: str,
    level: str = "INFO",
    details: Optional[Dict[str, Any]] = None,
) -> LogEntry:
    return _entry("system", "execution", event, level=level, details=details or None)


# ---------------------------------------------------------------------------
# stdlib logger setup
# ---------------------------------------------------------------------------

def configure_logging(level: str = "INFO", stream: Any = None) -> logging.Logger:
    """
    Attach a stream handler to the "docvault" logger and set its level.

    Repeated calls only change the level; the handler is added once.
    """
    root = logging.getLogger("docvault")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(getattr(h, "_docvault_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._docvault_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root
