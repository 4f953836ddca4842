"""Integration fixtures — a configured project with an activity log."""

from __future__ import annotations

import pytest

from docvault.catalog.store import get_store
from docvault.upload.validator import UploadAdapter


@pytest.fixture
def vault(tmp_path, monkeypatch):
    """Default store and adapter for a project whose docvault.yaml enables the activity log."""
    logs = tmp_path / "logs"
    (tmp_path / "docvault.yaml").write_text(
        "upload:\n"
        "  max_size_mb: 1\n"
        "users:\n"
        "  - {id: alice, name: Alice}\n"
        "  - {id: bob, name: Bob}\n"
        "logging:\n"
        "  activity_log: true\n"
        f"  directory: '{logs.as_posix()}'\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    store = get_store()
    return store, UploadAdapter(store)
