"""
DocVault Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

import logging

import pytest

from docvault.catalog.models import FileRef
from docvault.catalog.store import CatalogStore
from docvault.security.directory import StaticUserDirectory


@pytest.fixture(autouse=True)
def _isolate_singletons():
    """Reset global config, store and the docvault log handler between tests."""
    import docvault.catalog.store as store_mod
    import docvault.engine.config as cfg_mod

    cfg_mod._config = None
    store_mod._store = None
    yield
    cfg_mod._config = None
    store_mod._store = None
    root = logging.getLogger("docvault")
    for handler in [h for h in root.handlers if getattr(h, "_docvault_handler", False)]:
        root.removeHandler(handler)


@pytest.fixture
def directory():
    """The default three-user directory."""
    return StaticUserDirectory([
        {"id": "alice", "name": "alice"},
        {"id": "boob", "name": "boob"},
        {"id": "john", "name": "john"},
    ])


@pytest.fixture
def store(directory):
    """An empty store wired to the default directory."""
    return CatalogStore(directory=directory)


@pytest.fixture
def pdf():
    return FileRef(name="spec.pdf", mime_type="application/pdf", size_bytes=2048)


@pytest.fixture
def tree(store):
    """
    A small forest:

        A
        ├── B
        │   └── C
        └── D
        E
    """
    a = store.create_folder("A")
    b = store.create_folder("B", a.id)
    c = store.create_folder("C", b.id)
    d = store.create_folder("D", a.id)
    e = store.create_folder("E")
    return {"A": a, "B": b, "C": c, "D": d, "E": e}


@pytest.fixture
def project_root(tmp_path):
    """A project directory holding a docvault.yaml."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "docvault.yaml").write_text(
        "name: TestVault\n"
        "environment: staging\n"
        "upload:\n"
        "  max_size_mb: 2\n"
        "  allowed_mime_types:\n"
        "    - application/pdf\n"
        "    - image/*\n"
        "catalog:\n"
        "  unknown_user_label: '(unknown)'\n"
        "users:\n"
        "  - {id: u1, name: Una}\n"
        "  - {id: u2, name: Udo}\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )
    return root
