"""
DocVault CLI — replay catalog scripts and check uploads from the shell.

Commands:
- docvault run SCRIPT        — Replay a YAML operation script on a fresh store
- docvault check-upload PATH — Run the upload allow-list / size checks on a file
- docvault show-config       — Print the effective docvault.yaml settings

Script format (YAML)::

    users:                      # optional; defaults to docvault.yaml users
      - {id: alice, name: Alice}
    operations:
      - create_folder: {name: Projects, as: projects}
      - create_folder: {name: Specs, parent: projects, as: specs}
      - add_document:
          file: {name: spec.pdf, mime_type: application/pdf, size_bytes: 2048}
          title: Spec
          folder: specs
          tags: "draft, v1"
          as: spec
      - add_tag: {document: spec, tag: reviewed}
      - assign_permission: {document: spec, user: alice, permission: edit}
      - delete_folder: {folder: projects}

``as:`` names the created entity; later steps may use that alias anywhere
a folder or document id is expected.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from docvault.catalog.store import CatalogStore
from docvault.engine.config import get_config, load_config
from docvault.engine.errors import DocVaultError
from docvault.engine.logging import FileLogger, configure_logging, log_system_event
from docvault.security.directory import StaticUserDirectory
from docvault.upload.validator import UploadAdapter, UploadValidator, file_ref_from_path

logger = logging.getLogger("docvault.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="docvault",
        description="DocVault — folder tree & document catalog",
    )
    parser.add_argument("--config", help="Path to docvault.yaml (default: auto-discover)")
    parser.add_argument("--log-level", help="Override logging.level from docvault.yaml")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # docvault run
    run_parser = subparsers.add_parser("run", help="Replay a YAML operation script")
    run_parser.add_argument("script", help="Path to the operation script")
    run_parser.add_argument(
        "--stop-on-error", action="store_true", help="Abort at the first failing step"
    )

    # docvault check-upload
    check_parser = subparsers.add_parser("check-upload", help="Validate a file for upload")
    check_parser.add_argument("path", help="Local file to check")
    check_parser.add_argument("--mime", help="MIME type (default: guessed from the name)")

    # docvault show-config
    subparsers.add_parser("show-config", help="Print the effective configuration")

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except DocVaultError as e:
        print(f"[ERROR] {e.message}")
        return 1
    configure_logging(args.log_level or config.logging.level)

    if args.command == "run":
        return cmd_run(args)
    elif args.command == "check-upload":
        return cmd_check_upload(args)
    elif args.command == "show-config":
        return cmd_show_config(args)
    else:
        parser.print_help()
        return 0


# ---------------------------------------------------------------------------
# docvault run
# ---------------------------------------------------------------------------

def _text(params: Dict[str, Any], key: str, default: Optional[str] = "") -> Optional[str]:
    """A step parameter as text. YAML reads bare scalars like ``2024`` as numbers."""
    value = params.get(key)
    if value is None:
        return default
    return str(value)


class ScriptRunner:
    """Applies script steps to a store, tracking ``as:`` aliases."""

    def __init__(self, store: CatalogStore, adapter: UploadAdapter):
        self.store = store
        self.adapter = adapter
        self.aliases: Dict[str, str] = {}
        self._handlers: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "create_folder": self._create_folder,
            "edit_folder": self._edit_folder,
            "delete_folder": self._delete_folder,
            "add_document": self._add_document,
            "delete_document": self._delete_document,
            "add_tag": self._add_tag,
            "remove_tag": self._remove_tag,
            "assign_permission": self._assign_permission,
        }

    def _ref(self, params: Dict[str, Any], key: str) -> Optional[str]:
        value = _text(params, key, None)
        if value is None:
            return None
        return self.aliases.get(value, value)

    def _remember(self, params: Dict[str, Any], entity_id: str) -> None:
        alias = _text(params, "as", None)
        if alias:
            self.aliases[alias] = entity_id

    def apply(self, step: Dict[str, Any]) -> str:
        """Run one step; returns a short description. Raises DocVaultError."""
        if not isinstance(step, dict) or len(step) != 1:
            raise ValueError(f"Each step must be a single-key mapping, got: {step!r}")
        (op, params), = step.items()
        handler = self._handlers.get(op)
        if handler is None:
            raise ValueError(f"Unknown operation '{op}'")
        if params is not None and not isinstance(params, dict):
            raise ValueError(f"Parameters of '{op}' must be a mapping, got: {params!r}")
        return handler(params or {})

    def _create_folder(self, p: Dict[str, Any]) -> str:
        folder = self.store.create_folder(_text(p, "name"), self._ref(p, "parent"))
        self._remember(p, folder.id)
        return f"create_folder '{folder.name}'"

    def _edit_folder(self, p: Dict[str, Any]) -> str:
        folder = self.store.edit_folder(
            self._ref(p, "folder"), _text(p, "name"), self._ref(p, "parent")
        )
        return f"edit_folder '{folder.name}'"

    def _delete_folder(self, p: Dict[str, Any]) -> str:
        removed = self.store.delete_folder(self._ref(p, "folder"))
        return f"delete_folder ({len(removed)} folder(s) removed)"

    def _add_document(self, p: Dict[str, Any]) -> str:
        tags = p.get("tags")
        document = self.adapter.submit(
            p.get("file") or {},
            {
                "title": _text(p, "title"),
                "description": _text(p, "description", None),
                "folder_id": self._ref(p, "folder"),
                "tags": [str(t) for t in tags] if isinstance(tags, list) else _text(p, "tags"),
            },
        )
        self._remember(p, document.id)
        return f"add_document '{document.metadata.title}'"

    def _delete_document(self, p: Dict[str, Any]) -> str:
        self.store.delete_document(self._ref(p, "document"))
        return "delete_document"

    def _add_tag(self, p: Dict[str, Any]) -> str:
        tag = _text(p, "tag")
        self.store.add_tag(self._ref(p, "document"), tag)
        return f"add_tag '{tag}'"

    def _remove_tag(self, p: Dict[str, Any]) -> str:
        tag = _text(p, "tag")
        self.store.remove_tag(self._ref(p, "document"), tag)
        return f"remove_tag '{tag}'"

    def _assign_permission(self, p: Dict[str, Any]) -> str:
        user, permission = _text(p, "user"), _text(p, "permission")
        self.store.assign_permission(self._ref(p, "document"), user, permission)
        return f"assign_permission {user}={permission}"


def print_store(store: CatalogStore) -> None:
    """Render folders and documents the way the dashboard lists them."""
    print("\nFolders:")
    rows = store.list_folder_rows()
    if not rows:
        print("  (none)")
    for row in rows:
        print(f"  {store.folder_path_label(row.id)}  (parent: {row.parent_name})")

    print("\nDocuments:")
    docs = store.list_document_rows()
    if not docs:
        print("  No documents uploaded yet.")
    for doc in docs:
        print(f"  {doc.title} [{doc.file_name}]")
        print(f"    Folder: {doc.folder_label}")
        print(f"    Tags: {', '.join(doc.tags) if doc.tags else 'No tags'}")
        views = store.list_permissions(doc.id)
        if views:
            acl = ", ".join(f"{v.user_name}: {v.permission.value}" for v in views)
        else:
            acl = "No ACL"
        print(f"    ACL: {acl}")


def cmd_run(args: argparse.Namespace) -> int:
    """Replay an operation script against a fresh, private store."""
    path = Path(args.script)
    if not path.exists():
        print(f"[ERROR] Script not found: {path}")
        return 1

    try:
        with open(path, "r", encoding="utf-8") as f:
            script = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        print(f"[ERROR] Cannot parse {path}: {e}")
        return 1

    if not isinstance(script, dict):
        print(f"[ERROR] {path} must contain a mapping with an 'operations' list")
        return 1

    config = get_config()
    if script.get("users"):
        directory = StaticUserDirectory(script["users"])
    else:
        directory = StaticUserDirectory.from_config(config)

    activity_log = FileLogger(config.logging.directory) if config.logging.activity_log else None
    store = CatalogStore(directory=directory, config=config.catalog, activity_log=activity_log)
    runner = ScriptRunner(store, UploadAdapter(store, UploadValidator.from_config(config.upload)))

    operations: List[Any] = script.get("operations") or []
    logger.debug(f"Replaying {len(operations)} step(s) from {path}")
    errors = 0
    for index, step in enumerate(operations, start=1):
        try:
            summary = runner.apply(step)
            print(f"[OK] {index}: {summary}")
        except (DocVaultError, ValueError) as e:
            errors += 1
            message = e.message if isinstance(e, DocVaultError) else str(e)
            print(f"[ERROR] {index}: {type(e).__name__}: {message}")
            if args.stop_on_error:
                break

    if activity_log is not None:
        activity_log.write(log_system_event(
            "script_replayed",
            details={"script": str(path), "steps": len(operations), "errors": errors},
        ))

    print_store(store)
    print(f"\n{'All steps succeeded.' if errors == 0 else f'{errors} step(s) failed.'}")
    return 1 if errors else 0


# ---------------------------------------------------------------------------
# docvault check-upload
# ---------------------------------------------------------------------------

def cmd_check_upload(args: argparse.Namespace) -> int:
    """Validate a local file against the upload allow-list and size limit."""
    path = Path(args.path)
    if not path.is_file():
        print(f"[ERROR] File not found: {path}")
        return 1

    file_ref = file_ref_from_path(str(path), args.mime)
    validator = UploadValidator.from_config(get_config().upload)
    valid, error = validator.check(file_ref)
    if valid:
        print(f"[OK] {file_ref.name}: {file_ref.mime_type}, {file_ref.size_bytes} bytes")
        return 0
    print(f"[ERROR] {file_ref.name}: {error}")
    return 1


# ---------------------------------------------------------------------------
# docvault show-config
# ---------------------------------------------------------------------------

def cmd_show_config(args: argparse.Namespace) -> int:
    """Print the effective configuration as YAML."""
    print(yaml.safe_dump(get_config().model_dump(), sort_keys=False).rstrip())
    return 0


if __name__ == "__main__":
    sys.exit(main())
