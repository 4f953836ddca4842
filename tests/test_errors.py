"""Unit tests for docvault.engine.errors — Error hierarchy & serialization."""

import json

from docvault.engine.errors import (
    DocVaultConfigError,
    DocVaultCycleError,
    DocVaultError,
    DocVaultNotFoundError,
    DocVaultUploadError,
    DocVaultValidationError,
)


class TestDocVaultError:
    """Base error class tests."""

    def test_basic_creation(self):
        err = DocVaultError("something broke")
        assert err.message == "something broke"
        assert str(err) == "something broke"
        assert err.error_type == "DocVaultError"
        assert err.object_type is None
        assert err.object_id is None

    def test_to_dict(self):
        err = DocVaultError("fail", object_type="folder", object_id="f1", extra="x")
        d = err.to_dict()
        assert d["error_type"] == "DocVaultError"
        assert d["object_type"] == "folder"
        assert d["object_id"] == "f1"
        assert d["context"] == {"extra": "x"}
        assert "timestamp" in d

    def test_to_json(self):
        parsed = json.loads(DocVaultError("fail").to_json())
        assert parsed["message"] == "fail"

    def test_repr(self):
        r = repr(DocVaultError("fail", object_type="document", object_id="d1"))
        assert "DocVaultError: fail" in r
        assert "object_id=d1" in r


class TestSubclasses:
    def test_all_are_docvault_errors(self):
        for cls in (
            DocVaultValidationError,
            DocVaultNotFoundError,
            DocVaultCycleError,
            DocVaultUploadError,
            DocVaultConfigError,
        ):
            assert isinstance(cls("x"), DocVaultError)

    def test_validation_field(self):
        err = DocVaultValidationError("bad", field="title")
        assert err.field == "title"
        assert err.to_dict()["field"] == "title"

    def test_cycle_fields(self):
        err = DocVaultCycleError("loop", folder_id="a", parent_id="b")
        d = err.to_dict()
        assert (d["folder_id"], d["parent_id"]) == ("a", "b")

    def test_upload_fields(self):
        err = DocVaultUploadError("too big", reason="size", file_name="a.pdf")
        assert err.reason == "size"
        assert err.to_dict()["file_name"] == "a.pdf"

    def test_catalog_aliases(self):
        from docvault.catalog import CycleError, NotFoundError, ValidationError

        assert CycleError is DocVaultCycleError
        assert NotFoundError is DocVaultNotFoundError
        assert ValidationError is DocVaultValidationError

    def test_promoted_keys_not_repeated_in_context(self):
        d = DocVaultUploadError("bad", reason="size", file_name="a.pdf", limit=10).to_dict()
        assert d["context"] == {"limit": "10"}

    def test_missing_promoted_key_is_none(self):
        assert DocVaultCycleError("loop").folder_id is None
