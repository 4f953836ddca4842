"""Unit tests for docvault.upload — UploadValidator and UploadAdapter."""

import pytest

from docvault.catalog.models import FileRef
from docvault.engine.config import UploadConfig
from docvault.engine.errors import DocVaultUploadError, DocVaultValidationError
from docvault.upload import UploadAdapter, UploadValidator, detect_mime_type, file_ref_from_path

MB = 1024 * 1024


class TestUploadValidator:
    def test_defaults(self):
        v = UploadValidator()
        assert v.allowed_mime_types == ["application/pdf", "image/png", "image/jpeg"]
        assert v.max_size_bytes == 10 * MB

    @pytest.mark.parametrize("mime", ["application/pdf", "image/png", "image/jpeg"])
    def test_default_types_accepted(self, mime):
        ok, err = UploadValidator().check(FileRef(name="f", mime_type=mime, size_bytes=1))
        assert ok is True
        assert err is None

    def test_unsupported_type(self):
        ok, err = UploadValidator().check(FileRef(name="a.gif", mime_type="image/gif", size_bytes=1))
        assert ok is False
        assert "Unsupported file type" in err

    def test_wildcards(self):
        v = UploadValidator(["image/*"])
        assert v.accepts_mime_type("image/gif")
        assert not v.accepts_mime_type("application/pdf")
        assert UploadValidator(["*/*"]).accepts_mime_type("text/plain")

    def test_size_limit(self):
        v = UploadValidator(max_size_mb=1)
        assert v.check(FileRef(name="a.pdf", mime_type="application/pdf", size_bytes=MB))[0]
        ok, err = v.check(FileRef(name="a.pdf", mime_type="application/pdf", size_bytes=MB + 1))
        assert ok is False
        assert "Max size is 1MB" in err

    def test_validate_raises_with_reason(self):
        v = UploadValidator(max_size_mb=1)
        with pytest.raises(DocVaultUploadError) as exc:
            v.validate(FileRef(name="a.txt", mime_type="text/plain", size_bytes=1))
        assert exc.value.reason == "mime_type"
        assert exc.value.file_name == "a.txt"

        with pytest.raises(DocVaultUploadError) as exc:
            v.validate(FileRef(name="a.pdf", mime_type="application/pdf", size_bytes=2 * MB))
        assert exc.value.reason == "size"

    def test_from_config(self):
        v = UploadValidator.from_config(UploadConfig(allowed_mime_types=["text/plain"], max_size_mb=3))
        assert v.allowed_mime_types == ["text/plain"]
        assert v.max_size_bytes == 3 * MB


class TestFileRefFromPath:
    def test_reads_size_and_guesses_type(self, tmp_path):
        p = tmp_path / "scan.pdf"
        p.write_bytes(b"x" * 123)
        ref = file_ref_from_path(str(p))
        assert ref.name == "scan.pdf"
        assert ref.mime_type == "application/pdf"
        assert ref.size_bytes == 123

    def test_explicit_mime(self, tmp_path):
        p = tmp_path / "blob"
        p.write_bytes(b"")
        assert file_ref_from_path(str(p), "image/png").mime_type == "image/png"

    def test_unknown_extension(self):
        assert detect_mime_type("file.zzzunknown") == "application/octet-stream"


class TestUploadAdapter:
    def test_submit_catalogues(self, store, pdf):
        adapter = UploadAdapter(store, UploadValidator())
        doc = adapter.submit(pdf, {"title": "Spec", "tags": "a,b"})
        assert store.get_document(doc.id).metadata.tags == ["a", "b"]

    def test_rejection_leaves_store_untouched(self, store):
        adapter = UploadAdapter(store, UploadValidator())
        with pytest.raises(DocVaultUploadError):
            adapter.submit({"name": "a.exe", "mime_type": "application/x-msdownload"}, {"title": "X"})
        assert store.list_documents() == []

    def test_catalog_errors_propagate(self, store, pdf):
        adapter = UploadAdapter(store, UploadValidator())
        with pytest.raises(DocVaultValidationError):
            adapter.submit(pdf, {"title": ""})

    def test_submit_path(self, store, tmp_path):
        p = tmp_path / "photo.png"
        p.write_bytes(b"\x89PNG")
        doc = UploadAdapter(store, UploadValidator()).submit_path(str(p), {"title": "Photo"})
        assert doc.file_ref.mime_type == "image/png"
        assert doc.file_ref.size_bytes == 4

    def test_default_validator_from_config(self, store):
        assert UploadAdapter(store).validator.max_size_bytes == 10 * MB
