"""Unit tests for docvault.catalog.documents — DocumentCatalog."""

import pytest

from docvault.catalog.documents import DocumentCatalog
from docvault.catalog.folders import FolderTree
from docvault.catalog.models import FileRef, RawMetadata
from docvault.engine.errors import DocVaultNotFoundError, DocVaultValidationError


@pytest.fixture
def folders():
    return FolderTree()


@pytest.fixture
def catalog(folders):
    return DocumentCatalog(folders)


@pytest.fixture
def file_ref():
    return FileRef(name="report.pdf", mime_type="application/pdf", size_bytes=100)


class TestAddDocument:
    def test_minimal(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "Report"})
        assert doc.metadata.title == "Report"
        assert doc.metadata.description is None
        assert doc.metadata.folder_id is None
        assert doc.metadata.tags == []
        assert doc.acl == []
        assert doc.id in catalog

    def test_accepts_dicts(self, catalog):
        doc = catalog.add_document(
            {"name": "a.png", "mime_type": "image/png", "size_bytes": 5},
            RawMetadata(title="A"),
        )
        assert doc.file_ref.name == "a.png"

    def test_title_trimmed(self, catalog, file_ref):
        assert catalog.add_document(file_ref, {"title": "  Spec "}).metadata.title == "Spec"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_empty_title_rejected(self, catalog, file_ref, title):
        with pytest.raises(DocVaultValidationError) as exc:
            catalog.add_document(file_ref, {"title": title})
        assert exc.value.field == "title"
        assert len(catalog) == 0

    def test_folder_must_exist(self, catalog, file_ref):
        with pytest.raises(DocVaultNotFoundError):
            catalog.add_document(file_ref, {"title": "X", "folder_id": "missing"})
        assert len(catalog) == 0

    def test_blank_folder_means_none(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X", "folder_id": ""})
        assert doc.metadata.folder_id is None

    def test_in_folder(self, catalog, folders, file_ref):
        f = folders.create_folder("Inbox")
        doc = catalog.add_document(file_ref, {"title": "X", "folder_id": f.id})
        assert doc.metadata.folder_id == f.id

    def test_tags_parsed_from_comma_text(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X", "tags": " a, b ,,  ,c"})
        assert doc.metadata.tags == ["a", "b", "c"]

    def test_tags_deduplicated_at_creation(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X", "tags": "draft, v1, draft, Draft"})
        assert doc.metadata.tags == ["draft", "v1", "Draft"]

    def test_tags_from_list(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X", "tags": [" a", "b", "a"]})
        assert doc.metadata.tags == ["a", "b"]

    def test_missing_title_rejected(self, catalog, file_ref):
        with pytest.raises(DocVaultValidationError) as exc:
            catalog.add_document(file_ref, {"title": None})
        assert exc.value.field == "title"
        assert len(catalog) == 0

    def test_missing_tags_mean_none(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X", "tags": None})
        assert doc.metadata.tags == []

    def test_malformed_input_is_a_validation_error(self, catalog, file_ref):
        with pytest.raises(DocVaultValidationError) as exc:
            catalog.add_document(file_ref, {"title": ["not", "text"]})
        assert exc.value.field == "title"
        with pytest.raises(DocVaultValidationError) as exc:
            catalog.add_document({"name": "a.pdf", "size_bytes": -1}, {"title": "X"})
        assert exc.value.field == "size_bytes"
        assert len(catalog) == 0

    def test_empty_description_is_none(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X", "description": ""})
        assert doc.metadata.description is None

    def test_acl_lists_are_independent(self, catalog, file_ref):
        a = catalog.add_document(file_ref, {"title": "A"})
        b = catalog.add_document(file_ref, {"title": "B"})
        assert a.acl is not b.acl


class TestDeleteDocument:
    def test_delete(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X"})
        catalog.delete_document(doc.id)
        assert doc.id not in catalog

    def test_unknown(self, catalog, file_ref):
        catalog.add_document(file_ref, {"title": "X"})
        with pytest.raises(DocVaultNotFoundError) as exc:
            catalog.delete_document("missing")
        assert exc.value.object_type == "document"
        assert len(catalog) == 1


class TestListByFolder:
    def test_filters_exact_folder(self, catalog, folders, file_ref):
        a = folders.create_folder("A")
        b = folders.create_folder("B", a.id)
        d1 = catalog.add_document(file_ref, {"title": "1", "folder_id": a.id})
        d2 = catalog.add_document(file_ref, {"title": "2", "folder_id": b.id})
        d3 = catalog.add_document(file_ref, {"title": "3"})
        d4 = catalog.add_document(file_ref, {"title": "4", "folder_id": a.id})

        assert [d.id for d in catalog.list_by_folder(a.id)] == [d1.id, d4.id]
        assert [d.id for d in catalog.list_by_folder(b.id)] == [d2.id]
        assert [d.id for d in catalog.list_by_folder(None)] == [d3.id]
        assert [d.id for d in catalog.list_by_folder()] == [d3.id]

    def test_blank_folder_means_folderless(self, catalog, folders, file_ref):
        f = folders.create_folder("A")
        loose = catalog.add_document(file_ref, {"title": "1"})
        catalog.add_document(file_ref, {"title": "2", "folder_id": f.id})
        assert [d.id for d in catalog.list_by_folder("")] == [loose.id]
        assert [d.id for d in catalog.list_by_folder("  ")] == [loose.id]

    def test_unknown_folder_is_empty(self, catalog, file_ref):
        catalog.add_document(file_ref, {"title": "1"})
        assert catalog.list_by_folder("missing") == []


class TestUpdateMetadata:
    def test_partial_update(self, catalog, folders, file_ref):
        f = folders.create_folder("A")
        doc = catalog.add_document(file_ref, {"title": "Old", "description": "d"})
        changed = catalog.update_metadata(doc.id, title="New", folder_id=f.id)
        assert changed == ["title", "folder_id"]
        assert doc.metadata.title == "New"
        assert doc.metadata.description == "d"
        assert doc.metadata.folder_id == f.id

    def test_detach_with_none(self, catalog, folders, file_ref):
        f = folders.create_folder("A")
        doc = catalog.add_document(file_ref, {"title": "X", "folder_id": f.id})
        catalog.update_metadata(doc.id, folder_id=None)
        assert doc.metadata.folder_id is None

    def test_invalid_update_is_atomic(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X"})
        with pytest.raises(DocVaultNotFoundError):
            catalog.update_metadata(doc.id, title="Y", folder_id="missing")
        assert doc.metadata.title == "X"

    def test_unchanged_fields_not_reported(self, catalog, file_ref):
        doc = catalog.add_document(file_ref, {"title": "X"})
        assert catalog.update_metadata(doc.id, title="X") == []


class TestDetachFolders:
    def test_detach(self, catalog, folders, file_ref):
        a = folders.create_folder("A")
        b = folders.create_folder("B")
        d1 = catalog.add_document(file_ref, {"title": "1", "folder_id": a.id})
        d2 = catalog.add_document(file_ref, {"title": "2", "folder_id": b.id})
        assert catalog.detach_folders([a.id]) == [d1.id]
        assert d1.metadata.folder_id is None
        assert d2.metadata.folder_id == b.id
