import json

import pytest

from schemasync.importers import ProjectImporter, export_payload
from schemasync.models import Block, BlockKind, Provenance, SchemaDocument


@pytest.fixture
def project_file(tmp_path):
    payload = {
        "schema": {
            "code": "type Query {\n  _empty: String\n}\n",
            "libraries": "scalar DateTime\n",
        },
        "blocks": [
            {"id": "b1", "title": "Checkout", "kind": "event"},
            {"id": "c1", "title": "Place Order", "kind": "command"},
        ],
    }
    path = tmp_path / "project.json"
    path.write_text(json.dumps(payload))
    return path


def test_project_importer_from_file(project_file):
    """Test loading a project from a JSON file."""
    importer = ProjectImporter.from_file(str(project_file))

    blocks = importer.get_blocks()
    assert [block.id for block in blocks] == ["b1", "c1"]
    assert blocks[1].kind == BlockKind.COMMAND

    document = importer.get_document()
    assert document.text.startswith("type Query")
    assert document.auxiliary_library_text == "scalar DateTime\n"
    assert document.provenance == Provenance.SYSTEM


def test_legacy_keys():
    """Test loading a project saved with legacy keys."""
    importer = ProjectImporter({
        "schemaData": {"code": "type Query {\n  a: String\n}\n"},
        "blockRegistry": [{"id": "v1", "title": "Order List", "type": "view"}],
    })

    assert importer.get_blocks() == [Block(id="v1", title="Order List", kind="view")]
    assert importer.get_document().text == "type Query {\n  a: String\n}\n"
    assert importer.get_document().auxiliary_library_text == ""


def test_per_block_schemas_are_combined():
    """Test combining per-block schema fragments."""
    importer = ProjectImporter({
        "schemas": {
            "b1": {"code": "type Checkout {\n  id: ID!\n}\n"},
            "b2": {"code": "   "},
            "b3": {"code": "type Refund {\n  id: ID!\n}"},
        },
    })

    assert importer.get_document().text == "type Checkout {\n  id: ID!\n}\n\ntype Refund {\n  id: ID!\n}\n"


def test_missing_schema():
    """Test that a missing schema gives None."""
    assert ProjectImporter({"blocks": []}).get_document() is None


def test_invalid_block_records_are_skipped():
    """Test that malformed block records are skipped."""
    importer = ProjectImporter({
        "blocks": [
            {"id": "b1", "title": "Checkout", "kind": "event"},
            {"id": "b2", "title": "No Kind"},
            {"title": "No Id", "kind": "view"},
            {"id": "b3", "title": "Unknown", "kind": "aggregate"},
            {"id": "b1", "title": "Duplicate", "kind": "view"},
            "not a record",
        ],
    })

    assert [(block.id, block.title) for block in importer.get_blocks()] == [("b1", "Checkout")]


def test_payload_must_be_a_mapping():
    """Test rejecting payloads that are not objects."""
    with pytest.raises(ValueError):
        ProjectImporter(["not", "a", "project"])


def test_export_payload_round_trip():
    """Test that exported payloads load back."""
    document = SchemaDocument(text="type Query {\n  a: String\n}\n", auxiliary_library_text="scalar JSON\n")
    blocks = [Block(id="b1", title="Checkout", kind="event")]

    payload = export_payload(document, blocks)
    assert payload == {
        "schema": {"code": document.text, "libraries": "scalar JSON\n"},
        "blocks": [{"id": "b1", "title": "Checkout", "kind": "event"}],
    }

    importer = ProjectImporter(json.loads(json.dumps(payload)))
    assert importer.get_blocks() == blocks
    assert importer.get_document().text == document.text
