"""
Project payload importer for schemasync.

A saved project stores the schema document next to the block list:

    {
      "schema": {"code": "type Query { ... }", "libraries": ""},
      "blocks": [{"id": "b1", "title": "Checkout", "kind": "event"}]
    }

Older saves used ``schemaData`` instead of ``schema``, ``blockRegistry``
instead of ``blocks``, ``type`` instead of ``kind``, or one schema per block
under ``schemas``. All of them are read here.
"""

import collections.abc
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..models import Block, BlockKind, Provenance, SchemaDocument
from .base import BaseImporter


class ProjectImporter(BaseImporter):
    """
    Importer for exported project payloads.
    """

    def __init__(self, payload: Dict[str, Any]):
        """
        Initialize the importer.

        Args:
            payload: The decoded project payload
        """
        if not isinstance(payload, collections.abc.Mapping):
            raise ValueError(f"Project payload must be a mapping, got {type(payload).__name__}")
        self.payload = payload

    @classmethod
    def from_file(cls, path: str) -> "ProjectImporter":
        """Load a project payload from a JSON file."""
        with open(Path(path), 'r', encoding='utf-8') as f:
            payload = json.load(f)
        logging.info(f"Loaded project from {path}")
        return cls(payload)

    def get_blocks(self) -> List[Block]:
        blocks = []
        seen = set()
        for key in ("blocks", "blockRegistry"):
            records = self.payload.get(key)
            if not isinstance(records, list):
                continue
            for record in records:
                block = self._build_block(record)
                if block is None or block.id in seen:
                    continue
                seen.add(block.id)
                blocks.append(block)
        return blocks

    def get_document(self) -> Optional[SchemaDocument]:
        schema = self.payload.get("schema") or self.payload.get("schemaData")
        if isinstance(schema, collections.abc.Mapping):
            return SchemaDocument(
                text=schema.get("code") if isinstance(schema.get("code"), str) else "",
                auxiliary_library_text=schema.get("libraries") if isinstance(schema.get("libraries"), str) else "",
                provenance=Provenance.SYSTEM,
            )

        per_block = self.payload.get("schemas")
        if isinstance(per_block, collections.abc.Mapping):
            codes = [
                entry["code"].strip() for entry in per_block.values()
                if isinstance(entry, collections.abc.Mapping)
                and isinstance(entry.get("code"), str) and entry["code"].strip()
            ]
            if codes:
                logging.info(f"Combining {len(codes)} per-block schemas from a legacy project")
                return SchemaDocument(text="\n\n".join(codes) + "\n", provenance=Provenance.SYSTEM)

        return None

    @staticmethod
    def _build_block(record: Any) -> Optional[Block]:
        if not isinstance(record, collections.abc.Mapping):
            return None
        block_id = record.get("id")
        title = record.get("title")
        kind = record.get("kind") or record.get("type")
        if not block_id or not title or not kind:
            return None

        try:
            return Block(id=str(block_id), title=str(title), kind=BlockKind(kind))
        except (ValueError, ValidationError) as e:
            logging.warning(f"Skipping block {block_id}: {e}")
            return None


def export_payload(document: SchemaDocument, blocks: List[Block]) -> Dict[str, Any]:
    """
    Build the project payload for a document and its blocks.
    """
    return {
        "schema": {
            "code": document.text,
            "libraries": document.auxiliary_library_text,
        },
        "blocks": [block.model_dump(mode="json") for block in blocks],
    }
