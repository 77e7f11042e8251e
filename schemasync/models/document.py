"""
Schema document model.

A SchemaDocument is the snapshot exchanged between the synchronization
controller and the embedded schema editor.
"""

from enum import Enum

from pydantic import BaseModel, Field


class Provenance(str, Enum):
    """
    Where the latest version of a schema document came from.

    The editor widget compares the provenance it receives against the one it
    last emitted, and skips re-deriving its internal view when they match.
    """

    EXTERNAL_TREE_EDIT = "external-tree-edit"
    EXTERNAL_TEXT_EDIT = "external-text-edit"
    SYSTEM = "system"

    @property
    def is_external(self) -> bool:
        return self in (Provenance.EXTERNAL_TREE_EDIT, Provenance.EXTERNAL_TEXT_EDIT)


class SchemaDocument(BaseModel):
    """
    The schema text together with its auxiliary library text.
    """

    model_config = {"frozen": True}

    text: str = Field(
        default="",
        description="GraphQL SDL text mirroring the block set"
    )

    auxiliary_library_text: str = Field(
        default="",
        description="Library SDL the editor shows alongside the main text"
    )

    provenance: Provenance = Field(
        default=Provenance.SYSTEM,
        description="Origin of this snapshot"
    )

    def with_text(self, text: str, provenance: Provenance = Provenance.SYSTEM) -> "SchemaDocument":
        """Return a copy carrying new schema text."""
        return self.model_copy(update={"text": text, "provenance": provenance})
