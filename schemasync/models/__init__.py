"""Data models for schemasync."""

from .blocks import Block, BlockKind, active_block_ids
from .document import Provenance, SchemaDocument
from .identity import EntityRole, IdentityDirective, IdentityKey
from .plan import ChangePlan, NameConflict, TypeAddition, TypeRename

__all__ = [
    "Block",
    "BlockKind",
    "active_block_ids",
    "Provenance",
    "SchemaDocument",
    "EntityRole",
    "IdentityDirective",
    "IdentityKey",
    "ChangePlan",
    "NameConflict",
    "TypeAddition",
    "TypeRename"
]
