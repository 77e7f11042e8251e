"""
Identity models for managed schema types.

Every type the engine creates carries an identity directive that ties it back
to the block it was generated for. Identity survives block renames because it
is keyed on the block id, never on the type name.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, Field

from .blocks import BlockKind


class EntityRole(str, Enum):
    """Which of a block's types a managed type represents."""

    BLOCK = "block"
    INPUT = "input"
    RESULT = "result"


IdentityKey = Tuple[str, EntityRole]


class IdentityDirective(BaseModel):
    """
    The identity metadata embedded on a managed type.
    """

    model_config = {"frozen": True}

    block_id: str = Field(
        ...,
        min_length=1,
        description="Id of the block that owns the type"
    )

    entity_role: EntityRole = Field(
        ...,
        description="'block' for single-type blocks, 'input'/'result' for commands"
    )

    version: int = Field(
        default=1,
        description="Version of the identity encoding"
    )

    block_kind: Optional[BlockKind] = Field(
        default=None,
        description="Kind of the owning block at the time the type was created"
    )

    @property
    def key(self) -> IdentityKey:
        return (self.block_id, self.entity_role)
