"""
Change plan models.

A ChangePlan describes how to bring the managed types of a schema document in
line with the block registry. Plans are computed and applied within a single
sync cycle and are never persisted.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .blocks import BlockKind
from .identity import EntityRole, IdentityKey


class TypeAddition(BaseModel):
    """A managed type that has to be created."""

    type_name: str
    block_kind: BlockKind
    block_id: str
    entity_role: EntityRole


class TypeRename(BaseModel):
    """A managed type whose block title changed."""

    old_name: str
    new_name: str
    identity_key: IdentityKey


class NameConflict(BaseModel):
    """
    A required type name that could not be claimed.

    Raised when two blocks project to the same type name, or when the name is
    already held by another type that stays in the document.
    """

    type_name: str
    block_id: str
    entity_role: EntityRole
    holder: Optional[str] = Field(
        default=None,
        description="Block id holding the name, or None for a hand-written type"
    )

    def describe(self) -> str:
        holder = f"block {self.holder}" if self.holder else "a hand-written type"
        return (
            f"Type name '{self.type_name}' for block {self.block_id} "
            f"({self.entity_role.value}) is already taken by {holder}"
        )


class ChangePlan(BaseModel):
    """
    Additions, renames and removals for one sync cycle.
    """

    additions: List[TypeAddition] = Field(default_factory=list)
    renames: List[TypeRename] = Field(default_factory=list)
    removals: List[str] = Field(default_factory=list)
    conflicts: List[NameConflict] = Field(
        default_factory=list,
        description="Claims that were skipped; they never change the document"
    )

    @property
    def is_empty(self) -> bool:
        return not (self.additions or self.renames or self.removals)

    def summary(self) -> str:
        return (
            f"{len(self.additions)} additions, {len(self.renames)} renames, "
            f"{len(self.removals)} removals, {len(self.conflicts)} conflicts"
        )
