"""
Block models for schemasync.

Blocks are owned by the canvas. The synchronization engine only ever reads
them: each block contributes one or two managed types to the schema document.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class BlockKind(str, Enum):
    """The kinds of blocks that can be placed on the canvas."""

    TRIGGER = "trigger"
    COMMAND = "command"
    EVENT = "event"
    VIEW = "view"
    UI = "ui"
    PROCESSOR = "processor"


class Block(BaseModel):
    """
    A visible block on the canvas, reduced to what the schema cares about.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier, stable across renames"
    )

    title: str = Field(
        ...,
        description="Display title; type names are projected from it"
    )

    kind: BlockKind = Field(
        ...,
        description="Kind of block; command blocks own two schema types"
    )

    @property
    def is_command(self) -> bool:
        return self.kind == BlockKind.COMMAND


def active_block_ids(blocks: List[Block]) -> set:
    """Collect the ids of the given blocks."""
    return {block.id for block in blocks}
