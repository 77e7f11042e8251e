"""
Orphan detection for managed schema types.
"""

from typing import List

from ..identity import managed_types
from ..models import Block, active_block_ids
from ..sdl.ast import SchemaAST, TypeDefinitionNode


def find_orphans(ast: SchemaAST, active_blocks: List[Block]) -> List[TypeDefinitionNode]:
    """
    Find managed types whose block is no longer on the canvas.

    Types without a readable identity directive belong to the user and are
    never reported.

    Args:
        ast: Parsed schema document
        active_blocks: Blocks currently on the canvas

    Returns:
        Orphaned type definitions in document order
    """
    active_ids = active_block_ids(active_blocks)
    return [node for node, identity in managed_types(ast) if identity.block_id not in active_ids]
