"""
Read-only lookups over a parsed schema document.
"""

from typing import List, Optional, Tuple

from ..models import EntityRole, IdentityDirective
from ..sdl.ast import SchemaAST, TypeDefinitionNode
from .codec import NODE_ID_SUFFIXES, read_identity, split_composite_token


def type_names(ast: SchemaAST) -> List[str]:
    """Names of every type defined in the document, in document order."""
    return [node.name for node in ast.type_definitions() if not node.is_extension]


def managed_types(ast: SchemaAST) -> List[Tuple[TypeDefinitionNode, IdentityDirective]]:
    """All types carrying a readable identity directive, in document order."""
    managed = []
    for node in ast.type_definitions():
        identity = read_identity(ast, node)
        if identity is not None:
            managed.append((node, identity))
    return managed


def find_type_by_identity(ast: SchemaAST, block_id: str,
                          entity_role: Optional[EntityRole] = None) -> Optional[TypeDefinitionNode]:
    """
    Find the type owned by ``block_id``.

    Without ``entity_role`` the first type of that block is returned.
    """
    for node, identity in managed_types(ast):
        if identity.block_id != block_id:
            continue
        if entity_role is not None and identity.entity_role != entity_role:
            continue
        return node
    return None


def find_type_by_node_id(ast: SchemaAST, node_id: str) -> Optional[TypeDefinitionNode]:
    """
    Find a type by a legacy composite token (``b1``, ``b1-input``, ``b1-result``).

    A bare block id matches any role of that block.
    """
    if not node_id:
        return None
    block_id, entity_role = split_composite_token(node_id)
    has_suffix = any(node_id.endswith(suffix) for suffix in NODE_ID_SUFFIXES.values())
    return find_type_by_identity(ast, block_id, entity_role if has_suffix else None)


def find_related_types(ast: SchemaAST, block_id: str) -> List[TypeDefinitionNode]:
    """All types owned by one block."""
    return [node for node, identity in managed_types(ast) if identity.block_id == block_id]
