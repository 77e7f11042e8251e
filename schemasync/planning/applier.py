"""
Change-plan application.

Applies a ChangePlan to a schema AST: renames first, then additions, then
removals. ``apply_plan`` and the public primitives never modify their input;
they work on a copy and return it.
"""

import logging
from typing import Dict, List, Tuple

from ..identity import IDENTITY_DIRECTIVE, IDENTITY_DIRECTIVE_SDL, merge_directive_definition, write_identity
from ..models import BlockKind, ChangePlan, EntityRole, IdentityDirective
from ..sdl.ast import FieldNode, RawDefinitionNode, SchemaAST, TypeDefinitionNode, TypeKind, TypeRef
from ..sdl.codec import parse


def default_fields(block_kind: BlockKind, entity_role: EntityRole) -> List[Tuple[str, str]]:
    """
    The starter fields of a freshly created managed type, as (name, SDL type) pairs.
    """
    fields = [("id", "ID!")]
    if block_kind == BlockKind.EVENT:
        fields.append(("timestamp", "String!"))
    if entity_role == EntityRole.RESULT:
        fields.extend([("success", "Boolean!"), ("message", "String")])
    return fields


def apply_plan(ast: SchemaAST, plan: ChangePlan, declare_identity_directive: bool = True) -> SchemaAST:
    """
    Apply ``plan`` to a copy of ``ast``.

    Removals are resolved against the document as it was before the plan, so
    a type added under the name of a removed one survives.

    Args:
        ast: Parsed schema document
        plan: Plan computed for this document
        declare_identity_directive: Add the identity directive definition when
            the plan creates types and the document has none, or extend an
            existing definition with the arguments the engine writes

    Returns:
        The updated AST
    """
    result = ast.copy_tree()
    removal_ids = [node.id for name in plan.removals for node in _definitions_named(result, name)]

    _rename_in_place(result, {rename.old_name: rename.new_name for rename in plan.renames})

    for addition in plan.additions:
        _add_in_place(result, addition.type_name, addition.block_kind, addition.block_id, addition.entity_role)
    if plan.additions and declare_identity_directive:
        _declare_identity_directive(result)

    for node_id in removal_ids:
        _remove_definition(result, node_id)

    logging.info(f"Applied change plan: {plan.summary()}")
    return result


def rename_type(ast: SchemaAST, old_name: str, new_name: str) -> SchemaAST:
    """Rename a type and every reference to it."""
    result = ast.copy_tree()
    _rename_in_place(result, {old_name: new_name})
    return result


def add_type(ast: SchemaAST, type_name: str, block_kind: BlockKind, block_id: str,
             entity_role: EntityRole = EntityRole.BLOCK) -> SchemaAST:
    """Append a managed type with default fields and an identity directive."""
    result = ast.copy_tree()
    _add_in_place(result, type_name, block_kind, block_id, entity_role)
    return result


def remove_type(ast: SchemaAST, type_name: str) -> SchemaAST:
    """Delete the type definition called ``type_name``; references are left alone."""
    result = ast.copy_tree()
    for node in _definitions_named(result, type_name):
        _remove_definition(result, node.id)
    return result


def _rename_in_place(ast: SchemaAST, mapping: Dict[str, str]) -> None:
    # One pass with the whole mapping, so chained and swapped renames stay consistent
    if not mapping:
        return
    for node in ast.type_definitions():
        if node.name in mapping:
            node.name = mapping[node.name]
        node.interfaces = [mapping.get(name, name) for name in node.interfaces]
        node.members = [mapping.get(name, name) for name in node.members]
        for field in ast.field_nodes(node):
            field.type.rename(mapping)
            for argument_id in field.arguments:
                ast.get(argument_id).type.rename(mapping)


def _add_in_place(ast: SchemaAST, type_name: str, block_kind: BlockKind, block_id: str,
                  entity_role: EntityRole) -> TypeDefinitionNode:
    type_kind = TypeKind.INPUT if entity_role == EntityRole.INPUT else TypeKind.OBJECT
    fields = [
        ast.add(FieldNode, name=name, type=TypeRef.parse(type_text)).id
        for name, type_text in default_fields(block_kind, entity_role)
    ]
    node = ast.add(TypeDefinitionNode, name=type_name, type_kind=type_kind, fields=fields)
    write_identity(ast, node, IdentityDirective(
        block_id=block_id,
        entity_role=entity_role,
        version=1,
        block_kind=block_kind,
    ))
    ast.definitions.append(node.id)
    return node


def _declare_identity_directive(ast: SchemaAST) -> None:
    for node in ast.iter_definitions():
        if isinstance(node, RawDefinitionNode) and node.directive_name == IDENTITY_DIRECTIVE:
            node.text = merge_directive_definition(node.text)
            return
    definition = next(parse(IDENTITY_DIRECTIVE_SDL).iter_definitions())
    node = ast.add(RawDefinitionNode, text=definition.text, directive_name=IDENTITY_DIRECTIVE)
    ast.definitions.insert(0, node.id)


def _definitions_named(ast: SchemaAST, name: str) -> List[TypeDefinitionNode]:
    return [node for node in ast.type_definitions() if node.name == name and not node.is_extension]


def _remove_definition(ast: SchemaAST, node_id: int) -> None:
    if node_id in ast.definitions:
        ast.definitions.remove(node_id)
    ast.discard(node_id)
