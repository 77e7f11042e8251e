"""
Identity directive codec.

Managed types carry an ``@eventModelingBlock`` directive tying them to the
block that owns them:

    type Checkout @eventModelingBlock(blockId: "b1", entityRole: "block", blockType: "event", version: 1) {
      id: ID!
    }

Two encodings are read:

1. Explicit fields: ``blockId`` with ``entityRole`` (or the older
   ``blockEntityType`` spelling). These take precedence.
2. A single composite token, ``nodeId: "<blockId>-input"``,
   ``"<blockId>-result"`` or ``"<blockId>"``, written by older documents.

Documents are never migrated on read; only types the engine creates or
re-tags get the explicit encoding.
"""

import logging
from typing import Dict, Optional, Tuple

from graphql import parse as parse_document, print_ast
from graphql.language import NonNullTypeNode

from ..models import BlockKind, EntityRole, IdentityDirective
from ..sdl.ast import ArgumentNode, DirectiveNode, SchemaAST, TypeDefinitionNode, TypeKind
from ..sdl.codec import int_literal, string_literal


IDENTITY_DIRECTIVE = "eventModelingBlock"

ARG_BLOCK_ID = "blockId"
ARG_ENTITY_ROLE = "entityRole"
ARG_LEGACY_ENTITY_ROLE = "blockEntityType"
ARG_NODE_ID = "nodeId"
ARG_BLOCK_TYPE = "blockType"
ARG_VERSION = "version"

NODE_ID_SUFFIXES = {
    EntityRole.INPUT: "-input",
    EntityRole.RESULT: "-result",
}

MANAGED_TYPE_KINDS = (TypeKind.OBJECT, TypeKind.INPUT)

ALWAYS_WRITTEN_ARGUMENTS = (ARG_BLOCK_ID, ARG_ENTITY_ROLE, ARG_VERSION)

IDENTITY_DIRECTIVE_SDL = (
    "directive @eventModelingBlock("
    "blockId: String, entityRole: String, blockType: String, version: Int, "
    "nodeId: String, blockEntityType: String"
    ") on OBJECT | INPUT_OBJECT"
)


def merge_directive_definition(text: str) -> str:
    """
    Bring an existing ``@eventModelingBlock`` definition in line with what
    ``write_identity`` emits.

    Arguments and locations missing from ``text`` are appended, and required
    arguments the engine may leave out (``nodeId: String!`` in older
    documents) become nullable. Everything else in the definition is kept.

    Args:
        text: SDL of a single directive definition

    Returns:
        The merged definition as SDL
    """
    current = parse_document(text).definitions[0]
    canonical = parse_document(IDENTITY_DIRECTIVE_SDL).definitions[0]

    arguments = []
    for argument in current.arguments or ():
        if argument.name.value not in ALWAYS_WRITTEN_ARGUMENTS and isinstance(argument.type, NonNullTypeNode):
            argument.type = argument.type.type
        arguments.append(argument)
    declared = {argument.name.value for argument in arguments}
    arguments.extend(argument for argument in canonical.arguments if argument.name.value not in declared)
    current.arguments = tuple(arguments)

    locations = {location.value for location in current.locations}
    current.locations = tuple(current.locations) + tuple(
        location for location in canonical.locations if location.value not in locations
    )
    return print_ast(current)


def composite_token(block_id: str, entity_role: EntityRole) -> str:
    """Build the legacy ``nodeId`` token for a block id and role."""
    return block_id + NODE_ID_SUFFIXES.get(entity_role, "")


def split_composite_token(token: str) -> Tuple[str, EntityRole]:
    """
    Split a legacy ``nodeId`` token into block id and role.

    Examples:
        split_composite_token("b1-input")   # ("b1", EntityRole.INPUT)
        split_composite_token("b1")         # ("b1", EntityRole.BLOCK)
    """
    for role, suffix in NODE_ID_SUFFIXES.items():
        if token.endswith(suffix):
            return token[:-len(suffix)], role
    return token, EntityRole.BLOCK


def find_identity_directive(ast: SchemaAST, type_node: TypeDefinitionNode) -> Optional[DirectiveNode]:
    for directive in ast.directive_nodes(type_node):
        if directive.name == IDENTITY_DIRECTIVE:
            return directive
    return None


def _argument_values(ast: SchemaAST, directive: DirectiveNode) -> Dict[str, str]:
    values = {}
    for argument in ast.argument_nodes(directive):
        value = argument.value.value
        if value is None:
            value = argument.value.raw
        values[argument.name] = _strip_quotes(value.strip())
    return values


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def read_identity(ast: SchemaAST, type_node: TypeDefinitionNode) -> Optional[IdentityDirective]:
    """
    Read the identity of a type, or None when it is not managed.

    Only object and input type definitions can be managed; extensions never
    carry identity.
    """
    if type_node.type_kind not in MANAGED_TYPE_KINDS or type_node.is_extension:
        return None

    directive = find_identity_directive(ast, type_node)
    if directive is None:
        return None

    values = _argument_values(ast, directive)
    block_id = values.get(ARG_BLOCK_ID, "")
    role_text = values.get(ARG_ENTITY_ROLE) or values.get(ARG_LEGACY_ENTITY_ROLE)

    if block_id and role_text:
        try:
            entity_role = EntityRole(role_text)
        except ValueError:
            logging.warning(f"Type {type_node.name} has unknown entity role '{role_text}', treating it as unmanaged")
            return None
    elif values.get(ARG_NODE_ID):
        block_id, entity_role = split_composite_token(values[ARG_NODE_ID])
    elif block_id:
        entity_role = EntityRole.BLOCK
    else:
        return None

    if not block_id:
        return None

    try:
        version = int(values.get(ARG_VERSION, 1))
    except ValueError:
        version = 1

    try:
        block_kind = BlockKind(values[ARG_BLOCK_TYPE]) if ARG_BLOCK_TYPE in values else None
    except ValueError:
        block_kind = None

    return IdentityDirective(
        block_id=block_id,
        entity_role=entity_role,
        version=version,
        block_kind=block_kind,
    )


def write_identity(ast: SchemaAST, type_node: TypeDefinitionNode, identity: IdentityDirective) -> TypeDefinitionNode:
    """
    Tag ``type_node`` with ``identity``.

    Any existing identity directive is replaced in place; other directives on
    the node are left as they are.
    """
    arguments = [
        ast.add(ArgumentNode, name=ARG_BLOCK_ID, value=string_literal(identity.block_id)),
        ast.add(ArgumentNode, name=ARG_ENTITY_ROLE, value=string_literal(identity.entity_role.value)),
    ]
    if identity.block_kind is not None:
        arguments.append(ast.add(ArgumentNode, name=ARG_BLOCK_TYPE, value=string_literal(identity.block_kind.value)))
    arguments.append(ast.add(ArgumentNode, name=ARG_VERSION, value=int_literal(identity.version)))
    directive = ast.add(DirectiveNode, name=IDENTITY_DIRECTIVE, arguments=[argument.id for argument in arguments])

    directives = []
    replaced = False
    for directive_id in type_node.directives:
        if ast.get(directive_id).name != IDENTITY_DIRECTIVE:
            directives.append(directive_id)
            continue
        ast.discard(directive_id)
        if not replaced:
            directives.append(directive.id)
            replaced = True
    if not replaced:
        directives.append(directive.id)

    type_node.directives = directives
    return type_node
