"""
SDL codec for schemasync.

This module converts GraphQL SDL text into the arena AST and prints an arena
AST back to SDL. Lexing and parsing are delegated to graphql-core; the arena
is built from its document nodes much like an importer builds canonical
blocks from a parsed source format.
"""

import logging
import re
from typing import List, Optional

from graphql import GraphQLSyntaxError, parse as parse_document, print_ast
from graphql.language import (
    BooleanValueNode,
    DirectiveDefinitionNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    EnumValueNode as GraphQLEnumValueNode,
    FloatValueNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    IntValueNode,
    ListTypeNode,
    ListValueNode,
    NonNullTypeNode,
    NullValueNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ObjectValueNode,
    ScalarTypeDefinitionNode,
    ScalarTypeExtensionNode,
    StringValueNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    VariableNode,
)

from .ast import (
    ArgumentNode,
    DirectiveNode,
    EnumValueNode,
    FieldNode,
    RawDefinitionNode,
    SchemaAST,
    TypeDefinitionNode,
    TypeKind,
    TypeRef,
    ValueLiteral,
)


INDENT = "  "
_NAME_PATTERN = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")

_TYPE_DEFINITIONS = {
    ObjectTypeDefinitionNode: (TypeKind.OBJECT, False),
    ObjectTypeExtensionNode: (TypeKind.OBJECT, True),
    InputObjectTypeDefinitionNode: (TypeKind.INPUT, False),
    InputObjectTypeExtensionNode: (TypeKind.INPUT, True),
    InterfaceTypeDefinitionNode: (TypeKind.INTERFACE, False),
    InterfaceTypeExtensionNode: (TypeKind.INTERFACE, True),
    EnumTypeDefinitionNode: (TypeKind.ENUM, False),
    EnumTypeExtensionNode: (TypeKind.ENUM, True),
    UnionTypeDefinitionNode: (TypeKind.UNION, False),
    UnionTypeExtensionNode: (TypeKind.UNION, True),
    ScalarTypeDefinitionNode: (TypeKind.SCALAR, False),
    ScalarTypeExtensionNode: (TypeKind.SCALAR, True),
}

_VALUE_KINDS = {
    StringValueNode: "string",
    IntValueNode: "int",
    FloatValueNode: "float",
    BooleanValueNode: "boolean",
    NullValueNode: "null",
    GraphQLEnumValueNode: "enum",
    ListValueNode: "list",
    ObjectValueNode: "object",
    VariableNode: "variable",
}


class ParseError(ValueError):
    """Malformed schema text."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")


class SerializeError(RuntimeError):
    """The AST cannot be printed as a valid schema document."""
    pass


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse(text: str) -> SchemaAST:
    """
    Parse SDL text into an arena AST.

    Blank text yields an empty AST.

    Raises:
        ParseError: if the text is not valid GraphQL SDL
    """
    if not text or not text.strip():
        return SchemaAST()

    try:
        document = parse_document(text)
    except GraphQLSyntaxError as e:
        line = column = None
        if e.locations:
            line, column = e.locations[0].line, e.locations[0].column
        raise ParseError(e.message, line, column) from e

    ast = SchemaAST()
    for definition in document.definitions:
        node = _convert_definition(ast, definition)
        ast.definitions.append(node.id)
    return ast


def parse_safe(text: str) -> SchemaAST:
    """
    Parse SDL text, returning an empty AST for blank or malformed input.

    Meant for contexts that must never fail, such as UI polling.
    """
    if not text or not text.strip():
        return SchemaAST()
    try:
        return parse(text)
    except ParseError as e:
        logging.warning(f"Failed to parse schema, using an empty document: {e}")
        return SchemaAST()


def _convert_definition(ast: SchemaAST, definition):
    mapping = _TYPE_DEFINITIONS.get(type(definition))
    if mapping is None:
        directive_name = definition.name.value if isinstance(definition, DirectiveDefinitionNode) else None
        return ast.add(RawDefinitionNode, text=print_ast(definition), directive_name=directive_name)

    type_kind, is_extension = mapping
    description = getattr(definition, "description", None)
    node = ast.add(
        TypeDefinitionNode,
        name=definition.name.value,
        type_kind=type_kind,
        is_extension=is_extension,
        description=print_ast(description) if description else None,
        interfaces=[named.name.value for named in getattr(definition, "interfaces", None) or ()],
        members=[named.name.value for named in getattr(definition, "types", None) or ()],
    )
    node.directives = _convert_directives(ast, definition.directives)

    if type_kind.has_fields:
        node.fields = [_convert_field(ast, field).id for field in definition.fields or ()]
    elif type_kind == TypeKind.ENUM:
        node.values = [_convert_enum_value(ast, value).id for value in definition.values or ()]
    return node


def _convert_field(ast: SchemaAST, field) -> FieldNode:
    default_value = getattr(field, "default_value", None)
    node = ast.add(
        FieldNode,
        name=field.name.value,
        type=_convert_type(field.type),
        default_value=_convert_value(default_value) if default_value is not None else None,
        description=print_ast(field.description) if field.description else None,
    )
    node.arguments = [_convert_field(ast, argument).id for argument in getattr(field, "arguments", None) or ()]
    node.directives = _convert_directives(ast, field.directives)
    return node


def _convert_enum_value(ast: SchemaAST, value) -> EnumValueNode:
    node = ast.add(
        EnumValueNode,
        name=value.name.value,
        description=print_ast(value.description) if value.description else None,
    )
    node.directives = _convert_directives(ast, value.directives)
    return node


def _convert_directives(ast: SchemaAST, directives) -> List[int]:
    ids = []
    for directive in directives or ():
        node = ast.add(DirectiveNode, name=directive.name.value)
        node.arguments = [
            ast.add(ArgumentNode, name=argument.name.value, value=_convert_value(argument.value)).id
            for argument in directive.arguments or ()
        ]
        ids.append(node.id)
    return ids


def _convert_type(type_node) -> TypeRef:
    if isinstance(type_node, NonNullTypeNode):
        ref = _convert_type(type_node.type)
        ref.non_null = True
        return ref
    if isinstance(type_node, ListTypeNode):
        return TypeRef(of_type=_convert_type(type_node.type))
    return TypeRef(name=type_node.name.value)


def _convert_value(value_node) -> ValueLiteral:
    kind = _VALUE_KINDS[type(value_node)]
    value = None
    if kind in ("string", "int", "float", "enum"):
        value = value_node.value
    elif kind == "boolean":
        value = "true" if value_node.value else "false"
    return ValueLiteral(kind=kind, raw=print_ast(value_node), value=value)


def string_literal(value: str) -> ValueLiteral:
    """A string literal escaped the way the printer writes strings."""
    return ValueLiteral(kind="string", raw=print_ast(StringValueNode(value=value, block=False)), value=value)


def int_literal(value: int) -> ValueLiteral:
    text = str(int(value))
    return ValueLiteral(kind="int", raw=text, value=text)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def serialize(ast: SchemaAST) -> str:
    """
    Print an arena AST as SDL text.

    Definitions are separated by a blank line and the text ends with a
    newline. An empty AST prints as an empty string.

    Raises:
        SerializeError: on dangling node ids, invalid names, or two type
            definitions sharing a name
    """
    _check_unique_type_names(ast)
    try:
        chunks = [_print_definition(ast, ast.get(node_id)) for node_id in ast.definitions]
    except KeyError as e:
        raise SerializeError(f"AST refers to missing node {e.args[0]}") from e
    if not chunks:
        return ""
    return "\n\n".join(chunks) + "\n"


def _check_unique_type_names(ast: SchemaAST) -> None:
    seen = set()
    for node_id in ast.definitions:
        node = ast.nodes.get(node_id)
        if not isinstance(node, TypeDefinitionNode) or node.is_extension:
            continue
        if node.name in seen:
            raise SerializeError(f"Duplicate type definition '{node.name}'")
        seen.add(node.name)


def _check_name(name: str) -> str:
    if not name or not _NAME_PATTERN.match(name):
        raise SerializeError(f"Invalid GraphQL name: {name!r}")
    return name


def _print_definition(ast: SchemaAST, node) -> str:
    if isinstance(node, RawDefinitionNode):
        return node.text
    if not isinstance(node, TypeDefinitionNode):
        raise SerializeError(f"Node {node.id} ({node.kind}) is not a top-level definition")

    lines = []
    if node.description:
        lines.append(node.description)

    head = f"{'extend ' if node.is_extension else ''}{node.type_kind.value} {_check_name(node.name)}"
    if node.interfaces:
        head += " implements " + " & ".join(_check_name(name) for name in node.interfaces)
    head += _print_directives(ast, node.directives)
    if node.type_kind == TypeKind.UNION and node.members:
        head += " = " + " | ".join(_check_name(name) for name in node.members)

    body = []
    if node.type_kind.has_fields:
        body = [_print_field(ast, ast.get(field_id), INDENT) for field_id in node.fields]
    elif node.type_kind == TypeKind.ENUM:
        body = [_print_enum_value(ast, ast.get(value_id), INDENT) for value_id in node.values]

    if body:
        lines.append(head + " {")
        lines.extend(body)
        lines.append("}")
    else:
        lines.append(head)
    return "\n".join(lines)


def _print_field(ast: SchemaAST, field: FieldNode, indent: str) -> str:
    if not isinstance(field, FieldNode):
        raise SerializeError(f"Node {field.id} ({field.kind}) is not a field")
    lines = []
    if field.description:
        lines.append(_indent(field.description, indent))

    text = indent + _check_name(field.name) + _print_arguments(ast, field.arguments, indent)
    text += ": " + field.type.render()
    if field.default_value is not None:
        text += " = " + field.default_value.raw
    text += _print_directives(ast, field.directives)
    lines.append(text)
    return "\n".join(lines)


def _print_arguments(ast: SchemaAST, argument_ids: List[int], indent: str) -> str:
    if not argument_ids:
        return ""
    arguments = [ast.get(argument_id) for argument_id in argument_ids]
    if any(argument.description for argument in arguments):
        inner = indent + INDENT
        printed = [_print_field(ast, argument, inner) for argument in arguments]
        return "(\n" + "\n".join(printed) + "\n" + indent + ")"
    return "(" + ", ".join(_print_field(ast, argument, "") for argument in arguments) + ")"


def _print_enum_value(ast: SchemaAST, value: EnumValueNode, indent: str) -> str:
    lines = []
    if value.description:
        lines.append(_indent(value.description, indent))
    lines.append(indent + _check_name(value.name) + _print_directives(ast, value.directives))
    return "\n".join(lines)


def _print_directives(ast: SchemaAST, directive_ids: List[int]) -> str:
    printed = []
    for directive_id in directive_ids:
        directive = ast.get(directive_id)
        text = "@" + _check_name(directive.name)
        if directive.arguments:
            arguments = [
                f"{_check_name(argument.name)}: {argument.value.raw}"
                for argument in ast.argument_nodes(directive)
            ]
            text += "(" + ", ".join(arguments) + ")"
        printed.append(text)
    return "".join(" " + text for text in printed)


def _indent(text: str, indent: str) -> str:
    return "\n".join(indent + line if line else line for line in text.split("\n"))
