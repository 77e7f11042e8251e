"""GraphQL SDL parsing and printing."""

from .ast import SchemaAST, TypeDefinitionNode, TypeKind, TypeRef
from .codec import ParseError, SerializeError, parse, parse_safe, serialize

__all__ = [
    "SchemaAST",
    "TypeDefinitionNode",
    "TypeKind",
    "TypeRef",
    "ParseError",
    "SerializeError",
    "parse",
    "parse_safe",
    "serialize"
]
