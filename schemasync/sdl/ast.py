"""
Arena AST for schema documents.

A parsed schema document is a flat arena of tagged nodes indexed by integer
id. Definitions, fields, directives and arguments refer to each other by id,
which keeps traversal and in-place mutation simple and type-safe.

Usage:
    ast = SchemaAST()
    field = ast.add(FieldNode, name="id", type=TypeRef.parse("ID!"))
    node = ast.add(TypeDefinitionNode, name="Checkout", type_kind=TypeKind.OBJECT,
                   fields=[field.id])
    ast.definitions.append(node.id)
"""

from enum import Enum
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class TypeKind(str, Enum):
    """Kinds of type definitions, valued by their SDL keyword."""

    OBJECT = "type"
    INPUT = "input"
    INTERFACE = "interface"
    ENUM = "enum"
    UNION = "union"
    SCALAR = "scalar"

    @property
    def has_fields(self) -> bool:
        return self in (TypeKind.OBJECT, TypeKind.INPUT, TypeKind.INTERFACE)


class TypeRef(BaseModel):
    """
    A reference to a type, possibly wrapped in lists and non-null markers.

    Exactly one of ``name`` and ``of_type`` is set.
    """

    name: Optional[str] = None
    of_type: Optional["TypeRef"] = None
    non_null: bool = False

    @classmethod
    def parse(cls, text: str) -> "TypeRef":
        """Build a reference from SDL notation such as ``[String!]!``."""
        text = text.strip()
        non_null = text.endswith("!")
        if non_null:
            text = text[:-1].rstrip()
        if text.startswith("[") and text.endswith("]"):
            return cls(of_type=cls.parse(text[1:-1]), non_null=non_null)
        if not text:
            raise ValueError("Empty type reference")
        return cls(name=text, non_null=non_null)

    @property
    def base_name(self) -> str:
        ref = self
        while ref.of_type is not None:
            ref = ref.of_type
        return ref.name or ""

    def render(self) -> str:
        inner = f"[{self.of_type.render()}]" if self.of_type is not None else (self.name or "")
        return f"{inner}!" if self.non_null else inner

    def rename(self, mapping: Dict[str, str]) -> bool:
        """Rewrite the named base type through ``mapping``; True if it changed."""
        ref = self
        while ref.of_type is not None:
            ref = ref.of_type
        if ref.name in mapping:
            ref.name = mapping[ref.name]
            return True
        return False


TypeRef.model_rebuild()


class ValueLiteral(BaseModel):
    """
    A literal value as written in the document.

    ``raw`` is the SDL text used for printing; ``value`` is the decoded scalar
    for string, int, float, boolean and enum literals.
    """

    kind: Literal["string", "int", "float", "boolean", "null", "enum", "list", "object", "variable"]
    raw: str
    value: Optional[str] = None


class TypeDefinitionNode(BaseModel):
    kind: Literal["type_definition"] = "type_definition"
    id: int
    name: str
    type_kind: TypeKind
    is_extension: bool = False
    description: Optional[str] = None
    interfaces: List[str] = Field(default_factory=list)
    directives: List[int] = Field(default_factory=list)
    fields: List[int] = Field(default_factory=list)
    values: List[int] = Field(default_factory=list)
    members: List[str] = Field(default_factory=list)


class FieldNode(BaseModel):
    """A field of an object/interface type, or an input value (argument or input field)."""

    kind: Literal["field"] = "field"
    id: int
    name: str
    type: TypeRef
    arguments: List[int] = Field(default_factory=list)
    default_value: Optional[ValueLiteral] = None
    directives: List[int] = Field(default_factory=list)
    description: Optional[str] = None


class EnumValueNode(BaseModel):
    kind: Literal["enum_value"] = "enum_value"
    id: int
    name: str
    directives: List[int] = Field(default_factory=list)
    description: Optional[str] = None


class DirectiveNode(BaseModel):
    kind: Literal["directive"] = "directive"
    id: int
    name: str
    arguments: List[int] = Field(default_factory=list)


class ArgumentNode(BaseModel):
    kind: Literal["argument"] = "argument"
    id: int
    name: str
    value: ValueLiteral


class RawDefinitionNode(BaseModel):
    """
    A top-level definition kept verbatim (schema and directive definitions,
    schema extensions, operations).
    """

    kind: Literal["raw"] = "raw"
    id: int
    text: str
    directive_name: Optional[str] = Field(
        default=None,
        description="Set for directive definitions, without the leading '@'"
    )


AstNode = Annotated[
    Union[TypeDefinitionNode, FieldNode, EnumValueNode, DirectiveNode, ArgumentNode, RawDefinitionNode],
    Field(discriminator="kind"),
]


class SchemaAST(BaseModel):
    """
    The arena holding every node of a parsed schema document.
    """

    nodes: Dict[int, AstNode] = Field(default_factory=dict)
    definitions: List[int] = Field(
        default_factory=list,
        description="Top-level definition ids in document order"
    )
    next_id: int = 1

    def add(self, node_cls, **fields):
        """Create a node of ``node_cls`` with a fresh id and store it."""
        node = node_cls(id=self.next_id, **fields)
        self.nodes[node.id] = node
        self.next_id += 1
        return node

    def get(self, node_id: int):
        return self.nodes[node_id]

    @property
    def is_empty(self) -> bool:
        return not self.definitions

    def iter_definitions(self) -> Iterator[Union[TypeDefinitionNode, RawDefinitionNode]]:
        for node_id in self.definitions:
            yield self.nodes[node_id]

    def type_definitions(self) -> List[TypeDefinitionNode]:
        return [node for node in self.iter_definitions() if isinstance(node, TypeDefinitionNode)]

    def find_type(self, name: str) -> Optional[TypeDefinitionNode]:
        """Return the (non-extension) type definition called ``name``."""
        for node in self.type_definitions():
            if node.name == name and not node.is_extension:
                return node
        return None

    def field_nodes(self, type_node: TypeDefinitionNode) -> List[FieldNode]:
        return [self.nodes[field_id] for field_id in type_node.fields]

    def directive_nodes(self, owner) -> List[DirectiveNode]:
        return [self.nodes[directive_id] for directive_id in owner.directives]

    def argument_nodes(self, directive: DirectiveNode) -> List[ArgumentNode]:
        return [self.nodes[argument_id] for argument_id in directive.arguments]

    def child_ids(self, node) -> List[int]:
        """Ids directly owned by ``node``."""
        if isinstance(node, TypeDefinitionNode):
            return [*node.directives, *node.fields, *node.values]
        if isinstance(node, FieldNode):
            return [*node.arguments, *node.directives]
        if isinstance(node, EnumValueNode):
            return list(node.directives)
        if isinstance(node, DirectiveNode):
            return list(node.arguments)
        return []

    def discard(self, node_id: int) -> None:
        """Delete a node and everything it owns from the arena."""
        node = self.nodes.pop(node_id, None)
        if node is None:
            return
        for child_id in self.child_ids(node):
            self.discard(child_id)

    def copy_tree(self) -> "SchemaAST":
        return self.model_copy(deep=True)
