"""Identity directives on managed schema types."""

from .codec import (
    IDENTITY_DIRECTIVE,
    IDENTITY_DIRECTIVE_SDL,
    composite_token,
    find_identity_directive,
    merge_directive_definition,
    read_identity,
    split_composite_token,
    write_identity,
)
from .queries import (
    find_related_types,
    find_type_by_identity,
    find_type_by_node_id,
    managed_types,
    type_names,
)

__all__ = [
    "IDENTITY_DIRECTIVE",
    "IDENTITY_DIRECTIVE_SDL",
    "composite_token",
    "find_identity_directive",
    "merge_directive_definition",
    "read_identity",
    "split_composite_token",
    "write_identity",
    "find_related_types",
    "find_type_by_identity",
    "find_type_by_node_id",
    "managed_types",
    "type_names"
]
