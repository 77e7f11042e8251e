"""
schemasync: keeps a GraphQL schema document in step with an event model.

Blocks placed on a canvas (commands, events, views, ...) each own one or two
types in the schema. The engine adds, renames and removes those types as the
blocks change, and leaves every hand-written part of the schema alone.
"""

__version__ = "0.1.0"

from .config import ConfigManager
from .importers import BaseImporter, ProjectImporter
from .models import Block, BlockKind, ChangePlan, EntityRole, IdentityDirective, Provenance, SchemaDocument
from .planning import apply_plan, compute_plan, find_orphans
from .sdl import ParseError, SchemaAST, SerializeError, parse, parse_safe, serialize
from .sync import SchemaSyncController

__all__ = [
    "ConfigManager",
    "BaseImporter",
    "ProjectImporter",
    "Block",
    "BlockKind",
    "ChangePlan",
    "EntityRole",
    "IdentityDirective",
    "Provenance",
    "SchemaDocument",
    "apply_plan",
    "compute_plan",
    "find_orphans",
    "ParseError",
    "SchemaAST",
    "SerializeError",
    "parse",
    "parse_safe",
    "serialize",
    "SchemaSyncController"
]
