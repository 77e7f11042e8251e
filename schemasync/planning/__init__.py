"""Change planning: what to add, rename and remove, and how to apply it."""

from .applier import add_type, apply_plan, default_fields, remove_type, rename_type
from .computer import compute_plan
from .naming import NamingRules, project_title, required_types, type_name_for
from .orphans import find_orphans

__all__ = [
    "add_type",
    "apply_plan",
    "default_fields",
    "remove_type",
    "rename_type",
    "compute_plan",
    "NamingRules",
    "project_title",
    "required_types",
    "type_name_for",
    "find_orphans"
]
