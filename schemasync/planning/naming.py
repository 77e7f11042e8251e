"""
Type names derived from block titles.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from ..models import Block, BlockKind, EntityRole, TypeAddition


_WORD_PATTERN = re.compile(r"[A-Za-z0-9]+")


@dataclass
class NamingRules:
    """Suffixes and fallbacks used when projecting titles to type names."""
    input_suffix: str = "Input"
    result_suffix: str = "CommandResult"
    fallback_name: str = "Untitled"

    @classmethod
    def from_config(cls, config) -> "NamingRules":
        return cls(
            input_suffix=config.input_suffix,
            result_suffix=config.result_suffix,
            fallback_name=config.fallback_type_name,
        )

    def suffix_for(self, entity_role: EntityRole) -> str:
        if entity_role == EntityRole.INPUT:
            return self.input_suffix
        if entity_role == EntityRole.RESULT:
            return self.result_suffix
        return ""


def project_title(title: str, fallback: str = "Untitled") -> str:
    """
    Project a display title onto a GraphQL type name.

    Examples:
        project_title("User Registration")  # "UserRegistration"
        project_title("order-shipped")      # "OrderShipped"
        project_title("2fa check")          # "_2faCheck"
    """
    words = _WORD_PATTERN.findall(title or "")
    name = "".join(word[0].upper() + word[1:] for word in words)
    if not name:
        return fallback
    if name[0].isdigit():
        name = "_" + name
    return name


def entity_roles_for(kind: BlockKind) -> List[EntityRole]:
    """Command blocks own an input and a result type; every other kind owns one type."""
    if kind == BlockKind.COMMAND:
        return [EntityRole.INPUT, EntityRole.RESULT]
    return [EntityRole.BLOCK]


def type_name_for(block: Block, entity_role: EntityRole, rules: Optional[NamingRules] = None) -> str:
    rules = rules or NamingRules()
    return project_title(block.title, rules.fallback_name) + rules.suffix_for(entity_role)


def required_types(block: Block, rules: Optional[NamingRules] = None) -> List[TypeAddition]:
    """The managed types a block needs, in creation order."""
    rules = rules or NamingRules()
    return [
        TypeAddition(
            type_name=type_name_for(block, entity_role, rules),
            block_kind=block.kind,
            block_id=block.id,
            entity_role=entity_role,
        )
        for entity_role in entity_roles_for(block.kind)
    ]
