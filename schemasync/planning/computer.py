"""
Change-plan computation.

Compares the types a block list requires with the managed types already in a
schema document and works out the additions, renames and removals that bring
the two in line. Identity is keyed on (block id, entity role), so a renamed
block renames its types instead of creating new ones.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..identity import managed_types, read_identity
from ..models import Block, ChangePlan, IdentityKey, NameConflict, TypeAddition, TypeRename
from ..sdl.ast import SchemaAST, TypeDefinitionNode
from .naming import NamingRules, required_types
from .orphans import find_orphans


_Entry = Tuple[TypeAddition, Optional[TypeDefinitionNode]]


def compute_plan(ast: SchemaAST, blocks: List[Block], rules: Optional[NamingRules] = None) -> ChangePlan:
    """
    Compute the changes needed to make the managed types of ``ast`` match ``blocks``.

    Args:
        ast: Parsed schema document
        blocks: Blocks currently on the canvas, in canvas order
        rules: Naming rules for derived type names

    Returns:
        The change plan; type names that cannot be claimed are reported in
        ``conflicts`` and left out of the other lists
    """
    rules = rules or NamingRules()
    blocks = _unique_blocks(blocks)
    index = _index_managed_types(ast)

    entries: List[_Entry] = []
    for block in blocks:
        for required in required_types(block, rules):
            entries.append((required, index.get((required.block_id, required.entity_role))))

    orphans = find_orphans(ast, blocks)
    conflicts = _resolve_name_claims(ast, entries, orphans)

    plan = ChangePlan()
    for position, (required, existing) in enumerate(entries):
        if position in conflicts:
            conflict = NameConflict(
                type_name=required.type_name,
                block_id=required.block_id,
                entity_role=required.entity_role,
                holder=conflicts[position],
            )
            logging.warning(conflict.describe())
            plan.conflicts.append(conflict)
            continue

        if existing is None:
            plan.additions.append(required)
        elif existing.name != required.type_name:
            plan.renames.append(TypeRename(
                old_name=existing.name,
                new_name=required.type_name,
                identity_key=(required.block_id, required.entity_role),
            ))

    plan.removals = [node.name for node in orphans]
    logging.debug(f"Computed change plan: {plan.summary()}")
    return plan


def _unique_blocks(blocks: List[Block]) -> List[Block]:
    seen = set()
    unique = []
    for block in blocks:
        if block.id in seen:
            logging.warning(f"Ignoring duplicate block id {block.id} ('{block.title}')")
            continue
        seen.add(block.id)
        unique.append(block)
    return unique


def _index_managed_types(ast: SchemaAST) -> Dict[IdentityKey, TypeDefinitionNode]:
    """Index managed types by identity key; the first type in document order wins."""
    index: Dict[IdentityKey, TypeDefinitionNode] = {}
    for node, identity in managed_types(ast):
        holder = index.get(identity.key)
        if holder is not None:
            logging.warning(
                f"Types {holder.name} and {node.name} both claim block {identity.block_id} "
                f"({identity.entity_role.value}); keeping {holder.name}"
            )
            continue
        index[identity.key] = node
    return index


def _resolve_name_claims(ast: SchemaAST, entries: List[_Entry],
                         orphans: List[TypeDefinitionNode]) -> Dict[int, Optional[str]]:
    """
    Decide which entries may take their required name.

    Returns a mapping of entry position to the block id holding the contested
    name (None for a hand-written type). Entries holding their name already
    are served first, then the rest in block order. An entry that loses keeps
    its current name, which may in turn push out whoever claimed that name.
    """
    tracked_ids = {existing.id for _, existing in entries if existing is not None}
    tracked_ids.update(node.id for node in orphans)

    blocked: Dict[str, Optional[str]] = {}
    for node in ast.type_definitions():
        if node.is_extension or node.id in tracked_ids:
            continue
        identity = read_identity(ast, node)
        blocked.setdefault(node.name, identity.block_id if identity else None)

    def already_named(position: int) -> bool:
        required, existing = entries[position]
        return existing is not None and existing.name == required.type_name

    order = sorted(range(len(entries)), key=lambda position: (not already_named(position), position))

    owners: Dict[str, int] = {}
    conflicts: Dict[int, Optional[str]] = {}
    for position in order:
        name = entries[position][0].type_name
        if name in blocked:
            conflicts[position] = blocked[name]
        elif name in owners:
            conflicts[position] = entries[owners[name]][0].block_id
        else:
            owners[name] = position

    pending = [position for position in conflicts if entries[position][1] is not None]
    while pending:
        position = pending.pop()
        kept_name = entries[position][1].name
        owner = owners.get(kept_name)
        if owner is not None and owner != position and owner not in conflicts:
            conflicts[owner] = entries[position][0].block_id
            if entries[owner][1] is not None:
                pending.append(owner)
        owners[kept_name] = position

    return conflicts
