"""Move and item management for a combatant.

Moves are bounded by MIN_NUMBER_OF_MOVES and MAX_NUMBER_OF_MOVES and cost
NEW_MOVE_COST points to learn. Items stack by name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import config
from engine.stats import add_hp, get_current_stat
from engine.typechart import can_learn
from models.enums import Stat, Status
from models.errors import Failure, FailureKind

if TYPE_CHECKING:
    from models.combatant import Combatant
    from models.moves import Item, Move

# Returned by the PP getters when a move cannot be resolved.
MOVE_NOT_FOUND = -1


def _move_index(combatant: Combatant, key: str | int) -> int | None:
    """Resolve a move name (case-insensitive) or list index to an index."""
    if isinstance(key, int):
        if 0 <= key < len(combatant.moves):
            return key
        return None
    for i, move in enumerate(combatant.moves):
        if move.name.lower() == key.lower():
            return i
    return None


def find_move(combatant: Combatant, key: str | int) -> Move | None:
    """Look up an owned move by name or index."""
    index = _move_index(combatant, key)
    return combatant.moves[index] if index is not None else None


def find_item(combatant: Combatant, name: str) -> Item | None:
    """Look up an owned item by name (case-insensitive)."""
    for item in combatant.items:
        if item.name.lower() == name.lower():
            return item
    return None


def add_move(combatant: Combatant, move: Move) -> Failure | None:
    """Teach the combatant a move, spending NEW_MOVE_COST points.

    Args:
        combatant: The learner.
        move: The move to learn. A copy is stored.

    Returns:
        A Failure if the set is full, the combatant cannot afford the move,
        or the move's type is incompatible. None on success.
    """
    if len(combatant.moves) >= config.MAX_NUMBER_OF_MOVES:
        return Failure(
            kind=FailureKind.INVALID_POKEMON_POINTS,
            message=f"{combatant.name} already knows {config.MAX_NUMBER_OF_MOVES} moves",
        )
    if combatant.stats.points < config.NEW_MOVE_COST:
        return Failure(
            kind=FailureKind.INVALID_POKEMON_POINTS,
            message=(
                f"{combatant.name} has {combatant.stats.points} points, "
                f"needs {config.NEW_MOVE_COST} to learn {move.name}"
            ),
        )
    if not can_learn(move.type, combatant.type):
        return Failure(
            kind=FailureKind.INVALID_TYPE,
            message=(
                f"{combatant.name} ({combatant.type.value}) cannot learn "
                f"{move.name} ({move.type.value})"
            ),
        )

    combatant.moves.append(move.model_copy(deep=True))
    combatant.stats.points -= config.NEW_MOVE_COST
    return None


def delete_move(combatant: Combatant, key: str | int) -> bool:
    """Forget a move by name or index.

    Refuses when the combatant would drop below MIN_NUMBER_OF_MOVES.

    Returns:
        True if a move was removed.
    """
    index = _move_index(combatant, key)
    if index is None:
        return False
    if len(combatant.moves) <= config.MIN_NUMBER_OF_MOVES:
        return False
    removed = combatant.moves.pop(index)
    if combatant.current_move and combatant.current_move.lower() == removed.name.lower():
        combatant.current_move = None
    return True


def get_move_pp(combatant: Combatant, key: str | int) -> int:
    """Maximum PP of a move, or MOVE_NOT_FOUND."""
    move = find_move(combatant, key)
    return move.pp if move else MOVE_NOT_FOUND


def get_current_move_pp(combatant: Combatant, key: str | int) -> int:
    """Remaining PP of a move, or MOVE_NOT_FOUND."""
    move = find_move(combatant, key)
    return move.current_pp if move else MOVE_NOT_FOUND


def select_move(combatant: Combatant, name: str) -> bool:
    """Mark an owned move as the one to use next turn."""
    move = find_move(combatant, name)
    if move is None:
        return False
    combatant.current_move = move.name
    return True


def select_item(combatant: Combatant, name: str) -> bool:
    """Mark an owned item as the one to use next turn."""
    item = find_item(combatant, name)
    if item is None:
        return False
    combatant.current_item = item.name
    return True


def add_item(combatant: Combatant, item: Item) -> None:
    """Give the combatant an item, stacking onto one of the same name."""
    existing = find_item(combatant, item.name)
    if existing:
        existing.quantity += item.quantity
    else:
        combatant.items.append(item.model_copy(deep=True))


def remove_item(combatant: Combatant, name: str, quantity: int = 1) -> bool:
    """Take units of an item away, dropping the entry when none remain.

    Returns:
        True if the item was owned and the quantity was positive.
    """
    if quantity < 1:
        return False
    item = find_item(combatant, name)
    if item is None:
        return False
    item.quantity -= quantity
    if item.quantity <= 0:
        combatant.items.remove(item)
        if combatant.current_item and combatant.current_item.lower() == item.name.lower():
            combatant.current_item = None
    return True


def use_item(combatant: Combatant, name: str) -> tuple[bool, str]:
    """Apply an item's effect to its owner.

    Heals, cures, boosts current stats and restores PP as the item
    describes, then consumes one unit if the item is single use.

    Args:
        combatant: The item's owner and target.
        name: Name of the owned item.

    Returns:
        (used, message) tuple. The message narrates the effect or the error.
    """
    if combatant.is_fainted:
        return False, f"{combatant.name} has fainted and cannot use items"
    item = find_item(combatant, name)
    if item is None:
        return False, f"{combatant.name} has no {name}"

    effect = item.effect
    parts = []
    if effect.heal_hp:
        before = combatant.stats.current_hp
        after = add_hp(combatant, effect.heal_hp)
        parts.append(f"restored {after - before} HP")
    if combatant.status in effect.cures:
        parts.append(f"cured {combatant.status.value}")
        combatant.status = Status.NORMAL
    for stat, boost in effect.stat_boosts.items():
        if stat == Stat.HP:
            add_hp(combatant, boost)
        else:
            value = max(0, get_current_stat(combatant, stat) + boost)
            setattr(combatant.stats, f"current_{stat.value}", value)
        parts.append(f"{stat.value} {boost:+d}")
    if effect.restore_pp:
        for move in combatant.moves:
            move.current_pp = min(move.pp, move.current_pp + effect.restore_pp)
        parts.append(f"restored {effect.restore_pp} PP")
    if effect.critical_hit_boost:
        stats = combatant.stats
        stats.current_critical_hit_ratio = min(
            1.0, stats.current_critical_hit_ratio + effect.critical_hit_boost
        )
        parts.append("critical hit ratio rose")

    item_name = item.name
    if item.single_use:
        remove_item(combatant, item_name)

    summary = ", ".join(parts) if parts else "nothing happened"
    return True, f"{combatant.name} used {item_name}: {summary}"
