"""Arena orchestration: roster, roaming, collisions, battles and inspections."""

from __future__ import annotations

import json
import logging
import os
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import config
from engine.battle import resolve
from engine.scene import (
    NullSceneListener,
    SceneListener,
    in_bounds,
    intersects,
    reentry_position,
    step_toward,
)
from engine.species import create_combatant
from engine.validation import inspect
from models.arena import ArenaEvent, ArenaState, ArenaStatus, InspectionReport, RosterEntry, TickReport
from models.battle import BattlePair, BattleResult
from models.combatant import Combatant, CombatantConfig
from models.errors import Failure

logger = logging.getLogger(__name__)

BattleEngine = Callable[[BattlePair, random.Random], BattleResult]


def create_arena(
    width: int = config.ARENA_WIDTH,
    height: int = config.ARENA_HEIGHT,
    name: str = config.ARENA_NAME,
) -> ArenaState:
    """Initialize an empty arena.

    Args:
        width: Scene width in pixels.
        height: Scene height in pixels.
        name: Display name for the arena.

    Returns:
        A fresh ArenaState in ROAMING status.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Arena size must be positive (got {width}x{height})")
    return ArenaState(name=name, width=width, height=height)


def _log(
    arena: ArenaState,
    combatant_id: str | None,
    event_type: str,
    description: str,
    **details,
) -> None:
    arena.event_log.append(
        ArenaEvent(
            tick=arena.tick,
            combatant_id=combatant_id,
            event_type=event_type,
            description=description,
            details=details,
            timestamp=datetime.now(timezone.utc),
        )
    )


def _listener(listener: SceneListener | None) -> SceneListener:
    return listener if listener is not None else NullSceneListener()


def _in_battle(arena: ArenaState, combatant_id: str) -> bool:
    pair = arena.active_pair
    return pair is not None and combatant_id in (pair.first.id, pair.second.id)


def add_combatant(
    arena: ArenaState,
    combatant: Combatant,
    position: tuple[int, int],
    listener: SceneListener | None = None,
) -> RosterEntry:
    """Place a combatant into the roam pool.

    Args:
        arena: Current arena state.
        combatant: The combatant to add.
        position: Centre (x, y) to place it at.
        listener: Scene listener to notify.

    Returns:
        The new roster entry.

    Raises:
        ValueError: If the position is out of bounds, the id is already in
            the arena, or the combatant has fainted.
    """
    if combatant.id in arena.roster or _in_battle(arena, combatant.id):
        raise ValueError(f"Combatant '{combatant.id}' is already in the arena")
    if not in_bounds(position, arena.width, arena.height):
        raise ValueError(f"Position {position} is out of bounds")
    if combatant.is_fainted:
        raise ValueError(f"{combatant.name} has fainted")

    entry = RosterEntry(
        combatant=combatant,
        position=position,
        hitbox=(config.HITBOX_SIZE, config.HITBOX_SIZE),
        travel_speed=config.TRAVEL_SPEED,
    )
    arena.roster[combatant.id] = entry
    _log(arena, combatant.id, "added", f"{combatant.name} entered the arena at {position}.",
         position=list(position))
    _listener(listener).notify_entity_added(combatant.id, position[0], position[1])
    return entry


def register_combatant(
    arena: ArenaState,
    combatant_config: CombatantConfig,
    position: tuple[int, int],
    listener: SceneListener | None = None,
) -> tuple[RosterEntry | None, Failure | None]:
    """Construct a combatant from its config and add it to the arena.

    The arena assigns the id.

    Returns:
        (entry, failure) tuple with exactly one side set.

    Raises:
        ValueError: As add_combatant, or for an unknown catalogue name.
    """
    if not in_bounds(position, arena.width, arena.height):
        raise ValueError(f"Position {position} is out of bounds")
    combatant, failure = create_combatant(combatant_config, unique_id=str(arena.next_id))
    if failure is not None:
        _log(arena, None, "rejected", f"{combatant_config.name} was rejected: {failure.message}",
             failure_kind=failure.kind.value)
        return None, failure
    arena.next_id += 1
    return add_combatant(arena, combatant, position, listener), None


def remove_combatant(
    arena: ArenaState,
    combatant_id: str,
    event_type: str = "removed",
    listener: SceneListener | None = None,
    **details,
) -> Combatant:
    """Take a combatant out of the roam pool.

    Args:
        arena: Current arena state.
        combatant_id: The combatant to remove.
        event_type: What to log the removal as ("culled", "disqualified", ...).
        listener: Scene listener to notify.
        **details: Extra fields for the event log entry.

    Raises:
        ValueError: If the combatant is not roaming in this arena.
    """
    entry = arena.roster.pop(combatant_id, None)
    if entry is None:
        raise ValueError(f"Combatant '{combatant_id}' is not in the roster")
    _log(arena, combatant_id, event_type,
         f"{entry.combatant.name} left the arena ({event_type}).", **details)
    _listener(listener).notify_entity_removed(combatant_id)
    return entry.combatant


def set_roam_target(
    arena: ArenaState,
    combatant_id: str,
    target: tuple[int, int],
) -> RosterEntry:
    """Give a roaming combatant somewhere to walk to.

    Targets outside the scene are allowed; an entity that walks off the
    edge is culled.

    Raises:
        ValueError: If the combatant is not roaming in this arena.
    """
    entry = arena.roster.get(combatant_id)
    if entry is None:
        raise ValueError(f"Combatant '{combatant_id}' is not in the roster")
    entry.target = target
    return entry


def _move_entities(arena: ArenaState) -> None:
    for entry in arena.roster.values():
        if entry.target is None:
            continue
        entry.position = step_toward(entry.position, entry.target, entry.travel_speed)
        if entry.position == entry.target:
            entry.target = None


def _cull_out_of_bounds(arena: ArenaState, listener: SceneListener) -> list[str]:
    culled = [
        cid for cid, entry in arena.roster.items()
        if not in_bounds(entry.position, arena.width, arena.height)
    ]
    for cid in culled:
        remove_combatant(arena, cid, "culled", listener)
    return culled


def find_collision(arena: ArenaState) -> tuple[str, str] | None:
    """First intersecting pair in roster insertion order, or None."""
    entries = list(arena.roster.values())
    for i, a in enumerate(entries):
        for b in entries[i + 1:]:
            if intersects(a.position, a.hitbox, b.position, b.hitbox):
                return a.combatant.id, b.combatant.id
    return None


def tick(
    arena: ArenaState,
    rng: random.Random,
    listener: SceneListener | None = None,
    battle_engine: BattleEngine = resolve,
) -> TickReport:
    """Advance the arena by one tick.

    Entities step toward their targets, anything outside the scene is
    culled, and the first colliding pair (in roster order) is pulled out
    of the roam pool and battled. At most one battle runs per tick.

    Args:
        arena: Current arena state (mutated in place).
        rng: The arena's Random instance, handed to the battle engine.
        listener: Scene listener to notify.
        battle_engine: Callable that resolves a BattlePair.

    Returns:
        TickReport of what was culled and the battle fought, if any.

    Raises:
        ValueError: If a battle is already in progress.
    """
    if arena.status != ArenaStatus.ROAMING:
        raise ValueError("A battle is already in progress")
    listener = _listener(listener)

    arena.tick += 1
    report = TickReport(tick=arena.tick)

    _move_entities(arena)
    report.culled = _cull_out_of_bounds(arena, listener)

    collision = find_collision(arena)
    if collision is None:
        return report

    first = arena.roster.pop(collision[0])
    second = arena.roster.pop(collision[1])
    listener.notify_entity_removed(first.combatant.id)
    listener.notify_entity_removed(second.combatant.id)
    arena.status = ArenaStatus.BATTLE_TRANSITION
    arena.active_pair = BattlePair(first=first.combatant, second=second.combatant)
    _log(arena, first.combatant.id, "battle_start",
         f"{first.combatant.name} and {second.combatant.name} collided!",
         opponent_id=second.combatant.id)
    listener.notify_scene_transition("battle_start", {
        "first_id": first.combatant.id,
        "second_id": second.combatant.id,
    })

    try:
        result = battle_engine(arena.active_pair, rng)
    except Exception:
        # Put both back so the arena is usable again before propagating.
        arena.roster[first.combatant.id] = first
        arena.roster[second.combatant.id] = second
        listener.notify_entity_added(first.combatant.id, *first.position)
        listener.notify_entity_added(second.combatant.id, *second.position)
        arena.active_pair = None
        arena.status = ArenaStatus.ROAMING
        raise

    apply_battle_result(arena, result, listener)
    report.battle = result
    return report


def apply_battle_result(
    arena: ArenaState,
    result: BattleResult,
    listener: SceneListener | None = None,
) -> None:
    """Finish a battle: reinsert the winner, drop the loser, resume roaming.

    The winner re-enters at the centre of the scene. If the battle could
    not be fought, whichever combatants fail inspection are dropped and the
    rest re-enter.

    Args:
        arena: Current arena state (mutated in place).
        result: The battle engine's result.
        listener: Scene listener to notify.

    Raises:
        ValueError: If no battle is in progress.
    """
    if arena.status != ArenaStatus.BATTLE_TRANSITION or arena.active_pair is None:
        raise ValueError("No battle is in progress")
    listener = _listener(listener)
    pair = arena.active_pair
    arena.battle_history.append(result.model_copy(deep=True))

    if result.success:
        survivors, dropped = [result.winner], [result.loser]
        if not result.remove_loser and not result.loser.is_fainted:
            survivors, dropped = [result.winner, result.loser], []
        _log(arena, result.winner.id, "battle_end",
             f"{result.winner.name} defeated {result.loser.name}!",
             loser_id=result.loser.id, exp_gained=result.exp_gained, rounds=result.rounds)
    else:
        survivors, dropped = [], []
        for combatant in (pair.first, pair.second):
            if combatant.is_fainted or not inspect(combatant).passed:
                dropped.append(combatant)
            else:
                survivors.append(combatant)
        _log(arena, None, "battle_aborted", f"Battle could not be fought: {result.error}",
             error_kind=result.error_kind.value if result.error_kind else None)
        logger.warning("Battle aborted: %s", result.error)

    for combatant in dropped:
        _log(arena, combatant.id, "dropped", f"{combatant.name} left the arena.")

    arena.active_pair = None
    arena.status = ArenaStatus.ROAMING
    listener.notify_scene_transition("battle_end", {
        "winner_id": result.winner.id if result.winner else None,
        "loser_id": result.loser.id if result.loser else None,
    })

    position = reentry_position(arena.width, arena.height)
    for combatant in survivors:
        add_combatant(arena, combatant, position, listener)


def inspect_roster(
    arena: ArenaState,
    listener: SceneListener | None = None,
) -> list[InspectionReport]:
    """Inspect every roaming combatant and disqualify the violators.

    Returns:
        One report row per inspected combatant, in roster order.
    """
    reports = []
    for cid, entry in list(arena.roster.items()):
        verdict = inspect(entry.combatant)
        reports.append(
            InspectionReport(
                combatant_id=cid,
                name=entry.combatant.name,
                passed=verdict.passed,
                reason=verdict.reason,
            )
        )
        if not verdict.passed:
            remove_combatant(
                arena, cid, "disqualified", listener,
                reason=verdict.reason,
                failure_kind=verdict.failure_kind.value if verdict.failure_kind else None,
            )
            logger.warning("Disqualified %s: %s", entry.combatant.name, verdict.reason)
    return reports


def save_arena(arena: ArenaState, path: str) -> None:
    """Persist arena state to a JSON file.

    Writes to a temporary file first, then renames for atomicity.

    Args:
        arena: The arena state to save.
        path: File path to write to.
    """
    tmp_path = path + ".tmp"
    data = arena.model_dump(mode="json")
    with open(tmp_path, "w") as f:
        json.dump(data, f, default=str)
    os.replace(tmp_path, path)


def load_arena(path: str) -> ArenaState | None:
    """Load arena state from a JSON file.

    Args:
        path: File path to read from.

    Returns:
        The loaded ArenaState, or None if the file doesn't exist.
    """
    if not Path(path).exists():
        return None
    with open(path) as f:
        data = json.load(f)
    return ArenaState.model_validate(data)


def recover_interrupted_battle(arena: ArenaState) -> None:
    """Return a pair stranded mid-battle (e.g. by a restart) to the roster.

    Fainted combatants are dropped. The rest re-enter at the centre.

    Args:
        arena: Current arena state (mutated in place).
    """
    if arena.status != ArenaStatus.BATTLE_TRANSITION:
        return
    pair = arena.active_pair
    arena.active_pair = None
    arena.status = ArenaStatus.ROAMING
    if pair is None:
        return
    position = reentry_position(arena.width, arena.height)
    for combatant in (pair.first, pair.second):
        if combatant.is_fainted or combatant.id in arena.roster:
            continue
        add_combatant(arena, combatant, position)
    _log(arena, None, "battle_recovered", "An interrupted battle was called off.")
