"""Status conditions: infliction, recovery, action blocking and damage ticks."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from pydantic import BaseModel

import config
from engine.rng import roll_chance
from engine.stats import add_hp
from models.enums import Status

if TYPE_CHECKING:
    from models.combatant import Combatant

# Statuses that can be inflicted by a move.
INFLICTABLE = {
    Status.BURN,
    Status.FREEZE,
    Status.PARALYSIS,
    Status.POISON,
    Status.SLEEP,
    Status.BOUND,
    Status.CONFUSION,
}

_STATUS_TEXT = {
    Status.NORMAL: "{name} is healthy.",
    Status.BURN: "{name} is hurt by its burn!",
    Status.FREEZE: "{name} is frozen solid!",
    Status.PARALYSIS: "{name} is paralyzed! It may be unable to move!",
    Status.POISON: "{name} is hurt by poison!",
    Status.SLEEP: "{name} is fast asleep.",
    Status.BOUND: "{name} is bound and cannot move!",
    Status.CONFUSION: "{name} is confused!",
    Status.FAINTED: "{name} fainted!",
}


class TurnStartCheck(BaseModel):
    """What a combatant's status did at the start of its turn."""
    recovered: Status | None = None     # The status that wore off, if any
    blocked: bool = False               # True if the combatant loses its action
    self_damage: int = 0                # Confusion self-hit damage
    description: str = ""


def status_text(combatant: Combatant) -> str:
    """Human-readable line describing the combatant's current status."""
    return _STATUS_TEXT[combatant.status].format(name=combatant.name)


def check_faint(combatant: Combatant) -> bool:
    """Faint the combatant if its HP has run out.

    Returns:
        True if the combatant is fainted.
    """
    if combatant.stats.current_hp <= 0:
        combatant.stats.current_hp = 0
        combatant.status = Status.FAINTED
    return combatant.is_fainted


def inflict(combatant: Combatant, status: Status, chance: float, rng: random.Random) -> bool:
    """Try to give a healthy combatant a status.

    Only a combatant in NORMAL status can be afflicted, and only with an
    inflictable status. No roll is consumed otherwise.

    Args:
        combatant: The target.
        status: The status to inflict.
        chance: Probability of infliction, 0-1.
        rng: The arena's Random instance.

    Returns:
        True if the status took hold.
    """
    if status not in INFLICTABLE or combatant.status != Status.NORMAL:
        return False
    if not roll_chance(chance, rng):
        return False
    combatant.status = status
    return True


def clear_status(combatant: Combatant) -> None:
    """Reset any non-fainted status to NORMAL."""
    if not combatant.is_fainted:
        combatant.status = Status.NORMAL


def roll_recovery(combatant: Combatant, rng: random.Random) -> Status | None:
    """Roll once for the combatant to shake off its status.

    Returns:
        The status that wore off, or None.
    """
    chance = config.RECOVERY_CHANCE.get(combatant.status.value)
    if chance is None:
        return None
    if not roll_chance(chance, rng):
        return None
    recovered = combatant.status
    combatant.status = Status.NORMAL
    return recovered


def turn_start(combatant: Combatant, rng: random.Random) -> TurnStartCheck:
    """Run the turn-start status sequence for one combatant.

    Recovery is rolled first. A status that survives then decides whether
    the combatant acts: FREEZE, SLEEP and BOUND always block, PARALYSIS
    blocks some of the time, and CONFUSION can make the combatant hurt
    itself instead of acting.

    Args:
        combatant: The combatant about to act.
        rng: The arena's Random instance.

    Returns:
        TurnStartCheck describing the outcome.
    """
    check = TurnStartCheck()
    lines = []

    recovered = roll_recovery(combatant, rng)
    if recovered is not None:
        check.recovered = recovered
        lines.append(f"{combatant.name} recovered from {recovered.value}.")

    status = combatant.status
    if status in (Status.FREEZE, Status.SLEEP, Status.BOUND):
        check.blocked = True
        lines.append(status_text(combatant))
    elif status == Status.PARALYSIS:
        if roll_chance(config.PARALYSIS_SKIP_CHANCE, rng):
            check.blocked = True
            lines.append(f"{combatant.name} is paralyzed! It can't move!")
    elif status == Status.CONFUSION:
        if roll_chance(config.CONFUSION_SELF_HIT_CHANCE, rng):
            damage = max(1, int(combatant.stats.hp * config.CONFUSION_SELF_HIT_FRACTION))
            before = combatant.stats.current_hp
            add_hp(combatant, -damage)
            check.blocked = True
            check.self_damage = before - combatant.stats.current_hp
            lines.append(f"{combatant.name} hurt itself in its confusion!")

    check.description = " ".join(lines)
    return check


def end_of_round_tick(combatant: Combatant) -> int:
    """Apply burn or poison damage at the end of a round.

    Returns:
        HP lost (0 if the status does not tick).
    """
    if combatant.status == Status.BURN:
        fraction = config.BURN_TICK_FRACTION
    elif combatant.status == Status.POISON:
        fraction = config.POISON_TICK_FRACTION
    else:
        return 0
    damage = max(1, int(combatant.stats.hp * fraction))
    before = combatant.stats.current_hp
    add_hp(combatant, -damage)
    return before - combatant.stats.current_hp
