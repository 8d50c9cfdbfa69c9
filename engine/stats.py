"""Stat block accessors, HP bookkeeping and the experience curve."""

from __future__ import annotations

from typing import TYPE_CHECKING

import config
from models.enums import Stat, Status
from models.errors import Failure, FailureKind

if TYPE_CHECKING:
    from models.combatant import Combatant


def _values_failure(message: str) -> Failure:
    return Failure(kind=FailureKind.INVALID_POKEMON_VALUES, message=message)


def get_base_stat(combatant: Combatant, stat: Stat) -> int:
    """Return the base value of a stat."""
    return getattr(combatant.stats, stat.value)


def get_current_stat(combatant: Combatant, stat: Stat) -> int:
    """Return the in-battle value of a stat."""
    return getattr(combatant.stats, f"current_{stat.value}")


def set_base_stat(combatant: Combatant, stat: Stat, value: int) -> Failure | None:
    """Set a base stat and reset its current value to match.

    Args:
        combatant: The combatant to modify.
        stat: Which stat to set.
        value: The new base value.

    Returns:
        A Failure if the value is negative or would revive a fainted
        combatant, otherwise None.
    """
    if value < 0:
        return _values_failure(f"{stat.value} cannot be negative (got {value})")
    if stat == Stat.HP and value > 0 and combatant.is_fainted:
        return _values_failure(f"{combatant.name} has fainted; hp cannot be raised to {value}")
    setattr(combatant.stats, stat.value, value)
    setattr(combatant.stats, f"current_{stat.value}", value)
    if stat == Stat.HP and value == 0:
        combatant.status = Status.FAINTED
    return None


def set_current_stat(combatant: Combatant, stat: Stat, value: int) -> Failure | None:
    """Set the in-battle value of a stat.

    Current HP may not exceed base HP and a fainted combatant stays at 0.
    Setting current HP to 0 faints the combatant.

    Args:
        combatant: The combatant to modify.
        stat: Which stat to set.
        value: The new current value.

    Returns:
        A Failure if the value is out of range, otherwise None.
    """
    if value < 0:
        return _values_failure(f"current {stat.value} cannot be negative (got {value})")
    if stat == Stat.HP and value > combatant.stats.hp:
        return _values_failure(
            f"current hp {value} exceeds max hp {combatant.stats.hp}"
        )
    if stat == Stat.HP and value > 0 and combatant.is_fainted:
        return _values_failure(f"{combatant.name} has fainted; hp cannot be raised to {value}")
    setattr(combatant.stats, f"current_{stat.value}", value)
    if stat == Stat.HP and value == 0:
        combatant.status = Status.FAINTED
    return None


def add_hp(combatant: Combatant, delta: int) -> int:
    """Change current HP by delta, clamped to [0, max HP].

    Reaching 0 faints the combatant. A fainted combatant is not healed.

    Args:
        combatant: The combatant to modify.
        delta: HP to add (negative for damage).

    Returns:
        The combatant's current HP afterwards.
    """
    stats = combatant.stats
    if combatant.is_fainted:
        return stats.current_hp
    stats.current_hp = max(0, min(stats.hp, stats.current_hp + delta))
    if stats.current_hp == 0:
        combatant.status = Status.FAINTED
    return stats.current_hp


def base_critical_hit_ratio(speed: int) -> float:
    """Critical-hit ratio a combatant starts with: half its speed over 256."""
    return min(1.0, (speed / 2) / config.CRITICAL_HIT_DIVISOR)


def set_critical_hit_ratio(combatant: Combatant, ratio: float) -> Failure | None:
    """Set the base critical-hit ratio and reset the current ratio to it."""
    if not 0.0 <= ratio <= 1.0:
        return _values_failure(f"critical hit ratio must be within [0, 1] (got {ratio})")
    combatant.stats.critical_hit_ratio = ratio
    combatant.stats.current_critical_hit_ratio = ratio
    return None


def set_current_critical_hit_ratio(combatant: Combatant, ratio: float) -> Failure | None:
    """Set the in-battle critical-hit ratio."""
    if not 0.0 <= ratio <= 1.0:
        return _values_failure(f"critical hit ratio must be within [0, 1] (got {ratio})")
    combatant.stats.current_critical_hit_ratio = ratio
    return None


def reset_current_stats(combatant: Combatant) -> None:
    """Restore every current stat except HP, and the critical ratio, to base."""
    for stat in Stat:
        if stat == Stat.HP:
            continue
        setattr(combatant.stats, f"current_{stat.value}", get_base_stat(combatant, stat))
    combatant.stats.current_critical_hit_ratio = combatant.stats.critical_hit_ratio


# ---------------------------------------------------------------------------
# Experience and level
# ---------------------------------------------------------------------------


def exp_threshold(level: int) -> int:
    """Total experience needed to leave the given level.

    The first level-up costs FIRST_LEVEL_UP_EXP and each later one costs
    FIRST_LEVEL_UP_EXP more than the last: 10, 20, 40, 70, 110, ...
    """
    return config.FIRST_LEVEL_UP_EXP + config.FIRST_LEVEL_UP_EXP * level * (level - 1) // 2


def level_for_exp(exp: int) -> int:
    """Level reached with the given total experience, capped at MAX_LEVEL."""
    level = 1
    while level < config.MAX_LEVEL and exp >= exp_threshold(level):
        level += 1
    return level


def remaining_exp(combatant: Combatant) -> int:
    """Experience still needed before the next level-up (0 at the cap)."""
    if combatant.stats.level >= config.MAX_LEVEL:
        return 0
    return exp_threshold(combatant.stats.level) - combatant.stats.exp


def set_total_exp(combatant: Combatant, total: int) -> tuple[bool, Failure | None]:
    """Set total experience, recomputing level and granting level-up points.

    Experience never decreases, so a total below the current one is
    rejected along with negative totals.

    Args:
        combatant: The combatant to modify.
        total: The new total experience.

    Returns:
        (leveled_up, failure) tuple. On failure experience is unchanged.
    """
    stats = combatant.stats
    if total < 0:
        return False, Failure(
            kind=FailureKind.INVALID_EXP,
            message=f"experience cannot be negative (got {total})",
        )
    if total < stats.exp:
        return False, Failure(
            kind=FailureKind.INVALID_EXP,
            message=f"cannot decrease experience from {stats.exp} to {total}",
        )

    new_level = level_for_exp(total)
    gained_levels = new_level - stats.level
    stats.added_exp += total - stats.exp
    stats.exp = total
    if gained_levels > 0:
        stats.points += gained_levels * config.POINTS_GIVEN_ON_LEVEL_UP
        stats.level = new_level
        return True, None
    return False, None


def add_exp(combatant: Combatant, amount: int) -> tuple[bool, Failure | None]:
    """Add experience to the combatant's total.

    Args:
        combatant: The combatant to modify.
        amount: Experience to add. Must not be negative.

    Returns:
        (leveled_up, failure) tuple. On failure experience is unchanged.
    """
    if amount < 0:
        return False, Failure(
            kind=FailureKind.INVALID_EXP,
            message=f"cannot add negative experience ({amount})",
        )
    return set_total_exp(combatant, combatant.stats.exp + amount)


# ---------------------------------------------------------------------------
# Point budget
# ---------------------------------------------------------------------------


def points_spent(combatant: Combatant) -> int:
    """Points tied up in base stats and learned moves."""
    stat_total = sum(get_base_stat(combatant, stat) for stat in Stat)
    return stat_total + len(combatant.moves) * config.NEW_MOVE_COST


def points_allowance(level: int) -> int:
    """Maximum points a combatant of this level may have spent."""
    return config.STARTING_POINTS + (level - 1) * config.POINTS_GIVEN_ON_LEVEL_UP
