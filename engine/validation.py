"""Officer Jenny: the roster inspection gate.

`inspect` audits a combatant against the construction rules and returns a
Verdict. It never raises and never mutates the combatant, so inspecting an
unchanged combatant twice gives equal verdicts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import config
from engine.stats import get_base_stat, get_current_stat, level_for_exp, points_allowance, points_spent
from engine.typechart import can_learn
from models.battle import Verdict, VerdictKind
from models.enums import PokemonType, Stat, Status
from models.errors import FailureKind

if TYPE_CHECKING:
    from models.combatant import Combatant


def _disqualify(kind: FailureKind, reason: str) -> Verdict:
    return Verdict(kind=VerdictKind.DISQUALIFY, reason=reason, failure_kind=kind)


def _check_move_total(combatant: Combatant) -> Verdict | None:
    count = len(combatant.moves)
    if not config.MIN_NUMBER_OF_MOVES <= count <= config.MAX_NUMBER_OF_MOVES:
        return _disqualify(
            FailureKind.INVALID_MOVE_TOTAL,
            f"{combatant.name} knows {count} moves; must know between "
            f"{config.MIN_NUMBER_OF_MOVES} and {config.MAX_NUMBER_OF_MOVES}",
        )
    return None


def _check_stat_values(combatant: Combatant) -> Verdict | None:
    for stat in Stat:
        base = get_base_stat(combatant, stat)
        current = get_current_stat(combatant, stat)
        if base < 0 or current < 0:
            return _disqualify(
                FailureKind.INVALID_POKEMON_VALUES,
                f"{combatant.name} has a negative {stat.value} ({base}/{current})",
            )
    return None


def _check_hp(combatant: Combatant) -> Verdict | None:
    stats = combatant.stats
    if stats.current_hp > stats.hp:
        return _disqualify(
            FailureKind.INVALID_POKEMON_VALUES,
            f"{combatant.name} has {stats.current_hp} HP but a max of {stats.hp}",
        )
    if (stats.current_hp == 0) != (combatant.status == Status.FAINTED):
        return _disqualify(
            FailureKind.INVALID_POKEMON_VALUES,
            f"{combatant.name} has {stats.current_hp} HP with status {combatant.status.value}",
        )
    return None


def _check_type(combatant: Combatant) -> Verdict | None:
    if not isinstance(combatant.type, PokemonType):
        return _disqualify(
            FailureKind.INVALID_TYPE,
            f"{combatant.name} has unknown type {combatant.type!r}",
        )
    return None


def _check_critical_hit_ratio(combatant: Combatant) -> Verdict | None:
    stats = combatant.stats
    for ratio in (stats.critical_hit_ratio, stats.current_critical_hit_ratio):
        if not 0.0 <= ratio <= 1.0:
            return _disqualify(
                FailureKind.INVALID_POKEMON_VALUES,
                f"{combatant.name} has critical hit ratio {ratio} outside [0, 1]",
            )
    return None


def _check_move_types(combatant: Combatant) -> Verdict | None:
    for move in combatant.moves:
        if not can_learn(move.type, combatant.type):
            return _disqualify(
                FailureKind.INVALID_TYPE,
                f"{combatant.name} ({combatant.type.value}) knows "
                f"{move.name} ({move.type.value})",
            )
    return None


def _check_points(combatant: Combatant) -> Verdict | None:
    spent = points_spent(combatant)
    allowance = points_allowance(combatant.stats.level)
    if spent > allowance or combatant.stats.points < 0:
        return _disqualify(
            FailureKind.INVALID_POKEMON_POINTS,
            f"{combatant.name} spent {spent} points; level "
            f"{combatant.stats.level} allows {allowance}",
        )
    return None


def _check_exp(combatant: Combatant) -> Verdict | None:
    stats = combatant.stats
    if stats.exp < 0:
        return _disqualify(
            FailureKind.INVALID_EXP,
            f"{combatant.name} has negative experience ({stats.exp})",
        )
    expected = level_for_exp(stats.exp)
    if stats.level != expected:
        return _disqualify(
            FailureKind.INVALID_EXP,
            f"{combatant.name} is level {stats.level} but {stats.exp} "
            f"experience means level {expected}",
        )
    return None


# Ordered; the first failing check decides the verdict.
CHECKS = (
    _check_move_total,
    _check_stat_values,
    _check_hp,
    _check_type,
    _check_critical_hit_ratio,
    _check_move_types,
    _check_points,
    _check_exp,
)


def inspect(combatant: Combatant) -> Verdict:
    """Audit a combatant.

    Args:
        combatant: The combatant to inspect.

    Returns:
        PASS, or DISQUALIFY with the reason and failure kind of the first
        rule broken.
    """
    for check in CHECKS:
        verdict = check(combatant)
        if verdict is not None:
            return verdict
    return Verdict(kind=VerdictKind.PASS)
