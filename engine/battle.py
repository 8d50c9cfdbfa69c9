"""Battle resolution: turn order, move execution, damage and experience."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

import config
from engine.moveset import find_move, use_item
from engine.rng import roll_chance
from engine.species import STRUGGLE
from engine.stats import add_exp, add_hp, reset_current_stats
from engine.status import check_faint, clear_status, end_of_round_tick, inflict, turn_start
from engine.typechart import Effectiveness, MULTIPLIERS, effectiveness_text, get_effectiveness
from engine.validation import inspect
from models.battle import BattleEvent, BattleEventType, BattlePair, BattleResult
from models.enums import MoveCategory
from models.errors import FailureKind

if TYPE_CHECKING:
    from models.combatant import Combatant
    from models.moves import Move

logger = logging.getLogger(__name__)


def calculate_damage(
    attacker: Combatant,
    defender: Combatant,
    move: Move,
    critical: bool = False,
    typeless: bool = False,
) -> int:
    """Damage a move would deal, before it is applied.

    damage = ((2L/5 + 2) * power * A/D) / 50 + 2, scaled by type
    effectiveness and the critical-hit multiplier. PHYSICAL moves read
    Attack against Defense, SPECIAL moves read Special Attack against
    Special Defense. A hit that is not immune always deals at least 1.

    Args:
        attacker: The combatant using the move.
        defender: The combatant being hit.
        move: The move being used.
        critical: Whether the hit is critical.
        typeless: Ignore the type chart (Struggle).

    Returns:
        Damage as a non-negative integer. STATUS moves return 0.
    """
    if move.category == MoveCategory.STATUS or move.power <= 0:
        return 0

    if typeless:
        multiplier = 1.0
    else:
        multiplier = MULTIPLIERS[get_effectiveness(move.type, defender.type)]
    if multiplier == 0.0:
        return 0

    if move.category == MoveCategory.PHYSICAL:
        offence = attacker.stats.current_attack
        defence = defender.stats.current_defense
    else:
        offence = attacker.stats.current_special_attack
        defence = defender.stats.current_special_defense
    defence = max(1, defence)

    level = attacker.stats.level
    base = ((2 * level / 5 + 2) * move.power * offence / defence) / 50 + 2
    if critical:
        base *= config.CRITICAL_HIT_MULTIPLIER
    return max(1, int(base * multiplier))


def hit_chance(attacker: Combatant, defender: Combatant, move: Move) -> float:
    """Probability that a move lands, clamped to [0, 1]."""
    evasion = max(1, defender.stats.current_evasion)
    chance = (move.accuracy / 100) * attacker.stats.current_accuracy / evasion
    return max(0.0, min(1.0, chance))


def experience_for_win(winner: Combatant, loser: Combatant) -> int:
    """Experience the winner earns for defeating the loser."""
    loser_level = loser.stats.level
    winner_level = winner.stats.level
    b = loser.base_exp_yield + loser_level * (loser.evolutions + 1)
    scale = ((2 * loser_level + 10) / (loser_level + winner_level + 10)) ** 2.5
    return int(b * loser_level / 5 * scale)


def turn_order(pair: BattlePair) -> list[Combatant]:
    """Acting order for a round: faster first, ties keep pair order."""
    return sorted((pair.first, pair.second), key=lambda c: -c.stats.current_speed)


def choose_move(combatant: Combatant) -> tuple[Move, bool]:
    """Pick the move a combatant will use this turn.

    The selected move if it has PP, otherwise the first move with PP,
    otherwise Struggle.

    Returns:
        (move, is_struggle) tuple.
    """
    if combatant.current_move:
        selected = find_move(combatant, combatant.current_move)
        if selected is not None and selected.current_pp > 0:
            return selected, False
    for move in combatant.moves:
        if move.current_pp > 0:
            return move, False
    return STRUGGLE.model_copy(), True


def check_preconditions(pair: BattlePair) -> str | None:
    """Return why a pair cannot battle, or None if it can."""
    if pair.first is pair.second or pair.first.id == pair.second.id:
        return "A combatant cannot battle itself"
    for combatant in (pair.first, pair.second):
        if combatant.is_fainted:
            return f"{combatant.name} has fainted and cannot battle"
        verdict = inspect(combatant)
        if not verdict.passed:
            return f"{combatant.name} failed inspection: {verdict.reason}"
    return None


class _BattleLog:
    """Collects the ordered event log of one battle."""

    def __init__(self) -> None:
        self.events: list[BattleEvent] = []
        self.round = 0

    def add(
        self,
        combatant: Combatant,
        event_type: BattleEventType,
        description: str,
        damage: int | None = None,
        **details,
    ) -> None:
        self.events.append(
            BattleEvent(
                round=self.round,
                combatant_id=combatant.id,
                event_type=event_type,
                description=description,
                damage=damage,
                details=details,
            )
        )

    def faint(self, combatant: Combatant) -> None:
        self.add(combatant, BattleEventType.FAINT, f"{combatant.name} fainted!")


def _use_move(
    attacker: Combatant,
    defender: Combatant,
    rng: random.Random,
    log: _BattleLog,
) -> None:
    """Run one move: spend PP, roll accuracy, deal damage, roll status."""
    move, is_struggle = choose_move(attacker)
    if not is_struggle:
        move.current_pp -= 1

    chance = 1.0 if is_struggle else hit_chance(attacker, defender, move)
    if not roll_chance(chance, rng):
        log.add(attacker, BattleEventType.MISS, f"{attacker.name} used {move.name}, but it missed!",
                move=move.name)
        return

    effectiveness = Effectiveness.NORMAL if is_struggle else get_effectiveness(move.type, defender.type)

    if move.category == MoveCategory.STATUS:
        log.add(attacker, BattleEventType.MOVE, f"{attacker.name} used {move.name}!",
                damage=0, move=move.name)
        if effectiveness == Effectiveness.IMMUNE:
            log.add(attacker, BattleEventType.EFFECTIVENESS, effectiveness_text(effectiveness),
                    effectiveness=effectiveness.value)
    else:
        critical = roll_chance(attacker.stats.current_critical_hit_ratio, rng)
        damage = calculate_damage(attacker, defender, move, critical=critical, typeless=is_struggle)
        before = defender.stats.current_hp
        add_hp(defender, -damage)
        dealt = before - defender.stats.current_hp
        log.add(
            attacker,
            BattleEventType.MOVE,
            f"{attacker.name} used {move.name}! {defender.name} took {dealt} damage.",
            damage=dealt,
            move=move.name,
            target_hp_remaining=defender.stats.current_hp,
        )
        if critical and damage > 0:
            log.add(attacker, BattleEventType.CRITICAL, "A critical hit!")
        if effectiveness != Effectiveness.NORMAL:
            log.add(attacker, BattleEventType.EFFECTIVENESS, effectiveness_text(effectiveness),
                    effectiveness=effectiveness.value)
        if check_faint(defender):
            log.faint(defender)
            return
        if damage == 0:
            return

    if move.status_effect is None or effectiveness == Effectiveness.IMMUNE:
        return
    if inflict(defender, move.status_effect, move.status_chance, rng):
        log.add(defender, BattleEventType.STATUS,
                f"{defender.name} was afflicted with {move.status_effect.value}!",
                status=move.status_effect.value)
    elif move.category == MoveCategory.STATUS:
        log.add(attacker, BattleEventType.STATUS, "But it failed!")


def _take_turn(
    actor: Combatant,
    opponent: Combatant,
    rng: random.Random,
    log: _BattleLog,
) -> None:
    """Run one combatant's turn: status checks, then an item or a move."""
    check = turn_start(actor, rng)
    if check.recovered is not None:
        log.add(actor, BattleEventType.STATUS, f"{actor.name} recovered from {check.recovered.value}.",
                status="normal")
    if check.blocked:
        log.add(actor, BattleEventType.STATUS, check.description,
                damage=check.self_damage or None, status=actor.status.value)
        if check_faint(actor):
            log.faint(actor)
        return

    if actor.current_item:
        item_name = actor.current_item
        actor.current_item = None
        used, message = use_item(actor, item_name)
        if used:
            log.add(actor, BattleEventType.ITEM, message, item=item_name)
            return

    _use_move(actor, opponent, rng, log)


def _break_stalemate(pair: BattlePair, log: _BattleLog) -> None:
    """Faint whichever combatant has the lower HP fraction (the second on ties)."""
    first, second = pair.first, pair.second
    first_fraction = first.stats.current_hp / max(1, first.stats.hp)
    second_fraction = second.stats.current_hp / max(1, second.stats.hp)
    loser = first if first_fraction < second_fraction else second
    loser.stats.current_hp = 0
    check_faint(loser)
    log.add(loser, BattleEventType.FAINT,
            f"The battle dragged on too long. {loser.name} can no longer fight!")


def resolve(pair: BattlePair, rng: random.Random) -> BattleResult:
    """Fight a battle to the finish.

    Both combatants are mutated in place. Each round the faster combatant
    acts first; burn and poison tick once both have acted. The battle ends
    the moment either combatant faints.

    Args:
        pair: The two combatants to battle.
        rng: The arena's Random instance. The same seed and combatants
            always produce the same result.

    Returns:
        BattleResult naming winner and loser with the ordered event log,
        or an unsuccessful result if the pair cannot battle.
    """
    error = check_preconditions(pair)
    if error is not None:
        return BattleResult(
            success=False,
            error=error,
            error_kind=FailureKind.INVALID_BATTLE_STATE,
        )

    log = _BattleLog()
    first, second = pair.first, pair.second

    while not first.is_fainted and not second.is_fainted:
        log.round += 1
        if log.round > config.MAX_BATTLE_ROUNDS:
            log.round -= 1
            _break_stalemate(pair, log)
            break

        for actor in turn_order(pair):
            opponent = second if actor is first else first
            _take_turn(actor, opponent, rng, log)
            if first.is_fainted or second.is_fainted:
                break
        if first.is_fainted or second.is_fainted:
            break

        for combatant in (first, second):
            ticking = combatant.status
            lost = end_of_round_tick(combatant)
            if lost:
                log.add(combatant, BattleEventType.STATUS,
                        f"{combatant.name} is hurt by its {ticking.value}!",
                        damage=lost, status=ticking.value)
            if check_faint(combatant):
                log.faint(combatant)
                break

    winner, loser = (second, first) if first.is_fainted else (first, second)

    exp_gained = experience_for_win(winner, loser)
    leveled_up, _ = add_exp(winner, exp_gained)
    winner.wins += 1
    clear_status(winner)
    reset_current_stats(winner)
    log.add(
        winner,
        BattleEventType.EXPERIENCE,
        f"{winner.name} gained {exp_gained} experience!"
        + (f" {winner.name} grew to level {winner.stats.level}!" if leveled_up else ""),
        exp_gained=exp_gained,
        level=winner.stats.level,
    )

    logger.info(
        "%s defeated %s in %d rounds (+%d exp)",
        winner.name, loser.name, log.round, exp_gained,
    )
    return BattleResult(
        success=True,
        winner=winner,
        loser=loser,
        exp_gained=exp_gained,
        leveled_up=leveled_up,
        rounds=log.round,
        events=log.events,
    )
