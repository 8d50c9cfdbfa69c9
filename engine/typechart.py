"""Type effectiveness chart and move-learning compatibility."""

from __future__ import annotations

from enum import Enum

from models.enums import PokemonType

T = PokemonType


class Effectiveness(str, Enum):
    """The four outcomes of a move type hitting a defender type."""
    SUPER_EFFECTIVE = "super_effective"
    NORMAL = "normal"
    NOT_VERY_EFFECTIVE = "not_very_effective"
    IMMUNE = "immune"


MULTIPLIERS: dict[Effectiveness, float] = {
    Effectiveness.SUPER_EFFECTIVE: 2.0,
    Effectiveness.NORMAL: 1.0,
    Effectiveness.NOT_VERY_EFFECTIVE: 0.5,
    Effectiveness.IMMUNE: 0.0,
}

_S = Effectiveness.SUPER_EFFECTIVE
_H = Effectiveness.NOT_VERY_EFFECTIVE
_X = Effectiveness.IMMUNE

# attacking type -> {defending type -> effectiveness}. Pairs not listed are NORMAL.
_CHART: dict[PokemonType, dict[PokemonType, Effectiveness]] = {
    T.NORMAL: {T.ROCK: _H, T.STEEL: _H, T.GHOST: _X},
    T.FIRE: {
        T.FIRE: _H, T.WATER: _H, T.ROCK: _H, T.DRAGON: _H,
        T.GRASS: _S, T.ICE: _S, T.BUG: _S, T.STEEL: _S,
    },
    T.WATER: {
        T.WATER: _H, T.GRASS: _H, T.DRAGON: _H,
        T.FIRE: _S, T.GROUND: _S, T.ROCK: _S,
    },
    T.ELECTRIC: {
        T.ELECTRIC: _H, T.GRASS: _H, T.DRAGON: _H,
        T.WATER: _S, T.FLYING: _S,
        T.GROUND: _X,
    },
    T.GRASS: {
        T.FIRE: _H, T.GRASS: _H, T.POISON: _H, T.FLYING: _H, T.BUG: _H, T.DRAGON: _H, T.STEEL: _H,
        T.WATER: _S, T.GROUND: _S, T.ROCK: _S,
    },
    T.ICE: {
        T.FIRE: _H, T.WATER: _H, T.ICE: _H, T.STEEL: _H,
        T.GRASS: _S, T.GROUND: _S, T.FLYING: _S, T.DRAGON: _S,
    },
    T.FIGHTING: {
        T.POISON: _H, T.FLYING: _H, T.PSYCHIC: _H, T.BUG: _H,
        T.NORMAL: _S, T.ICE: _S, T.ROCK: _S, T.DARK: _S, T.STEEL: _S,
        T.GHOST: _X,
    },
    T.POISON: {
        T.POISON: _H, T.GROUND: _H, T.ROCK: _H, T.GHOST: _H,
        T.GRASS: _S,
        T.STEEL: _X,
    },
    T.GROUND: {
        T.GRASS: _H, T.BUG: _H,
        T.FIRE: _S, T.ELECTRIC: _S, T.POISON: _S, T.ROCK: _S, T.STEEL: _S,
        T.FLYING: _X,
    },
    T.FLYING: {
        T.ELECTRIC: _H, T.ROCK: _H, T.STEEL: _H,
        T.GRASS: _S, T.FIGHTING: _S, T.BUG: _S,
    },
    T.PSYCHIC: {
        T.PSYCHIC: _H, T.STEEL: _H,
        T.FIGHTING: _S, T.POISON: _S,
        T.DARK: _X,
    },
    T.BUG: {
        T.FIRE: _H, T.FIGHTING: _H, T.POISON: _H, T.FLYING: _H, T.GHOST: _H, T.STEEL: _H,
        T.GRASS: _S, T.PSYCHIC: _S, T.DARK: _S,
    },
    T.ROCK: {
        T.FIGHTING: _H, T.GROUND: _H, T.STEEL: _H,
        T.FIRE: _S, T.ICE: _S, T.FLYING: _S, T.BUG: _S,
    },
    T.GHOST: {
        T.DARK: _H, T.STEEL: _H,
        T.PSYCHIC: _S, T.GHOST: _S,
        T.NORMAL: _X,
    },
    T.DRAGON: {T.STEEL: _H, T.DRAGON: _S},
    T.DARK: {
        T.FIGHTING: _H, T.DARK: _H, T.STEEL: _H,
        T.PSYCHIC: _S, T.GHOST: _S,
    },
    T.STEEL: {
        T.FIRE: _H, T.WATER: _H, T.ELECTRIC: _H, T.STEEL: _H,
        T.ICE: _S, T.ROCK: _S,
    },
}


def get_effectiveness(attack_type: PokemonType, defend_type: PokemonType) -> Effectiveness:
    """Classify a move type against a defender type.

    Every pair of valid types resolves to exactly one Effectiveness.

    Args:
        attack_type: The move's type.
        defend_type: The defending combatant's type.

    Returns:
        The effectiveness class.
    """
    return _CHART.get(attack_type, {}).get(defend_type, Effectiveness.NORMAL)


def get_multiplier(attack_type: PokemonType, defend_type: PokemonType) -> float:
    """Damage multiplier for a move type against a defender type."""
    return MULTIPLIERS[get_effectiveness(attack_type, defend_type)]


def effectiveness_text(effectiveness: Effectiveness) -> str:
    """Battle narration for an effectiveness class."""
    if effectiveness == Effectiveness.SUPER_EFFECTIVE:
        return "It's super effective!"
    if effectiveness == Effectiveness.NOT_VERY_EFFECTIVE:
        return "It's not very effective..."
    if effectiveness == Effectiveness.IMMUNE:
        return "It had no effect!"
    return "It has a regular effect."


def can_learn(move_type: PokemonType, combatant_type: PokemonType) -> bool:
    """Whether a combatant may learn a move of the given type.

    A move must share the combatant's type, except NORMAL moves which
    every combatant can learn.
    """
    return move_type == combatant_type or move_type == PokemonType.NORMAL
