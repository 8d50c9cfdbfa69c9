"""Enumerations shared across the combatant, move and battle models."""

from __future__ import annotations

from enum import Enum


class PokemonType(str, Enum):
    """The 17 elemental types a combatant or move can have."""
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"

    @classmethod
    def parse(cls, value: str) -> PokemonType | None:
        """Case-insensitive lookup. Returns None for unknown strings."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Status(str, Enum):
    """Exclusive conditions. FAINTED is terminal and overrides the rest."""
    NORMAL = "normal"
    BURN = "burn"
    FREEZE = "freeze"
    PARALYSIS = "paralysis"
    POISON = "poison"
    SLEEP = "sleep"
    BOUND = "bound"
    CONFUSION = "confusion"
    FAINTED = "fainted"


class MoveCategory(str, Enum):
    """Which stat pair a move uses. STATUS moves deal no damage."""
    PHYSICAL = "physical"
    SPECIAL = "special"
    STATUS = "status"


class Stat(str, Enum):
    """The eight stats that carry a base and a current value."""
    HP = "hp"
    ATTACK = "attack"
    DEFENSE = "defense"
    SPECIAL_ATTACK = "special_attack"
    SPECIAL_DEFENSE = "special_defense"
    SPEED = "speed"
    EVASION = "evasion"
    ACCURACY = "accuracy"
