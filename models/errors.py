"""Validation failure kinds shared by construction, mutators and the gate."""

from enum import Enum

from pydantic import BaseModel


class FailureKind(str, Enum):
    """Closed set of reasons a combatant operation can be rejected."""
    INVALID_MOVE_TOTAL = "invalid_move_total"          # Move count outside [MIN, MAX]
    INVALID_POKEMON_POINTS = "invalid_pokemon_points"  # Point allocation exceeded
    INVALID_TYPE = "invalid_type"                      # Unknown type or move/type mismatch
    INVALID_POKEMON_VALUES = "invalid_pokemon_values"  # Negative or out-of-range stat
    INVALID_EXP = "invalid_exp"                        # Experience would go negative or backwards
    INVALID_BATTLE_STATE = "invalid_battle_state"      # Battle preconditions not met


class Failure(BaseModel):
    """A rejected operation: which rule was broken and why."""
    kind: FailureKind
    message: str
