"""Combatant data models for PokeArena Server."""

from pydantic import BaseModel

from models.enums import PokemonType, Status
from models.moves import Item, Move


class StatBlock(BaseModel):
    """Base and current stat values plus experience bookkeeping.

    Base values are what the combatant was built with (and raised to by
    level-ups). Current values are what battle reads and mutates.
    """
    hp: int
    current_hp: int
    attack: int
    current_attack: int
    defense: int
    current_defense: int
    special_attack: int
    current_special_attack: int
    special_defense: int
    current_special_defense: int
    speed: int
    current_speed: int
    evasion: int
    current_evasion: int
    accuracy: int
    current_accuracy: int
    critical_hit_ratio: float = 0.0         # Chance of a critical hit, 0-1
    current_critical_hit_ratio: float = 0.0
    points: int = 0                         # Unspent points
    exp: int = 0                            # Total experience
    level: int = 1
    added_exp: int = 0                      # Experience gained since creation


class Combatant(BaseModel):
    """A creature with full battle-relevant stats, moves, items and status."""
    id: str                                 # Unique identifier
    name: str
    species: str = "custom"
    type: PokemonType
    stats: StatBlock
    status: Status = Status.NORMAL
    wins: int = 0
    evolutions: int = 0
    height: float = 0.0                     # Feet
    weight: float = 0.0                     # Pounds
    description: str = ""
    number: int = 0                         # Species number
    base_exp_yield: int = 64                # Feeds the experience award formula
    moves: list[Move] = []
    items: list[Item] = []
    current_move: str | None = None         # Name of the selected move
    current_item: str | None = None         # Name of the selected item
    image_id: str | None = None             # Roaming sprite
    battle_image_id: str | None = None
    cry_id: str | None = None

    @property
    def is_fainted(self) -> bool:
        return self.status == Status.FAINTED


class CombatantConfig(BaseModel):
    """Construction input: every caller-supplied field of a combatant.

    Moves and items may be given by catalogue name or inline.
    """
    name: str
    species: str = "custom"
    type: str
    hp: int
    attack: int
    defense: int
    special_attack: int
    special_defense: int
    speed: int
    evasion: int
    accuracy: int
    exp: int = 0
    wins: int = 0
    evolutions: int = 0
    moves: list[Move | str] = []
    items: list[Item | str] = []
    height: float = 0.0
    weight: float = 0.0
    description: str = ""
    number: int = 0
    base_exp_yield: int = 64
    image_id: str | None = None
    battle_image_id: str | None = None
    cry_id: str | None = None
