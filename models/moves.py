"""Move and item records attached to a combatant."""

from pydantic import BaseModel

from models.enums import MoveCategory, PokemonType, Stat, Status


class Move(BaseModel):
    """A learned action. Only current_pp changes once learned."""
    name: str                           # e.g., "Thunder Shock"
    type: PokemonType
    category: MoveCategory = MoveCategory.PHYSICAL
    power: int                          # Base power, 0 for status moves
    accuracy: int = 100                 # Percent, 0-100
    pp: int                             # Maximum uses
    current_pp: int
    status_effect: Status | None = None # Status inflicted on hit
    status_chance: float = 0.0          # Infliction chance, 0-1
    description: str = ""
    sound_id: str | None = None         # Passed through to the presentation layer


class ItemEffect(BaseModel):
    """What using an item does. Unset fields have no effect."""
    heal_hp: int = 0                    # Restore this much current HP
    cures: list[Status] = []            # Statuses reset to NORMAL
    stat_boosts: dict[Stat, int] = {}   # Added to current stat values
    restore_pp: int = 0                 # Added to every move's current PP
    critical_hit_boost: float = 0.0     # Added to current critical-hit ratio


class Item(BaseModel):
    """An inventory item. Items with the same name stack by quantity."""
    name: str                           # e.g., "Potion"
    effect: ItemEffect = ItemEffect()
    single_use: bool = True
    quantity: int = 1
    description: str = ""
    image_id: str | None = None
