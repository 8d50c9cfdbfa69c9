"""Arena state, roster and event models for PokeArena Server."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from models.battle import BattlePair, BattleResult
from models.combatant import Combatant


class ArenaStatus(str, Enum):
    """Controller states."""
    ROAMING = "roaming"                       # Entities wander, collisions checked
    BATTLE_TRANSITION = "battle_transition"   # A pair is inside the battle engine


class RosterEntry(BaseModel):
    """A combatant roaming the scene."""
    combatant: Combatant
    position: tuple[int, int]                 # Centre (x, y) in pixels
    target: tuple[int, int] | None = None     # Where it is walking to
    hitbox: tuple[int, int] = (40, 40)        # (width, height)
    travel_speed: int = 3                     # Pixels per tick


class ArenaEvent(BaseModel):
    """A logged roster or scene change."""
    tick: int
    combatant_id: str | None
    event_type: str                           # "added", "culled", "battle", "disqualified", ...
    description: str
    details: dict = {}
    timestamp: datetime


class InspectionReport(BaseModel):
    """One row of an inspection sweep."""
    combatant_id: str
    name: str
    passed: bool
    reason: str | None = None


class TickReport(BaseModel):
    """What happened during one tick."""
    tick: int
    culled: list[str] = []
    battle: BattleResult | None = None


class ArenaState(BaseModel):
    """The full state of one arena scene."""
    name: str = "PokeArena"
    width: int
    height: int
    status: ArenaStatus = ArenaStatus.ROAMING
    roster: dict[str, RosterEntry] = {}       # combatant_id -> RosterEntry, insertion ordered
    active_pair: BattlePair | None = None
    tick: int = 0
    next_id: int = 1
    event_log: list[ArenaEvent] = []
    battle_history: list[BattleResult] = []
