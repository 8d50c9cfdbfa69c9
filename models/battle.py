"""Battle pairing, event, result and inspection verdict models."""

from enum import Enum

from pydantic import BaseModel

from models.combatant import Combatant
from models.errors import FailureKind


class BattleEventType(str, Enum):
    """Kinds of entries in a battle's event log."""
    MOVE = "move"
    MISS = "miss"
    CRITICAL = "critical"
    EFFECTIVENESS = "effectiveness"
    STATUS = "status"             # Inflicted, recovered, blocked or ticked
    ITEM = "item"
    FAINT = "faint"
    EXPERIENCE = "experience"


class BattleEvent(BaseModel):
    """A logged step of a battle."""
    round: int
    combatant_id: str
    event_type: BattleEventType
    description: str              # Human-readable narrative
    damage: int | None = None
    details: dict = {}


class BattlePair(BaseModel):
    """Two combatants pulled out of the roam pool for one match."""
    first: Combatant
    second: Combatant


class BattleResult(BaseModel):
    """The outcome of BattleEngine.resolve.

    On success, winner and loser are set and the loser must be dropped
    from the roster. On failure, error and error_kind describe why the
    battle never started.
    """
    success: bool
    winner: Combatant | None = None
    loser: Combatant | None = None
    exp_gained: int = 0
    leveled_up: bool = False
    rounds: int = 0
    remove_loser: bool = True
    events: list[BattleEvent] = []
    error: str | None = None
    error_kind: FailureKind | None = None


class VerdictKind(str, Enum):
    """Outcome of an inspection."""
    PASS = "pass"
    DISQUALIFY = "disqualify"


class Verdict(BaseModel):
    """The ValidationGate's decision on one combatant."""
    kind: VerdictKind
    reason: str | None = None
    failure_kind: FailureKind | None = None

    @property
    def passed(self) -> bool:
        return self.kind == VerdictKind.PASS
