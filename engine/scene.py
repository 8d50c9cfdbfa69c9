"""Scene geometry and the listener contract for the presentation layer."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol

from pydantic import BaseModel


class SceneNotification(BaseModel):
    """One message for the presentation layer."""
    kind: str                                 # "entity_added", "entity_removed", "scene_transition"
    entity_id: str | None = None
    position: tuple[int, int] | None = None
    transition: str | None = None             # "battle_start" or "battle_end"
    payload: dict[str, Any] = {}
    timestamp: datetime


class SceneListener(Protocol):
    """Receives roster and scene changes from the arena controller."""

    def notify_entity_added(self, entity_id: str, x: int, y: int) -> None: ...

    def notify_entity_removed(self, entity_id: str) -> None: ...

    def notify_scene_transition(self, kind: str, payload: dict[str, Any]) -> None: ...


class NullSceneListener:
    """Discards every notification."""

    def notify_entity_added(self, entity_id: str, x: int, y: int) -> None:
        pass

    def notify_entity_removed(self, entity_id: str) -> None:
        pass

    def notify_scene_transition(self, kind: str, payload: dict[str, Any]) -> None:
        pass


class RecordingSceneListener:
    """Buffers notifications until they are drained, e.g. by the WebSocket feed.

    Only the newest `max_buffered` notifications are kept.
    """

    def __init__(self, max_buffered: int = 1000) -> None:
        self.notifications: list[SceneNotification] = []
        self.max_buffered = max_buffered

    def _record(self, **fields) -> None:
        self.notifications.append(
            SceneNotification(timestamp=datetime.now(timezone.utc), **fields)
        )
        if len(self.notifications) > self.max_buffered:
            del self.notifications[0]

    def notify_entity_added(self, entity_id: str, x: int, y: int) -> None:
        self._record(kind="entity_added", entity_id=entity_id, position=(x, y))

    def notify_entity_removed(self, entity_id: str) -> None:
        self._record(kind="entity_removed", entity_id=entity_id)

    def notify_scene_transition(self, kind: str, payload: dict[str, Any]) -> None:
        self._record(kind="scene_transition", transition=kind, payload=payload)

    def drain(self) -> list[SceneNotification]:
        """Return and clear the buffered notifications."""
        drained, self.notifications = self.notifications, []
        return drained


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def in_bounds(position: tuple[int, int], width: int, height: int) -> bool:
    """Check if a point lies inside the scene."""
    x, y = position
    return 0 <= x < width and 0 <= y < height


def intersects(
    pos1: tuple[int, int],
    hitbox1: tuple[int, int],
    pos2: tuple[int, int],
    hitbox2: tuple[int, int],
) -> bool:
    """Check if two centred axis-aligned hitboxes overlap.

    Args:
        pos1: Centre (x, y) of the first entity.
        hitbox1: (width, height) of the first entity.
        pos2: Centre (x, y) of the second entity.
        hitbox2: (width, height) of the second entity.

    Returns:
        True if the boxes overlap, including identical positions.
    """
    dx = abs(pos1[0] - pos2[0])
    dy = abs(pos1[1] - pos2[1])
    return dx * 2 < hitbox1[0] + hitbox2[0] and dy * 2 < hitbox1[1] + hitbox2[1]


def step_toward(
    position: tuple[int, int],
    target: tuple[int, int],
    speed: int,
) -> tuple[int, int]:
    """Move up to `speed` pixels along each axis toward a target.

    Returns:
        The new position. Never overshoots the target.
    """
    x, y = position
    tx, ty = target
    if x != tx:
        x += max(-speed, min(speed, tx - x))
    if y != ty:
        y += max(-speed, min(speed, ty - y))
    return (x, y)


def reentry_position(width: int, height: int) -> tuple[int, int]:
    """Where a battle winner rejoins the scene: the centre."""
    return (width // 2, height // 2)
