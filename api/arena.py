"""Tick, arena state, event log and battle history endpoints."""

from fastapi import APIRouter, HTTPException, Query, Request

import config
from engine.arena import save_arena, tick
from models.arena import ArenaState, TickReport

router = APIRouter()


def _get_arena(request: Request) -> ArenaState:
    """Get the singleton arena from app state."""
    return request.app.state.arena


@router.post("/tick", response_model=list[TickReport])
def advance(
    request: Request,
    count: int = Query(1, ge=1, le=1000),
) -> list[TickReport]:
    """Advance the arena by one or more ticks.

    Returns one report per tick, including any battle fought.
    """
    arena = _get_arena(request)
    reports = []
    try:
        for _ in range(count):
            reports.append(tick(arena, request.app.state.rng, request.app.state.listener))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    finally:
        save_arena(arena, config.SAVE_FILE)
    return reports


@router.get("/state")
def get_arena_state(request: Request) -> dict:
    """Arena metadata and where everyone is."""
    arena = _get_arena(request)
    pair = arena.active_pair
    return {
        "name": arena.name,
        "width": arena.width,
        "height": arena.height,
        "status": arena.status.value,
        "tick": arena.tick,
        "roster_size": len(arena.roster),
        "positions": {cid: entry.position for cid, entry in arena.roster.items()},
        "active_pair": [pair.first.id, pair.second.id] if pair else None,
        "battles_fought": len(arena.battle_history),
    }


@router.get("/log")
def get_arena_log(request: Request) -> list[dict]:
    """The arena event log."""
    arena = _get_arena(request)
    return [event.model_dump(mode="json") for event in arena.event_log]


@router.get("/battles")
def get_battles(request: Request) -> list[dict]:
    """Archived battle results, oldest first."""
    arena = _get_arena(request)
    return [result.model_dump(mode="json") for result in arena.battle_history]
