"""Combatant registration, roster and per-combatant endpoints."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import config
from engine.arena import register_combatant, save_arena, set_roam_target
from engine.moveset import select_item, select_move
from engine.species import SPECIES, species_config
from engine.stats import remaining_exp
from engine.status import status_text
from models.arena import ArenaState
from models.combatant import CombatantConfig

router = APIRouter()


class RegisterCombatantRequest(BaseModel):
    """Request body for entering a combatant into the arena.

    Give either a catalogue species or a custom config.
    """
    species: str | None = None
    custom: CombatantConfig | None = None
    exp: int = 0                              # Starting experience for species entries
    position: tuple[int, int] | None = None   # Defaults to the next spawn point
    target: tuple[int, int] | None = None


class RegisterCombatantResponse(BaseModel):
    """Response after entering a combatant."""
    combatant_id: str
    message: str


class TargetRequest(BaseModel):
    """Request body for setting a roam target."""
    x: int
    y: int


class SelectRequest(BaseModel):
    """Request body for choosing next turn's move and/or item."""
    move: str | None = None
    item: str | None = None


def _get_arena(request: Request) -> ArenaState:
    """Get the singleton arena from app state."""
    return request.app.state.arena


def _spawn_point(arena: ArenaState) -> tuple[int, int]:
    """Cycle through spawn points near the corners and edges."""
    margin = config.HITBOX_SIZE * 2
    w, h = arena.width, arena.height
    positions = [
        (margin, margin),
        (w - margin, h - margin),
        (w - margin, margin),
        (margin, h - margin),
        (w // 2, margin),
        (w // 2, h - margin),
    ]
    return positions[(arena.next_id - 1) % len(positions)]


@router.post("/combatants", response_model=RegisterCombatantResponse)
def enter_combatant(body: RegisterCombatantRequest, request: Request) -> RegisterCombatantResponse:
    """Construct a combatant and place it in the roam pool.

    Rejected configs return 400 with the failure kind and message.
    """
    arena = _get_arena(request)

    try:
        if body.custom is not None:
            combatant_config = body.custom
        elif body.species is not None:
            combatant_config = species_config(body.species, exp=body.exp)
        else:
            raise HTTPException(status_code=400, detail="Provide either species or custom")

        position = body.position or _spawn_point(arena)
        entry, failure = register_combatant(arena, combatant_config, position, request.app.state.listener)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if failure is not None:
        save_arena(arena, config.SAVE_FILE)
        raise HTTPException(
            status_code=400,
            detail={"kind": failure.kind.value, "message": failure.message},
        )

    if body.target is not None:
        set_roam_target(arena, entry.combatant.id, body.target)

    save_arena(arena, config.SAVE_FILE)
    return RegisterCombatantResponse(
        combatant_id=entry.combatant.id,
        message=f"{entry.combatant.name} has entered the arena.",
    )


@router.get("/roster")
def get_roster(request: Request) -> list[dict]:
    """Summaries of every roaming combatant, in roster order."""
    arena = _get_arena(request)
    return [
        {
            "id": entry.combatant.id,
            "name": entry.combatant.name,
            "species": entry.combatant.species,
            "type": entry.combatant.type.value,
            "level": entry.combatant.stats.level,
            "current_hp": entry.combatant.stats.current_hp,
            "max_hp": entry.combatant.stats.hp,
            "status": entry.combatant.status.value,
            "wins": entry.combatant.wins,
            "position": entry.position,
            "target": entry.target,
        }
        for entry in arena.roster.values()
    ]


@router.get("/species")
def list_species() -> list[dict]:
    """The species catalogue."""
    return [info.model_dump(mode="json") for info in SPECIES.values()]


@router.get("/combatants/{combatant_id}")
def get_combatant(combatant_id: str, request: Request) -> dict:
    """Full detail of a roaming combatant."""
    arena = _get_arena(request)
    entry = arena.roster.get(combatant_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Combatant '{combatant_id}' not found")
    return {
        **entry.model_dump(mode="json"),
        "status_text": status_text(entry.combatant),
        "remaining_exp": remaining_exp(entry.combatant),
    }


@router.post("/combatants/{combatant_id}/target")
def set_target(combatant_id: str, body: TargetRequest, request: Request) -> dict:
    """Send a roaming combatant toward a point."""
    arena = _get_arena(request)
    try:
        entry = set_roam_target(arena, combatant_id, (body.x, body.y))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    save_arena(arena, config.SAVE_FILE)
    return {"combatant_id": combatant_id, "position": entry.position, "target": entry.target}


@router.post("/combatants/{combatant_id}/select")
def select_action(combatant_id: str, body: SelectRequest, request: Request) -> dict:
    """Choose the move and/or item a combatant uses in its next battle."""
    arena = _get_arena(request)
    entry = arena.roster.get(combatant_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Combatant '{combatant_id}' not found")
    combatant = entry.combatant

    if body.move is not None and not select_move(combatant, body.move):
        raise HTTPException(status_code=400, detail=f"{combatant.name} does not know {body.move}")
    if body.item is not None and not select_item(combatant, body.item):
        raise HTTPException(status_code=400, detail=f"{combatant.name} has no {body.item}")

    save_arena(arena, config.SAVE_FILE)
    return {
        "combatant_id": combatant_id,
        "current_move": combatant.current_move,
        "current_item": combatant.current_item,
    }
