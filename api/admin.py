"""Admin endpoints: inspections, arena reset and secret management."""

from fastapi import APIRouter, HTTPException, Header, Request
from pydantic import BaseModel

import config
from config import save_secret
from engine.arena import create_arena, inspect_roster, remove_combatant, save_arena
from models.arena import InspectionReport

router = APIRouter()


class ChangeSecretRequest(BaseModel):
    """Request body for changing the admin secret."""
    new_secret: str


class ChangeSecretResponse(BaseModel):
    """Response after changing the admin secret."""
    message: str


class InspectionResponse(BaseModel):
    """Response after an inspection sweep."""
    inspected: int
    disqualified: list[str]
    reports: list[InspectionReport]


def _check_secret(x_admin_secret: str) -> None:
    if x_admin_secret != config.ADMIN_SECRET:
        raise HTTPException(status_code=403, detail="Invalid admin secret")


@router.put("/secret", response_model=ChangeSecretResponse)
def change_admin_secret(
    body: ChangeSecretRequest,
    x_admin_secret: str = Header(..., alias="X-Admin-Secret"),
) -> ChangeSecretResponse:
    """Change the admin secret at runtime.

    Requires the current X-Admin-Secret header. The new secret takes
    effect immediately.
    """
    _check_secret(x_admin_secret)

    if not body.new_secret or len(body.new_secret) < 8:
        raise HTTPException(
            status_code=400,
            detail="New secret must be at least 8 characters",
        )

    config.ADMIN_SECRET = body.new_secret
    save_secret()
    return ChangeSecretResponse(message="Admin secret updated")


@router.post("/inspect", response_model=InspectionResponse)
def inspect_arena(
    request: Request,
    x_admin_secret: str = Header(..., alias="X-Admin-Secret"),
) -> InspectionResponse:
    """Send Officer Jenny through the roster.

    Every roaming combatant is inspected and violators are disqualified.
    Requires the X-Admin-Secret header.
    """
    _check_secret(x_admin_secret)

    arena = request.app.state.arena
    reports = inspect_roster(arena, request.app.state.listener)
    save_arena(arena, config.SAVE_FILE)
    return InspectionResponse(
        inspected=len(reports),
        disqualified=[r.combatant_id for r in reports if not r.passed],
        reports=reports,
    )


@router.delete("/combatants/{combatant_id}")
def remove_from_arena(
    combatant_id: str,
    request: Request,
    x_admin_secret: str = Header(..., alias="X-Admin-Secret"),
) -> dict:
    """Remove a combatant from the roster.

    Requires the X-Admin-Secret header.
    """
    _check_secret(x_admin_secret)

    arena = request.app.state.arena
    try:
        combatant = remove_combatant(arena, combatant_id, "removed", request.app.state.listener)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    save_arena(arena, config.SAVE_FILE)
    return {"message": f"{combatant.name} was removed from the arena"}


@router.post("/reset")
def reset_arena(
    request: Request,
    x_admin_secret: str = Header(..., alias="X-Admin-Secret"),
) -> dict:
    """Discard the arena and start an empty one.

    Requires the X-Admin-Secret header.
    """
    _check_secret(x_admin_secret)

    old = request.app.state.arena
    request.app.state.arena = create_arena(old.width, old.height, old.name)
    save_arena(request.app.state.arena, config.SAVE_FILE)
    return {"message": "Arena reset", "removed": len(old.roster)}
