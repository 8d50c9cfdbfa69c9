"""FastAPI app entry point for PokeArena Server."""

import logging

from fastapi import FastAPI

import config
from api.admin import router as admin_router
from api.arena import router as arena_router
from api.roster import router as roster_router
from api.ws import router as ws_router
from engine.arena import create_arena, load_arena, recover_interrupted_battle, save_arena
from engine.rng import make_rng
from engine.scene import RecordingSceneListener
from models.arena import ArenaStatus

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="PokeArena Server",
    description="A creature-battle arena: roaming combatants collide and battle it out",
    version="0.1.0",
)

config.load_secret()

# Load or create the singleton arena
loaded = load_arena(config.SAVE_FILE)
if loaded is not None:
    app.state.arena = loaded
    # If the server stopped mid-battle, return the pair to the roster
    if loaded.status == ArenaStatus.BATTLE_TRANSITION:
        recover_interrupted_battle(loaded)
        save_arena(loaded, config.SAVE_FILE)
else:
    app.state.arena = create_arena()

app.state.rng = make_rng(config.ARENA_SEED)
app.state.listener = RecordingSceneListener()

app.include_router(roster_router, prefix="/arena", tags=["Roster"])
app.include_router(arena_router, prefix="/arena", tags=["Arena"])
app.include_router(ws_router, prefix="/arena", tags=["WebSocket"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])


@app.get("/")
def root() -> dict:
    """Root endpoint returning server info."""
    return {"name": "PokeArena Server", "version": "0.1.0", "status": "running"}


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"healthy": True}
