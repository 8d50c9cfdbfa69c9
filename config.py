"""Server-wide configuration constants for PokeArena Server."""

import os

# Scene
ARENA_WIDTH = 970            # Scene width in pixels
ARENA_HEIGHT = 545           # Scene height in pixels
HITBOX_SIZE = 40             # Default square hitbox edge for a roaming entity
TRAVEL_SPEED = 3             # Pixels moved toward the roam target per tick
ARENA_NAME = "PokeArena"

# Combatant creation
STARTING_POINTS = 200            # Points available to a level 1 combatant
POINTS_GIVEN_ON_LEVEL_UP = 5
NEW_MOVE_COST = 5                # Points spent per learned move
MIN_ATTRIBUTE = 5                # Minimum base value of any stat at creation
MIN_NUMBER_OF_MOVES = 1
MAX_NUMBER_OF_MOVES = 4
CRITICAL_HIT_DIVISOR = 256       # Base crit ratio = (speed / 2) / 256

# Experience curve: leaving level L costs FIRST_LEVEL_UP_EXP * (1 + L(L-1)/2)
FIRST_LEVEL_UP_EXP = 10
MAX_LEVEL = 100

# Battle
CRITICAL_HIT_MULTIPLIER = 2.0
MAX_BATTLE_ROUNDS = 500
STRUGGLE_POWER = 50

# Status chances (0-1) and per-tick HP fractions
RECOVERY_CHANCE = {
    "freeze": 0.20,
    "sleep": 0.33,
    "paralysis": 0.25,
    "bound": 0.25,
    "confusion": 0.25,
}
PARALYSIS_SKIP_CHANCE = 0.25
CONFUSION_SELF_HIT_CHANCE = 0.33
CONFUSION_SELF_HIT_FRACTION = 1 / 8
BURN_TICK_FRACTION = 1 / 16
POISON_TICK_FRACTION = 1 / 8

# Deployment
DATA_DIR = os.environ.get("DATA_DIR", ".")  # Persistent data directory
SAVE_FILE = os.path.join(DATA_DIR, "arena_state.json")
ARENA_SEED = int(os.environ["ARENA_SEED"]) if os.environ.get("ARENA_SEED") else None
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "change-me-in-production")
SECRET_FILE = os.path.join(DATA_DIR, "admin_secret.txt")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
WS_FLUSH_INTERVAL = 0.5         # Seconds between scene notification flushes


def load_secret() -> None:
    """Load admin secret from persistent file, if it exists."""
    global ADMIN_SECRET
    if os.path.exists(SECRET_FILE):
        with open(SECRET_FILE) as f:
            stored = f.read().strip()
        if stored:
            ADMIN_SECRET = stored


def save_secret() -> None:
    """Persist current admin secret to file (atomic write)."""
    tmp_path = SECRET_FILE + ".tmp"
    with open(tmp_path, "w") as f:
        f.write(ADMIN_SECRET)
    os.replace(tmp_path, SECRET_FILE)
