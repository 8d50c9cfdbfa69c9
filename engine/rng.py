"""Seedable randomness for PokeArena Server.

Every probabilistic roll in the engine goes through a ``random.Random``
instance created here and passed down explicitly. Nothing in the engine
touches the module-level ``random`` functions.
"""

import random


def make_rng(seed: int | None = None) -> random.Random:
    """Create the generator an arena owns.

    Args:
        seed: Fixed seed for reproducible battles, or None for OS entropy.

    Returns:
        A fresh Random instance.
    """
    return random.Random(seed)


def roll_chance(probability: float, rng: random.Random) -> bool:
    """Return True with the given probability.

    Probabilities at or above 1 always succeed and at or below 0 always
    fail, but a roll is still consumed so the stream stays aligned.

    Args:
        probability: Chance of success, 0-1.
        rng: The arena's Random instance.

    Returns:
        Whether the roll succeeded.
    """
    value = rng.random()
    if probability >= 1.0:
        return True
    if probability <= 0.0:
        return False
    return value < probability

