import random
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    """
    Difficulty rungs, ordered easy < medium < hard.
    """
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


LADDER = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]


def parse_difficulty(value) -> Optional[Difficulty]:
    """Return the rung for value, or None when value is not a known rung."""
    try:
        return Difficulty(value)
    except ValueError:
        return None


def increase(difficulty: Difficulty) -> Difficulty:
    """Next rung up, saturating at HARD."""
    idx = LADDER.index(Difficulty(difficulty))
    return LADDER[min(idx + 1, len(LADDER) - 1)]


def decrease(difficulty: Difficulty) -> Difficulty:
    """Next rung down, saturating at EASY."""
    idx = LADDER.index(Difficulty(difficulty))
    return LADDER[max(idx - 1, 0)]


def alternate(difficulty: Difficulty, rng: random.Random) -> Difficulty:
    """One of the two other rungs, chosen uniformly."""
    current = Difficulty(difficulty)
    others = [d for d in LADDER if d != current]
    return rng.choice(others)


def random_difficulty(rng: random.Random) -> Difficulty:
    return rng.choice(LADDER)
