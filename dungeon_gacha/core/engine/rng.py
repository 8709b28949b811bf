"""Seeded random source for deterministic battles and expeditions.

Every random decision in the engine goes through a SeededRNG instance handed
in by the caller. Two instances built from the same seed produce the same
sequence of draws, which is what makes battle logs replayable.
"""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class SeededRNG:
    """Thin wrapper around ``random.Random`` with game-flavored helpers."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._random.random()

    def chance(self, probability: float) -> bool:
        """Bernoulli roll. Always consumes exactly one draw."""
        return self._random.random() < probability

    def uniform(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[self._random.randrange(len(items))]

    def shuffle(self, items: list[T]) -> None:
        """Shuffle a list in place."""
        self._random.shuffle(items)

    def sample(self, items: Sequence[T], count: int) -> list[T]:
        """Draw up to ``count`` distinct items without replacement."""
        count = max(0, min(count, len(items)))
        return self._random.sample(list(items), count)
