"""
Seeded RNG - the deterministic generator behind QCM option sets.

A plain linear congruential generator so the exact sequence can be
reproduced in any language. Do not swap in ``random.Random``: option lists
are part of grading fixtures and must stay byte-identical.

    seed' = (seed * 9301 + 49297) mod 233280
    value = seed' / 233280
"""

from typing import List, Sequence, Tuple, TypeVar
import math

T = TypeVar("T")

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def lcg_next(seed: int) -> Tuple[float, int]:
    """Advance the generator one step: ``seed -> (value in [0, 1), next seed)``."""
    next_seed = (int(seed) * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
    return next_seed / LCG_MODULUS, next_seed


class SeededRng:
    """Stateful wrapper around ``lcg_next``.

    Usage:
        rng = SeededRng(7)
        rng.random()        # 0.4904... (114404 / 233280)
        rng.index(5)        # floor(value * 5)
    """

    def __init__(self, seed: int):
        self.state = int(seed)

    def random(self) -> float:
        value, self.state = lcg_next(self.state)
        return value

    def index(self, size: int) -> int:
        """Uniform index in ``range(size)``."""
        return int(math.floor(self.random() * size))

    def choice(self, items: Sequence[T]) -> T:
        return items[self.index(len(items))]


def seeded_shuffle(items: Sequence[T], seed: int) -> List[T]:
    """Fisher-Yates shuffle driven by a fresh generator seeded with ``seed``."""
    rng = SeededRng(seed)
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.index(i + 1)
        result[i], result[j] = result[j], result[i]
    return result
