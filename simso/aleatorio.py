"""Random number device."""

from __future__ import annotations

import random

__all__ = ["RandomDevice", "RANDOM_MIN", "RANDOM_MAX"]

RANDOM_MIN = 0
RANDOM_MAX = 10


class RandomDevice:
    """An input device yielding integers in [RANDOM_MIN, RANDOM_MAX)."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def read(self, ident: int = 0) -> int:
        """Return a random integer; the ident is ignored."""
        return self._random.randrange(RANDOM_MIN, RANDOM_MAX)