import random
from typing import Optional, Sequence

from wordbomb.constants import COMBINATIONS


class CombinationGenerator:
    """Picks the letter sequence the turn-holder's word must contain."""

    def __init__(self, pool: Optional[Sequence[str]] = None, rng=None):
        self.pool = list(pool if pool is not None else COMBINATIONS)
        if not self.pool:
            raise ValueError('combination pool is empty')
        self._rng = rng or random.Random()

    def generate(self) -> str:
        return self._rng.choice(self.pool)
