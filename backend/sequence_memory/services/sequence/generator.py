import random
from typing import Optional, Tuple


class RandomSequenceGenerator:
    """Draws the digits a player has to memorize.

    Pass a seeded ``random.Random`` to make rounds reproducible; otherwise
    the process-wide ``random`` module is used.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random

    def generate(self, length: int, exclusive_max: int) -> Tuple[int, ...]:
        if length < 1:
            raise ValueError(f"Sequence length must be at least 1, got {length}")
        if exclusive_max < 1:
            raise ValueError(f"Number range must be at least 1, got {exclusive_max}")
        return tuple(self._rng.randrange(exclusive_max) for _ in range(length))
