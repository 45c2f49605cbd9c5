from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol


class Dice(Protocol):
    def roll(self, rng: random.Random) -> int: ...


@dataclass(frozen=True)
class SixSidedDie:
    faces: int = 6

    def roll(self, rng: random.Random) -> int:
        return rng.randint(1, self.faces)
