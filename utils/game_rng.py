"""Seedable random source used by every map generation step.

Each generation run owns one :class:`GameRNG`; helpers never consult the
module-level :mod:`random` state, so a map can be replayed from its seed and
tests can inject a stub that forces every probabilistic branch one way.
"""

from __future__ import annotations

import random
from typing import Any, List, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class GameRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)

    # ------------------------------------------------------------------
    # draws
    # ------------------------------------------------------------------
    def get_int(self, a: int, b: int) -> int:
        """Uniform integer in the inclusive range ``[a, b]``."""
        if a > b:
            raise ValueError("a <= b")
        return int(self.rng.integers(a, b + 1))

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        if a > b:
            raise ValueError("a <= b")
        val = float(self.rng.random())
        return a + (b - a) * val

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        if not 0.0 <= probability <= 1.0:
            raise ValueError("probability out of range")
        return self.get_float() < probability

    def coin_flip(self, heads_probability: float = 0.5) -> str:
        return "heads" if self.chance(heads_probability) else "tails"

    def subtile(self) -> tuple[int, int]:
        """Random (tile_x, tile_y) pair selecting one cell of a 4x4 sprite sheet."""
        return self.get_int(0, 3), self.get_int(0, 3)

    # ------------------------------------------------------------------
    # sequence utilities
    # ------------------------------------------------------------------
    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("items empty")
        return items[self.get_int(0, len(items) - 1)]

    def shuffle(self, seq: List[Any]) -> None:
        self.rng.shuffle(seq)

    def sample(self, items: Sequence[T], k: int) -> List[T]:
        """``k`` distinct items, in random order."""
        if k < 0:
            raise ValueError("k >= 0")
        if k > len(items):
            raise ValueError("k <= len(items) without replacement")
        if k == 0:
            return []
        # Index sampling keeps tuple items intact (numpy would stack them).
        idx = self.rng.choice(len(items), size=k, replace=False)
        return [items[int(i)] for i in idx]


__all__ = ["GameRNG"]
