"""
Weighted sampling over transition count distributions.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, TypeVar

import numpy as np

from .errors import GraphInvariantError

KeyT = TypeVar("KeyT")


class WeightedSampler:
    """
    Draw keys from a count distribution with probability proportional to their counts.

    The sampler draws an integer uniformly from ``[0, total)`` and locates it in the
    cumulative counts, so the selection is exactly proportional to the integer weights.
    Without an injected generator it seeds itself from system entropy, so separate runs
    produce different walks.

    :param rng: Optional NumPy random generator.
    :type rng: numpy.random.Generator or None
    """

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def seeded(cls, seed: int) -> "WeightedSampler":
        return cls(np.random.default_rng(seed))

    def sample(self, distribution: Mapping[KeyT, int]) -> KeyT:
        """
        Select one key of a distribution.

        :param distribution: Mapping of key to positive observation count.
        :type distribution: Mapping[KeyT, int]
        :return: Selected key.
        :rtype: KeyT
        :raises GraphInvariantError: If the distribution is empty or holds a non-positive count.
        """
        if not distribution:
            raise GraphInvariantError("Cannot sample from an empty distribution")
        keys: List[KeyT] = list(distribution.keys())
        counts = np.fromiter(distribution.values(), dtype=np.int64, count=len(keys))
        if (counts <= 0).any():
            raise GraphInvariantError(f"Distribution counts must be positive (got {counts.tolist()})")
        cumulative = np.cumsum(counts)
        draw = self._rng.integers(0, cumulative[-1])
        position = int(np.searchsorted(cumulative, draw, side="right"))
        return keys[position]
