"""
hypersim/fenwick.py - Weighted Sampling Index

Fenwick (binary indexed) tree over vertex weights. Point updates and range
sums run in O(log n); weighted sampling binary-searches the implicit prefix
sums in O(log^2 n).
"""

from typing import List

import numpy as np


class Fenwick:
    """
    Fixed-capacity Fenwick tree of integer weights.

    items[k] holds the sum of weights over [k & (k + 1), k], so a prefix sum
    over [0, j) is items[j - 1] + prefix(j & (j - 1)).
    """

    __slots__ = ("_items", "_total")

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {capacity}")
        self._items: List[int] = [0] * capacity
        self._total = 0

    @classmethod
    def of_size(cls, capacity: int) -> "Fenwick":
        """Construct an index of the given capacity with every weight zero."""
        return cls(capacity)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Fenwick(capacity={len(self._items)}, total={self._total})"

    @property
    def total(self) -> int:
        """Current sum of all weights."""
        return self._total

    def _check_index(self, i: int) -> None:
        if not 0 <= i < len(self._items):
            raise IndexError(f"Index {i} out of range [0, {len(self._items)})")

    def sum(self, i: int, j: int) -> int:
        """
        Partial sum of weights over the half-open range [i, j).

        Args:
            i: First index (inclusive)
            j: Last index (exclusive)

        Returns:
            int: Sum of weights in [i, j)
        """
        if not 0 <= i <= j <= len(self._items):
            raise IndexError(f"Range [{i}, {j}) out of bounds for capacity {len(self._items)}")

        items = self._items
        s = 0
        # Walk both ends down until they meet at their common prefix.
        while j > i:
            s += items[j - 1]
            j &= j - 1
        while i > j:
            s -= items[i - 1]
            i &= i - 1
        return s

    def get(self, i: int) -> int:
        """Weight at index i."""
        self._check_index(i)
        return self.sum(i, i + 1)

    def set(self, i: int, x: int) -> None:
        """Set the weight at index i to x."""
        self.add(i, x - self.get(i))

    def add(self, i: int, delta: int) -> None:
        """Add delta to the weight at index i."""
        self._check_index(i)
        items = self._items
        n = len(items)
        while i < n:
            items[i] += delta
            i |= i + 1
        self._total += delta

    def weights(self) -> np.ndarray:
        """Current weights as an int64 array (O(n log n))."""
        return np.array([self.get(i) for i in range(len(self._items))], dtype=np.int64)

    def sample_one(self, rng) -> int:
        """
        Draw one index with probability proportional to its weight.

        Draws x uniformly from [1, total] and binary-searches the smallest i
        with sum(0, i + 1) >= x.

        Args:
            rng: Source exposing integers(low, high, endpoint=True)

        Returns:
            int: Sampled index
        """
        if self._total <= 0:
            raise ValueError("Cannot sample from an index with non-positive total weight")

        x = int(rng.integers(1, self._total, endpoint=True))

        acc = 0
        lo = 0
        hi = len(self._items) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            s = self.sum(lo, mid + 1)
            if acc + s < x:
                lo = mid + 1
                acc += s
            else:
                hi = mid
        return hi

    def sample_many(self, m: int, rng) -> List[int]:
        """Draw m indices independently, with replacement."""
        return [self.sample_one(rng) for _ in range(m)]
