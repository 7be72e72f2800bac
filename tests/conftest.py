"""
tests/conftest.py - Shared Fixtures

Rigged random sources that force specific events and draws.
"""

import numpy as np
import pytest


class RiggedRandom:
    """
    Random source with scripted draws.

    random() returns the scripted floats in order (cycling if cycle=True,
    otherwise repeating the last one). integers() returns the scripted
    ints in order, then delegates to `fallback`, or returns `low` when
    there is no fallback.
    """

    def __init__(self, floats, ints=None, cycle=False, fallback=None):
        self.floats = list(floats)
        self.ints = list(ints or [])
        self.cycle = cycle
        self.fallback = fallback
        self.float_calls = 0
        self.int_calls = 0

    def random(self):
        i = self.float_calls
        self.float_calls += 1
        if self.cycle:
            return self.floats[i % len(self.floats)]
        return self.floats[min(i, len(self.floats) - 1)]

    def integers(self, low, high, endpoint=False):
        self.int_calls += 1
        if self.ints:
            return self.ints.pop(0)
        if self.fallback is not None:
            return self.fallback.integers(low, high, endpoint=endpoint)
        return low


@pytest.fixture
def rigged():
    """Factory for RiggedRandom instances."""
    return RiggedRandom


@pytest.fixture
def rng():
    """Deterministic numpy generator."""
    return np.random.default_rng(20240611)
