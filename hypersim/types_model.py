"""
hypersim/types_model.py - Model Dataclass and Hyperedge Size Strategies

The random preferential attachment hypergraph model with vertex deactivation,
H(H_0, pv, pe, pd, Y). Given H_{t-1}, build H_t as follows:
  - wp pv, add a vertex and a preferentially selected hyperedge of size Y_t,
  - wp pe, add a preferentially selected hyperedge of size Y_t,
  - wp pd, deactivate a preferentially selected vertex.

Preferential selection picks an active vertex with probability proportional
to its degree. The resulting degree distribution follows a power law with an
exponential cutoff.
"""

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .constants import PROBABILITY_TOLERANCE
from .errors import ValidationError


# =============================================================================
# HYPEREDGE SIZE STRATEGIES
# =============================================================================

class SizeDistribution:
    """Maps a step index to the size of the hyperedge created at that step."""

    def size(self, step: int) -> int:
        raise NotImplementedError

    def __call__(self, step: int) -> int:
        return self.size(step)


@dataclass(frozen=True)
class ConstantSize(SizeDistribution):
    """Every hyperedge has the same size m."""
    m: int

    def size(self, step: int) -> int:
        return self.m


# =============================================================================
# MODEL
# =============================================================================

@dataclass(frozen=True)
class Model:
    """Validated model parameters (immutable)."""
    pv: float  # vertex arrival
    pe: float  # edge arrival
    pd: float  # vertex deactivation
    m: int     # hyperedge size
    size_distribution: Optional[SizeDistribution] = field(default=None, repr=False)

    def __post_init__(self):
        validate_parameters(self.pv, self.pe, self.pd, self.m)
        if self.size_distribution is None:
            object.__setattr__(self, "size_distribution", ConstantSize(self.m))

    @classmethod
    def new(cls, pv: float, pe: float, pd: float, m: int) -> "Model":
        """
        Create a model, ensuring that the parameters are consistent.

        Raises:
            ValidationError: On any violated constraint
        """
        return cls(pv=pv, pe=pe, pd=pd, m=m)

    def size(self, step: int) -> int:
        """Size of the hyperedge created at the given step."""
        return self.size_distribution.size(step)

    def parameters(self) -> Dict[str, Any]:
        return {"pv": self.pv, "pe": self.pe, "pd": self.pd, "m": self.m}


def validate_parameters(pv: float, pe: float, pd: float, m: int) -> None:
    """
    Check the model constraints.

    Args:
        pv: Probability of the vertex arrival event
        pe: Probability of the edge arrival event
        pd: Probability of the vertex deactivation event
        m: Hyperedge size

    Raises:
        ValidationError: Describing the first violated constraint
    """
    for name, p in (("pv", pv), ("pe", pe), ("pd", pd)):
        if not isinstance(p, numbers.Real) or isinstance(p, bool) or not math.isfinite(p):
            raise ValidationError(f"Expected `{name}` to be a finite number, got {p!r}")
    if pv < 0.0 or pe < 0.0 or pd < 0.0:
        raise ValidationError("Expected `pv`, `pe` and `pd` to be non-negative")
    if not abs(pv + pe + pd - 1.0) < PROBABILITY_TOLERANCE:
        raise ValidationError("Expected `pv`, `pe` and `pd` to sum up to 1")
    if pv <= pd:
        raise ValidationError("Expected `pv > pd` to hold")
    if not isinstance(m, numbers.Integral) or isinstance(m, bool):
        raise ValidationError(f"Expected `m` to be an integer, got {m!r}")
    if m < 1:
        raise ValidationError("Expected `m` to be a positive integer")
