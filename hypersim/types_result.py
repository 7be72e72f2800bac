"""
hypersim/types_result.py - Simulation Dataclass

Immutable result of one successful generation.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .types_model import Model
from .types_state import Hypergraph


@dataclass(frozen=True)
class Simulation:
    """Immutable simulation result."""
    model: Model
    hypergraph: Hypergraph
    steps: int
    theta: List[float]  # size-biased mean active degree, len == steps + 1
    statistics: Dict[str, Any] = field(default_factory=dict)
    attempts: int = 1
    receipt: Dict[str, Any] = field(default_factory=dict, compare=False)
