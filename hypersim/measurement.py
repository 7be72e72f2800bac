"""
hypersim/measurement.py - Degree Statistics

Empirical degree distribution of a generated hypergraph and the theoretical
power law with exponential cutoff it is compared against.
"""

from collections import Counter
from typing import Callable, Dict, Sequence, Tuple

import numpy as np
from scipy.special import gamma

from .constants import THETA_TAIL_FRACTION
from .types_model import Model
from .types_state import Hypergraph


def degree_distribution(hypergraph: Hypergraph) -> Dict[int, float]:
    """
    Fraction of vertices (active or not) having each degree.

    Args:
        hypergraph: Hypergraph to measure

    Returns:
        dict: degree -> fraction of vertices, values sum to 1
    """
    if hypergraph.vertex_count == 0:
        return {}
    counts = Counter(hypergraph.degree)
    return {deg: n / hypergraph.vertex_count for deg, n in sorted(counts.items())}


def degree_distribution_arrays(hypergraph: Hypergraph) -> Tuple[np.ndarray, np.ndarray]:
    """Degrees >= 1 and their frequencies as arrays, ready for a log-log plot."""
    dist = degree_distribution(hypergraph)
    degrees = np.array([k for k in dist if k > 0], dtype=np.int64)
    freqs = np.array([dist[k] for k in degrees], dtype=np.float64)
    return degrees, freqs


def limiting_theta(theta: Sequence[float], tail_fraction: float = THETA_TAIL_FRACTION) -> float:
    """
    Estimate the limit of a theta trace as the mean of its tail.

    Args:
        theta: Theta trace of a run
        tail_fraction: Share of the trace to average, in (0, 1]

    Returns:
        float: Mean of the last ceil(len * tail_fraction) values
    """
    if not 0.0 < tail_fraction <= 1.0:
        raise ValueError(f"tail_fraction must be in (0, 1], got {tail_fraction}")
    if len(theta) == 0:
        raise ValueError("Empty theta trace")
    n = max(1, int(np.ceil(len(theta) * tail_fraction)))
    return float(np.mean(theta[-n:]))


def theoretical_degree_distribution(model: Model, theta: float) -> Callable[[np.ndarray], np.ndarray]:
    """
    Asymptotic degree distribution of the model for a given theta.

    f(k) = c/pv * g^k / k^(1/b) * (1/k + d) with
      g = (pv(m-1) + pe m) / (pv(m-1) + pe m + pd)
      d = pd / ((pv + pe) m - pd theta)
      b = ((pv + pe) m - pd theta) / (pv(m-1) + pe m + pd)
      c = pv / g * Gamma(1 + 1/b) / b

    Args:
        model: Model the hypergraph was generated with
        theta: Limiting size-biased mean active degree

    Returns:
        Vectorized callable k -> f(k) for k >= 1
    """
    pv, pe, pd = model.pv, model.pe, model.pd
    m = float(model.m)

    denominator = pv * (m - 1.0) + pe * m + pd
    drift = (pv + pe) * m - pd * theta
    if drift <= 0.0:
        raise ValueError(f"theta={theta} too large for the model: (pv + pe) m - pd theta <= 0")

    g = (pv * (m - 1.0) + pe * m) / denominator
    if g <= 0.0:
        raise ValueError("Degenerate model: no hyperedge ever attaches to an existing vertex")
    d = pd / drift
    b = drift / denominator
    c = pv / g * gamma(1.0 + 1.0 / b) / b

    def f(k):
        k = np.asarray(k, dtype=np.float64)
        return c / pv * np.power(g, k) / np.power(k, 1.0 / b) * (1.0 / k + d)

    return f
