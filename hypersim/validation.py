"""
hypersim/validation.py - Conservation and Consistency Checks

Post-run checks on a generated hypergraph. Each returns violation dicts
instead of raising so callers can report all of them at once.
"""

from typing import List

from .types_model import ConstantSize
from .types_result import Simulation
from .types_state import Hypergraph


def validate_conservation(hypergraph: Hypergraph) -> bool:
    """
    Handshake identity: total degree equals total hyperedge size.

    Args:
        hypergraph: Hypergraph to check

    Returns:
        bool: True if sum(degree) == sum(len(e) for e in edges)
    """
    return sum(hypergraph.degree) == sum(len(e) for e in hypergraph.edges)


def validate_result(sim: Simulation) -> List[dict]:
    """
    Check a simulation result for internal consistency.

    Args:
        sim: Simulation to check

    Returns:
        List of violation dicts (empty if consistent)
    """
    violations = []
    graph = sim.hypergraph

    if not validate_conservation(graph):
        violations.append({
            "type": "conservation_violation",
            "degree_total": sum(graph.degree),
            "incidence_total": sum(len(e) for e in graph.edges),
        })

    if len(graph.degree) != graph.vertex_count:
        violations.append({
            "type": "degree_length",
            "expected": graph.vertex_count,
            "actual": len(graph.degree),
        })

    if len(sim.theta) != sim.steps + 1:
        violations.append({
            "type": "theta_length",
            "expected": sim.steps + 1,
            "actual": len(sim.theta),
        })

    constant_size = isinstance(sim.model.size_distribution, ConstantSize)
    for i, edge in enumerate(graph.edges):
        # The initial edge is the only one not drawn from the size strategy
        if constant_size and i > 0 and len(edge) != sim.model.m:
            violations.append({"type": "edge_size", "edge": i, "size": len(edge)})
        if any(not 0 <= v < graph.vertex_count for v in edge):
            violations.append({"type": "vertex_out_of_range", "edge": i})

    return violations
