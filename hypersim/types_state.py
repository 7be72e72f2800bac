"""
hypersim/types_state.py - Hypergraph Dataclass

Mutable hypergraph grown by the engine. Vertices are never removed and
degrees never decrease; deactivation only affects sampling eligibility,
which the engine tracks in its weighted index.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from .constants import INITIAL_EDGES, INITIAL_VERTEX_COUNT


@dataclass
class Hypergraph:
    """
    Hypergraph as an edge list plus per-vertex degree.

    A hyperedge is a list of vertex ids and may repeat a vertex, in which
    case that vertex's degree counts every occurrence.
    """
    vertex_count: int = 0
    edges: List[List[int]] = field(default_factory=list)
    degree: List[int] = field(default_factory=list)

    @classmethod
    def initial(cls) -> "Hypergraph":
        """A single vertex with a single hyperedge of size 1."""
        graph = cls()
        for _ in range(INITIAL_VERTEX_COUNT):
            graph.add_vertex()
        for edge in INITIAL_EDGES:
            graph.add_edge(list(edge))
        return graph

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def add_vertex(self) -> int:
        """Add a vertex of degree 0 and return its id."""
        v = self.vertex_count
        self.vertex_count += 1
        self.degree.append(0)
        return v

    def add_edge(self, edge: Sequence[int]) -> List[int]:
        """
        Append a hyperedge and count every occurrence towards degree.

        Args:
            edge: Vertex ids, repetitions allowed

        Returns:
            List[int]: Degree of each occurrence just before it was counted,
                so a vertex repeated in the edge sees its own earlier increment
        """
        edge = list(edge)
        for v in edge:
            if not 0 <= v < self.vertex_count:
                raise IndexError(f"Vertex {v} does not exist (vertex_count={self.vertex_count})")
        previous = []
        for v in edge:
            previous.append(self.degree[v])
            self.degree[v] += 1
        self.edges.append(edge)
        return previous
