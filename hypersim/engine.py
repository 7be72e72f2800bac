"""
hypersim/engine.py - Growth Engine

Event-driven growth loop: GrowthEngine owns one weighted index and one
hypergraph, applies one event per step and keeps the running moments of the
active degrees used for theta.
"""

import logging
from enum import Enum

from receipts import emit_receipt, merkle

from .constants import INITIAL_VERTEX_COUNT, TENANT_ID
from .errors import ExhaustionError, HypergraphError, ValidationError
from .fenwick import Fenwick
from .types_model import Model
from .types_result import Simulation
from .types_state import Hypergraph

logger = logging.getLogger(__name__)


class Event(Enum):
    """Event applied at one step."""
    VERTEX_ARRIVAL = "vertex_arrival"
    EDGE_ARRIVAL = "edge_arrival"
    VERTEX_DEACTIVATION = "vertex_deactivation"


def choose_event(p: float, model: Model) -> Event:
    """Map a uniform draw in [0, 1) onto [0, pv), [pv, pv + pe), [pv + pe, 1)."""
    if p < model.pv:
        return Event.VERTEX_ARRIVAL
    if p < model.pv + model.pe:
        return Event.EDGE_ARRIVAL
    return Event.VERTEX_DEACTIVATION


class GrowthEngine:
    """
    One run of the growth process.

    Activity is encoded by the index weight alone: an active vertex weighs
    its degree, a deactivated vertex weighs 0 and keeps its degree in the
    hypergraph. The running moments are only touched by the _apply_* methods.
    """

    def __init__(self, model: Model, steps: int, rng):
        """
        Args:
            model: Validated model
            steps: Number of steps to perform
            rng: Random source exposing random() and integers(low, high, endpoint=True)
        """
        if steps < 0:
            raise ValidationError(f"Expected `steps` to be non-negative, got {steps}")

        self.model = model
        self.steps = steps
        self._rng = rng

        self.hypergraph = Hypergraph.initial()
        # At most one new vertex per step
        self.index = Fenwick.of_size(INITIAL_VERTEX_COUNT + steps)

        self._active_degree_total = 0
        self._active_degree_square = 0
        for v, d in enumerate(self.hypergraph.degree):
            self.index.set(v, d)
            self._active_degree_total += d
            self._active_degree_square += d * d

        self._theta = [self._current_theta()]
        self.event_counts = {event.value: 0 for event in Event}
        self._finished = False

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def active_degree_total(self) -> int:
        return self._active_degree_total

    @property
    def active_degree_square(self) -> int:
        return self._active_degree_square

    @property
    def theta(self) -> list:
        return list(self._theta)

    def _current_theta(self) -> float:
        return self._active_degree_square / self._active_degree_total

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def _attach(self, edge: list) -> None:
        previous = self.hypergraph.add_edge(edge)
        for v, d in zip(edge, previous):
            self.index.add(v, 1)
            self._active_degree_total += 1
            # (d + 1)^2 - d^2
            self._active_degree_square += 2 * d + 1

    def _edge_size(self, t: int) -> int:
        size = self.model.size(t)
        if size < 1:
            raise ValidationError(f"Expected hyperedge size at step {t} to be at least 1, got {size}")
        return size

    def _apply_vertex_arrival(self, t: int) -> None:
        size = self._edge_size(t)
        v = self.hypergraph.add_vertex()
        edge = self.index.sample_many(size - 1, self._rng)
        edge.append(v)
        self._attach(edge)

    def _apply_edge_arrival(self, t: int) -> None:
        edge = self.index.sample_many(self._edge_size(t), self._rng)
        self._attach(edge)

    def _apply_vertex_deactivation(self, t: int) -> None:
        v = self.index.sample_one(self._rng)
        d = self.hypergraph.degree[v]
        self.index.set(v, 0)
        self._active_degree_total -= d
        self._active_degree_square -= d * d

    def _check_not_finished(self) -> None:
        # The returned Simulation shares this hypergraph
        if self._finished:
            raise HypergraphError("Engine already finished, start a new GrowthEngine")

    def step(self, t: int) -> Event:
        """
        Perform step t (1-based) and record theta for the resulting state.

        Raises:
            ExhaustionError: If no vertex is active before the step
            ValidationError: If the size strategy yields a size below 1
            HypergraphError: If run() already returned a result
        """
        self._check_not_finished()
        if self._active_degree_total == 0:
            raise ExhaustionError(step=t)

        event = choose_event(float(self._rng.random()), self.model)
        if event is Event.VERTEX_ARRIVAL:
            self._apply_vertex_arrival(t)
        elif event is Event.EDGE_ARRIVAL:
            self._apply_edge_arrival(t)
        else:
            self._apply_vertex_deactivation(t)
        self.event_counts[event.value] += 1

        if self._active_degree_total > 0:
            self._theta.append(self._current_theta())
        return event

    def run(self) -> Simulation:
        """
        Perform all steps.

        Returns:
            Simulation with theta of length steps + 1

        Raises:
            ExhaustionError: If every vertex gets deactivated, including on the last step
            HypergraphError: If run() already returned a result
        """
        self._check_not_finished()
        for t in range(1, self.steps + 1):
            self.step(t)
        if self._active_degree_total == 0:
            raise ExhaustionError(step=self.steps)

        statistics = {
            **self.event_counts,
            "edge_count": self.hypergraph.edge_count,
            "active_degree_total": self._active_degree_total,
            "active_degree_square": self._active_degree_square,
        }
        receipt = emit_receipt("sim_run", {
            "tenant_id": TENANT_ID,
            "steps": self.steps,
            "vertex_count": self.hypergraph.vertex_count,
            "edge_count": self.hypergraph.edge_count,
            "final_theta": self._theta[-1],
            "edges_root": merkle(self.hypergraph.edges),
        })
        self._finished = True
        logger.debug(
            "Run finished: %d vertices, %d edges, theta=%.4f",
            self.hypergraph.vertex_count, self.hypergraph.edge_count, self._theta[-1],
        )
        return Simulation(
            model=self.model,
            hypergraph=self.hypergraph,
            steps=self.steps,
            theta=list(self._theta),
            statistics=statistics,
            receipt=receipt,
        )


def run_simulation(model: Model, steps: int, rng) -> Simulation:
    """
    Run one simulation of the model.

    Args:
        model: Validated model
        steps: Number of steps to perform
        rng: Random source owned by this run

    Returns:
        Simulation result

    Raises:
        ExhaustionError: If all vertices get deactivated
    """
    return GrowthEngine(model, steps, rng).run()
