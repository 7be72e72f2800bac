"""
tests/test_retry.py - Retry Driver and Ensemble Tests

Validates:
- Success on attempt k + 1 after k exhausted attempts within the budget
- RetriesExhaustedError once the budget is spent
- Fresh state on every attempt, shared random stream
- Reproducible ensembles, sequential and parallel
"""

import pickle

import numpy as np
import pytest

from hypersim.engine import run_simulation
from hypersim.errors import ExhaustionError, RetriesExhaustedError, ValidationError
from hypersim.retry import generate, generate_from_parameters, make_rng, run_ensemble
from hypersim.types_config import GenConfig
from hypersim.types_model import Model
from receipts import StopRule

# pd = 0 never exhausts
SAFE_MODEL = Model.new(0.5, 0.5, 0.0, 3)


class FlakyRunner:
    """Runner that exhausts on its first `failures` calls."""

    def __init__(self, failures):
        self.failures = failures
        self.calls = 0
        self.rngs = []

    def __call__(self, model, steps, rng):
        self.calls += 1
        self.rngs.append(rng)
        if self.calls <= self.failures:
            raise ExhaustionError(step=self.calls)
        return run_simulation(model, steps, rng)


class TestRetryContract:
    """Test generate() against rigged runners."""

    @pytest.mark.parametrize("k, retries", [(0, 1), (0, 5), (3, 5), (4, 5), (9, 10)])
    def test_succeeds_after_k_failures(self, rng, k, retries):
        """k < retries failures, success on attempt k + 1."""
        runner = FlakyRunner(k)
        sim = generate(SAFE_MODEL, 10, retries, rng, runner=runner)
        assert sim.attempts == k + 1
        assert sim.statistics["attempts"] == k + 1
        assert runner.calls == k + 1 <= retries

    @pytest.mark.parametrize("k, retries", [(1, 1), (5, 5), (8, 5)])
    def test_exhausts_budget(self, rng, k, retries):
        """k >= retries failures end in RetriesExhaustedError."""
        runner = FlakyRunner(k)
        with pytest.raises(RetriesExhaustedError) as info:
            generate(SAFE_MODEL, 10, retries, rng, runner=runner)
        assert info.value.attempts == retries
        assert runner.calls == retries
        assert isinstance(info.value.last, ExhaustionError)

    def test_zero_retries_makes_one_attempt(self, rng):
        """A zero budget still runs once."""
        runner = FlakyRunner(0)
        sim = generate(SAFE_MODEL, 10, 0, rng, runner=runner)
        assert runner.calls == 1
        assert sim.attempts == 1

    def test_negative_retries_rejected(self, rng):
        """retries < 0 raises ValidationError."""
        with pytest.raises(ValidationError):
            generate(SAFE_MODEL, 10, -1, rng)

    def test_same_stream_every_attempt(self, rng):
        """Every attempt receives the same generator."""
        runner = FlakyRunner(3)
        generate(SAFE_MODEL, 10, 5, rng, runner=runner)
        assert all(r is rng for r in runner.rngs)

    def test_other_errors_propagate(self, rng):
        """Only exhaustion is retried."""
        def broken(model, steps, rng):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            generate(SAFE_MODEL, 10, 5, rng, runner=broken)

    def test_terminal_failure_is_stoprule(self):
        """RetriesExhaustedError is a StopRule."""
        assert issubclass(RetriesExhaustedError, StopRule)

    def test_errors_survive_pickling(self):
        """Errors cross process boundaries intact."""
        err = pickle.loads(pickle.dumps(RetriesExhaustedError(7, ExhaustionError(3))))
        assert err.attempts == 7
        assert err.last.step == 3

    def test_receipts_recorded(self, rng):
        """Failed attempts and terminal failure leave receipts."""
        receipts = []
        with pytest.raises(RetriesExhaustedError):
            generate(SAFE_MODEL, 10, 3, rng, runner=FlakyRunner(3), receipts=receipts)
        types = [r["receipt_type"] for r in receipts]
        assert types == ["sim_retry", "sim_retry", "sim_retry", "sim_exhausted"]


class TestRetryWithEngine:
    """Test generate() with the real engine."""

    def test_restarts_from_scratch(self, rigged):
        """Failed attempts leave no trace in the successful one."""
        model = Model.new(0.30, 0.49, 0.21, 3)
        # two attempts deactivate vertex 0 on step 1, the third only adds vertices
        source = rigged([0.95, 0.95, 0.1, 0.1, 0.1])
        sim = generate(model, 3, 5, source)
        assert sim.attempts == 3
        assert sim.hypergraph.vertex_count == 4
        assert sim.hypergraph.edges[0] == [0]
        assert len(sim.hypergraph.edges) == 4
        assert len(sim.theta) == 4

    def test_always_exhausting_stream(self, rigged):
        """A stream that always deactivates exhausts the budget."""
        model = Model.new(0.40, 0.21, 0.39, 2)
        with pytest.raises(RetriesExhaustedError) as info:
            generate(model, 50, 4, rigged([0.99]))
        assert info.value.attempts == 4

    def test_default_rng(self):
        """Without an rng, an entropy-seeded generator is used."""
        sim = generate(SAFE_MODEL, 20, 1)
        assert len(sim.theta) == 21


class TestBoundary:
    """Test generate_from_parameters."""

    def test_validation_before_work(self):
        """Invalid parameters fail before any run."""
        with pytest.raises(ValidationError):
            generate_from_parameters(0.2, 0.2, 0.6, 3, 100, 5)

    def test_seeded(self):
        """Seeded calls are reproducible."""
        a = generate_from_parameters(0.30, 0.49, 0.21, 3, 200, 100, seed=5)
        b = generate_from_parameters(0.30, 0.49, 0.21, 3, 200, 100, seed=5)
        assert a.hypergraph.edges == b.hypergraph.edges

    def test_make_rng(self):
        """make_rng returns a numpy Generator."""
        assert isinstance(make_rng(1), np.random.Generator)


class TestEnsemble:
    """Test run_ensemble."""

    def test_runs_in_order(self):
        """One result per run, reproducible from the root seed."""
        config = GenConfig(steps=100, runs=3, retries=100, seed=42)
        first = run_ensemble(config)
        second = run_ensemble(config)
        assert len(first) == 3
        assert [s.hypergraph.edges for s in first] == [s.hypergraph.edges for s in second]

    def test_parallel_matches_sequential(self):
        """Process fan-out returns the same runs as the sequential path."""
        sequential = run_ensemble(GenConfig(steps=100, runs=3, retries=100, seed=9))
        parallel = run_ensemble(
            GenConfig(steps=100, runs=3, retries=100, seed=9, parallel=True, workers=2)
        )
        assert [s.hypergraph.edges for s in parallel] == [s.hypergraph.edges for s in sequential]
        assert [s.theta for s in parallel] == [s.theta for s in sequential]

    def test_invalid_model_rejected_up_front(self):
        """Validation errors surface before any run."""
        with pytest.raises(ValidationError):
            run_ensemble(GenConfig(pv=0.1, pe=0.1, pd=0.8, runs=2))

    def test_zero_runs(self):
        """No runs, no results."""
        assert run_ensemble(GenConfig(steps=10, runs=0, seed=1)) == []
