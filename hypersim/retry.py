"""
hypersim/retry.py - Retry Driver and Ensembles

generate() re-runs the engine with the same random stream until a run
survives or the attempt budget is spent. Ensembles fan independent runs out
over child seeds of one SeedSequence, optionally across processes.
"""

import logging
import os
import time
from dataclasses import replace
from multiprocessing import get_context
from typing import Iterator, List, Optional, Tuple

import numpy as np
from numpy.random import SeedSequence

from receipts import emit_receipt

from .constants import TENANT_ID
from .engine import run_simulation
from .errors import ExhaustionError, RetriesExhaustedError, ValidationError
from .types_config import GenConfig
from .types_model import Model
from .types_result import Simulation

logger = logging.getLogger(__name__)


def make_rng(seed=None) -> np.random.Generator:
    """Independent generator; None seeds from OS entropy."""
    return np.random.default_rng(seed)


def generate(
    model: Model,
    steps: int,
    retries: int,
    rng=None,
    runner=run_simulation,
    receipts: Optional[list] = None,
) -> Simulation:
    """
    Generate a hypergraph, retrying runs that end in exhaustion.

    Every attempt starts from the initial hypergraph; only the random stream
    carries over. At least one attempt is made.

    Args:
        model: Validated model
        steps: Number of steps per run
        retries: Attempt budget
        rng: Random source (fresh entropy-seeded generator if None)
        runner: Callable (model, steps, rng) -> Simulation
        receipts: Optional list collecting sim_retry/sim_exhausted receipts

    Returns:
        Simulation from the first successful attempt

    Raises:
        RetriesExhaustedError: If every attempt ended in exhaustion
    """
    if retries < 0:
        raise ValidationError(f"Expected `retries` to be non-negative, got {retries}")
    if rng is None:
        rng = make_rng()

    budget = max(retries, 1)
    last = None
    started = time.perf_counter()
    for attempt in range(1, budget + 1):
        try:
            result = runner(model, steps, rng)
        except ExhaustionError as e:
            last = e
            logger.debug("Attempt %d/%d failed: %s", attempt, budget, e)
            if receipts is not None:
                receipts.append(emit_receipt("sim_retry", {
                    "tenant_id": TENANT_ID,
                    "attempt": attempt,
                    "budget": budget,
                    "failed_step": e.step,
                }))
            continue

        elapsed = time.perf_counter() - started
        return replace(
            result,
            attempts=attempt,
            statistics={**result.statistics, "attempts": attempt, "elapsed_s": elapsed},
        )

    logger.warning("All %d attempts ended with every vertex deactivated", budget)
    if receipts is not None:
        receipts.append(emit_receipt("sim_exhausted", {
            "tenant_id": TENANT_ID,
            "attempts": budget,
            "steps": steps,
            "model": model.parameters(),
        }))
    raise RetriesExhaustedError(attempts=budget, last=last)


def generate_from_parameters(
    pv: float, pe: float, pd: float, m: int, steps: int, retries: int, seed=None
) -> Simulation:
    """Validate the parameters and generate one hypergraph."""
    model = Model.new(pv, pe, pd, m)
    return generate(model, steps, retries, make_rng(seed))


# =============================================================================
# ENSEMBLES
# =============================================================================

def _ensemble_worker(args: Tuple[Model, int, int, SeedSequence]) -> Simulation:
    model, steps, retries, seed_seq = args
    return generate(model, steps, retries, np.random.default_rng(seed_seq))


def iter_ensemble(config: GenConfig) -> Iterator[Tuple[int, Simulation]]:
    """
    Yield (run index, Simulation) for config.runs independent runs, in order.

    Raises:
        ValidationError: Before any run starts, on bad parameters
        RetriesExhaustedError: When a run exhausts its attempt budget
    """
    model = config.model()
    if config.steps < 0:
        raise ValidationError(f"Expected `steps` to be non-negative, got {config.steps}")
    if config.runs < 0:
        raise ValidationError(f"Expected `runs` to be non-negative, got {config.runs}")

    children = SeedSequence(config.seed).spawn(config.runs)
    args = [(model, config.steps, config.retries, child) for child in children]

    workers = config.workers or os.cpu_count() or 1
    if config.parallel and workers > 1 and config.runs > 1:
        logger.debug("Running %d runs on %d processes", config.runs, workers)
        ctx = get_context("spawn")
        with ctx.Pool(processes=min(workers, config.runs)) as pool:
            for i, result in enumerate(pool.imap(_ensemble_worker, args, chunksize=1)):
                yield i, result
    else:
        for i, item in enumerate(args):
            yield i, _ensemble_worker(item)


def run_ensemble(config: GenConfig) -> List[Simulation]:
    """Run every run of the configuration and return the results in run order."""
    return [result for _, result in iter_ensemble(config)]
