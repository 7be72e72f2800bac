"""
hypersim/types_config.py - GenConfig Dataclass and Presets

Immutable configuration for a batch of generation runs.
"""

from dataclasses import dataclass
from typing import Optional

from .constants import (
    DEFAULT_PV, DEFAULT_PE, DEFAULT_PD, DEFAULT_M,
    DEFAULT_STEPS, DEFAULT_RUNS, DEFAULT_RETRIES, DEFAULT_SAVE_TEMPLATE,
)
from .types_model import Model


@dataclass(frozen=True)
class GenConfig:
    """Generation configuration (immutable)."""
    pv: float = DEFAULT_PV
    pe: float = DEFAULT_PE
    pd: float = DEFAULT_PD
    m: int = DEFAULT_M
    steps: int = DEFAULT_STEPS
    runs: int = DEFAULT_RUNS
    retries: int = DEFAULT_RETRIES  # attempt budget per run
    parallel: bool = False
    workers: Optional[int] = None  # None = os.cpu_count()
    save_template: str = DEFAULT_SAVE_TEMPLATE
    seed: Optional[int] = None  # None = seed from OS entropy

    def model(self) -> Model:
        return Model.new(self.pv, self.pe, self.pd, self.m)


# =============================================================================
# PRESETS
# =============================================================================

CONFIG_DEFAULT = GenConfig()

CONFIG_SMOKE = GenConfig(
    steps=50,
    runs=2,
    retries=20,
    save_template="data/smoke",
    seed=7,
)
