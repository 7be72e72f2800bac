"""
hypersim - Preferential Attachment Hypergraphs with Vertex Deactivation

Public API for hypergraph generation.
One file = one responsibility.
"""

# =============================================================================
# TYPES (Dataclasses)
# =============================================================================
from .types_model import Model, SizeDistribution, ConstantSize, validate_parameters
from .types_config import GenConfig, CONFIG_DEFAULT, CONFIG_SMOKE
from .types_state import Hypergraph
from .types_result import Simulation

# =============================================================================
# ERRORS
# =============================================================================
from .errors import (
    HypergraphError,
    ValidationError,
    ExhaustionError,
    RetriesExhaustedError,
    ResultFormatError,
)

# =============================================================================
# CORE SIMULATION
# =============================================================================
from .fenwick import Fenwick
from .engine import Event, GrowthEngine, choose_event, run_simulation
from .retry import (
    make_rng,
    generate,
    generate_from_parameters,
    iter_ensemble,
    run_ensemble,
)

# =============================================================================
# VALIDATION / MEASUREMENT
# =============================================================================
from .validation import validate_conservation, validate_result
from .measurement import (
    degree_distribution,
    degree_distribution_arrays,
    limiting_theta,
    theoretical_degree_distribution,
)

# =============================================================================
# EXPORT
# =============================================================================
from .export import (
    result_path,
    to_dict,
    from_dict,
    save_result,
    load_result,
    generate_report,
    plot_degree_distribution,
)

# =============================================================================
# PUBLIC API
# =============================================================================
__all__ = [
    # Types
    "Model",
    "SizeDistribution",
    "ConstantSize",
    "validate_parameters",
    "GenConfig",
    "CONFIG_DEFAULT",
    "CONFIG_SMOKE",
    "Hypergraph",
    "Simulation",
    # Errors
    "HypergraphError",
    "ValidationError",
    "ExhaustionError",
    "RetriesExhaustedError",
    "ResultFormatError",
    # Core simulation
    "Fenwick",
    "Event",
    "GrowthEngine",
    "choose_event",
    "run_simulation",
    "make_rng",
    "generate",
    "generate_from_parameters",
    "iter_ensemble",
    "run_ensemble",
    # Validation / measurement
    "validate_conservation",
    "validate_result",
    "degree_distribution",
    "degree_distribution_arrays",
    "limiting_theta",
    "theoretical_degree_distribution",
    # Export
    "result_path",
    "to_dict",
    "from_dict",
    "save_result",
    "load_result",
    "generate_report",
    "plot_degree_distribution",
]
