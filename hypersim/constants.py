"""
hypersim/constants.py - Model Defaults and Simulation Constants

All defaults for hypergraph generation. Centralized for tuning.
Pure data, no behavior.
"""

# =============================================================================
# MODEL DEFAULTS (vertex arrival / edge arrival / deactivation)
# =============================================================================

DEFAULT_PV = 0.30  # Probability of the vertex arrival event
DEFAULT_PE = 0.49  # Probability of the edge arrival event
DEFAULT_PD = 0.21  # Probability of the vertex deactivation event
DEFAULT_M = 3      # Hyperedge size

# Sum of the three probabilities must be within this of 1.0
PROBABILITY_TOLERANCE = 1e-9

# =============================================================================
# RUN DEFAULTS
# =============================================================================

DEFAULT_STEPS = 1000
DEFAULT_RUNS = 5
DEFAULT_RETRIES = 100
DEFAULT_SAVE_TEMPLATE = "data/hypergraph"

# =============================================================================
# INITIAL STATE
# =============================================================================

# One vertex carrying one self-referencing hyperedge of size 1
INITIAL_VERTEX_COUNT = 1
INITIAL_EDGES = ((0,),)
INITIAL_THETA = 1.0

# =============================================================================
# MEASUREMENT
# =============================================================================

# Share of the theta trace averaged to estimate its limit
THETA_TAIL_FRACTION = 0.25

# =============================================================================
# RECEIPTS
# =============================================================================

TENANT_ID = "hypergraphs"
