"""
hypersim/export.py - Result Serialization and Plotting

JSON round-trip of Simulation results and the log-log degree distribution
plot. The only module in hypersim that touches the file system.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .errors import ResultFormatError, ValidationError
from .measurement import (
    degree_distribution_arrays,
    limiting_theta,
    theoretical_degree_distribution,
)
from .types_model import Model
from .types_result import Simulation
from .types_state import Hypergraph

PathLike = Union[str, Path]


def result_path(template: str, index: int) -> Path:
    """Path of the index-th result for a save template: '<template>-<index>.json'."""
    return Path(f"{template}-{index}.json")


def to_dict(sim: Simulation) -> Dict[str, Any]:
    """
    Format a Simulation as a JSON-ready dict.

    Args:
        sim: Simulation to export

    Returns:
        dict with parameters, vertex_count, edges, degree, theta, statistics
    """
    return {
        "parameters": {**sim.model.parameters(), "steps": sim.steps},
        "vertex_count": sim.hypergraph.vertex_count,
        "edges": sim.hypergraph.edges,
        "degree": sim.hypergraph.degree,
        "theta": sim.theta,
        "statistics": sim.statistics,
    }


def from_dict(data: Dict[str, Any]) -> Simulation:
    """
    Rebuild a Simulation from to_dict() output.

    Also accepts the legacy keys 'vertices' and 't'.

    Raises:
        ResultFormatError: If fields are missing or malformed
    """
    if not isinstance(data, dict):
        raise ResultFormatError(f"Expected a JSON object, got {type(data).__name__}")
    try:
        params = data["parameters"]
        steps = params["steps"] if "steps" in params else params["t"]
        vertex_count = data["vertex_count"] if "vertex_count" in data else data["vertices"]
        model = Model.new(params["pv"], params["pe"], params["pd"], params["m"])
        hypergraph = Hypergraph(
            vertex_count=int(vertex_count),
            edges=[[int(v) for v in e] for e in data["edges"]],
            degree=[int(d) for d in data["degree"]],
        )
        theta = [float(x) for x in data["theta"]]
        statistics = data.get("statistics") or {}
        if not isinstance(statistics, dict):
            raise ResultFormatError(
                f"Expected `statistics` to be an object, got {type(statistics).__name__}"
            )
        attempts = int(statistics.get("attempts", 1))
    except (KeyError, TypeError, ValueError) as e:
        if isinstance(e, ResultFormatError):
            raise
        if isinstance(e, ValidationError):
            raise ResultFormatError(f"Invalid model parameters: {e}") from e
        raise ResultFormatError(f"Malformed result: {e!r}") from e

    return Simulation(
        model=model,
        hypergraph=hypergraph,
        steps=int(steps),
        theta=theta,
        statistics=statistics,
        attempts=attempts,
    )


def save_result(sim: Simulation, path: PathLike) -> Path:
    """
    Write a Simulation as compact JSON, creating parent directories.

    Returns:
        Path: The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump(to_dict(sim), f, separators=(",", ":"))
    return path


def load_result(path: PathLike) -> Simulation:
    """
    Read a Simulation saved by save_result().

    Raises:
        FileNotFoundError: If the file does not exist
        ResultFormatError: If the file is not a valid result
    """
    with Path(path).open("r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ResultFormatError(f"{path} is not valid JSON: {e}") from e
    return from_dict(data)


def generate_report(sim: Simulation) -> str:
    """Human-readable summary of a run."""
    stats = sim.statistics
    lines = [
        "=== HYPERGRAPH REPORT ===",
        f"Model: pv={sim.model.pv} pe={sim.model.pe} pd={sim.model.pd} m={sim.model.m}",
        f"Steps: {sim.steps}",
        f"Attempts: {sim.attempts}",
        f"Vertices: {sim.hypergraph.vertex_count}",
        f"Edges: {sim.hypergraph.edge_count}",
        f"Vertex arrivals: {stats.get('vertex_arrival', 'n/a')}",
        f"Edge arrivals: {stats.get('edge_arrival', 'n/a')}",
        f"Deactivations: {stats.get('vertex_deactivation', 'n/a')}",
        f"Final theta: {sim.theta[-1]:.4f}" if sim.theta else "Final theta: n/a",
    ]
    return "\n".join(lines)


def plot_degree_distribution(
    sim: Simulation,
    output_path: PathLike,
    theoretical: bool = False,
    theta: Optional[float] = None,
) -> Path:
    """
    Render the empirical degree distribution as a log-log scatter.

    Args:
        sim: Simulation to plot
        output_path: Image file to write (format from the suffix)
        theoretical: Overlay the theoretical distribution
        theta: Theta for the overlay (limit of sim.theta if None)

    Returns:
        Path: The written image
    """
    degrees, freqs = degree_distribution_arrays(sim.hypergraph)

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.scatter(degrees, freqs, s=12, color="b", label="Empirical")

    if theoretical and len(degrees) > 0:
        if theta is None:
            theta = limiting_theta(sim.theta)
        f = theoretical_degree_distribution(sim.model, theta)
        ks = degrees.astype(float)
        ax.plot(ks, f(ks), color="r", linestyle="--", label=f"Theoretical (theta={theta:.2f})")

    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("Degree (log scale)")
    ax.set_ylabel("Fraction of vertices (log scale)")
    ax.set_title(
        f"Degree distribution: pv={sim.model.pv} pe={sim.model.pe} "
        f"pd={sim.model.pd} m={sim.model.m}, t={sim.steps}"
    )
    ax.legend()
    ax.grid(True)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path)
    plt.close(fig)
    return output_path
