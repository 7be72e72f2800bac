"""
hypersim/cli.py - Hypergraph Generator CLI

Generates hypergraphs according to the random preferential attachment
hypergraph model with vertex deactivation, and plots their degree
distributions.

Usage:
  hypergraphs gen [pv pe pd m t] [--runs N] [--par] [--retries N] [--save TEMPLATE]
  hypergraphs plot <result.json> --save <plot.png>
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from receipts import append_ledger, emit_receipt
from .constants import (
    DEFAULT_PV, DEFAULT_PE, DEFAULT_PD, DEFAULT_M,
    DEFAULT_STEPS, DEFAULT_RUNS, DEFAULT_RETRIES, DEFAULT_SAVE_TEMPLATE, TENANT_ID,
)
from .errors import HypergraphError
from .export import (
    generate_report,
    load_result,
    plot_degree_distribution,
    result_path,
    save_result,
)
from .retry import iter_ensemble
from .types_config import GenConfig

logger = logging.getLogger("hypergraphs")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


# --- Command Handlers ---


def cmd_gen(args: argparse.Namespace) -> int:
    """Generate args.runs hypergraphs and save each to '<save>-<i>.json'."""
    config = GenConfig(
        pv=args.pv,
        pe=args.pe,
        pd=args.pd,
        m=args.m,
        steps=args.t,
        runs=args.runs,
        retries=args.retries,
        parallel=args.par,
        workers=args.workers,
        save_template=args.save,
        seed=args.seed,
    )

    started = time.perf_counter()
    receipts = []
    for i, sim in iter_ensemble(config):
        path = save_result(sim, result_path(config.save_template, i))
        logger.info(
            "[%d]: %.3fs elapsed, %d attempt(s), saved to %s",
            i, sim.statistics.get("elapsed_s", 0.0), sim.attempts, path,
        )
        if args.report:
            print(generate_report(sim))
        receipts.append(sim.receipt)
        receipts.append(emit_receipt("gen_saved", {
            "tenant_id": TENANT_ID,
            "run": i,
            "path": str(path),
            "attempts": sim.attempts,
        }))

    if args.receipts:
        n = append_ledger(receipts, args.receipts)
        logger.debug("Appended %d receipts to %s", n, args.receipts)

    logger.info("Total: %.3fs elapsed", time.perf_counter() - started)
    return 0


def cmd_plot(args: argparse.Namespace) -> int:
    """Plot the degree distribution of a saved hypergraph."""
    sim = load_result(args.path)
    out = plot_degree_distribution(
        sim, args.save, theoretical=args.theoretical, theta=args.theta
    )
    logger.info("Plot written to %s", out)
    return 0


# --- CLI Main ---


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hypergraphs",
        description=(
            "Generates hypergraphs according to the random preferential "
            "attachment hypergraph model with vertex deactivation"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hypergraphs gen                              # 5 runs, default model
  hypergraphs gen 0.3 0.49 0.21 3 10000 --par  # parallel runs
  hypergraphs plot data/hypergraph-0.json --save data/degree-0.png
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser(
        "gen", help="Generate hypergraphs according to the specified model"
    )
    gen_parser.add_argument(
        "pv", type=float, nargs="?", default=DEFAULT_PV,
        help=f"Probability of the vertex arrival event (default: {DEFAULT_PV})",
    )
    gen_parser.add_argument(
        "pe", type=float, nargs="?", default=DEFAULT_PE,
        help=f"Probability of the edge arrival event (default: {DEFAULT_PE})",
    )
    gen_parser.add_argument(
        "pd", type=float, nargs="?", default=DEFAULT_PD,
        help=f"Probability of the vertex deactivation event (default: {DEFAULT_PD})",
    )
    gen_parser.add_argument(
        "m", type=int, nargs="?", default=DEFAULT_M,
        help=f"Size of hyperedges (default: {DEFAULT_M})",
    )
    gen_parser.add_argument(
        "t", type=int, nargs="?", default=DEFAULT_STEPS,
        help=f"Number of iterations to perform (default: {DEFAULT_STEPS})",
    )
    gen_parser.add_argument(
        "--runs", type=int, default=DEFAULT_RUNS,
        help=f"Number of hypergraphs to generate (default: {DEFAULT_RUNS})",
    )
    gen_parser.add_argument(
        "--par", action="store_true",
        help="Generate hypergraphs in parallel",
    )
    gen_parser.add_argument(
        "--workers", type=int, default=None,
        help="Number of processes with --par (default: CPU count)",
    )
    gen_parser.add_argument(
        "--retries", type=int, default=DEFAULT_RETRIES,
        help=f"Attempts per hypergraph until the model finishes with success (default: {DEFAULT_RETRIES})",
    )
    gen_parser.add_argument(
        "--save", type=str, default=DEFAULT_SAVE_TEMPLATE,
        help=f"Template path of the JSON files to save to (default: {DEFAULT_SAVE_TEMPLATE})",
    )
    gen_parser.add_argument(
        "--seed", type=int, default=None,
        help="Root seed for reproducible runs (default: OS entropy)",
    )
    gen_parser.add_argument(
        "--receipts", type=str, default=None,
        help="Append run receipts to this JSONL ledger",
    )
    gen_parser.add_argument(
        "--report", action="store_true",
        help="Print a summary of every run",
    )

    plot_parser = subparsers.add_parser(
        "plot", help="Plot the degree distribution of the specified hypergraph"
    )
    plot_parser.add_argument(
        "path", type=str,
        help="Path to a file to read the hypergraph from",
    )
    plot_parser.add_argument(
        "--save", type=str, required=True,
        help="Path to a file to save the plot to",
    )
    plot_parser.add_argument(
        "--theoretical", action="store_true",
        help="Overlay the theoretical degree distribution",
    )
    plot_parser.add_argument(
        "--theta", type=float, default=None,
        help="Theta for the theoretical curve (default: tail mean of the run)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    handlers = {"gen": cmd_gen, "plot": cmd_plot}
    if args.command not in handlers:
        parser.print_help()
        return 1

    try:
        return handlers[args.command](args)
    except (HypergraphError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
