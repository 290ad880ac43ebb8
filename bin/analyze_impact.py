#!/usr/bin/env python3
"""
CEnTR*IMPACT Analysis CLI

Computes one CEnTR*IMPACT score from a CSV file or from synthetic data.

Components:
    alignment - researcher/partner agreement (columns: role, alignment, rating)
    dynamics  - balance across CBPR domains (columns: domain, dimension, salience, weight)
    cascade   - balance of network influence (columns: from, to, layer)

Usage:
    python bin/analyze_impact.py alignment --input ratings.csv
    python bin/analyze_impact.py cascade --seed 42 --output output/cascade.json
    python bin/analyze_impact.py dynamics --seed 7 --json
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import argparse
import json
import logging
from typing import List, Optional

import pandas as pd

from centr_impact.analysis import (
    AlignmentAnalyzer,
    AlignmentResult,
    CascadeAnalyzer,
    CascadeResult,
    DynamicsAnalyzer,
    DynamicsResult,
)
from centr_impact.config import Settings
from centr_impact.core import (
    SchemaError,
    generate_alignment_data,
    generate_cascade_data,
    generate_dynamics_data,
)


COMPONENTS = ("alignment", "dynamics", "cascade")

GENERATORS = {
    "alignment": generate_alignment_data,
    "dynamics": generate_dynamics_data,
    "cascade": generate_cascade_data,
}


# ---------------------------------------------------------------------------
# CLI Argument Parsing
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with clear grouping."""
    parser = argparse.ArgumentParser(
        prog="analyze_impact",
        description="CEnTR*IMPACT alignment, dynamics and cascade scoring.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s alignment --input ratings.csv      Score a survey export
  %(prog)s dynamics --seed 7                  Score synthetic dynamics data
  %(prog)s cascade --input edges.csv --alpha 0.5
  %(prog)s cascade --seed 42 -o out.json      Export results to JSON
""",
    )

    parser.add_argument("component", choices=COMPONENTS, help="Score to compute")

    # --- Input (mutually exclusive) ---
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", "-i", metavar="CSV", help="Read records from a CSV file")
    source.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Seed for synthetic data (used when --input is absent)",
    )

    # --- Parameters ---
    params = parser.add_argument_group("Parameters")
    params.add_argument(
        "--alpha",
        type=float,
        default=None,
        help="Alpha centrality damping for cascade (default: from settings, 0.9)",
    )

    # --- Output ---
    output = parser.add_argument_group("Output")
    output.add_argument("--output", "-o", metavar="FILE", help="Export results to JSON file")
    output.add_argument("--json", action="store_true", help="Print results as JSON to stdout")
    output.add_argument("--quiet", "-q", action="store_true", help="Suppress console display")
    output.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser


# ---------------------------------------------------------------------------
# Analysis Logic
# ---------------------------------------------------------------------------

def load_input(args: argparse.Namespace) -> pd.DataFrame:
    """Read the CSV named by --input, or generate synthetic records."""
    if args.input:
        return pd.read_csv(args.input)
    return GENERATORS[args.component](seed=args.seed)


def run_analysis(args: argparse.Namespace, settings: Settings, data: pd.DataFrame):
    if args.component == "alignment":
        analyzer = AlignmentAnalyzer(
            median_width=settings.median_width,
            conf_level=settings.icc_conf_level,
        )
    elif args.component == "dynamics":
        analyzer = DynamicsAnalyzer()
    else:
        alpha = args.alpha if args.alpha is not None else settings.alpha_parameter
        analyzer = CascadeAnalyzer(alpha_parameter=alpha, weights=settings.cascade_weights())
    return analyzer.analyze(data)


# ---------------------------------------------------------------------------
# Output Helpers
# ---------------------------------------------------------------------------

def format_score(value: Optional[float]) -> str:
    if value is None or pd.isna(value):
        return "N/A"
    return f"{value:.4f}"


def display(result) -> None:
    """Print a human-readable summary of an analysis result."""
    with pd.option_context("display.width", 120, "display.max_columns", 20):
        if isinstance(result, AlignmentResult):
            print("\nAlignment by category")
            print(result.table_frame().round(4).to_string(index=False))
            print(f"\nICC(A,1):        {format_score(result.icc_value)}")
            print(f"Alignment Score: {format_score(result.alignment_score)}")

        elif isinstance(result, DynamicsResult):
            print("\nDomain scores")
            print(result.domain_frame().to_string(index=False))
            print(f"\nDynamics Score:  {format_score(result.dynamics_score)} ({result.level.label})")

        elif isinstance(result, CascadeResult):
            print("\nLayer summary")
            print(result.layer_frame().round(4).to_string(index=False))
            print(f"\nTopology Score:  {format_score(result.topology_score)}")
            print(f"Cascade Score:   {format_score(result.cascade_score)} ({result.level.label})")
            if result.degraded_metrics:
                print(f"Degraded metrics: {', '.join(result.degraded_metrics)}")


def export_json(result, path: str) -> None:
    """Write results to a JSON file, creating parent directories as needed."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(result.to_dict(), f, indent=2, default=str)


# ---------------------------------------------------------------------------
# Entry Point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Logging setup
    log_level = (
        logging.DEBUG if args.verbose
        else logging.WARNING if args.quiet
        else getattr(logging, settings.log_level)
    )
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        data = load_input(args)
        result = run_analysis(args, settings, data)

        # Export to file if requested
        if args.output:
            export_json(result, args.output)
            if not args.quiet:
                print(f"\n✓ Results exported to: {args.output}")

        # Display to stdout
        if args.json:
            print(json.dumps(result.to_dict(), indent=2, default=str))
        elif not args.quiet:
            display(result)

        return 0

    except (SchemaError, OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if args.verbose:
            logging.exception("Analysis failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
