#!/usr/bin/env python
"""Run drift velocity queries from YAML specification files.

Usage:
    python run_queries.py <experiment_name>

Example:
    python run_queries.py published

This will:
1. Look for queries/<experiment_name>/*.yaml
2. Evaluate each query or sweep defined in the YAML files
3. Save results to queries/<experiment_name>/results/
"""

import argparse
import sys
from datetime import datetime
from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
import yaml

from refrigerants.config import load_query_spec
from refrigerants.formulas import calculate_criteria
from refrigerants.freon import Freon
from refrigerants.sweep import SWEEP_COLUMNS, sweep_from_query


def run_single_query(query: dict) -> pd.DataFrame:
    """Evaluate a single (refrigerant, temperature, diameter) query."""
    freon = Freon(query["refrigerant"], query["temperature"])
    d_m = query["drop_diameter"]
    result = calculate_criteria(freon, d_m)
    row = {
        "refrigerant": freon.name,
        "temperature_C": freon.temperature,
        "drop_diameter_mm": d_m * 1000,
        "drop_diameter_m": d_m,
        "archimedes": result.archimedes,
        "reynolds": result.reynolds,
        "drift_velocity": result.drift_velocity,
    }
    return pd.DataFrame([row], columns=SWEEP_COLUMNS)


def select_query_files(
    spec_dir: Path, names: Optional[Sequence[str]] = None
) -> List[Path]:
    """
    Query specs in spec_dir, optionally restricted to names or patterns

    Each name is matched against file stems, so 'r410_*' selects
    r410_temperature_sweep.yaml. A name matching nothing is an error.
    """
    available = sorted(spec_dir.glob("*.yaml"))
    if not names:
        return available

    selected = set()
    for name in names:
        matched = [path for path in available if fnmatch(path.stem, name)]
        if not matched:
            raise FileNotFoundError(f"No query matches '{name}' in {spec_dir}")
        selected.update(matched)
    return sorted(selected)


def save_results(df: pd.DataFrame, output_dir: Path, query_name: str):
    """Save query results and metadata."""
    output_dir.mkdir(parents=True, exist_ok=True)

    df.to_csv(output_dir / f"{query_name}.csv", index=False)

    metadata = {
        "query_name": query_name,
        "timestamp": datetime.now().isoformat(),
        "n_rows": len(df),
        "refrigerants": sorted(df["refrigerant"].unique().tolist()),
        "max_drift_velocity_m_s": float(df["drift_velocity"].max()),
    }
    with open(output_dir / f"{query_name}_metadata.yaml", "w") as f:
        yaml.dump(metadata, f, default_flow_style=False)

    print(f"Results saved to {output_dir}")


def run_query_file(yaml_file: Path, results_dir: Path, dry_run: bool = False):
    """Load one query spec, evaluate it and save its results"""
    query = load_query_spec(yaml_file)
    if dry_run:
        kind = query["sweep"]["kind"] if query["sweep"] else "single"
        print(f"Spec loaded ({kind} query), not evaluated")
        return None

    if query["sweep"] is None:
        df = run_single_query(query)
    else:
        df = sweep_from_query(query)
    save_results(df, results_dir, yaml_file.stem)
    return df


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Run drift velocity queries from YAML specs",
        epilog="""
Examples:
  python run_queries.py published                       # Run all queries
  python run_queries.py published --query r134_half_mm  # Run one query
  python run_queries.py published --query "r*"          # Run matching pattern
  python run_queries.py published --list                # List queries
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "experiment_name",
        help="Name of experiment (directory in queries/)",
    )
    parser.add_argument(
        "--query",
        nargs="*",
        dest="queries",
        metavar="NAME",
        help="Run specific query(s) by name (without .yaml). "
        "Supports glob patterns (e.g., 'r410_*'). "
        "If not specified, runs all queries.",
    )
    parser.add_argument(
        "--list",
        "-l",
        action="store_true",
        help="List available queries and exit",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse specs but don't evaluate them",
    )

    args = parser.parse_args(argv)

    spec_dir = Path(__file__).parent / "queries" / args.experiment_name
    results_dir = spec_dir / "results"

    if not spec_dir.exists():
        print(f"Error: Query directory not found: {spec_dir}")
        sys.exit(1)

    if args.list:
        print(f"Queries in '{args.experiment_name}':")
        for yaml_file in select_query_files(spec_dir):
            print(f"  {yaml_file.stem}")
        sys.exit(0)

    try:
        yaml_files = select_query_files(spec_dir, args.queries)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)
    if not yaml_files:
        print(f"Error: No query specs in {spec_dir}")
        sys.exit(1)

    print(f"{len(yaml_files)} query spec(s), results in {results_dir}")
    print()

    failed = []
    for yaml_file in yaml_files:
        print(f"--- {yaml_file.stem} ---")
        try:
            run_query_file(yaml_file, results_dir, dry_run=args.dry_run)
        except ValueError as e:
            print(f"Error: {e}")
            failed.append(yaml_file.stem)
        print()

    if failed:
        print(f"Failed queries: {', '.join(failed)}")
        sys.exit(1)
    print("All queries completed!")


if __name__ == "__main__":
    main()
