"""Command line interface for drift velocity calculations.

Usage:
    refrigerant-drift                                  # interactive
    refrigerant-drift -r R410 -d 0.5 -t 5              # single query
    refrigerant-drift --sweep diameter -t 0            # all refrigerants
    refrigerant-drift --sweep temperature -r R410      # -10..15 °C
    refrigerant-drift --spec queries/r410.yaml         # YAML query spec
"""

import argparse
import math
import sys
from typing import Callable, List, Optional

import matplotlib.pyplot as plt

from .config import load_query_spec
from .formulas import calculate_criteria
from .freon import Freon, Refrigerant
from .sweep import (
    diameter_sweep,
    plot_drift_velocity,
    print_sweep,
    sweep_from_query,
    temperature_sweep,
)

# Column used to group printed and plotted sweep results
SWEEP_GROUPS = {"diameter": "refrigerant", "temperature": "temperature_C"}


def _read_float(text: str) -> float:
    try:
        return float(text.strip().replace(",", "."))
    except ValueError:
        return math.nan


def prompt_refrigerant(
    input_func: Callable[[str], str] = input,
) -> Refrigerant:
    """Ask for a refrigerant menu index until a valid one is entered"""
    members = list(Refrigerant)
    menu = "\t\t".join(
        f"{i}. {member.value}" for i, member in enumerate(members)
    )
    while True:
        print("Select refrigerant:")
        print(menu)
        try:
            index = int(input_func("").strip())
        except ValueError:
            continue
        if 0 <= index < len(members):
            return Refrigerant.from_index(index)


def prompt_diameter(input_func: Callable[[str], str] = input) -> float:
    """Ask for a positive droplet diameter [mm], return it in metres"""
    while True:
        print("Droplet diameter [mm]:")
        diameter_mm = _read_float(input_func(""))
        if 0 < diameter_mm < math.inf:
            return diameter_mm / 1000


def prompt_temperature(
    T_min: float, T_max: float, input_func: Callable[[str], str] = input
) -> float:
    """Ask for an ambient temperature [°C] in [T_min, T_max]"""
    while True:
        print(f"Ambient temperature [°C] [{T_min:g}; {T_max:g}]:")
        t = _read_float(input_func(""))
        if T_min <= t <= T_max:
            return t


def print_criteria(result):
    print("Archimedes criterion:")
    print(result.archimedes)
    print("Reynolds criterion:")
    print(result.reynolds)
    print("Drift velocity [m/s]:")
    print(result.drift_velocity)


def run_query(refrigerant, temperature: float, drop_diameter: float):
    """Evaluate and print one query, drop_diameter in metres"""
    freon = Freon(refrigerant, temperature)
    result = calculate_criteria(freon, drop_diameter)
    print_criteria(result)
    return result


def run_interactive(input_func: Callable[[str], str] = input):
    """Prompt for refrigerant, droplet diameter and temperature"""
    refrigerant = prompt_refrigerant(input_func)
    drop_diameter = prompt_diameter(input_func)
    table = refrigerant.table
    temperature = prompt_temperature(table.T_min, table.T_max, input_func)
    return run_query(refrigerant, temperature, drop_diameter)


def report_sweep(
    df, by: str, output: Optional[str] = None, plot: bool = False
):
    """Print sweep results and optionally save them to CSV or plot them"""
    print_sweep(df, by=by)

    if output:
        df.to_csv(output, index=False)
        print(f"Results saved to {output}")
    if plot:
        plot_drift_velocity(df, by=by)
        plt.tight_layout()
        plt.show()
    return df


def run_sweep(
    kind: str,
    refrigerants: Optional[List[Refrigerant]] = None,
    temperature: Optional[float] = None,
    temperatures: Optional[List[float]] = None,
    diameters_mm: Optional[List[float]] = None,
    output: Optional[str] = None,
    plot: bool = False,
):
    """Run a diameter or temperature sweep and report it"""
    if kind == "diameter":
        df = diameter_sweep(temperature, refrigerants, diameters_mm)
    else:
        df = temperature_sweep(refrigerants[0], temperatures, diameters_mm)
    return report_sweep(df, SWEEP_GROUPS[kind], output=output, plot=plot)


def run_spec(spec_path: str, output: Optional[str] = None, plot: bool = False):
    """Run the query or sweep described by a YAML spec file"""
    query = load_query_spec(spec_path)
    if query["sweep"] is None:
        return run_query(
            query["refrigerant"], query["temperature"], query["drop_diameter"]
        )
    df = sweep_from_query(query)
    return report_sweep(
        df, SWEEP_GROUPS[query["sweep"]["kind"]], output=output, plot=plot
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refrigerant-drift",
        description="Drift velocity of vapor droplets in refrigerants",
        epilog="""
Examples:
  refrigerant-drift                               # Interactive prompts
  refrigerant-drift -r R410 -d 0.5 -t 5           # Single query
  refrigerant-drift --sweep diameter -t 0         # All refrigerants at 0°C
  refrigerant-drift --sweep temperature -r R410   # R410 from -10 to 15°C
  refrigerant-drift --spec query.yaml             # Query from YAML spec
  refrigerant-drift --list                        # List refrigerants
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-r",
        "--refrigerant",
        help="Refrigerant name (R134, R407, R410, R32)",
    )
    parser.add_argument(
        "-d",
        "--diameter",
        type=float,
        metavar="MM",
        help="Droplet diameter [mm]",
    )
    parser.add_argument(
        "-t",
        "--temperature",
        type=float,
        metavar="DEG_C",
        help="Ambient temperature [°C]",
    )
    parser.add_argument(
        "--sweep",
        choices=["diameter", "temperature"],
        help="Sweep droplet diameter (all refrigerants at -t) or "
        "temperature (refrigerant -r)",
    )
    parser.add_argument(
        "--spec",
        metavar="YAML",
        help="Run a query or sweep from a YAML spec file",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="CSV",
        help="Save sweep results to a CSV file",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Plot sweep results",
    )
    parser.add_argument(
        "--list",
        "-l",
        action="store_true",
        help="List available refrigerants and exit",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        print("Available refrigerants:")
        for i, refrigerant in enumerate(Refrigerant):
            table = refrigerant.table
            print(
                f"  {i}. {refrigerant.value} "
                f"({table.T_min:g}°C to {table.T_max:g}°C)"
            )
        return 0

    try:
        if args.spec:
            run_spec(args.spec, output=args.output, plot=args.plot)
        elif args.sweep == "diameter":
            if args.temperature is None:
                parser.error("--sweep diameter requires --temperature")
            refrigerants = (
                [Refrigerant.parse(args.refrigerant)]
                if args.refrigerant
                else None
            )
            diameters_mm = (
                [args.diameter] if args.diameter is not None else None
            )
            run_sweep(
                "diameter",
                refrigerants=refrigerants,
                temperature=args.temperature,
                diameters_mm=diameters_mm,
                output=args.output,
                plot=args.plot,
            )
        elif args.sweep == "temperature":
            if args.refrigerant is None:
                parser.error("--sweep temperature requires --refrigerant")
            temperatures = (
                [args.temperature] if args.temperature is not None else None
            )
            diameters_mm = (
                [args.diameter] if args.diameter is not None else None
            )
            run_sweep(
                "temperature",
                refrigerants=[Refrigerant.parse(args.refrigerant)],
                temperatures=temperatures,
                diameters_mm=diameters_mm,
                output=args.output,
                plot=args.plot,
            )
        elif any(
            value is not None
            for value in (args.refrigerant, args.diameter, args.temperature)
        ):
            if None in (args.refrigerant, args.diameter, args.temperature):
                parser.error(
                    "--refrigerant, --diameter and --temperature must be "
                    "given together"
                )
            if args.diameter <= 0:
                parser.error("--diameter must be positive")
            run_query(args.refrigerant, args.temperature, args.diameter / 1000)
        else:
            run_interactive()
    except ValueError as e:
        # DomainError and InvalidTableError included
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (EOFError, KeyboardInterrupt):
        print("\nAborted", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
