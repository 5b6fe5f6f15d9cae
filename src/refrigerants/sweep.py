"""Batch evaluation of drift velocity over droplet diameter and temperature.

Results are collected in pandas DataFrames with one row per
(refrigerant, temperature, diameter) query and the columns listed in
SWEEP_COLUMNS.
"""

from typing import Iterable, List, Optional, Sequence, Union

import matplotlib.pyplot as plt
import pandas as pd

from .config import VAR_INFO
from .formulas import calculate_criteria
from .freon import Freon, Refrigerant

# Droplet diameters [mm] and temperatures [°C] of the published tables
DEFAULT_DIAMETER_RANGE = (0.1, 2.0, 0.05)
DEFAULT_TEMPERATURE_RANGE = (-10, 15, 5)

SWEEP_COLUMNS = [
    "refrigerant",
    "temperature_C",
    "drop_diameter_mm",
    "drop_diameter_m",
    "archimedes",
    "reynolds",
    "drift_velocity",
]


def diameter_range(
    start: float = DEFAULT_DIAMETER_RANGE[0],
    end: float = DEFAULT_DIAMETER_RANGE[1],
    step: float = DEFAULT_DIAMETER_RANGE[2],
) -> List[float]:
    """
    Droplet diameters [mm] from start to end inclusive

    Values are accumulated by repeated addition of step, so the last
    value depends on round-off and may stop one step short of end.
    """
    if step <= 0:
        raise ValueError(f"Step must be positive, got {step}")
    if start > end:
        raise ValueError(f"Range start {start} is after its end {end}")
    values = []
    current = start
    while start <= current <= end:
        values.append(current)
        current += step
    return values


def temperature_range(
    start: float = DEFAULT_TEMPERATURE_RANGE[0],
    end: float = DEFAULT_TEMPERATURE_RANGE[1],
    step: float = DEFAULT_TEMPERATURE_RANGE[2],
) -> List[float]:
    """Temperatures [°C] from start to end inclusive"""
    return diameter_range(start, end, step)


def _sweep_rows(freon: Freon, diameters_mm: Iterable[float]) -> List[dict]:
    rows = []
    for d_mm in diameters_mm:
        d_m = d_mm / 1000
        result = calculate_criteria(freon, d_m)
        rows.append(
            {
                "refrigerant": freon.name,
                "temperature_C": freon.temperature,
                "drop_diameter_mm": d_mm,
                "drop_diameter_m": d_m,
                "archimedes": result.archimedes,
                "reynolds": result.reynolds,
                "drift_velocity": result.drift_velocity,
            }
        )
    return rows


def diameter_sweep(
    temperature: float,
    refrigerants: Optional[Sequence[Union[Refrigerant, str]]] = None,
    diameters_mm: Optional[Sequence[float]] = None,
) -> pd.DataFrame:
    """
    Drift velocity vs droplet diameter for several refrigerants

    Parameters
    ----------
    temperature : float
        Ambient temperature [°C]
    refrigerants : sequence of Refrigerant or str, optional
        Refrigerants to evaluate, by default all of them
    diameters_mm : sequence of float, optional
        Droplet diameters [mm], by default diameter_range()

    Returns
    -------
    pd.DataFrame
        One row per (refrigerant, diameter) with SWEEP_COLUMNS
    """
    if refrigerants is None:
        refrigerants = list(Refrigerant)
    if diameters_mm is None:
        diameters_mm = diameter_range()

    rows = []
    for refrigerant in refrigerants:
        freon = Freon(refrigerant, temperature)
        rows.extend(_sweep_rows(freon, diameters_mm))
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)


def temperature_sweep(
    refrigerant: Union[Refrigerant, str],
    temperatures: Optional[Sequence[float]] = None,
    diameters_mm: Optional[Sequence[float]] = None,
) -> pd.DataFrame:
    """
    Drift velocity vs droplet diameter at several temperatures

    Parameters
    ----------
    refrigerant : Refrigerant or str
        Refrigerant to evaluate
    temperatures : sequence of float, optional
        Ambient temperatures [°C], by default temperature_range()
    diameters_mm : sequence of float, optional
        Droplet diameters [mm], by default diameter_range()

    Returns
    -------
    pd.DataFrame
        One row per (temperature, diameter) with SWEEP_COLUMNS
    """
    if temperatures is None:
        temperatures = temperature_range()
    if diameters_mm is None:
        diameters_mm = diameter_range()
    if len(temperatures) == 0:
        return pd.DataFrame(columns=SWEEP_COLUMNS)

    freon = Freon(refrigerant, temperatures[0])
    rows = []
    for t in temperatures:
        freon.temperature = t
        rows.extend(_sweep_rows(freon, diameters_mm))
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)


def sweep_from_query(query: dict) -> pd.DataFrame:
    """
    Run the sweep section of a parsed query spec

    Parameters
    ----------
    query : dict
        Output of config.parse_query_spec() with a non-empty 'sweep'

    Returns
    -------
    pd.DataFrame
        Sweep results with SWEEP_COLUMNS
    """
    sweep = query["sweep"]
    diameters_mm = (
        diameter_range(**sweep["diameters"]) if sweep["diameters"] else None
    )
    if sweep["kind"] == "diameter":
        return diameter_sweep(
            query["temperature"], sweep["refrigerants"], diameters_mm
        )

    temperatures = (
        temperature_range(**sweep["temperatures"])
        if sweep["temperatures"]
        else None
    )
    return temperature_sweep(
        sweep["refrigerants"][0], temperatures, diameters_mm
    )


def format_decimal_comma(value: float) -> str:
    """Format a number with a decimal comma, e.g. 0.25 -> '0,25'"""
    return str(value).replace(".", ",")


def print_sweep(df: pd.DataFrame, by: str = "refrigerant"):
    """
    Print drift velocities grouped by a column, one value per line

    Each group starts with its label and ends with a blank line.
    Values are printed with decimal commas.
    """
    for label, group in df.groupby(by, sort=False):
        if by == "temperature_C":
            print(f"t={label:g}")
        else:
            print(label)
        for value in group["drift_velocity"]:
            print(format_decimal_comma(float(value)))
        print()


def plot_drift_velocity(
    df: pd.DataFrame, by: str = "refrigerant", figsize=(7, 4), **kwargs
):
    """
    Plot drift velocity vs droplet diameter, one line per group

    Parameters
    ----------
    df : pd.DataFrame
        Sweep results from diameter_sweep() or temperature_sweep()
    by : str, optional
        Column used to group lines, by default "refrigerant"
    figsize : tuple, optional
        Figure size (width, height), by default (7, 4)
    **kwargs
        Additional arguments passed to ax.plot()

    Returns
    -------
    fig : matplotlib.figure.Figure
    ax : matplotlib.axes.Axes
    """
    fig, ax = plt.subplots(figsize=figsize)
    for label, group in df.groupby(by, sort=False):
        if by == "temperature_C":
            label = f"{label:g}°C"
        ax.plot(
            group["drop_diameter_mm"],
            group["drift_velocity"],
            label=label,
            **kwargs,
        )
    x_info = VAR_INFO["drop_diameter_mm"]
    y_info = VAR_INFO["drift_velocity"]
    ax.set_xlabel(f"{x_info['long_name']} [{x_info['units']}]")
    ax.set_ylabel(f"{y_info['long_name']} [{y_info['units']}]")
    ax.grid(True, alpha=0.3)
    ax.legend()
    return fig, ax
