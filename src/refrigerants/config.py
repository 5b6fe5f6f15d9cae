"""Column metadata and YAML query specifications.

A query spec names a refrigerant, an ambient temperature and a droplet
diameter, with optional units handled by pint:

    refrigerant: R410
    temperature: {value: 5, units: degC}
    drop_diameter: {value: 0.5, units: mm}

An optional ``sweep`` section turns the query into a batch run:

    sweep:
      kind: diameter            # or: temperature
      refrigerants: [R134, R32] # diameter sweeps only, default all
      diameters: {start: 0.1, end: 2.0, step: 0.05, units: mm}
      temperatures: {start: -10, end: 15, step: 5, units: degC}

Plain numbers are read in the default units (°C for temperatures, mm for
droplet diameters).
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Union

import pint
import yaml

from .freon import Refrigerant

VAR_INFO = {
    "temperature_C": {
        "long_name": "Ambient Temperature",
        "units": "°C",
        "description": "Temperature at which refrigerant properties are taken",
    },
    "drop_diameter_mm": {
        "long_name": "Droplet Diameter",
        "units": "mm",
        "description": "Diameter of the vapor droplet",
    },
    "drop_diameter_m": {
        "long_name": "Droplet Diameter",
        "units": "m",
        "description": "Diameter of the vapor droplet",
    },
    "archimedes": {
        "long_name": "Archimedes Criterion",
        "units": "-",
        "description": "Ratio of buoyancy to viscous forces on the droplet",
    },
    "reynolds": {
        "long_name": "Reynolds Criterion",
        "units": "-",
        "description": "Reynolds number of the drifting droplet",
    },
    "drift_velocity": {
        "long_name": "Drift Velocity",
        "units": "m/s",
        "description": "Terminal rise velocity of the droplet",
    },
}

DEFAULT_TEMPERATURE_UNITS = "degC"
DEFAULT_DIAMETER_UNITS = "mm"
SWEEP_KINDS = ("diameter", "temperature")
OFFSET_UNITS = ("degC", "degF")


@lru_cache(maxsize=None)
def get_unit_registry() -> pint.UnitRegistry:
    """Shared unit registry"""
    return pint.UnitRegistry()


def _convert(ureg, value, units, target_units) -> float:
    """Magnitude of value [units] in target_units, unit errors as ValueError"""
    try:
        quantity = ureg.Quantity(float(value), units)
        return float(quantity.to(target_units).magnitude)
    except pint.errors.PintError as e:
        raise ValueError(f"Cannot read {value} {units}: {e}") from e


def read_quantity(entry, default_units, target_units, ureg=None) -> float:
    """
    Read a value with optional units and convert it to target units.

    Parameters
    ----------
    entry : dict or number
        Either a plain number (read in default_units) or a dict with a
        'value' key and an optional 'units' key.
    default_units : str
        Units assumed when none are given
    target_units : str
        Units of the returned magnitude
    ureg : pint.UnitRegistry, optional
        Unit registry, by default the shared one

    Returns
    -------
    float
        Magnitude in target_units

    Examples
    --------
    >>> read_quantity({'value': 0.5, 'units': 'mm'}, 'mm', 'm')
    0.0005
    >>> read_quantity(5, 'degC', 'degC')
    5.0
    """
    if ureg is None:
        ureg = get_unit_registry()
    if isinstance(entry, dict):
        if "value" not in entry:
            raise ValueError(f"Quantity is missing a 'value' key: {entry}")
        value = entry["value"]
        units = entry.get("units") or default_units
    else:
        value = entry
        units = default_units
    return _convert(ureg, value, units, target_units)


def read_range(
    entry: Dict[str, Any], default_units: str, target_units: str, ureg=None
) -> Dict[str, float]:
    """
    Read a {start, end, step, units} range and convert it to target units.

    The step is converted as a difference so offset units (°C, °F) work.
    """
    if ureg is None:
        ureg = get_unit_registry()
    missing = [key for key in ("start", "end", "step") if key not in entry]
    if missing:
        raise ValueError(f"Range is missing keys {missing}: {entry}")
    units = entry.get("units") or default_units
    step_units = (
        f"delta_{target_units}"
        if target_units in OFFSET_UNITS
        else target_units
    )
    try:
        step = ureg.Quantity(float(entry["step"]), units) - ureg.Quantity(
            0.0, units
        )
        step = float(step.to(step_units).magnitude)
    except pint.errors.PintError as e:
        raise ValueError(
            f"Cannot read step {entry['step']} {units}: {e}"
        ) from e

    result = {
        "start": _convert(ureg, entry["start"], units, target_units),
        "end": _convert(ureg, entry["end"], units, target_units),
        "step": step,
    }
    if result["step"] <= 0:
        raise ValueError(f"Range step must be positive: {entry}")
    if result["start"] > result["end"]:
        raise ValueError(f"Range start is after its end: {entry}")
    return result


def parse_query_spec(spec: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a query spec and convert it to SI-style values.

    Returns
    -------
    dict
        'refrigerant' (Refrigerant or None), 'temperature' [°C] or None,
        'drop_diameter' [m] or None and 'sweep' (None or dict with 'kind',
        'refrigerants', 'temperatures' [°C] and 'diameters' [mm] ranges).
    """
    if not isinstance(spec, dict):
        raise ValueError(f"Query spec must be a mapping, got {type(spec)}")

    sweep_spec = spec.get("sweep")
    if sweep_spec is None:
        required_sections = ["refrigerant", "temperature", "drop_diameter"]
    elif sweep_spec.get("kind") == "diameter":
        required_sections = ["temperature"]
    elif sweep_spec.get("kind") == "temperature":
        required_sections = ["refrigerant"]
    else:
        raise ValueError(
            f"Sweep kind must be one of {SWEEP_KINDS}, "
            f"got {sweep_spec.get('kind')!r}"
        )

    for section in required_sections:
        if section not in spec:
            raise ValueError(f"Missing required section: {section}")

    query = {
        "refrigerant": None,
        "temperature": None,
        "drop_diameter": None,
        "sweep": None,
    }
    if "refrigerant" in spec:
        query["refrigerant"] = Refrigerant.parse(spec["refrigerant"])
    if "temperature" in spec:
        query["temperature"] = read_quantity(
            spec["temperature"], DEFAULT_TEMPERATURE_UNITS, "degC"
        )
    if "drop_diameter" in spec:
        query["drop_diameter"] = read_quantity(
            spec["drop_diameter"], DEFAULT_DIAMETER_UNITS, "m"
        )
        if not query["drop_diameter"] > 0:
            raise ValueError(
                f"Drop diameter must be positive, got {spec['drop_diameter']}"
            )

    if sweep_spec is not None:
        sweep = {"kind": sweep_spec["kind"]}
        if "refrigerants" in sweep_spec:
            sweep["refrigerants"] = [
                Refrigerant.parse(name) for name in sweep_spec["refrigerants"]
            ]
        elif query["refrigerant"] is not None:
            sweep["refrigerants"] = [query["refrigerant"]]
        else:
            sweep["refrigerants"] = list(Refrigerant)
        sweep["diameters"] = (
            read_range(sweep_spec["diameters"], DEFAULT_DIAMETER_UNITS, "mm")
            if "diameters" in sweep_spec
            else None
        )
        if sweep["diameters"] and not sweep["diameters"]["start"] > 0:
            raise ValueError(
                f"Drop diameters must be positive: {sweep_spec['diameters']}"
            )
        sweep["temperatures"] = (
            read_range(
                sweep_spec["temperatures"], DEFAULT_TEMPERATURE_UNITS, "degC"
            )
            if "temperatures" in sweep_spec
            else None
        )
        query["sweep"] = sweep

    return query


def load_query_spec(yaml_path: Union[str, Path]) -> Dict[str, Any]:
    """Load and validate a query specification from YAML."""
    with open(yaml_path, "r") as f:
        spec = yaml.safe_load(f)
    return parse_query_spec(spec)
