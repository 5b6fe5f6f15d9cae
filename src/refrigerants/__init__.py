"""
Refrigerants Module

Drift (terminal rise) velocity of vapor droplets in refrigerants, from
tabulated saturation properties and the Archimedes/Reynolds criteria chain.

This module provides:
- Natural cubic spline interpolation of tabulated properties
- Reconstruction of missing table entries
- Property tables for R134, R407, R410 and R32
- Archimedes criterion, Reynolds criterion and drift velocity formulas
- Diameter and temperature sweeps with pandas output

Classes:
--------
SplineInterpolator : PropertyCorrelation
    Natural cubic spline through tabulated data
TableRow, PropertyTable
    Static property tables
Refrigerant : Enum
    Closed set of supported refrigerants
Freon
    Refrigerant properties at an ambient temperature
CriteriaResult
    (archimedes, reynolds, drift_velocity) triple

Functions:
----------
fill_missing : Reconstruct missing entries of a table column
archimedes_criterion, reynolds_criterion, drift_velocity : Formulas
calculate_criteria : Full criteria chain for a refrigerant and droplet
diameter_sweep, temperature_sweep : Batch evaluation
"""

from .formulas import (
    G,
    CriteriaResult,
    archimedes_criterion,
    calculate_criteria,
    drift_velocity,
    reynolds_criterion,
)
from .freon import (
    Freon,
    PropertyTable,
    Refrigerant,
    TableRow,
)
from .interpolation import (
    DomainError,
    InvalidTableError,
    PropertyCorrelation,
    SplineInterpolator,
    fill_missing,
)
from .sweep import (
    diameter_range,
    diameter_sweep,
    temperature_range,
    temperature_sweep,
)

# Module metadata
__version__ = "0.1.0"

# Define what gets imported with 'from refrigerants import *'
__all__ = [
    # Interpolation
    "PropertyCorrelation",
    "SplineInterpolator",
    "fill_missing",
    "DomainError",
    "InvalidTableError",
    # Refrigerants
    "TableRow",
    "PropertyTable",
    "Refrigerant",
    "Freon",
    # Formulas
    "G",
    "CriteriaResult",
    "archimedes_criterion",
    "reynolds_criterion",
    "drift_velocity",
    "calculate_criteria",
    # Sweeps
    "diameter_range",
    "temperature_range",
    "diameter_sweep",
    "temperature_sweep",
]
