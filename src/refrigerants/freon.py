"""
Refrigerant (freon) property tables and temperature-dependent properties

Each refrigerant owns one static table of saturation properties measured
every 10 °C between -30 °C and 30 °C:

- Vapor dynamic viscosity [µPa·s]
- Vapor density [kg/m³] (some entries missing, reconstructed on use)
- Liquid density [kg/m³]

Properties at an arbitrary temperature inside the table span are obtained
by natural cubic spline interpolation along the temperature column.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .interpolation import (
    InvalidTableError,
    SplineInterpolator,
    fill_missing,
    missing_indices,
)

# Table viscosities are recorded in µPa·s
VISCOSITY_SCALE = 1e-6


@dataclass(frozen=True)
class TableRow:
    """
    Tabulated properties at one temperature

    Attributes:
    -----------
    temperature : float
        Ambient temperature [°C]
    vapor_viscosity : float
        Vapor dynamic viscosity [µPa·s]
    vapor_density : float or None
        Vapor density [kg/m³], None when not measured
    liquid_density : float
        Liquid density [kg/m³]
    """

    temperature: float
    vapor_viscosity: float
    vapor_density: Optional[float]
    liquid_density: float


class PropertyTable:
    """
    Immutable, temperature-ordered set of table rows for one substance

    Raises InvalidTableError unless the table has at least two rows,
    strictly increasing temperatures and a vapor density in its first and
    last rows.
    """

    def __init__(self, rows: Sequence[TableRow]):
        rows = tuple(rows)
        if len(rows) < 2:
            raise InvalidTableError(
                f"A property table needs at least 2 rows, got {len(rows)}"
            )
        temperatures = [row.temperature for row in rows]
        if any(t1 >= t2 for t1, t2 in zip(temperatures, temperatures[1:])):
            raise InvalidTableError(
                f"Table temperatures must be strictly increasing: "
                f"{temperatures}"
            )
        if rows[0].vapor_density is None or rows[-1].vapor_density is None:
            raise InvalidTableError(
                f"First and last vapor densities must be present: "
                f"first={rows[0].vapor_density}, "
                f"last={rows[-1].vapor_density}"
            )
        self._rows = rows

    @property
    def rows(self) -> Tuple[TableRow, ...]:
        return self._rows

    @property
    def temperatures(self) -> np.ndarray:
        return np.array([row.temperature for row in self._rows])

    @property
    def vapor_viscosities(self) -> np.ndarray:
        return np.array([row.vapor_viscosity for row in self._rows])

    @property
    def vapor_densities(self) -> List[Optional[float]]:
        return [row.vapor_density for row in self._rows]

    @property
    def liquid_densities(self) -> np.ndarray:
        return np.array([row.liquid_density for row in self._rows])

    @property
    def T_min(self) -> float:
        return self._rows[0].temperature

    @property
    def T_max(self) -> float:
        return self._rows[-1].temperature

    def __len__(self):
        return len(self._rows)

    def __iter__(self):
        return iter(self._rows)


R134_TABLE = PropertyTable(
    [
        TableRow(-30.0, 9.74, 4.35, 1396.9),
        TableRow(-20.0, 10.2, 6.71, 1363.2),
        TableRow(-10.0, 10.7, 9.97, 1331.4),
        TableRow(0.0, 11.2, None, 1298.7),
        TableRow(10.0, 11.7, None, 1264.6),
        TableRow(20.0, 12.2, None, 1228.4),
        TableRow(30.0, 12.7, 37.89, 1190.1),
    ]
)

R407_TABLE = PropertyTable(
    [
        TableRow(-30.0, 10.2, 6.017, 1338.83),
        TableRow(-20.0, 10.11, 9.108, 1306.71),
        TableRow(-10.0, 10.97, 13.328, 1273.11),
        TableRow(0.0, 11.43, 18.947, 1237.76),
        TableRow(10.0, 12.2, 26.299, 1200.33),
        TableRow(20.0, 12.67, 35.817, 1160.36),
        TableRow(30.0, 13.08, 48.108, 1117.2),
    ]
)

R410_TABLE = PropertyTable(
    [
        TableRow(-30.0, 9.87, 2.683, 1278.534),
        TableRow(-20.0, 10.54, 3.944, 1245.297),
        TableRow(-10.0, 10.86, 5.635, 1209.914),
        TableRow(0.0, 11.21, 7.849, 1171.968),
        TableRow(10.0, 12.4, 10.688, 1130.887),
        TableRow(20.0, 12.89, 14.26, 1085.849),
        TableRow(30.0, 13.02, 18.681, 1035.603),
    ]
)

R32_TABLE = PropertyTable(
    [
        TableRow(-30.0, 10.18, 7.61, 1151.0),
        TableRow(-20.0, 10.61, 11.109, 1120.6),
        TableRow(-10.0, 11.05, 15.801, 1088.8),
        TableRow(0.0, 11.51, 21.997, 1055.3),
        TableRow(10.0, 12.0, 30.101, 1019.7),
        TableRow(20.0, 12.86, 40.66, 981.4),
        TableRow(30.0, 13.58, 54.468, 939.6),
    ]
)


class Refrigerant(Enum):
    """Closed set of supported refrigerants, in menu order"""

    R134 = "R134"
    R407 = "R407"
    R410 = "R410"
    R32 = "R32"

    @property
    def table(self) -> PropertyTable:
        return _TABLES[self]

    @classmethod
    def from_index(cls, index: int) -> "Refrigerant":
        """Refrigerant at a zero-based menu position"""
        members = list(cls)
        if not 0 <= index < len(members):
            raise IndexError(
                f"Refrigerant index must be in 0..{len(members) - 1}, "
                f"got {index}"
            )
        return members[index]

    @classmethod
    def parse(cls, name: Union[str, "Refrigerant"]) -> "Refrigerant":
        """Look up a refrigerant by name, e.g. 'R410', 'r410' or '410'"""
        if isinstance(name, cls):
            return name
        key = str(name).strip().upper()
        if not key.startswith("R"):
            key = "R" + key
        try:
            return cls(key)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown refrigerant {name!r}, expected one of: {valid}"
            ) from None


_TABLES: Dict[Refrigerant, PropertyTable] = {
    Refrigerant.R134: R134_TABLE,
    Refrigerant.R407: R407_TABLE,
    Refrigerant.R410: R410_TABLE,
    Refrigerant.R32: R32_TABLE,
}


@lru_cache(maxsize=None)
def property_correlations(
    refrigerant: Refrigerant,
) -> Dict[str, SplineInterpolator]:
    """
    Spline correlations vs temperature for one refrigerant

    Built once per refrigerant. The vapor density column is densified with
    fill_missing() before fitting.
    """
    table = refrigerant.table
    T = table.temperatures
    return {
        "vapor_density": SplineInterpolator(
            T,
            fill_missing(table.vapor_densities),
            name=f"{refrigerant.value} vapor density",
        ),
        "liquid_density": SplineInterpolator(
            T,
            table.liquid_densities,
            name=f"{refrigerant.value} liquid density",
        ),
        "vapor_viscosity": SplineInterpolator(
            T,
            table.vapor_viscosities,
            name=f"{refrigerant.value} vapor viscosity",
        ),
    }


class Freon:
    """
    Refrigerant properties at an ambient temperature

    Properties are interpolated from the refrigerant's table on first
    access and memoized. Assigning a new temperature discards the
    memoized values.

    Parameters:
    -----------
    refrigerant : Refrigerant or str
        Refrigerant, or its name (e.g. "R410")
    temperature : float
        Ambient temperature [°C]

    Properties:
    -----------
    - vapor_density (rho_v) [kg/m³]
    - liquid_density (rho_l) [kg/m³]
    - dynamic_vapor_viscosity (mu_v) [Pa·s]
    - kinematic_vapor_viscosity (nu_v) [m²/s]

    Any property raises DomainError if the temperature is outside the
    table span.
    """

    def __init__(
        self, refrigerant: Union[Refrigerant, str], temperature: float
    ):
        self.refrigerant = Refrigerant.parse(refrigerant)
        self._temperature = float(temperature)
        self._values: Dict[str, float] = {}

    @property
    def temperature(self) -> float:
        return self._temperature

    @temperature.setter
    def temperature(self, value: float):
        value = float(value)
        if value != self._temperature:
            self._values.clear()
        self._temperature = value

    @property
    def name(self) -> str:
        return self.refrigerant.value

    @property
    def table(self) -> PropertyTable:
        return self.refrigerant.table

    @property
    def correlations(self) -> Dict[str, SplineInterpolator]:
        return property_correlations(self.refrigerant)

    def _memoized(self, key: str, func: Callable[[], float]) -> float:
        if key not in self._values:
            self._values[key] = func()
        return self._values[key]

    @property
    def available_temperature(self) -> Tuple[float, float]:
        """
        Temperature range as published with the original results.

        Both bounds equal the lowest table temperature. Use
        get_valid_range() for the span the interpolation accepts.
        """
        T_min = float(self.table.temperatures.min())
        return (T_min, T_min)

    def get_valid_range(self) -> Tuple[float, float]:
        """Temperature span of the property table (T_min, T_max) [°C]"""
        return (self.table.T_min, self.table.T_max)

    @property
    def vapor_density(self) -> float:
        """Vapor density [kg/m³]"""
        return self._memoized(
            "vapor_density",
            lambda: self.correlations["vapor_density"].evaluate(
                self.temperature
            ),
        )

    @property
    def liquid_density(self) -> float:
        """Liquid density [kg/m³]"""
        return self._memoized(
            "liquid_density",
            lambda: self.correlations["liquid_density"].evaluate(
                self.temperature
            ),
        )

    @property
    def dynamic_vapor_viscosity(self) -> float:
        """Vapor dynamic viscosity [Pa·s]"""
        return self._memoized(
            "dynamic_vapor_viscosity",
            lambda: self.correlations["vapor_viscosity"].evaluate(
                self.temperature
            )
            * VISCOSITY_SCALE,
        )

    @property
    def kinematic_vapor_viscosity(self) -> float:
        """Vapor kinematic viscosity [m²/s]"""
        return self._memoized(
            "kinematic_vapor_viscosity",
            lambda: self.dynamic_vapor_viscosity / self.vapor_density,
        )

    def get_all_properties(self) -> Dict[str, float]:
        """All derived properties at the current temperature"""
        return {
            "vapor_density": self.vapor_density,
            "liquid_density": self.liquid_density,
            "dynamic_vapor_viscosity": self.dynamic_vapor_viscosity,
            "kinematic_vapor_viscosity": self.kinematic_vapor_viscosity,
        }

    def summary(self):
        """Print summary of the property table"""
        T_min, T_max = self.get_valid_range()
        print(f"Refrigerant: {self.name}")
        print(f"  Table range: {T_min:.1f}°C to {T_max:.1f}°C")
        print(f"  Ambient temperature: {self.temperature:.1f}°C")
        gaps = missing_indices(self.table.vapor_densities)
        if gaps:
            reconstructed = ", ".join(
                f"{self.table.rows[i].temperature:.1f}°C" for i in gaps
            )
            print(f"  Reconstructed vapor densities: {reconstructed}")
        print("\nCorrelations:")
        for prop_name, corr in self.correlations.items():
            print(f"  • {prop_name}: {corr.name}")

    def __repr__(self):
        return f"Freon({self.name!r}, temperature={self.temperature})"
