from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy.interpolate import CubicSpline


class InvalidTableError(ValueError):
    """Property table data violates its structural invariants"""


class DomainError(ValueError):
    """
    Query point outside the span of the tabulated data

    Attributes:
    -----------
    value : float
        Offending query value
    lower, upper : float
        Valid (closed) interval of the interpolated data
    """

    def __init__(self, value: float, lower: float, upper: float):
        self.value = value
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"Value {value} is outside the interpolation range "
            f"[{lower}, {upper}]"
        )


class PropertyCorrelation(ABC):
    """
    Abstract base class for property correlations
    """

    @abstractmethod
    def evaluate(
        self, T: Union[float, np.ndarray]
    ) -> Union[float, np.ndarray]:
        """Evaluate property at temperature T"""
        pass

    @abstractmethod
    def get_valid_range(self) -> Tuple[float, float]:
        """Return valid temperature range (T_min, T_max)"""
        pass

    @abstractmethod
    def to_dict(self) -> Dict:
        """Serialize correlation to dictionary"""
        pass


class SplineInterpolator(PropertyCorrelation):
    """
    Natural cubic spline through tabulated (x, y) pairs

    The spline has continuous first and second derivatives and zero second
    derivative at both end points. It is built once on construction and can
    then be evaluated any number of times. Queries outside [min(x), max(x)]
    are rejected, the spline is never extrapolated.

    Parameters:
    -----------
    x_data : sequence of float
        Independent variable, strictly increasing, at least 2 points
    y_data : sequence of float
        Dependent variable, same length as x_data, no missing values
    name : str, optional
        Label used in summaries and serialization

    Raises:
    -------
    InvalidTableError
        If the arrays differ in size, are too short, contain missing
        values or x_data is not strictly increasing.
    """

    def __init__(
        self,
        x_data: Sequence[float],
        y_data: Sequence[Optional[float]],
        name: str = "Spline",
    ):
        x_data = np.asarray(x_data, dtype=float)
        y_data = np.asarray(y_data, dtype=float)
        if x_data.ndim != 1 or x_data.shape != y_data.shape:
            raise InvalidTableError(
                f"Array sizes must match: x has {x_data.size} values, "
                f"y has {y_data.size} values"
            )
        if x_data.size < 2:
            raise InvalidTableError(
                f"At least 2 points are needed for interpolation, "
                f"got {x_data.size}"
            )
        if np.any(np.isnan(x_data)) or np.any(np.isnan(y_data)):
            raise InvalidTableError(
                "Missing values must be filled before interpolation"
            )
        if np.any(np.diff(x_data) <= 0):
            raise InvalidTableError(
                f"x values must be strictly increasing: {x_data.tolist()}"
            )

        self.x_data = x_data
        self.y_data = y_data
        self.x_min = float(x_data[0])
        self.x_max = float(x_data[-1])
        self.name = name
        self._spline = CubicSpline(
            x_data, y_data, bc_type="natural", extrapolate=False
        )

    def evaluate(
        self, x: Union[float, np.ndarray]
    ) -> Union[float, np.ndarray]:
        """
        Spline value at x

        Raises DomainError if x (or any element of x) is NaN or lies
        outside [x_min, x_max].
        """
        x_arr = np.asarray(x, dtype=float)
        outside = np.isnan(x_arr) | (x_arr < self.x_min) | (x_arr > self.x_max)
        if np.any(outside):
            bad_value = float(np.atleast_1d(x_arr)[np.atleast_1d(outside)][0])
            raise DomainError(bad_value, self.x_min, self.x_max)
        result = self._spline(x_arr)
        return float(result) if result.ndim == 0 else result

    def __call__(
        self, x: Union[float, np.ndarray]
    ) -> Union[float, np.ndarray]:
        return self.evaluate(x)

    def get_valid_range(self) -> Tuple[float, float]:
        return (self.x_min, self.x_max)

    def to_dict(self) -> Dict:
        return {
            "type": "natural_cubic_spline",
            "x_data": self.x_data.tolist(),
            "y_data": self.y_data.tolist(),
            "name": self.name,
        }

    def __repr__(self):
        return (
            f"SplineInterpolator(name={self.name!r}, "
            f"range=({self.x_min}, {self.x_max}), n_points={self.x_data.size})"
        )


def fill_missing(values: Sequence[Optional[float]]) -> np.ndarray:
    """
    Reconstruct missing interior entries of a tabulated column

    A natural cubic spline is fitted with the positional index of each
    present value (0, 1, 2, ...) as the independent variable, then evaluated
    at every index. Present values are therefore re-evaluated through the
    refit rather than copied, so they may move by round-off.

    Parameters:
    -----------
    values : sequence of float or None
        Column values, None (or NaN) marks a missing entry. The first and
        last entries must be present.

    Returns:
    --------
    np.ndarray
        Column with every entry filled. If nothing is missing the values
        are returned unchanged.

    Raises:
    -------
    InvalidTableError
        If the sequence is empty or its first or last entry is missing.
    """
    column = np.array(
        [np.nan if v is None else v for v in values], dtype=float
    )
    missing = np.isnan(column)
    if column.size == 0 or missing[0] or missing[-1]:
        first = values[0] if column.size else None
        last = values[-1] if column.size else None
        raise InvalidTableError(
            f"First and last values must be present: "
            f"first={first}, last={last}"
        )
    if not np.any(missing):
        return column

    index = np.arange(column.size, dtype=float)
    spline = SplineInterpolator(index[~missing], column[~missing], name="Gaps")
    return spline.evaluate(index)


def missing_indices(values: Sequence[Optional[float]]) -> List[int]:
    """Positions of missing (None or NaN) entries"""
    return [
        i for i, v in enumerate(values) if v is None or np.isnan(v)
    ]
