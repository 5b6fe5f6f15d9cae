"""Tests for spline interpolation and missing value reconstruction."""

import numpy as np
import pytest

from refrigerants.interpolation import (
    DomainError,
    InvalidTableError,
    SplineInterpolator,
    fill_missing,
    missing_indices,
)

T_DATA = [-30.0, -20.0, -10.0, 0.0, 10.0, 20.0, 30.0]
LIQUID_DENSITY = [1396.9, 1363.2, 1331.4, 1298.7, 1264.6, 1228.4, 1190.1]


def test_spline_reproduces_knots():
    """Spline passes through every point it was built from"""
    spline = SplineInterpolator(T_DATA, LIQUID_DENSITY)

    for T, rho in zip(T_DATA, LIQUID_DENSITY):
        assert spline.evaluate(T) == pytest.approx(rho, rel=1e-12)


def test_spline_linear_data_is_exact():
    """A natural spline through collinear points is the straight line"""
    x = [0.0, 1.0, 2.0, 3.0, 4.0]
    y = [1.0, 3.0, 5.0, 7.0, 9.0]
    spline = SplineInterpolator(x, y)

    assert spline.evaluate(2.5) == pytest.approx(6.0, rel=1e-12)
    assert spline.evaluate(0.25) == pytest.approx(1.5, rel=1e-12)


def test_spline_natural_boundary():
    """Second derivative vanishes at both end points"""
    x = [0.0, 1.0, 2.0, 6.0]
    y = [4.35, 6.71, 9.97, 37.89]
    spline = SplineInterpolator(x, y)

    # Interior second derivatives of this natural spline, solved by hand
    assert spline._spline(0.0, 2) == pytest.approx(0.0, abs=1e-12)
    assert spline._spline(6.0, 2) == pytest.approx(0.0, abs=1e-12)
    assert spline._spline(1.0, 2) == pytest.approx(31.68 / 39, rel=1e-10)
    assert spline._spline(2.0, 2) == pytest.approx(
        5.4 - 4 * 31.68 / 39, rel=1e-10
    )


def test_spline_two_points():
    """Two points give linear interpolation"""
    spline = SplineInterpolator([0.0, 10.0], [2.0, 4.0])

    assert spline.evaluate(5.0) == pytest.approx(3.0)


def test_spline_returns_float_for_scalar_and_array_for_array():
    spline = SplineInterpolator(T_DATA, LIQUID_DENSITY)

    assert isinstance(spline.evaluate(5.0), float)
    values = spline.evaluate(np.array([-30.0, 0.0, 30.0]))
    assert isinstance(values, np.ndarray)
    np.testing.assert_allclose(values, [1396.9, 1298.7, 1190.1], rtol=1e-12)


@pytest.mark.parametrize("x0", [-30.0001, 30.0001, -100.0, 1e6, np.nan])
def test_spline_rejects_points_outside_domain(x0):
    spline = SplineInterpolator(T_DATA, LIQUID_DENSITY)

    with pytest.raises(DomainError) as exc_info:
        spline.evaluate(x0)

    assert exc_info.value.lower == -30.0
    assert exc_info.value.upper == 30.0


def test_spline_domain_error_reports_offending_value():
    spline = SplineInterpolator(T_DATA, LIQUID_DENSITY)

    with pytest.raises(DomainError, match="45"):
        spline.evaluate(np.array([0.0, 45.0]))


def test_spline_accepts_domain_end_points():
    spline = SplineInterpolator(T_DATA, LIQUID_DENSITY)
    assert spline.get_valid_range() == (-30.0, 30.0)

    assert spline(-30.0) == pytest.approx(1396.9)
    assert spline(30.0) == pytest.approx(1190.1)


@pytest.mark.parametrize(
    "x, y",
    [
        ([0.0, 1.0, 2.0], [1.0, 2.0]),  # size mismatch
        ([0.0], [1.0]),  # too short
        ([0.0, 1.0, 2.0], [1.0, None, 3.0]),  # missing value
        ([0.0, 2.0, 1.0], [1.0, 2.0, 3.0]),  # not increasing
        ([0.0, 1.0, 1.0], [1.0, 2.0, 3.0]),  # repeated x
    ],
)
def test_spline_rejects_invalid_data(x, y):
    with pytest.raises(InvalidTableError):
        SplineInterpolator(x, y)


def test_spline_to_dict():
    spline = SplineInterpolator([0.0, 1.0], [2.0, 3.0], name="Test")

    data = spline.to_dict()

    assert data["type"] == "natural_cubic_spline"
    assert data["x_data"] == [0.0, 1.0]
    assert data["y_data"] == [2.0, 3.0]
    assert data["name"] == "Test"


def test_fill_missing_identity_without_gaps():
    values = [6.017, 9.108, 13.328, 18.947, 26.299, 35.817, 48.108]

    filled = fill_missing(values)

    assert np.array_equal(filled, np.array(values))


def test_fill_missing_by_position():
    """Gaps are filled along the row index, not the temperature"""
    values = [4.35, 6.71, 9.97, None, None, None, 37.89]

    filled = fill_missing(values)

    # Natural spline through (0, 4.35), (1, 6.71), (2, 9.97), (6, 37.89)
    assert filled[3] == pytest.approx(15.068076923076923, rel=1e-10)
    assert len(filled) == len(values)
    # Present values are refitted, so only approximately preserved
    for i in (0, 1, 2, 6):
        assert filled[i] == pytest.approx(values[i], rel=1e-12)
    assert np.all(np.diff(filled) > 0)


def test_fill_missing_single_gap_between_neighbours():
    values = [1.0, 2.0, None, 4.5, 6.0]

    filled = fill_missing(values)

    assert 2.0 < filled[2] < 4.5
    assert np.array_equal(filled, fill_missing(values))


def test_fill_missing_linear_gap():
    filled = fill_missing([0.0, 1.0, None, 3.0, 4.0])

    assert filled[2] == pytest.approx(2.0, rel=1e-12)


def test_fill_missing_accepts_nan_as_missing():
    filled = fill_missing([0.0, 1.0, np.nan, 3.0, 4.0])

    assert filled[2] == pytest.approx(2.0, rel=1e-12)


@pytest.mark.parametrize(
    "values", [[None, 1.0, 2.0], [1.0, 2.0, None], [None], []]
)
def test_fill_missing_requires_first_and_last(values):
    with pytest.raises(InvalidTableError):
        fill_missing(values)


def test_missing_indices():
    assert missing_indices([1.0, None, 2.0, np.nan, 3.0]) == [1, 3]
    assert missing_indices([1.0, 2.0]) == []
