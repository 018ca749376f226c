import numpy as np
import pytest
from numpy.testing import assert_allclose

from ssfremoval import units


@pytest.mark.parametrize(
    ("func", "value", "expected"),
    [
        (units.micrometre_to_metre, 1.0, 1e-6),
        (units.micrometre_to_metre, 0.05, 5e-8),
        (units.millimetre_to_metre, 0.2, 2e-4),
        (units.centimetre_to_metre, 52.0, 0.52),
        (units.metre_per_hour_to_metre_per_second, 3.6, 1e-3),
        (units.metre_per_day_to_metre_per_second, 86.4, 1e-3),
        (units.celsius_to_kelvin, 20.0, 293.15),
        (units.celsius_to_kelvin, 0.0, 273.15),
        (units.hamaker_to_joule, 1.0, 1e-20),
        (units.days_to_months, 730.0, 730.0 / 30.0),
    ],
)
def test_conversion_values(func, value, expected):
    """Each boundary conversion produces the SI value."""
    assert_allclose(func(value), expected, rtol=1e-12)


def test_conversions_are_vectorised():
    """Conversions accept arrays and keep their shape."""
    diameters = np.array([0.01, 0.1, 1.0, 10.0])
    result = units.micrometre_to_metre(diameters)
    assert result.shape == diameters.shape
    assert_allclose(result, diameters * 1e-6)


def test_velocity_conversion_matches_seconds_per_hour():
    """Filtration velocities of 0.5 m/h are about 1.4e-4 m/s."""
    assert_allclose(units.metre_per_hour_to_metre_per_second(0.5), 0.5 / units.SECONDS_PER_HOUR)


def test_conversions_return_float_arrays():
    """Integer inputs are converted to floats."""
    assert units.celsius_to_kelvin(20).dtype == np.float64
