"""
Unit Conversions at the Model Boundary.

The public entry points of the removal models accept the units in which filter
operators and the underlying publications report their data (grain sizes in mm,
particle sizes in µm, filtration rates in m/h, temperatures in °C). The
correlations themselves are written in SI units. All conversions between the two
happen here so that each one is done once and can be tested on its own.

Every function accepts scalars or array-likes and returns ``numpy`` values of the
same shape.

Available functions:

- :func:`micrometre_to_metre`, :func:`millimetre_to_metre`, :func:`centimetre_to_metre`
- :func:`metre_per_hour_to_metre_per_second`, :func:`metre_per_day_to_metre_per_second`
- :func:`celsius_to_kelvin`
- :func:`hamaker_to_joule` - Hamaker constant given in units of 1e-20 J to J.
- :func:`days_to_months` - Schmutzdecke age in days to months of 30 days.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import numpy as np
import numpy.typing as npt

SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0
KELVIN_OFFSET = 273.15
HAMAKER_UNIT = 1e-20  # [J]
DAYS_PER_MONTH = 30.0


def micrometre_to_metre(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Convert a length in micrometres [µm] to metres [m].

    Examples
    --------
    >>> from ssfremoval.units import micrometre_to_metre
    >>> print(f"{micrometre_to_metre(1.0):.1e}")
    1.0e-06
    """
    return np.asarray(value, dtype=float) * 1e-6


def millimetre_to_metre(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """Convert a length in millimetres [mm] to metres [m]."""
    return np.asarray(value, dtype=float) * 1e-3


def centimetre_to_metre(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """Convert a length in centimetres [cm] to metres [m]."""
    return np.asarray(value, dtype=float) * 1e-2


def metre_per_hour_to_metre_per_second(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Convert a filtration rate in m/h to m/s.

    Examples
    --------
    >>> from ssfremoval.units import metre_per_hour_to_metre_per_second
    >>> print(f"{metre_per_hour_to_metre_per_second(0.36):.1e}")
    1.0e-04
    """
    return np.asarray(value, dtype=float) / SECONDS_PER_HOUR


def metre_per_day_to_metre_per_second(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """Convert a velocity in m/d to m/s."""
    return np.asarray(value, dtype=float) / SECONDS_PER_DAY


def celsius_to_kelvin(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Convert a temperature in degrees Celsius to Kelvin.

    Examples
    --------
    >>> from ssfremoval.units import celsius_to_kelvin
    >>> print(f"{celsius_to_kelvin(20.0):.2f}")
    293.15
    """
    return np.asarray(value, dtype=float) + KELVIN_OFFSET


def hamaker_to_joule(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Convert a Hamaker constant given in units of 1e-20 J to J.

    Hamaker constants for bacteria and viruses on quartz are of order 1e-20 J,
    which is why the model inputs are scaled that way.
    """
    return np.asarray(value, dtype=float) * HAMAKER_UNIT


def days_to_months(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Convert an age in days to months.

    A month is taken as 30 days, the convention of the maturation curve in
    :mod:`ssfremoval.layers`.
    """
    return np.asarray(value, dtype=float) / DAYS_PER_MONTH
