"""
Log Removal Conventions.

Two logarithmic conventions coexist in the slow sand filter literature and in this
package:

- log10 removal, ``LR = -log10(C/C0)``, used by the two-site kinetic model, the
  clean-bed collector model and the regression registry;
- natural-log removal, ``-ln(C/C0)``, the output of the system-property regression
  of the extended CFT model.

The two differ by a factor ``ln(10)``; mixing them silently overstates removal by
130 %. The functions below are the only place where the conversion is done.

For a first-order removal process over a filter bed the concentration decays as
``C(x)/C0 = exp(-lambda * x)`` with ``lambda`` [1/m] the spatial removal
coefficient, so the log10 removal over a depth ``L`` is ``lambda * L / ln(10)``.

Available functions:

- :func:`ln_removal_to_log10_removal` and :func:`log10_removal_to_ln_removal`
- :func:`concentration_ratio_to_log10_removal` and :func:`log10_removal_to_concentration_ratio`
- :func:`removal_coefficient_to_log10_removal` - first-order log10 removal over a depth.
- :func:`clamp_non_negative` - presentation clamp for removal values.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import numpy as np
import numpy.typing as npt

from ssfremoval.exceptions import DomainError

LN10 = np.log(10.0)


def ln_removal_to_log10_removal(ln_removal: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Convert a natural-log removal ``-ln(C/C0)`` to a log10 removal ``-log10(C/C0)``.

    Parameters
    ----------
    ln_removal : array-like
        Natural-log removal [-].

    Returns
    -------
    log10_removal : numpy.ndarray
        Log10 removal [-], ``ln_removal / ln(10)``.

    See Also
    --------
    log10_removal_to_ln_removal : Inverse conversion

    Examples
    --------
    >>> import numpy as np
    >>> from ssfremoval.logremoval import ln_removal_to_log10_removal
    >>> print(f"{ln_removal_to_log10_removal(np.log(1000.0)):.3f}")
    3.000
    """
    return np.asarray(ln_removal, dtype=float) / LN10


def log10_removal_to_ln_removal(log10_removal: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Convert a log10 removal to a natural-log removal.

    See Also
    --------
    ln_removal_to_log10_removal : Inverse conversion
    """
    return np.asarray(log10_removal, dtype=float) * LN10


def concentration_ratio_to_log10_removal(ratio: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Compute the log10 removal from an effluent to influent concentration ratio.

    Parameters
    ----------
    ratio : array-like
        Concentration ratio C/C0 [-]. Must be positive.

    Returns
    -------
    log10_removal : numpy.ndarray
        ``-log10(C/C0)``.

    Raises
    ------
    DomainError
        If any ratio is not strictly positive.

    Notes
    -----
    Log removal is a logarithmic measure of pathogen reduction:
    - Log 1 = 90% reduction
    - Log 2 = 99% reduction
    - Log 3 = 99.9% reduction
    """
    ratio = np.asarray(ratio, dtype=float)
    if np.any(ratio <= 0.0):
        msg = "Concentration ratio must be positive to express it as log removal"
        raise DomainError(msg)
    return -np.log10(ratio)


def log10_removal_to_concentration_ratio(log10_removal: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """Compute C/C0 from a log10 removal, ``10 ** -LR``."""
    return 10.0 ** (-np.asarray(log10_removal, dtype=float))


def removal_coefficient_to_log10_removal(
    *, removal_coefficient: npt.ArrayLike, depth: npt.ArrayLike
) -> npt.NDArray[np.floating]:
    """
    Compute log10 removal of a first-order process over a filter depth.

    Parameters
    ----------
    removal_coefficient : array-like
        Spatial first-order removal coefficient lambda [1/m], as in
        ``C(x)/C0 = exp(-lambda * x)``.
    depth : array-like
        Depth travelled through the bed [m].

    Returns
    -------
    log10_removal : numpy.ndarray
        ``lambda * depth / ln(10)``.

    See Also
    --------
    ssfremoval.collector.filter_scale_log_removal : CFT removal coefficient applied over a bed
    ssfremoval.twosite.concentration_profile : Dispersive steady-state profile

    Examples
    --------
    >>> from ssfremoval.logremoval import removal_coefficient_to_log10_removal
    >>> lr = removal_coefficient_to_log10_removal(removal_coefficient=4.605170185988092, depth=1.0)
    >>> print(f"{lr:.3f}")
    2.000
    """
    return np.asarray(removal_coefficient, dtype=float) * np.asarray(depth, dtype=float) / LN10


def clamp_non_negative(value: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Clamp removal values at zero for presentation.

    Regression models can return negative removal outside their calibration range.
    Removal cannot be negative in the output convention, but the raw value is kept
    by the callers for diagnostics; this function is only applied to the presented
    value.
    """
    return np.maximum(np.asarray(value, dtype=float), 0.0)
