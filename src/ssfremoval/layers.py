"""
Depth-Resolved Layer Contributions.

In a maturing slow sand filter the removal shifts from the deeper bed towards the
Schmutzdecke. Depth-resolved pilot observations show the top 10 cm contributing
about a third of the removal after six months and nearly all of it after two
years. This module describes that shift with an empirical maturation curve of
Schmutzdecke age,

    f_upper = min(ceiling, min(cap, baseline + asymptote (1 - exp(-rate * months))) + bonus)

where ``bonus`` applies to inoculated filters only. The curve is not fitted to
the layer observations; those are available separately in
:mod:`ssfremoval.reference`.

The upper-layer removal is the estimate of a regression model for the top layer,
for example the pilot-scale models of :mod:`ssfremoval.regression`. The deeper
layer follows its own decay with maturation,

    deeper = upper (1 - f_upper) / f_upper * deeper_scale

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import logging
from collections.abc import Callable

import numpy as np
import numpy.typing as npt
import pandas as pd

from ssfremoval import regression, units
from ssfremoval.exceptions import DomainError
from ssfremoval.parameters import ParameterRecord

logger = logging.getLogger(__name__)

DEFAULT_BASELINE = 0.25
DEFAULT_ASYMPTOTE = 0.70
DEFAULT_RATE = 0.15  # [1/month]
DEFAULT_INOCULATION_BONUS = 0.10
DEFAULT_CAP = 0.95
DEFAULT_CEILING = 0.98
DEFAULT_DEEPER_SCALE = 0.3
UPPER_LAYER_DEPTH = 0.10  # [m]


def upper_layer_fraction(
    *,
    age_days: npt.ArrayLike,
    inoculated: bool,
    baseline: float = DEFAULT_BASELINE,
    asymptote: float = DEFAULT_ASYMPTOTE,
    rate: float = DEFAULT_RATE,
    bonus: float = DEFAULT_INOCULATION_BONUS,
    cap: float = DEFAULT_CAP,
    ceiling: float = DEFAULT_CEILING,
) -> npt.NDArray[np.floating]:
    """
    Fraction of the total removal that takes place in the upper layer.

    Parameters
    ----------
    age_days : array-like
        Schmutzdecke age [days]. Converted to months of 30 days.
    inoculated : bool
        Whether the Schmutzdecke was inoculated; adds ``bonus`` to the fraction.
    baseline : float, optional
        Fraction of a new filter (default 0.25).
    asymptote : float, optional
        Growth of the fraction with maturation (default 0.70).
    rate : float, optional
        Maturation rate [1/month] (default 0.15).
    bonus : float, optional
        Increase for inoculated filters (default 0.10).
    cap : float, optional
        Upper bound of the maturation curve before the bonus (default 0.95).
    ceiling : float, optional
        Upper bound of the final fraction (default 0.98). Keeps the deeper layer
        from being reported as contributing nothing.

    Returns
    -------
    numpy.ndarray
        Upper-layer fraction in (0, ``ceiling``].

    Examples
    --------
    >>> from ssfremoval.layers import upper_layer_fraction
    >>> print(upper_layer_fraction(age_days=730.0, inoculated=True))
    0.98
    """
    months = units.days_to_months(np.maximum(np.asarray(age_days, dtype=float), 0.0))
    maturation = np.minimum(cap, baseline + asymptote * (1.0 - np.exp(-rate * months)))
    return np.minimum(ceiling, maturation + (bonus if inoculated else 0.0))


def split_removal(
    *, total_removal: float, upper_fraction: float, deeper_scale: float = DEFAULT_DEEPER_SCALE
) -> dict[str, float]:
    """
    Split a removal estimate into upper and deeper layer contributions.

    Parameters
    ----------
    total_removal : float
        Removal estimate of the upper-layer model [-].
    upper_fraction : float
        Upper-layer fraction, in (0, 1].
    deeper_scale : float, optional
        Scale factor of the deeper-layer removal (default 0.3).

    Returns
    -------
    dict
        ``upper_layer_removal``, ``deeper_layer_removal``, their sum
        ``total_removal``, ``upper_fraction`` and ``deeper_fraction``.

    Raises
    ------
    DomainError
        If ``upper_fraction`` is outside (0, 1].
    """
    if not 0.0 < upper_fraction <= 1.0:
        msg = f"upper_fraction must be in (0, 1], got {upper_fraction}"
        raise DomainError(msg)
    deeper = total_removal * (1.0 - upper_fraction) / upper_fraction * deeper_scale
    return {
        "upper_layer_removal": total_removal,
        "deeper_layer_removal": deeper,
        "total_removal": total_removal + deeper,
        "upper_fraction": upper_fraction,
        "deeper_fraction": 1.0 - upper_fraction,
    }


def time_series(
    *,
    inoculated: bool,
    removal_model: Callable[[float], float],
    months: npt.ArrayLike | None = None,
    **fraction_kwargs,
) -> pd.DataFrame:
    """
    Layer contributions over the Schmutzdecke age.

    Parameters
    ----------
    inoculated : bool
        Whether the Schmutzdecke was inoculated.
    removal_model : callable
        Upper-layer removal as a function of age [days]. Negative estimates are
        clamped to zero.
    months : array-like, optional
        Ages [months] to evaluate (default 1 to 24).
    **fraction_kwargs
        Passed on to :func:`upper_layer_fraction`.

    Returns
    -------
    pandas.DataFrame
        One row per month with the entries of :func:`split_removal` and
        ``upper_percent`` and ``deeper_percent`` [%].

    See Also
    --------
    regression_removal_model : Removal model backed by the regression registry
    """
    if months is None:
        months = np.arange(1, 25)
    rows = []
    for month in np.asarray(months, dtype=float):
        age_days = month * units.DAYS_PER_MONTH
        fraction = float(upper_layer_fraction(age_days=age_days, inoculated=inoculated, **fraction_kwargs))
        estimate = removal_model(age_days)
        if estimate < 0.0:
            logger.debug("Clamping negative removal %.4g at month %g", estimate, month)
        split = split_removal(total_removal=max(estimate, 0.0), upper_fraction=fraction)
        rows.append({
            "month": month,
            **split,
            "upper_percent": fraction * 100.0,
            "deeper_percent": (1.0 - fraction) * 100.0,
        })
    return pd.DataFrame(rows)


def regression_removal_model(
    scale: regression.Scale | str, key: str, params: ParameterRecord
) -> Callable[[float], float]:
    """
    Removal model of age built from a registry regression.

    Parameters
    ----------
    scale : Scale or str
        Scale of the regression, usually ``'pilot'``.
    key : str
        Model key.
    params : ParameterRecord
        Record providing all fields but ``age_days``.

    Returns
    -------
    callable
        ``f(age_days)`` returning the raw regression estimate.
    """
    definition = regression.get_model(scale, key)

    def removal_at(age_days: float) -> float:
        return regression.predict(definition, params.replace(age_days=age_days)).raw_value

    return removal_at
