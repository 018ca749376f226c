"""
Sensitivity Sweeps.

Every model module exposes a sweep that re-evaluates the model along one input
variable while holding the others fixed. The sampling and the collection of
results into a table are shared and live here.

A sweep result is a :class:`pandas.DataFrame` with the swept variable as the first
column and one column per model output, one row per sample, in sampling order.
Sweeps hold no state: the same inputs always regenerate the same table.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

from collections.abc import Callable, Mapping
from typing import Any

import numpy as np
import numpy.typing as npt
import pandas as pd

from ssfremoval.exceptions import DomainError


def sample_values(
    *,
    start: float,
    stop: float,
    num: int = 50,
    spacing: str = "linear",
) -> npt.NDArray[np.floating]:
    """
    Sample values of a swept variable.

    Parameters
    ----------
    start : float
        First value.
    stop : float
        Last value (inclusive).
    num : int, optional
        Number of samples (default 50).
    spacing : {'linear', 'log'}, optional
        Linear spacing, or logarithmic spacing for variables that span several
        orders of magnitude such as particle diameter (default 'linear').

    Returns
    -------
    values : numpy.ndarray
        Array of ``num`` sample values.

    Raises
    ------
    DomainError
        If ``num`` is smaller than 1 or log spacing is requested for non-positive bounds.
    ValueError
        If ``spacing`` is not recognised.

    Examples
    --------
    >>> from ssfremoval.sweep import sample_values
    >>> sample_values(start=0.01, stop=10.0, num=4, spacing="log")
    array([ 0.01,  0.1 ,  1.  , 10.  ])
    """
    if num < 1:
        msg = f"num must be at least 1, got {num}"
        raise DomainError(msg)
    if spacing == "linear":
        return np.linspace(start, stop, num)
    if spacing == "log":
        if start <= 0.0 or stop <= 0.0:
            msg = "Log spacing requires positive start and stop"
            raise DomainError(msg)
        return np.logspace(np.log10(start), np.log10(stop), num)
    msg = f"spacing must be 'linear' or 'log', got {spacing!r}"
    raise ValueError(msg)


def evaluate_sweep(
    func: Callable[..., Mapping[str, Any] | float],
    *,
    variable: str,
    values: npt.ArrayLike,
    fixed_params: Mapping[str, Any],
    outputs: list[str] | None = None,
) -> pd.DataFrame:
    """
    Evaluate a model at each value of one variable.

    Parameters
    ----------
    func : callable
        Model evaluated as ``func(**params)``. Returns either a scalar or a
        mapping of named scalar outputs.
    variable : str
        Keyword of ``func`` that is swept.
    values : array-like
        Values of the swept variable.
    fixed_params : mapping
        Keyword arguments held fixed. A value for ``variable`` in here is
        overridden by the sweep.
    outputs : list of str, optional
        Keys of the mapping returned by ``func`` to keep. All scalar outputs are
        kept if None. Ignored for scalar-valued models, whose result column is
        named ``value``.

    Returns
    -------
    pandas.DataFrame
        One row per value, first column ``variable``.
    """
    values = np.atleast_1d(np.asarray(values, dtype=float))
    rows = []
    for value in values:
        result = func(**{**fixed_params, variable: float(value)})
        row = {variable: float(value)}
        if isinstance(result, Mapping):
            if outputs is None:
                keys = [k for k, v in result.items() if not isinstance(v, Mapping) and np.ndim(v) == 0]
            else:
                keys = outputs
            row.update({key: result[key] for key in keys})
        else:
            row["value"] = result
        rows.append(row)
    return pd.DataFrame(rows)
