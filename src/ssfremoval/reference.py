"""
Measured Reference Data.

Observations against which the removal models are compared. They are not used by
the models themselves.

- :func:`scale_observations` - removal coefficients of the mini and midi filters.
- :func:`pilot_layer_observations` - depth-resolved removal of the two pilot filters.
- :data:`FILTER_SPECS` - geometry of the experimental filters.

Filter ids encode scale (MN mini, MD midi), sand type (C coarse, F fine, M
mixed), age in months and inoculation (+ inoculated, - not inoculated).

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import pandas as pd

FILTER_SPECS = {
    "mini": {"sand_length": 0.10, "diameter": 0.027, "operation_months": 4},
    "midi": {"sand_length": 0.52, "diameter": 0.10, "operation_months": 12},
    "pilot": {
        "sand_length": 0.80,
        "upper_layer_depth": 0.10,
        "deeper_layer_depth": 0.70,
        "operation_months": 24,
        "location": "Scheveningen DWTP, Netherlands",
    },
}
"""Sand bed length, column diameter and layer depths [m], operation period [months]."""

_SCALE_COLUMNS = ["scale", "filter", "age_days", "sand_type", "inoculated", "removal"]

_SCALE_ROWS = [
    ("mini", "MN-C0-", 1, "coarse", False, 3.61e-6),
    ("mini", "MN-C3-", 93, "coarse", False, 9.00e-6),
    ("mini", "MN-C3+", 90, "coarse", True, 0.031),
    ("mini", "MN-F0-", 1, "fine", False, 6.92e-4),
    ("mini", "MN-F3-", 100, "fine", False, 0.0105),
    ("mini", "MN-F3+", 96, "fine", True, 0.0155),
    ("mini", "MN-M0-", 1, "mixed", False, 8.56e-6),
    ("mini", "MN-M3-", 106, "mixed", False, 0.154),
    ("mini", "MN-M3+", 103, "mixed", True, 0.389),
    ("midi", "MD-C0+", 1, "coarse", True, 0.0455),
    ("midi", "MD-C3+", 105, "coarse", True, 0.170),
    ("midi", "MD-C7+", 230, "coarse", True, 0.203),
    ("midi", "MD-C12+", 390, "coarse", True, 0.582),
    ("midi", "MD-F0+", 1, "fine", True, 0.0955),
    ("midi", "MD-F3+", 107, "fine", True, 0.321),
    ("midi", "MD-F7+", 238, "fine", True, 0.245),
    ("midi", "MD-F12+", 392, "fine", True, 0.570),
    ("midi", "MD-M0+", 1, "mixed", True, 3.00e-6),
    ("midi", "MD-M3+", 111, "mixed", True, 2.94e-6),
    ("midi", "MD-M8+", 250, "mixed", True, 0.0688),
    ("midi", "MD-M12+", 397, "mixed", True, 0.574),
    ("midi", "MD-M3-", 113, "mixed", False, 2.47e-6),
    ("midi", "MD-M8-", 258, "mixed", False, 0.489),
    ("midi", "MD-M12-", 399, "mixed", False, 0.679),
]

_PILOT_COLUMNS = ["filter", "month", "upper_layer", "deeper_layer", "total"]

_PILOT_ROWS = [
    ("inoculated", 6, 0.35, 0.75, 1.10),
    ("inoculated", 12, 0.85, 0.35, 1.20),
    ("inoculated", 18, 1.20, 0.15, 1.35),
    ("inoculated", 24, 1.30, 0.10, 1.40),
    ("control", 6, 0.20, 0.80, 1.00),
    ("control", 12, 0.60, 0.50, 1.10),
    ("control", 18, 1.00, 0.25, 1.25),
    ("control", 24, 1.25, 0.12, 1.37),
]


def scale_observations(scale: str | None = None) -> pd.DataFrame:
    """
    Measured removal coefficients of the mini and midi filters.

    Parameters
    ----------
    scale : {'mini', 'midi'}, optional
        Only return one scale. All observations if None.

    Returns
    -------
    pandas.DataFrame
        Columns ``scale``, ``filter``, ``age_days``, ``sand_type``,
        ``inoculated`` and ``removal``.

    Raises
    ------
    ValueError
        If ``scale`` is not 'mini' or 'midi'.
    """
    frame = pd.DataFrame(_SCALE_ROWS, columns=_SCALE_COLUMNS)
    if scale is None:
        return frame
    if scale not in {"mini", "midi"}:
        msg = f"scale must be 'mini' or 'midi', got {scale!r}"
        raise ValueError(msg)
    return frame[frame["scale"] == scale].reset_index(drop=True)


def pilot_layer_observations() -> pd.DataFrame:
    """
    Depth-resolved log10 removal of the inoculated and control pilot filters.

    Returns
    -------
    pandas.DataFrame
        Columns ``filter`` ('inoculated' or 'control'), ``month``,
        ``upper_layer`` (top 10 cm), ``deeper_layer`` and ``total``, plus
        ``upper_fraction``, the share of the total removed in the upper layer.
    """
    frame = pd.DataFrame(_PILOT_ROWS, columns=_PILOT_COLUMNS)
    frame["upper_fraction"] = frame["upper_layer"] / frame["total"]
    return frame
