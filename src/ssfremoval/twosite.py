"""
Steady-State Two-Site Kinetic Removal Model.

Implements the steady-state balance of the two-site attachment/detachment model
with inactivation of Schijven et al. (2013) for microorganisms in a slow sand filter
bed. Microorganisms in the pore water attach to two populations of sorption sites:

- site 1, slow detachment, governs the primary removal;
- site 2, fast detachment, governs tailing.

Attached organisms either detach again or are inactivated on the solid phase.
At steady state each site removes ``k_att / (1 + k_det / mu_s)`` per day, so the
effective removal coefficient is

    lambda = mu_l + k_att1 / (1 + k_det1 / mu_s1) + k_att2 / (1 + k_det2 / mu_s2)

with ``mu_l`` the liquid-phase inactivation rate. With longitudinal dispersion the
steady advection-dispersion-reaction equation ``alpha_L v C'' - v C' - lambda C = 0``
has the decaying solution ``C(x)/C0 = exp(k x)`` with exponent coefficient

    k = (1 - sqrt(1 + 4 alpha_L lambda / v)) / (2 alpha_L)

Rates are in [1/day], velocity in [m/day], dispersivity and depths in [m].

Available functions:

- :func:`effective_removal_coefficient` - lambda from the site rate constants.
- :func:`removal_coefficient_breakdown` - contribution of liquid phase and each site.
- :func:`exponent_coefficient` - spatial exponent of the dispersive solution.
- :func:`concentration_profile` - C/C0 and log10 removal over depth.
- :func:`depth_for_target_removal` - depth at which C/C0 reaches a target ratio.
- :func:`steady_state_metrics` - effluent ratio, total log removal and 2-/4-log depths.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import logging

import numpy as np
import numpy.typing as npt
import pandas as pd

from ssfremoval.exceptions import DomainError, ensure_finite
from ssfremoval.logremoval import ln_removal_to_log10_removal

logger = logging.getLogger(__name__)

# Depth for a target removal beyond this multiple of the filter depth is reported as unavailable.
PLAUSIBLE_DEPTH_FACTOR = 2.0


def site_contribution(*, k_att: float, k_det: float, mu_s: float) -> float:
    """
    Compute the steady-state removal of one sorption site population.

    Parameters
    ----------
    k_att : float
        Attachment rate [1/day].
    k_det : float
        Detachment rate [1/day].
    mu_s : float
        Solid-phase inactivation rate [1/day]. Must be positive.

    Returns
    -------
    float
        ``k_att / (1 + k_det / mu_s)`` [1/day].

    Raises
    ------
    DomainError
        If an input is not finite or ``mu_s`` is not positive. As ``mu_s`` goes to zero attached organisms
        are never inactivated and the site only retains them temporarily; the
        steady-state expression is singular there.
    """
    ensure_finite(k_att=k_att, k_det=k_det, mu_s=mu_s)
    if mu_s <= 0.0:
        msg = f"Solid-phase inactivation rate must be positive, got mu_s={mu_s}"
        raise DomainError(msg)
    k_att = max(float(k_att), 0.0)
    k_det = max(float(k_det), 0.0)
    return k_att / (1.0 + k_det / mu_s)


def effective_removal_coefficient(
    *,
    mu_l: float,
    k_att1: float,
    k_det1: float,
    mu_s1: float,
    k_att2: float,
    k_det2: float,
    mu_s2: float,
) -> float:
    """
    Compute the effective removal coefficient of the two-site kinetic model.

    Negative rate constants are clamped to zero; inactivation rates on the solid
    phase must be strictly positive.

    Parameters
    ----------
    mu_l : float
        Liquid-phase inactivation rate [1/day].
    k_att1, k_det1, mu_s1 : float
        Attachment, detachment and solid inactivation rates of site 1 [1/day].
    k_att2, k_det2, mu_s2 : float
        Attachment, detachment and solid inactivation rates of site 2 [1/day].

    Returns
    -------
    float
        Effective removal coefficient lambda [1/day].

    Raises
    ------
    DomainError
        If a rate is not finite, or ``mu_s1`` or ``mu_s2`` is not positive.

    See Also
    --------
    removal_coefficient_breakdown : Same computation with per-term contributions

    Examples
    --------
    >>> from ssfremoval.twosite import effective_removal_coefficient
    >>> lam = effective_removal_coefficient(
    ...     mu_l=0.1, k_att1=50.0, k_det1=0.1, mu_s1=0.5, k_att2=30.0, k_det2=10.0, mu_s2=0.5
    ... )
    >>> print(f"{lam:.2f}")
    43.20
    """
    return removal_coefficient_breakdown(
        mu_l=mu_l, k_att1=k_att1, k_det1=k_det1, mu_s1=mu_s1, k_att2=k_att2, k_det2=k_det2, mu_s2=mu_s2
    )["total"]


def removal_coefficient_breakdown(
    *,
    mu_l: float,
    k_att1: float,
    k_det1: float,
    mu_s1: float,
    k_att2: float,
    k_det2: float,
    mu_s2: float,
) -> dict[str, float]:
    """
    Split the effective removal coefficient into its three terms.

    Returns
    -------
    dict
        ``liquid``, ``site1``, ``site2`` and ``total`` [1/day].
    """
    ensure_finite(mu_l=mu_l, k_att1=k_att1, k_det1=k_det1, mu_s1=mu_s1, k_att2=k_att2, k_det2=k_det2, mu_s2=mu_s2)
    site1 = site_contribution(k_att=k_att1, k_det=k_det1, mu_s=mu_s1)
    site2 = site_contribution(k_att=k_att2, k_det=k_det2, mu_s=mu_s2)
    liquid = max(float(mu_l), 0.0)
    return {"liquid": liquid, "site1": site1, "site2": site2, "total": liquid + site1 + site2}


def exponent_coefficient(*, velocity: float, dispersivity: float, removal_coefficient: float) -> float:
    """
    Compute the spatial exponent of the dispersive steady-state solution.

    Parameters
    ----------
    velocity : float
        Pore water velocity v [m/day]. Must be positive.
    dispersivity : float
        Longitudinal dispersivity alpha_L [m]. Must be positive.
    removal_coefficient : float
        Effective removal coefficient lambda [1/day].

    Returns
    -------
    float
        ``(1 - sqrt(1 + 4 alpha_L lambda / v)) / (2 alpha_L)`` [1/m]. Negative for
        positive lambda.

    Raises
    ------
    DomainError
        If velocity or dispersivity is not positive, or if the discriminant
        ``1 + 4 alpha_L lambda / v`` is negative. Non-finite inputs are
        rejected as well.
    """
    ensure_finite(velocity=velocity, dispersivity=dispersivity, removal_coefficient=removal_coefficient)
    if velocity <= 0.0:
        msg = f"velocity must be positive, got {velocity}"
        raise DomainError(msg)
    if dispersivity <= 0.0:
        msg = f"dispersivity must be positive, got {dispersivity}"
        raise DomainError(msg)
    discriminant = 1.0 + 4.0 * dispersivity * removal_coefficient / velocity
    if discriminant < 0.0:
        msg = f"Negative discriminant 1 + 4 alpha_L lambda / v = {discriminant:.6g}; no real steady-state profile"
        raise DomainError(msg)
    return (1.0 - np.sqrt(discriminant)) / (2.0 * dispersivity)


def concentration_profile(
    *,
    velocity: float,
    dispersivity: float,
    removal_coefficient: float,
    depths: npt.ArrayLike | None = None,
    filter_depth: float = 1.0,
    n_points: int = 101,
) -> pd.DataFrame:
    """
    Compute the steady-state concentration profile over depth.

    Parameters
    ----------
    velocity : float
        Pore water velocity [m/day].
    dispersivity : float
        Longitudinal dispersivity [m].
    removal_coefficient : float
        Effective removal coefficient [1/day].
    depths : array-like, optional
        Depths at which to evaluate [m]. If None, ``n_points`` equally spaced
        depths from 0 to ``filter_depth``.
    filter_depth : float, optional
        Filter bed depth [m] used when ``depths`` is None (default 1.0).
    n_points : int, optional
        Number of depths used when ``depths`` is None (default 101).

    Returns
    -------
    pandas.DataFrame
        Columns ``depth`` [m], ``concentration_ratio`` C/C0 [-],
        ``concentration_percent`` [%], ``log10_removal`` [-] and ``ln_ratio`` [-].

    Raises
    ------
    DomainError
        See :func:`exponent_coefficient`.
    """
    k = exponent_coefficient(velocity=velocity, dispersivity=dispersivity, removal_coefficient=removal_coefficient)
    if depths is None:
        depths = np.linspace(0.0, filter_depth, n_points)
    depths = np.asarray(depths, dtype=float)
    ln_ratio = k * depths
    ratio = np.exp(ln_ratio)
    return pd.DataFrame({
        "depth": depths,
        "concentration_ratio": ratio,
        "concentration_percent": ratio * 100.0,
        "log10_removal": ln_removal_to_log10_removal(-ln_ratio),
        "ln_ratio": ln_ratio,
    })


def depth_for_target_removal(
    *, target_ratio: float, exponent_coefficient: float, max_depth: float | None = None
) -> float | None:
    """
    Find the depth at which C/C0 decays to a target ratio.

    Parameters
    ----------
    target_ratio : float
        Target concentration ratio C/C0, between 0 and 1 exclusive (0.01 for
        2-log removal).
    exponent_coefficient : float
        Spatial exponent of the profile [1/m], see :func:`exponent_coefficient`.
    max_depth : float, optional
        Largest plausible depth [m]. Depths beyond it are reported as unavailable.

    Returns
    -------
    float or None
        ``ln(target_ratio) / exponent_coefficient`` [m], or None when the profile
        never reaches the target (non-negative exponent) or the depth exceeds
        ``max_depth``.

    Raises
    ------
    DomainError
        If ``target_ratio`` is not in (0, 1), or ``exponent_coefficient`` or
        ``max_depth`` is not finite.
    """
    ensure_finite(target_ratio=target_ratio, exponent_coefficient=exponent_coefficient)
    if max_depth is not None:
        ensure_finite(max_depth=max_depth)
    if not 0.0 < target_ratio < 1.0:
        msg = f"target_ratio must be between 0 and 1, got {target_ratio}"
        raise DomainError(msg)
    if exponent_coefficient >= 0.0:
        return None
    depth = float(np.log(target_ratio) / exponent_coefficient)
    if max_depth is not None and depth > max_depth:
        return None
    return depth


def steady_state_metrics(
    *, velocity: float, dispersivity: float, removal_coefficient: float, filter_depth: float
) -> dict[str, float | None]:
    """
    Summarise filter performance for a removal coefficient.

    Parameters
    ----------
    velocity : float
        Pore water velocity [m/day].
    dispersivity : float
        Longitudinal dispersivity [m].
    removal_coefficient : float
        Effective removal coefficient [1/day].
    filter_depth : float
        Filter bed depth [m].

    Returns
    -------
    dict
        ``exponent_coefficient`` [1/m], ``effluent_ratio`` C(L)/C0,
        ``total_log10_removal`` at the filter depth, and ``depth_2log`` and
        ``depth_4log`` [m] (None when beyond twice the filter depth).
    """
    ensure_finite(filter_depth=filter_depth)
    k = exponent_coefficient(velocity=velocity, dispersivity=dispersivity, removal_coefficient=removal_coefficient)
    effluent_ratio = float(np.exp(k * filter_depth))
    max_depth = PLAUSIBLE_DEPTH_FACTOR * filter_depth
    metrics = {
        "exponent_coefficient": k,
        "effluent_ratio": effluent_ratio,
        "total_log10_removal": float(ln_removal_to_log10_removal(-k * filter_depth)),
        "depth_2log": depth_for_target_removal(target_ratio=1e-2, exponent_coefficient=k, max_depth=max_depth),
        "depth_4log": depth_for_target_removal(target_ratio=1e-4, exponent_coefficient=k, max_depth=max_depth),
    }
    logger.debug("Two-site steady state: lambda=%.4g 1/d, LR=%.3f", removal_coefficient, metrics["total_log10_removal"])
    return metrics
