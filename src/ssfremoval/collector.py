"""
Single-Collector Contact Efficiency (Clean-Bed Colloid Filtration Theory).

Implements the Tufenkji and Elimelech (2004) correlation for the single-collector
contact efficiency of a spherical collector in a packed bed,

    eta_0 = eta_D + eta_I + eta_G

    eta_D = 2.4 As^(1/3) N_R^-0.081 N_Pe^-0.715 N_vdW^0.052     (diffusion)
    eta_I = 0.55 As N_R^1.675 N_A^0.125                        (interception)
    eta_G = 0.22 N_R^-0.24 N_G^1.11 N_vdW^0.053                 (gravity)

with the Happel porosity parameter ``As`` and the dimensionless groups

    N_R   = dp / dc                                  aspect ratio
    N_Pe  = U dc / D                                 Peclet number
    N_vdW = A / (kB T)                               van der Waals number
    N_G   = 2/9 (rho_p - rho_f) g dp^2 / (mu U)      gravity number
    N_A   = A / (12 pi mu dp^2 U)                    attraction number

The diffusion coefficient follows from Stokes-Einstein, ``D = kB T / (3 pi mu dp)``.
Water viscosity is ``mu(T) = 2.414e-5 * 10^(247.8 / (T - 140))`` [Pa s] and water
density a quadratic around its 4 °C maximum.

At filter scale the first-order removal coefficient is
``lambda = 3/2 (1 - f) / dc * alpha * eta_0`` [1/m], giving a log10 removal
``lambda L / ln(10)`` over a bed of depth ``L``.

The correlation was fitted for ``0.01 <= N_R <= 0.1`` and ``1e2 <= N_Pe <= 1e7``.
Outside that window the result is still returned, flagged and logged.

Functions taking SI values are the building blocks. :func:`single_collector_efficiency`
is the entry point in operator units (µm, mm, m/h, °C, 1e-20 J).
:func:`single_collector_efficiency_from_record` reads the same inputs from a
:class:`~ssfremoval.parameters.ParameterRecord`.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import logging

import numpy as np
import numpy.typing as npt
import pandas as pd
from scipy import constants

from ssfremoval import units
from ssfremoval.exceptions import DomainError, ensure_finite
from ssfremoval.logremoval import removal_coefficient_to_log10_removal
from ssfremoval.parameters import ParameterRecord
from ssfremoval.sweep import evaluate_sweep, sample_values

logger = logging.getLogger(__name__)

BOLTZMANN = constants.k  # [J/K]
GRAVITY = constants.g  # [m/s2]

# Fitting window of the Tufenkji-Elimelech correlation
ASPECT_RATIO_RANGE = (0.01, 0.1)
PECLET_RANGE = (1e2, 1e7)

DEFAULT_FILTER_DEPTH = 0.8  # [m]

MECHANISMS = ("diffusion", "interception", "gravity")

RECORD_REQUIRED_FIELDS = ("particle_diameter", "collector_diameter", "velocity", "porosity")
RECORD_OPTIONAL_FIELDS = ("particle_density", "temperature", "hamaker", "sticking_efficiency")


def water_viscosity(temperature: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Dynamic viscosity of water.

    Parameters
    ----------
    temperature : array-like
        Temperature [K]. Must be above 140 K.

    Returns
    -------
    numpy.ndarray
        Viscosity [Pa s], ``2.414e-5 * 10 ** (247.8 / (T - 140))``.

    Examples
    --------
    >>> from ssfremoval.collector import water_viscosity
    >>> print(f"{water_viscosity(293.15):.3e}")
    1.002e-03
    """
    temperature = np.asarray(temperature, dtype=float)
    if np.any(temperature <= 140.0):
        msg = "Viscosity correlation requires temperatures above 140 K"
        raise DomainError(msg)
    return 2.414e-5 * 10.0 ** (247.8 / (temperature - 140.0))


def water_density(temperature: npt.ArrayLike) -> npt.NDArray[np.floating]:
    """
    Density of water from a quadratic approximation around 4 °C.

    Parameters
    ----------
    temperature : array-like
        Temperature [K].

    Returns
    -------
    numpy.ndarray
        Density [kg/m3], ``1000 * (1 - (T_C - 4)^2 / 180000)``.
    """
    temperature_c = np.asarray(temperature, dtype=float) - units.KELVIN_OFFSET
    return 1000.0 * (1.0 - (temperature_c - 4.0) ** 2 / 180000.0)


def stokes_einstein_diffusivity(
    *, particle_diameter: float, temperature: float, viscosity: float | None = None
) -> float:
    """
    Bulk diffusion coefficient of a particle.

    Parameters
    ----------
    particle_diameter : float
        Particle diameter [m].
    temperature : float
        Temperature [K].
    viscosity : float, optional
        Dynamic viscosity [Pa s]. Computed from temperature if None.

    Returns
    -------
    float
        Diffusion coefficient [m2/s].
    """
    if viscosity is None:
        viscosity = water_viscosity(temperature)
    return BOLTZMANN * temperature / (3.0 * np.pi * viscosity * particle_diameter)


def happel_parameter(porosity: float) -> float:
    """
    Porosity-dependent Happel parameter of the sphere-in-cell model.

    ``gamma = (1 - f)^(1/3)`` and ``As = 2 (1 - gamma^5) / (2 - 3 gamma + 3 gamma^5 - 2 gamma^6)``.

    Parameters
    ----------
    porosity : float
        Bed porosity f, strictly between 0 and 1.

    Returns
    -------
    float
        Happel parameter As [-], positive and finite on (0, 1). It grows like
        ``9 / f^2`` as the porosity goes to zero.

    Raises
    ------
    DomainError
        If the porosity is not strictly between 0 and 1. The denominator vanishes
        at f = 0.

    Examples
    --------
    >>> from ssfremoval.collector import happel_parameter
    >>> print(f"{happel_parameter(0.4):.2f}")
    37.98
    """
    if not 0.0 < porosity < 1.0:
        msg = f"porosity must be between 0 and 1, got {porosity}"
        raise DomainError(msg)
    gamma = (1.0 - porosity) ** (1.0 / 3.0)
    return 2.0 * (1.0 - gamma**5) / (2.0 - 3.0 * gamma + 3.0 * gamma**5 - 2.0 * gamma**6)


def derived_quantities(
    *,
    particle_diameter: float,
    collector_diameter: float,
    approach_velocity: float,
    porosity: float,
    particle_density: float,
    temperature: float,
    hamaker: float,
) -> dict[str, float]:
    """
    Compute fluid properties and dimensionless groups of the TE correlation.

    All inputs are SI.

    Parameters
    ----------
    particle_diameter : float
        Particle diameter dp [m].
    collector_diameter : float
        Collector diameter dc [m].
    approach_velocity : float
        Approach (Darcy) velocity U [m/s].
    porosity : float
        Bed porosity [-].
    particle_density : float
        Particle density [kg/m3].
    temperature : float
        Temperature [K].
    hamaker : float
        Hamaker constant [J].

    Returns
    -------
    dict
        ``viscosity``, ``fluid_density``, ``diffusivity``, ``happel_gamma``,
        ``happel_parameter``, ``aspect_ratio`` (N_R), ``peclet_number`` (N_Pe),
        ``van_der_waals_number`` (N_vdW), ``gravity_number`` (N_G) and
        ``attraction_number`` (N_A).

    Raises
    ------
    DomainError
        If a diameter, the velocity, the temperature or the Hamaker constant is
        not positive, the porosity is not in (0, 1), or the particle density is
        not finite.

    Notes
    -----
    A particle lighter than water does not settle; its gravity number is clamped
    at zero rather than raised to a fractional power.
    """
    ensure_finite(porosity=porosity, particle_density=particle_density)
    for name, value in (
        ("particle_diameter", particle_diameter),
        ("collector_diameter", collector_diameter),
        ("approach_velocity", approach_velocity),
        ("temperature", temperature),
        ("hamaker", hamaker),
    ):
        if not np.isfinite(value) or value <= 0.0:
            msg = f"{name} must be positive, got {value}"
            raise DomainError(msg)

    a_s = happel_parameter(porosity)
    viscosity = float(water_viscosity(temperature))
    fluid_density = float(water_density(temperature))
    diffusivity = stokes_einstein_diffusivity(
        particle_diameter=particle_diameter, temperature=temperature, viscosity=viscosity
    )
    gravity_number = (
        (2.0 / 9.0)
        * (particle_density - fluid_density)
        * GRAVITY
        * particle_diameter**2
        / (viscosity * approach_velocity)
    )
    return {
        "viscosity": viscosity,
        "fluid_density": fluid_density,
        "diffusivity": diffusivity,
        "happel_gamma": (1.0 - porosity) ** (1.0 / 3.0),
        "happel_parameter": a_s,
        "aspect_ratio": particle_diameter / collector_diameter,
        "peclet_number": approach_velocity * collector_diameter / diffusivity,
        "van_der_waals_number": hamaker / (BOLTZMANN * temperature),
        "gravity_number": max(gravity_number, 0.0),
        "attraction_number": hamaker / (12.0 * np.pi * viscosity * particle_diameter**2 * approach_velocity),
    }


def collector_efficiency(derived: dict[str, float]) -> dict[str, float]:
    """
    Evaluate the Tufenkji-Elimelech correlation.

    Parameters
    ----------
    derived : dict
        Output of :func:`derived_quantities`.

    Returns
    -------
    dict
        ``eta_d``, ``eta_i``, ``eta_g`` and their sum ``eta_0`` [-].
    """
    a_s = derived["happel_parameter"]
    n_r = derived["aspect_ratio"]
    n_pe = derived["peclet_number"]
    n_vdw = derived["van_der_waals_number"]
    n_g = derived["gravity_number"]
    n_a = derived["attraction_number"]

    eta_d = 2.4 * a_s ** (1.0 / 3.0) * n_r**-0.081 * n_pe**-0.715 * n_vdw**0.052
    eta_i = 0.55 * a_s * n_r**1.675 * n_a**0.125
    eta_g = 0.22 * n_r**-0.24 * n_g**1.11 * n_vdw**0.053
    return {"eta_d": eta_d, "eta_i": eta_i, "eta_g": eta_g, "eta_0": eta_d + eta_i + eta_g}


def validity_flags(*, aspect_ratio: float, peclet_number: float) -> dict[str, bool]:
    """
    Check whether N_R and N_Pe lie in the fitting window of the correlation.

    Returns
    -------
    dict
        ``aspect_ratio_in_range``, ``peclet_in_range`` and ``is_valid``.
    """
    aspect_ok = ASPECT_RATIO_RANGE[0] <= aspect_ratio <= ASPECT_RATIO_RANGE[1]
    peclet_ok = PECLET_RANGE[0] <= peclet_number <= PECLET_RANGE[1]
    return {"aspect_ratio_in_range": aspect_ok, "peclet_in_range": peclet_ok, "is_valid": aspect_ok and peclet_ok}


def dominant_mechanism(efficiencies: dict[str, float]) -> str:
    """Name of the largest contribution to eta_0: 'diffusion', 'interception' or 'gravity'."""
    values = (efficiencies["eta_d"], efficiencies["eta_i"], efficiencies["eta_g"])
    return MECHANISMS[int(np.argmax(values))]


def mechanism_breakdown(efficiencies: dict[str, float]) -> pd.DataFrame:
    """
    Tabulate each mechanism's efficiency and its share of eta_0.

    Returns
    -------
    pandas.DataFrame
        Index ``mechanism``, columns ``efficiency`` and ``percent``. Empty when
        eta_0 is zero.
    """
    total = efficiencies["eta_0"]
    if total == 0.0:
        return pd.DataFrame(columns=["efficiency", "percent"]).rename_axis("mechanism")
    values = np.array([efficiencies["eta_d"], efficiencies["eta_i"], efficiencies["eta_g"]])
    return pd.DataFrame(
        {"efficiency": values, "percent": values / total * 100.0},
        index=pd.Index(MECHANISMS, name="mechanism"),
    )


def attachment_rate(
    *, porosity: float, collector_diameter: float, approach_velocity: float, sticking_efficiency: float, eta_0: float
) -> float:
    """
    First-order attachment rate of clean-bed filtration.

    Parameters
    ----------
    porosity : float
        Bed porosity [-].
    collector_diameter : float
        Collector diameter [m].
    approach_velocity : float
        Approach velocity [m/s].
    sticking_efficiency : float
        Attachment efficiency alpha [-].
    eta_0 : float
        Single-collector contact efficiency [-].

    Returns
    -------
    float
        ``k_att = 3/2 (1 - f) / dc * U * alpha * eta_0`` [1/s].
    """
    return 1.5 * (1.0 - porosity) / collector_diameter * approach_velocity * sticking_efficiency * eta_0


def filter_scale_log_removal(
    *, porosity: float, collector_diameter: float, filter_depth: float, sticking_efficiency: float, eta_0: float
) -> float:
    """
    Log10 removal over a filter bed predicted by clean-bed filtration theory.

    Parameters
    ----------
    porosity : float
        Bed porosity [-].
    collector_diameter : float
        Collector diameter [m].
    filter_depth : float
        Filter bed depth L [m].
    sticking_efficiency : float
        Attachment efficiency alpha [-].
    eta_0 : float
        Single-collector contact efficiency [-].

    Returns
    -------
    float
        ``3/2 (1 - f) / dc * (L / ln 10) * alpha * eta_0`` [-].

    See Also
    --------
    ssfremoval.logremoval.removal_coefficient_to_log10_removal : First-order log removal over a depth
    """
    removal_coefficient = 1.5 * (1.0 - porosity) / collector_diameter * sticking_efficiency * eta_0
    return float(removal_coefficient_to_log10_removal(removal_coefficient=removal_coefficient, depth=filter_depth))


def single_collector_efficiency(
    *,
    particle_diameter: float,
    collector_diameter: float,
    velocity: float,
    porosity: float,
    particle_density: float = 1050.0,
    temperature: float = 20.0,
    hamaker: float = 1.0,
    sticking_efficiency: float = 0.1,
    filter_depth: float = DEFAULT_FILTER_DEPTH,
) -> dict:
    """
    Evaluate clean-bed filtration for one operating point, in operator units.

    Parameters
    ----------
    particle_diameter : float
        Particle diameter [µm].
    collector_diameter : float
        Collector (grain) diameter [mm].
    velocity : float
        Filtration (approach) velocity [m/h].
    porosity : float
        Bed porosity [-].
    particle_density : float, optional
        Particle density [kg/m3] (default 1050, bacteria).
    temperature : float, optional
        Water temperature [°C] (default 20).
    hamaker : float, optional
        Hamaker constant [1e-20 J] (default 1.0).
    sticking_efficiency : float, optional
        Attachment efficiency alpha [-] (default 0.1).
    filter_depth : float, optional
        Filter bed depth [m] for the log removal (default 0.8).

    Returns
    -------
    dict
        All entries of :func:`derived_quantities` and :func:`collector_efficiency`,
        the :func:`validity_flags`, ``dominant_mechanism``, ``attachment_rate``
        [1/s] and ``log10_removal`` over ``filter_depth``.

    Examples
    --------
    >>> from ssfremoval.collector import single_collector_efficiency
    >>> result = single_collector_efficiency(
    ...     particle_diameter=1.0, collector_diameter=0.2, velocity=0.5, porosity=0.4
    ... )
    >>> result["dominant_mechanism"]
    'diffusion'
    """
    ensure_finite(sticking_efficiency=sticking_efficiency, filter_depth=filter_depth)
    derived = _derived_in_operator_units(
        particle_diameter=particle_diameter,
        collector_diameter=collector_diameter,
        velocity=velocity,
        porosity=porosity,
        particle_density=particle_density,
        temperature=temperature,
        hamaker=hamaker,
    )
    dc = float(units.millimetre_to_metre(collector_diameter))
    u = float(units.metre_per_hour_to_metre_per_second(velocity))
    efficiencies = collector_efficiency(derived)
    flags = validity_flags(aspect_ratio=derived["aspect_ratio"], peclet_number=derived["peclet_number"])
    if not flags["is_valid"]:
        logger.warning(
            "Outside the Tufenkji-Elimelech fitting window: N_R=%.3g (range %g-%g), N_Pe=%.3g (range %g-%g)",
            derived["aspect_ratio"],
            *ASPECT_RATIO_RANGE,
            derived["peclet_number"],
            *PECLET_RANGE,
        )

    return {
        **derived,
        **efficiencies,
        **flags,
        "dominant_mechanism": dominant_mechanism(efficiencies),
        "attachment_rate": attachment_rate(
            porosity=porosity,
            collector_diameter=dc,
            approach_velocity=u,
            sticking_efficiency=sticking_efficiency,
            eta_0=efficiencies["eta_0"],
        ),
        "log10_removal": filter_scale_log_removal(
            porosity=porosity,
            collector_diameter=dc,
            filter_depth=filter_depth,
            sticking_efficiency=sticking_efficiency,
            eta_0=efficiencies["eta_0"],
        ),
    }


def single_collector_efficiency_from_record(
    params: ParameterRecord, *, filter_depth: float = DEFAULT_FILTER_DEPTH
) -> dict:
    """
    Evaluate :func:`single_collector_efficiency` on a parameter record.

    The record must provide ``particle_diameter``, ``collector_diameter``,
    ``velocity`` and ``porosity``. ``particle_density``, ``temperature``,
    ``hamaker`` and ``sticking_efficiency`` fall back to the defaults of
    :func:`single_collector_efficiency` when unset.

    Raises
    ------
    MissingParameterError
        If a required field is unset.
    """
    model = "single_collector_efficiency"
    required = {name: params.require(model, name) for name in RECORD_REQUIRED_FIELDS}
    optional = {
        name: getattr(params, name) for name in RECORD_OPTIONAL_FIELDS if getattr(params, name) is not None
    }
    return single_collector_efficiency(**required, **optional, filter_depth=filter_depth)

def _derived_in_operator_units(
    *,
    particle_diameter: float,
    collector_diameter: float,
    velocity: float,
    porosity: float,
    particle_density: float,
    temperature: float,
    hamaker: float,
) -> dict[str, float]:
    return derived_quantities(
        particle_diameter=float(units.micrometre_to_metre(particle_diameter)),
        collector_diameter=float(units.millimetre_to_metre(collector_diameter)),
        approach_velocity=float(units.metre_per_hour_to_metre_per_second(velocity)),
        porosity=porosity,
        particle_density=particle_density,
        temperature=float(units.celsius_to_kelvin(temperature)),
        hamaker=float(units.hamaker_to_joule(hamaker)),
    )


def _efficiencies_only(
    *,
    particle_diameter: float,
    collector_diameter: float,
    velocity: float,
    porosity: float,
    particle_density: float = 1050.0,
    temperature: float = 20.0,
    hamaker: float = 1.0,
    **_,
) -> dict[str, float]:
    # No validity logging here, a sweep deliberately leaves the fitting window.
    return collector_efficiency(
        _derived_in_operator_units(
            particle_diameter=particle_diameter,
            collector_diameter=collector_diameter,
            velocity=velocity,
            porosity=porosity,
            particle_density=particle_density,
            temperature=temperature,
            hamaker=hamaker,
        )
    )


def sweep_over_variable(
    *,
    variable: str,
    values: npt.ArrayLike | None = None,
    fixed_params: dict,
    spacing: str | None = None,
    num: int | None = None,
) -> pd.DataFrame:
    """
    Re-evaluate the collector efficiencies along one input variable.

    Parameters
    ----------
    variable : str
        Keyword of :func:`single_collector_efficiency` to sweep, in its operator
        units (for example ``'particle_diameter'`` in µm or ``'velocity'`` in m/h).
    values : array-like, optional
        Values to evaluate. If None, the default range of the variable is used:
        particle diameter log-spaced from 0.01 to 10 µm (61 points), velocity
        linear from 0.05 to 4.95 m/h (50 points).
    fixed_params : dict
        Remaining keywords of :func:`single_collector_efficiency`.
    spacing : {'linear', 'log'}, optional
        Overrides the default spacing when ``values`` is None.
    num : int, optional
        Overrides the default number of samples when ``values`` is None.

    Returns
    -------
    pandas.DataFrame
        Columns ``variable``, ``eta_d``, ``eta_i``, ``eta_g`` and ``eta_0``.

    Raises
    ------
    ValueError
        If ``values`` is None and the variable has no default range.
    """
    if values is None:
        defaults = {
            "particle_diameter": {"start": 0.01, "stop": 10.0, "num": 61, "spacing": "log"},
            "velocity": {"start": 0.05, "stop": 4.95, "num": 50, "spacing": "linear"},
        }
        if variable not in defaults:
            msg = f"No default sweep range for {variable!r}; pass values explicitly"
            raise ValueError(msg)
        sampling = defaults[variable]
        if spacing is not None:
            sampling["spacing"] = spacing
        if num is not None:
            sampling["num"] = num
        values = sample_values(**sampling)
    return evaluate_sweep(_efficiencies_only, variable=variable, values=values, fixed_params=fixed_params)
