"""
Biofilm-Extended Colloid Filtration Theory.

Biofilm growth in a sand bed changes the pore space that clean-bed filtration
theory assumes. Two complementary representations of the extra removal are
implemented, after Samari-Kermani et al. (2025), "From Roughness to Occlusion".

System-property regression
--------------------------
A linear regression on image-derived system properties (R² = 0.98),

    -ln(C/C0) = 18.33 - 13.29 theta - 15.34 HC - 10.12 tau - 0.11 SVR

with porosity theta [-], normalised hydraulic conductivity HC [-], tortuosity
tau [-] and biofilm surface-to-volume ratio SVR [1/µm]. The output is a
**natural-log** removal, unlike the log10 removals elsewhere in this package;
:func:`system_property_regression` reports both. Negative values occur for
non-physical input combinations and are only clamped in the presented value.

Three-stage mechanistic efficiency
----------------------------------
Biofilm development is described by three stages that each add a collector
efficiency to the clean-bed value ``eta_base``:

- eta_1, roughness: surface roughening and crevices on the grains;
- eta_2, network: a biofilm network spanning the pores;
- eta_3, occlusion: pore throats narrowed until straining dominates.

The porosity drop from the clean bed sets a stage progress ``t`` in [0, 1]. Its
quadratic Bernstein basis ``(1-t)^2, 2t(1-t), t^2`` is sharpened with a softmax
into stage weights ``c_i``. Each stage has a raw driver ``T_i`` built from pore
geometry, normalised by a fixed reference and passed through the saturating
transform ``B_i = 1 - exp(-c_i T_i^e_i)``, which stays in [0, 1) whatever the
driver magnitude. Finally the stage terms are scaled into the capacity left by
the clean bed,

    s = (1 - eta_base) / (B_1 + B_2 + B_3 + k (1 - eta_base)),   eta_i = s B_i

so that ``eta_base + eta_1 + eta_2 + eta_3 <= 1``.

The stage exponents, the driver references, the default sharpness and shrink
factor and the clean-bed reference geometry are illustrative placeholders. The
model was calibrated on eight microfluidic experiments, but those calibration
values are not published with it. The placeholders are fixed module constants
until the published values replace them; they are never re-fitted here.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import logging

import numpy as np
import numpy.typing as npt
import pandas as pd
from scipy.special import softmax

from ssfremoval import units
from ssfremoval.exceptions import DomainError, ensure_finite
from ssfremoval.logremoval import clamp_non_negative, ln_removal_to_log10_removal
from ssfremoval.parameters import ParameterRecord
from ssfremoval.presets import BIOFILM_STAGES
from ssfremoval.sweep import evaluate_sweep

logger = logging.getLogger(__name__)

# System-property regression, natural-log removal
REGRESSION_INTERCEPT = 18.33
REGRESSION_COEFFICIENTS = {
    "porosity": -13.29,
    "hydraulic_conductivity": -15.34,
    "tortuosity": -10.12,
    "svr": -0.11,
}
REGRESSION_R_SQUARED = 0.98

# Three-stage constants, illustrative placeholders pending the published calibration
STAGE_POROSITY_RANGE = (0.0, 0.34)  # (theta_min, theta_max)
STAGE_EXPONENTS = (0.85, 0.62, 1.30)  # (n, m, p)
DRIVER_REFERENCES = (1.42, 0.37, 0.21)  # stand-ins for the geometric means of T1, T2, T3
DEFAULT_SHARPNESS = 4.0
DEFAULT_SHRINK_FACTOR = 0.25
DEFAULT_SCALE_FACTOR = 1.0

CLEAN_BED_POROSITY = 0.35
CLEAN_BED_GRAIN_DIAMETER = 200.0  # [µm]
CLEAN_BED_THROAT_DIAMETER = 40.0  # [µm]


def system_property_ln_removal(
    *, porosity: float, hydraulic_conductivity: float, tortuosity: float, svr: float
) -> float:
    """
    Raw natural-log removal ``-ln(C/C0)`` of the system-property regression.

    Parameters
    ----------
    porosity : float
        Porosity theta [-].
    hydraulic_conductivity : float
        Hydraulic conductivity normalised by its clean-bed value [-].
    tortuosity : float
        Tortuosity tau [-].
    svr : float
        Biofilm surface-to-volume ratio [1/µm].

    Returns
    -------
    float
        Unclamped natural-log removal. Can be negative.

    Examples
    --------
    >>> from ssfremoval.biofilm import system_property_ln_removal
    >>> value = system_property_ln_removal(porosity=0.26, hydraulic_conductivity=0.68, tortuosity=1.25, svr=0.21)
    >>> print(f"{value:.4f}")
    -8.2297
    """
    return contribution_breakdown(
        porosity=porosity, hydraulic_conductivity=hydraulic_conductivity, tortuosity=tortuosity, svr=svr
    )["total"]


def contribution_breakdown(
    *, porosity: float, hydraulic_conductivity: float, tortuosity: float, svr: float
) -> dict:
    """
    Signed contribution of each term of the system-property regression.

    Parameters
    ----------
    porosity, hydraulic_conductivity, tortuosity, svr : float
        See :func:`system_property_ln_removal`.

    Returns
    -------
    dict
        ``intercept`` (beta_0), ``contributions`` (DataFrame indexed by term with
        columns ``coefficient``, ``value``, ``contribution`` and ``percent``, the
        share of ``|total|`` in %, NaN when the total is zero) and ``total``, the
        raw natural-log removal.
    """
    ensure_finite(
        porosity=porosity, hydraulic_conductivity=hydraulic_conductivity, tortuosity=tortuosity, svr=svr
    )
    values = {
        "porosity": porosity,
        "hydraulic_conductivity": hydraulic_conductivity,
        "tortuosity": tortuosity,
        "svr": svr,
    }
    coefficients = pd.Series(REGRESSION_COEFFICIENTS)
    frame = pd.DataFrame({"coefficient": coefficients, "value": pd.Series(values)})
    frame["contribution"] = frame["coefficient"] * frame["value"]
    total = REGRESSION_INTERCEPT + float(frame["contribution"].sum())
    frame["percent"] = frame["contribution"].abs() / abs(total) * 100.0 if total != 0.0 else np.nan
    frame.index.name = "term"
    return {"intercept": REGRESSION_INTERCEPT, "contributions": frame, "total": total}


def system_property_regression(
    *, porosity: float, hydraulic_conductivity: float, tortuosity: float, svr: float
) -> dict[str, float]:
    """
    Evaluate the system-property regression in both log conventions.

    Returns
    -------
    dict
        ``ln_removal`` (raw, natural log), ``log10_removal`` (raw, log10) and
        ``removal`` and ``log10_removal_clamped``, the presented values clamped
        at zero.
    """
    ln_removal = system_property_ln_removal(
        porosity=porosity, hydraulic_conductivity=hydraulic_conductivity, tortuosity=tortuosity, svr=svr
    )
    if ln_removal < 0.0:
        logger.warning("System-property regression gives negative removal %.3f; presented as 0", ln_removal)
    log10_removal = float(ln_removal_to_log10_removal(ln_removal))
    return {
        "ln_removal": ln_removal,
        "log10_removal": log10_removal,
        "removal": float(clamp_non_negative(ln_removal)),
        "log10_removal_clamped": float(clamp_non_negative(log10_removal)),
    }


def system_property_regression_from_record(params: ParameterRecord) -> dict[str, float]:
    """
    Evaluate the system-property regression on a parameter record.

    Reads ``porosity``, ``hydraulic_conductivity``, ``tortuosity`` and ``svr``.

    Raises
    ------
    MissingParameterError
        If one of those fields is unset.
    """
    fields = {name: params.require("system_property_regression", name) for name in REGRESSION_COEFFICIENTS}
    return system_property_regression(**fields)


def stage_comparison() -> pd.DataFrame:
    """
    Evaluate the system-property regression for the biofilm-stage presets.

    Returns
    -------
    pandas.DataFrame
        Indexed by stage key, with the stage name, age in days, the four system
        properties and the regression outputs.
    """
    rows = {}
    for key, stage in BIOFILM_STAGES.items():
        params = stage["params"]
        rows[key] = {"name": stage["name"], "days": stage["days"], **params, **system_property_regression(**params)}
    return pd.DataFrame.from_dict(rows, orient="index").rename_axis("stage")


def sweep_system_properties(*, variable: str, values: npt.ArrayLike, fixed_params: dict) -> pd.DataFrame:
    """Re-evaluate the system-property regression along one of its four inputs."""
    return evaluate_sweep(
        system_property_regression,
        variable=variable,
        values=values,
        fixed_params=fixed_params,
        outputs=["ln_removal", "log10_removal", "removal"],
    )


def stage_progress(
    porosity: npt.ArrayLike,
    *,
    porosity_min: float = STAGE_POROSITY_RANGE[0],
    porosity_max: float = STAGE_POROSITY_RANGE[1],
) -> npt.NDArray[np.floating]:
    """
    Biofilm stage progress from the porosity.

    Parameters
    ----------
    porosity : array-like
        Current porosity theta [-].
    porosity_min : float, optional
        Porosity of a fully occluded bed (default 0.0).
    porosity_max : float, optional
        Porosity at which biofilm development starts (default 0.34).

    Returns
    -------
    numpy.ndarray
        ``t = clip((theta_max - theta) / (theta_max - theta_min), 0, 1)``.

    Raises
    ------
    DomainError
        If ``porosity_max`` is not larger than ``porosity_min``.

    Examples
    --------
    >>> from ssfremoval.biofilm import stage_progress
    >>> print(stage_progress(0.34), stage_progress(0.0), stage_progress(0.5))
    0.0 1.0 0.0
    """
    if porosity_max <= porosity_min:
        msg = f"porosity_max ({porosity_max}) must exceed porosity_min ({porosity_min})"
        raise DomainError(msg)
    porosity = np.asarray(porosity, dtype=float)
    return np.clip((porosity_max - porosity) / (porosity_max - porosity_min), 0.0, 1.0)


def bernstein_weights(t: float) -> npt.NDArray[np.floating]:
    """Quadratic Bernstein basis ``((1-t)^2, 2t(1-t), t^2)``; sums to one."""
    return np.array([(1.0 - t) ** 2, 2.0 * t * (1.0 - t), t**2])


def softmax_stage_weights(weights: npt.ArrayLike, *, sharpness: float = DEFAULT_SHARPNESS) -> npt.NDArray[np.floating]:
    """
    Sharpen stage weights with a softmax.

    Parameters
    ----------
    weights : array-like
        Bernstein weights ``(b1, b2, b3)``.
    sharpness : float, optional
        Softmax sharpness lambda, finite and non-negative (default 4.0). Zero gives
        equal weights; large values approach a single dominant stage.

    Returns
    -------
    numpy.ndarray
        ``c_i = exp(lambda b_i) / sum_j exp(lambda b_j)``, strictly positive and
        summing to one.

    Notes
    -----
    Strict positivity holds for sharpness below about 700. Beyond that the
    exponentials of the smaller weights underflow in double precision and those
    weights become exactly zero, while the sum stays one.
    """
    if not np.isfinite(sharpness) or sharpness < 0.0:
        msg = f"sharpness must be finite and non-negative, got {sharpness}"
        raise DomainError(msg)
    return softmax(sharpness * np.asarray(weights, dtype=float))


def effective_throat_diameter(
    *,
    throat_diameter_ref: float,
    grain_diameter: float,
    grain_diameter_ref: float,
    porosity: float,
    porosity_ref: float,
) -> float:
    """
    Effective pore-throat diameter of a biofilm-laden bed.

    The smaller of a grain-size estimate ``dth0^2 / (dth0 + (dg - dg0))`` and a
    porosity estimate ``dth0 * (theta / (1 - theta)) / (theta0 / (1 - theta0))``.

    Parameters
    ----------
    throat_diameter_ref : float
        Clean-bed throat diameter dth0 [µm].
    grain_diameter : float
        Grain diameter dg [µm].
    grain_diameter_ref : float
        Reference grain diameter dg0 [µm].
    porosity : float
        Current porosity theta [-].
    porosity_ref : float
        Clean-bed porosity theta0 [-].

    Returns
    -------
    float
        Effective throat diameter [µm].

    Raises
    ------
    DomainError
        If an input is not finite, ``dth0 + (dg - dg0)`` is not positive or a
        porosity is outside (0, 1).
    """
    ensure_finite(
        throat_diameter_ref=throat_diameter_ref,
        grain_diameter=grain_diameter,
        grain_diameter_ref=grain_diameter_ref,
        porosity=porosity,
        porosity_ref=porosity_ref,
    )
    denominator = throat_diameter_ref + (grain_diameter - grain_diameter_ref)
    if denominator <= 0.0:
        msg = f"dth0 + (dg - dg0) must be positive, got {denominator}"
        raise DomainError(msg)
    for name, value in (("porosity", porosity), ("porosity_ref", porosity_ref)):
        if not 0.0 < value < 1.0:
            msg = f"{name} must be between 0 and 1, got {value}"
            raise DomainError(msg)
    throat_grain = throat_diameter_ref**2 / denominator
    throat_porosity = throat_diameter_ref * (porosity / (1.0 - porosity)) / (porosity_ref / (1.0 - porosity_ref))
    return min(throat_grain, throat_porosity)


def raw_drivers(
    *,
    shape_factor: float,
    concavity_factor: float,
    svr: float,
    particle_diameter: float,
    roughness_coefficient: float,
    hydraulic_conductivity: float,
    hydraulic_conductivity_ref: float,
    throat_diameter: float,
) -> npt.NDArray[np.floating]:
    """
    Raw drivers of the three biofilm stages.

    Parameters
    ----------
    shape_factor : float
        Biofilm shape factor [-].
    concavity_factor : float
        Biofilm concavity factor [-].
    svr : float
        Surface-to-volume ratio [1/µm].
    particle_diameter : float
        Particle diameter dp [µm].
    roughness_coefficient : float
        Roughness coefficient RC [-], positive.
    hydraulic_conductivity : float
        Hydraulic conductivity HC, same units as the reference.
    hydraulic_conductivity_ref : float
        Clean-bed hydraulic conductivity HC0, positive.
    throat_diameter : float
        Effective throat diameter [µm].

    Returns
    -------
    numpy.ndarray
        ``T1 = f_shape + f_concave``, ``T2 = SVR dp / RC`` and
        ``T3 = (1 - sqrt(HC / HC0)) dp / (dp + dth)``. T3 is clamped at zero when
        the conductivity exceeds the clean-bed value.

    Raises
    ------
    DomainError
        If an input is not finite, RC or HC0 is not positive, HC is negative, or
        ``dp + dth`` is not positive.
    """
    ensure_finite(
        shape_factor=shape_factor,
        concavity_factor=concavity_factor,
        svr=svr,
        particle_diameter=particle_diameter,
        roughness_coefficient=roughness_coefficient,
        hydraulic_conductivity=hydraulic_conductivity,
        hydraulic_conductivity_ref=hydraulic_conductivity_ref,
        throat_diameter=throat_diameter,
    )
    if roughness_coefficient <= 0.0:
        msg = f"roughness_coefficient must be positive, got {roughness_coefficient}"
        raise DomainError(msg)
    if hydraulic_conductivity_ref <= 0.0:
        msg = f"hydraulic_conductivity_ref must be positive, got {hydraulic_conductivity_ref}"
        raise DomainError(msg)
    if hydraulic_conductivity < 0.0:
        msg = f"hydraulic_conductivity must be non-negative, got {hydraulic_conductivity}"
        raise DomainError(msg)
    if particle_diameter + throat_diameter <= 0.0:
        msg = "particle_diameter + throat_diameter must be positive"
        raise DomainError(msg)

    t1 = shape_factor + concavity_factor
    t2 = svr * particle_diameter / roughness_coefficient
    t3 = (1.0 - np.sqrt(hydraulic_conductivity / hydraulic_conductivity_ref)) * (
        particle_diameter / (particle_diameter + throat_diameter)
    )
    return np.maximum(np.array([t1, t2, t3], dtype=float), 0.0)


def normalize_drivers(
    drivers: npt.ArrayLike, references: tuple[float, float, float] = DRIVER_REFERENCES
) -> npt.NDArray[np.floating]:
    """Divide the raw drivers by their reference values."""
    return np.asarray(drivers, dtype=float) / np.asarray(references, dtype=float)


def bounded_stage_efficiencies(
    stage_weights: npt.ArrayLike,
    normalized_drivers: npt.ArrayLike,
    exponents: tuple[float, float, float] = STAGE_EXPONENTS,
) -> npt.NDArray[np.floating]:
    """
    Saturating stage efficiencies ``B_i = 1 - exp(-c_i T_i^e_i)``.

    Each ``B_i`` is in [0, 1) for non-negative weights and drivers, however large
    the driver.
    """
    c = np.asarray(stage_weights, dtype=float)
    t = np.asarray(normalized_drivers, dtype=float)
    return -np.expm1(-c * t ** np.asarray(exponents, dtype=float))


def capacity_scaled_efficiencies(
    eta_base: float, bounded: npt.ArrayLike, *, shrink_factor: float = DEFAULT_SHRINK_FACTOR
) -> npt.NDArray[np.floating]:
    """
    Scale the stage efficiencies into the capacity left by the clean bed.

    Parameters
    ----------
    eta_base : float
        Clean-bed collector efficiency, in [0, 1).
    bounded : array-like
        ``(B1, B2, B3)`` from :func:`bounded_stage_efficiencies`.
    shrink_factor : float, optional
        Shrink factor k >= 0 (default 0.25). Larger values leave more of the
        capacity unused.

    Returns
    -------
    numpy.ndarray
        ``eta_i = s B_i`` with ``s = (1 - eta_base) / (sum(B) + k (1 - eta_base))``.
        ``eta_base + sum(eta_i) <= 1``.

    Raises
    ------
    DomainError
        If ``eta_base`` is outside [0, 1) or ``shrink_factor`` is negative or not
        finite.
    """
    ensure_finite(eta_base=eta_base, shrink_factor=shrink_factor)
    if not 0.0 <= eta_base < 1.0:
        msg = f"eta_base must be in [0, 1), got {eta_base}"
        raise DomainError(msg)
    if shrink_factor < 0.0:
        msg = f"shrink_factor must be non-negative, got {shrink_factor}"
        raise DomainError(msg)
    bounded = np.asarray(bounded, dtype=float)
    capacity = 1.0 - eta_base
    denominator = bounded.sum() + shrink_factor * capacity
    if denominator == 0.0:
        # No biofilm drive and no shrinkage: nothing to add.
        return np.zeros_like(bounded)
    return bounded * capacity / denominator


def flow_aligned_projected_area(
    *, porosity: float, porosity_ref: float, tortuosity: float, collector_diameter: float
) -> float:
    """
    Collector area projected onto the flow direction per unit bed volume.

    ``Avx = 3/2 (1 - theta) / dc / tau * (theta0 / theta)`` [1/m]. For a clean bed
    (tau = 1, theta = theta0) this is the clean-bed CFT factor ``3/2 (1 - f) / dc``.

    Parameters
    ----------
    porosity : float
        Current porosity theta [-].
    porosity_ref : float
        Clean-bed porosity theta0 [-].
    tortuosity : float
        Tortuosity tau [-], positive.
    collector_diameter : float
        Collector diameter dc [m].
    """
    ensure_finite(
        porosity=porosity, porosity_ref=porosity_ref, tortuosity=tortuosity, collector_diameter=collector_diameter
    )
    if not 0.0 < porosity < 1.0 or not 0.0 < porosity_ref < 1.0:
        msg = "porosity and porosity_ref must be between 0 and 1"
        raise DomainError(msg)
    if tortuosity <= 0.0 or collector_diameter <= 0.0:
        msg = "tortuosity and collector_diameter must be positive"
        raise DomainError(msg)
    return 1.5 * (1.0 - porosity) / collector_diameter / tortuosity * (porosity_ref / porosity)


def biofilm_attachment_rate(
    *,
    eta_total: float,
    porosity: float,
    tortuosity: float,
    collector_diameter: float,
    velocity: float,
    porosity_ref: float = CLEAN_BED_POROSITY,
    sticking_efficiency: float = 1.0,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> float:
    """
    Attachment rate of a biofilm-laden bed.

    Parameters
    ----------
    eta_total : float
        Total collector efficiency, clean bed plus stages [-].
    porosity : float
        Current porosity [-].
    tortuosity : float
        Tortuosity [-].
    collector_diameter : float
        Collector diameter [µm].
    velocity : float
        Approach velocity [m/h].
    porosity_ref : float, optional
        Clean-bed porosity (default 0.35).
    sticking_efficiency : float, optional
        Attachment efficiency alpha (default 1.0).
    scale_factor : float, optional
        Global scale factor gamma (default 1.0).

    Returns
    -------
    float
        ``k_att = gamma * Avx * U * alpha * eta_total`` [1/s].
    """
    area = flow_aligned_projected_area(
        porosity=porosity,
        porosity_ref=porosity_ref,
        tortuosity=tortuosity,
        collector_diameter=float(units.micrometre_to_metre(collector_diameter)),
    )
    u = float(units.metre_per_hour_to_metre_per_second(velocity))
    return scale_factor * area * u * sticking_efficiency * eta_total


def three_stage_efficiency(
    *,
    eta_base: float,
    porosity: float,
    svr: float,
    particle_diameter: float,
    hydraulic_conductivity: float,
    shape_factor: float = 1.0,
    concavity_factor: float = 0.0,
    roughness_coefficient: float = 1.0,
    hydraulic_conductivity_ref: float = 1.0,
    grain_diameter: float = CLEAN_BED_GRAIN_DIAMETER,
    grain_diameter_ref: float = CLEAN_BED_GRAIN_DIAMETER,
    throat_diameter_ref: float = CLEAN_BED_THROAT_DIAMETER,
    porosity_ref: float = CLEAN_BED_POROSITY,
    porosity_min: float = STAGE_POROSITY_RANGE[0],
    porosity_max: float = STAGE_POROSITY_RANGE[1],
    sharpness: float = DEFAULT_SHARPNESS,
    shrink_factor: float = DEFAULT_SHRINK_FACTOR,
) -> dict:
    """
    Collector efficiency of a biofilm-laden bed from the three-stage model.

    Parameters
    ----------
    eta_base : float
        Clean-bed single-collector efficiency, for example ``eta_0`` of
        :func:`ssfremoval.collector.single_collector_efficiency`. In [0, 1).
    porosity : float
        Current porosity [-].
    svr : float
        Biofilm surface-to-volume ratio [1/µm].
    particle_diameter : float
        Particle diameter [µm].
    hydraulic_conductivity : float
        Hydraulic conductivity, same units as ``hydraulic_conductivity_ref``.
    shape_factor, concavity_factor : float, optional
        Biofilm morphology factors of the roughness driver [-].
    roughness_coefficient : float, optional
        Roughness coefficient of the network driver [-] (default 1.0).
    hydraulic_conductivity_ref : float, optional
        Clean-bed hydraulic conductivity (default 1.0, i.e. HC is normalised).
    grain_diameter, grain_diameter_ref : float, optional
        Grain diameter and reference grain diameter [µm] (default 200).
    throat_diameter_ref : float, optional
        Clean-bed throat diameter [µm] (default 40).
    porosity_ref : float, optional
        Clean-bed porosity (default 0.35).
    porosity_min, porosity_max : float, optional
        Porosity range of the stage progress (default 0.0 and 0.34).
    sharpness : float, optional
        Softmax sharpness (default 4.0).
    shrink_factor : float, optional
        Capacity shrink factor (default 0.25).

    Returns
    -------
    dict
        ``stage_progress``, ``bernstein_weights``, ``stage_weights``,
        ``throat_diameter`` [µm], ``raw_drivers``, ``normalized_drivers``,
        ``bounded`` (arrays of three), ``eta_1``, ``eta_2``, ``eta_3``,
        ``eta_base``, ``eta_total`` and ``dominant_stage`` (1, 2 or 3).
    """
    t = float(stage_progress(porosity, porosity_min=porosity_min, porosity_max=porosity_max))
    bernstein = bernstein_weights(t)
    weights = softmax_stage_weights(bernstein, sharpness=sharpness)
    throat = effective_throat_diameter(
        throat_diameter_ref=throat_diameter_ref,
        grain_diameter=grain_diameter,
        grain_diameter_ref=grain_diameter_ref,
        porosity=porosity,
        porosity_ref=porosity_ref,
    )
    drivers = raw_drivers(
        shape_factor=shape_factor,
        concavity_factor=concavity_factor,
        svr=svr,
        particle_diameter=particle_diameter,
        roughness_coefficient=roughness_coefficient,
        hydraulic_conductivity=hydraulic_conductivity,
        hydraulic_conductivity_ref=hydraulic_conductivity_ref,
        throat_diameter=throat,
    )
    normalized = normalize_drivers(drivers)
    bounded = bounded_stage_efficiencies(weights, normalized)
    eta_1, eta_2, eta_3 = capacity_scaled_efficiencies(eta_base, bounded, shrink_factor=shrink_factor)
    eta_total = eta_base + eta_1 + eta_2 + eta_3
    logger.debug("Three-stage efficiency: t=%.3f, eta=(%.3g, %.3g, %.3g), total=%.3g", t, eta_1, eta_2, eta_3, eta_total)
    return {
        "stage_progress": t,
        "bernstein_weights": bernstein,
        "stage_weights": weights,
        "throat_diameter": throat,
        "raw_drivers": drivers,
        "normalized_drivers": normalized,
        "bounded": bounded,
        "eta_base": eta_base,
        "eta_1": float(eta_1),
        "eta_2": float(eta_2),
        "eta_3": float(eta_3),
        "eta_total": float(eta_total),
        "dominant_stage": int(np.argmax([eta_1, eta_2, eta_3])) + 1,
    }


def sweep_three_stage(*, variable: str, values: npt.ArrayLike, fixed_params: dict) -> pd.DataFrame:
    """Re-evaluate :func:`three_stage_efficiency` along one of its keywords."""
    return evaluate_sweep(
        three_stage_efficiency,
        variable=variable,
        values=values,
        fixed_params=fixed_params,
        outputs=["stage_progress", "eta_1", "eta_2", "eta_3", "eta_total", "dominant_stage"],
    )


def three_stage_efficiency_from_record(params: ParameterRecord, *, eta_base: float, **kwargs) -> dict:
    """
    Evaluate :func:`three_stage_efficiency` on a parameter record.

    Parameters
    ----------
    params : ParameterRecord
        Provides ``porosity``, ``svr``, ``particle_diameter`` [µm] and
        ``hydraulic_conductivity`` (normalised, so the default clean-bed
        reference of 1.0 applies).
    eta_base : float
        Clean-bed single-collector efficiency [-].
    **kwargs
        Remaining keywords of :func:`three_stage_efficiency`.

    Raises
    ------
    MissingParameterError
        If one of the record fields is unset.
    """
    fields = {
        name: params.require("three_stage_efficiency", name)
        for name in ("porosity", "svr", "particle_diameter", "hydraulic_conductivity")
    }
    return three_stage_efficiency(eta_base=eta_base, **fields, **kwargs)
