"""
Multi-Scale Regression Registry.

Empirical linear regressions of the removal coefficient lambda of slow sand
filters on Schmutzdecke properties, fitted at four experimental scales:

- ``mini_75day``: mini-scale columns operated for 75 days, with the
  protein/carbohydrate ratio of the EPS as key predictor.
- ``mini_4month``: mini-scale columns operated for 4 months, protein only.
- ``midi``: midi-scale columns operated for one year, biomass or age.
- ``combined``: mini and midi data pooled.
- ``pilot``: the top 10 cm of pilot-scale filters, EPS composition and inoculation.

Each entry is a :class:`ModelDefinition` with fixed coefficients and the fitted
statistics (R², p-value). The registry is static and immutable; models are looked
up by ``(Scale, key)``.

A model reads only the fields of a :class:`~ssfremoval.parameters.ParameterRecord`
it needs and fails with :class:`~ssfremoval.exceptions.MissingParameterError` when
one is unset; it never substitutes zero. Predictions are clamped at zero in
:attr:`PredictionResult.value` while the fitted value stays in
:attr:`PredictionResult.raw_value`.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import dataclasses
import enum
import logging
import types
from collections.abc import Iterable
from dataclasses import dataclass

import numpy.typing as npt
import pandas as pd

from ssfremoval.exceptions import MissingParameterError
from ssfremoval.parameters import ParameterRecord
from ssfremoval.sweep import evaluate_sweep

logger = logging.getLogger(__name__)

# Smallest carbohydrate content used as divisor of the protein/carbohydrate ratio [µg/g].
CARBOHYDRATE_FLOOR = 0.1

# Predictors that are not plain record fields, with the fields they are computed from.
DERIVED_PREDICTORS = {"protein_carbohydrate_ratio": ("protein", "carbohydrate")}


class Scale(enum.Enum):
    """Experimental scale at which a regression was fitted."""

    MINI_75DAY = "mini_75day"
    MINI_4MONTH = "mini_4month"
    MIDI = "midi"
    COMBINED = "combined"
    PILOT = "pilot"


@dataclass(frozen=True)
class ModelDefinition:
    """
    A fixed-coefficient linear regression ``lambda = intercept + sum(coefficient * predictor)``.

    Parameters
    ----------
    scale : Scale
        Scale at which the model was fitted.
    key : str
        Model key within the scale, ``'A'``, ``'B'`` or ``'C'``.
    name : str
        Human-readable model name.
    equation : str
        Equation as published.
    intercept : float
        Intercept a0.
    terms : tuple of (str, float)
        Predictor names with their coefficients. A predictor is a
        :class:`~ssfremoval.parameters.ParameterRecord` field or one of
        :data:`DERIVED_PREDICTORS`. ``inoculated`` enters as 0 or 1.
    r_squared : float
        Coefficient of determination of the fit.
    p_value : float
        p-value of the fit.
    note : str, optional
        Remarks on the fit.
    """

    scale: Scale
    key: str
    name: str
    equation: str
    intercept: float
    terms: tuple[tuple[str, float], ...]
    r_squared: float
    p_value: float
    note: str = ""

    @property
    def label(self) -> str:
        """Registry label, for example ``'pilot/C'``."""
        return f"{self.scale.value}/{self.key}"

    @property
    def required_fields(self) -> tuple[str, ...]:
        """Record fields the model reads, in term order."""
        fields = []
        for predictor, _ in self.terms:
            for field in DERIVED_PREDICTORS.get(predictor, (predictor,)):
                if field not in fields:
                    fields.append(field)
        return tuple(fields)


@dataclass(frozen=True)
class PredictionResult:
    """
    Prediction of one registry model.

    Parameters
    ----------
    value : float
        Predicted removal coefficient, clamped at zero.
    raw_value : float
        Fitted value before clamping. Negative for inputs outside the fitted range.
    model : ModelDefinition
        The model that produced the prediction, with its fitted statistics.
    contributions : tuple of (str, float, float)
        Predictor name, predictor value and signed contribution per term.
    """

    value: float
    raw_value: float
    model: ModelDefinition
    contributions: tuple[tuple[str, float, float], ...]

    @property
    def clamped(self) -> bool:
        """Whether the presented value differs from the fitted value."""
        return self.value != self.raw_value


_DEFINITIONS = (
    ModelDefinition(
        scale=Scale.MINI_75DAY,
        key="A",
        name="Model A (Biochemical)",
        equation="lambda = a0 + a1 * (protein / carbohydrate)",
        intercept=-0.17,
        terms=(("protein_carbohydrate_ratio", 2.14),),
        r_squared=0.81,
        p_value=5.62e-4,
    ),
    ModelDefinition(
        scale=Scale.MINI_75DAY,
        key="B",
        name="Model B (Abiotic)",
        equation="lambda = a0 + a1 * grain_size + a2 * SD_inoc",
        intercept=0.86,
        terms=(("grain_size", -1.44), ("inoculated", 0.64)),
        r_squared=0.55,
        p_value=0.039,
    ),
    ModelDefinition(
        scale=Scale.MINI_75DAY,
        key="C",
        name="Model C (Combined)",
        equation="lambda = a0 + a1 * (protein / carbohydrate) + a2 * SD_inoc",
        intercept=-0.22,
        terms=(("protein_carbohydrate_ratio", 1.90), ("inoculated", 0.34)),
        r_squared=0.89,
        p_value=5.97e-4,
    ),
    ModelDefinition(
        scale=Scale.MINI_4MONTH,
        key="A",
        name="Model A (Protein)",
        equation="lambda = a0 + a1 * protein",
        intercept=-0.21,
        terms=(("protein", 5.71e-3),),
        r_squared=0.37,
        p_value=0.0477,
        note="Abiotic-only model not significant (p > 0.05). Protein correlated with age (r = 0.88).",
    ),
    ModelDefinition(
        scale=Scale.MIDI,
        key="A",
        name="Model A (Biomass)",
        equation="lambda = a0 + a1 * biomass",
        intercept=0.128,
        terms=(("biomass", 1.85e-9),),
        r_squared=0.35,
        p_value=0.0113,
    ),
    ModelDefinition(
        scale=Scale.MIDI,
        key="B",
        name="Model B (Age)",
        equation="lambda = a0 + a1 * SD_age",
        intercept=-0.0106,
        terms=(("age_days", 1.36e-3),),
        r_squared=0.71,
        p_value=4.8e-5,
        note="Protein not significant at midi-scale due to minimal temporal variation in EPS.",
    ),
    ModelDefinition(
        scale=Scale.COMBINED,
        key="A",
        name="Model A (Biomass)",
        equation="lambda = a0 + a1 * biomass",
        intercept=0.0884,
        terms=(("biomass", 2.10e-9),),
        r_squared=0.43,
        p_value=3.30e-4,
        note=(
            "Listed in some sources as an EPS-component model (carbohydrate and protein), "
            "but the published coefficients belong to the biomass regression."
        ),
    ),
    ModelDefinition(
        scale=Scale.COMBINED,
        key="B",
        name="Model B (Age)",
        equation="lambda = a0 + a1 * SD_age",
        intercept=-0.017,
        terms=(("age_days", 1.37e-3),),
        r_squared=0.70,
        p_value=1.9e-7,
    ),
    ModelDefinition(
        scale=Scale.PILOT,
        key="A",
        name="Model A (EPS Components)",
        equation="lambda = a0 + a1 * carbohydrate + a2 * protein",
        intercept=-2.1110,
        terms=(("carbohydrate", 4.16e-3), ("protein", 0.0133)),
        r_squared=0.95,
        p_value=0.0059,
        note="Upper layer (top 10 cm) removal only.",
    ),
    ModelDefinition(
        scale=Scale.PILOT,
        key="B",
        name="Model B (Age Only)",
        equation="lambda = a0 + a1 * SD_age",
        intercept=-0.3748,
        terms=(("age_days", 0.0029),),
        r_squared=0.83,
        p_value=0.0074,
        note="Upper layer (top 10 cm) removal only.",
    ),
    ModelDefinition(
        scale=Scale.PILOT,
        key="C",
        name="Model C (Full Model)",
        equation="lambda = a0 + a1 * carbohydrate + a2 * protein + a3 * SD_inoc",
        intercept=-2.2556,
        terms=(("carbohydrate", 4.78e-3), ("protein", 0.0124), ("inoculated", -0.1935)),
        r_squared=0.99,
        p_value=0.0041,
        note="Upper layer (top 10 cm) removal only.",
    ),
)

REGISTRY = types.MappingProxyType({(definition.scale, definition.key): definition for definition in _DEFINITIONS})

# How best_available picks the canonical model of a scale.
BEST_MODEL_POLICY = types.MappingProxyType({
    Scale.MINI_75DAY: "r_squared",
    Scale.MINI_4MONTH: "r_squared",
    Scale.MIDI: "max_prediction",
    Scale.COMBINED: "max_prediction",
    Scale.PILOT: "r_squared",
})


def get_model(scale: Scale | str, key: str) -> ModelDefinition:
    """
    Look up a registry model.

    Parameters
    ----------
    scale : Scale or str
        Scale, or its value such as ``'pilot'``.
    key : str
        Model key within the scale.

    Raises
    ------
    ValueError
        If the scale or the model is unknown.
    """
    scale = Scale(scale)
    try:
        return REGISTRY[scale, key]
    except KeyError:
        available = ", ".join(definition.key for definition in models_for_scale(scale))
        msg = f"Unknown model {key!r} for scale {scale.value!r}; available: {available}"
        raise ValueError(msg) from None


def models_for_scale(scale: Scale | str) -> list[ModelDefinition]:
    """All models fitted at a scale, in key order."""
    scale = Scale(scale)
    return [definition for (s, _), definition in REGISTRY.items() if s is scale]


def predictor_value(params: ParameterRecord, predictor: str, *, model: str = "") -> float:
    """
    Value of one regression predictor for a parameter record.

    Parameters
    ----------
    params : ParameterRecord
        Operating point.
    predictor : str
        Record field name, or ``'protein_carbohydrate_ratio'``, computed as
        ``protein / max(carbohydrate, 0.1)``.
    model : str, optional
        Requesting model label, used in error messages.

    Returns
    -------
    float
        Predictor value; ``inoculated`` is returned as 0.0 or 1.0.

    Raises
    ------
    MissingParameterError
        If a field the predictor needs is unset.
    """
    if predictor == "protein_carbohydrate_ratio":
        protein = params.require(model, "protein")
        carbohydrate = params.require(model, "carbohydrate")
        return protein / max(carbohydrate, CARBOHYDRATE_FLOOR)
    return float(params.require(model, predictor))


def predict(definition: ModelDefinition, params: ParameterRecord) -> PredictionResult:
    """Apply a model to a record without logging; see :func:`evaluate`."""
    contributions = []
    raw_value = definition.intercept
    for predictor, coefficient in definition.terms:
        x = predictor_value(params, predictor, model=definition.label)
        contributions.append((predictor, x, coefficient * x))
        raw_value += coefficient * x
    return PredictionResult(
        value=max(raw_value, 0.0), raw_value=raw_value, model=definition, contributions=tuple(contributions)
    )


def evaluate(scale: Scale | str, key: str, params: ParameterRecord) -> PredictionResult:
    """
    Evaluate one registry model.

    Parameters
    ----------
    scale : Scale or str
        Scale of the model.
    key : str
        Model key within the scale.
    params : ParameterRecord
        Operating point. Only the fields in ``required_fields`` of the model are read.

    Returns
    -------
    PredictionResult
        Clamped and raw prediction with the model metadata.

    Raises
    ------
    MissingParameterError
        If the record lacks a field the model needs.
    ValueError
        If the model is unknown.

    Examples
    --------
    >>> from ssfremoval.parameters import ParameterRecord
    >>> from ssfremoval.regression import evaluate
    >>> params = ParameterRecord(carbohydrate=390.0, protein=185.0, inoculated=True)
    >>> print(f"{evaluate('pilot', 'C', params).value:.4f}")
    1.7091
    """
    result = predict(get_model(scale, key), params)
    if result.clamped:
        logger.warning("%s predicts negative removal %.4g; presented as 0", result.model.label, result.raw_value)
    return result


def evaluate_all(
    params: ParameterRecord, *, skip_missing: bool = False
) -> dict[tuple[Scale, str], PredictionResult]:
    """
    Evaluate every registry model against the same parameter record.

    Parameters
    ----------
    params : ParameterRecord
        Operating point shared by all models.
    skip_missing : bool, optional
        Leave out models whose fields are unset instead of raising (default False).

    Returns
    -------
    dict
        Prediction per ``(Scale, key)``, in registry order.

    Raises
    ------
    MissingParameterError
        If ``skip_missing`` is False and a model lacks a field.
    """
    results = {}
    for (scale, key), definition in REGISTRY.items():
        try:
            results[scale, key] = evaluate(scale, key, params)
        except MissingParameterError:
            if not skip_missing:
                raise
            logger.debug("Skipping %s: missing parameter", definition.label)
    return results


def best_available(scale: Scale | str, params: ParameterRecord) -> PredictionResult:
    """
    Canonical prediction of a scale.

    The pick follows :data:`BEST_MODEL_POLICY`: ``'r_squared'`` takes the model with
    the highest R², ``'max_prediction'`` the largest clamped prediction. Only models
    whose fields are all set take part.

    Raises
    ------
    MissingParameterError
        If no model of the scale can be evaluated; the error of the first model
        is raised.
    """
    scale = Scale(scale)
    candidates = []
    first_error = None
    for definition in models_for_scale(scale):
        try:
            candidates.append(evaluate(scale, definition.key, params))
        except MissingParameterError as error:
            first_error = first_error or error
    if not candidates:
        raise first_error
    if BEST_MODEL_POLICY[scale] == "r_squared":
        return max(candidates, key=lambda result: result.model.r_squared)
    return max(candidates, key=lambda result: result.value)


def sweep_over_variable(
    scale: Scale | str, key: str, *, variable: str, values: npt.ArrayLike, fixed_params: ParameterRecord
) -> pd.DataFrame:
    """
    Re-evaluate a registry model along one record field.

    Parameters
    ----------
    scale : Scale or str
        Scale of the model.
    key : str
        Model key within the scale.
    variable : str
        ParameterRecord field to sweep.
    values : array-like
        Values of the field.
    fixed_params : ParameterRecord
        Record providing the other fields. It is not modified.

    Returns
    -------
    pandas.DataFrame
        Columns ``variable``, ``value`` (clamped) and ``raw_value``.

    Raises
    ------
    ValueError
        If ``variable`` is not a ParameterRecord field.
    """
    definition = get_model(scale, key)
    field_names = {field.name for field in dataclasses.fields(ParameterRecord)}
    if variable not in field_names:
        msg = f"Cannot sweep {variable!r}: not a ParameterRecord field. Available: {', '.join(sorted(field_names))}"
        raise ValueError(msg)

    def predict_fields(**fields):
        result = predict(definition, ParameterRecord(**fields))
        return {"value": result.value, "raw_value": result.raw_value}

    return evaluate_sweep(predict_fields, variable=variable, values=values, fixed_params=fixed_params.as_dict())


def compare_models(params: ParameterRecord) -> pd.DataFrame:
    """
    Tabulate every model that can be evaluated for a record.

    Returns
    -------
    pandas.DataFrame
        One row per model with columns ``scale``, ``model``, ``name``, ``value``,
        ``raw_value``, ``r_squared`` and ``p_value``.
    """
    rows = [
        {
            "scale": scale.value,
            "model": key,
            "name": result.model.name,
            "value": result.value,
            "raw_value": result.raw_value,
            "r_squared": result.model.r_squared,
            "p_value": result.model.p_value,
        }
        for (scale, key), result in evaluate_all(params, skip_missing=True).items()
    ]
    return pd.DataFrame(rows, columns=["scale", "model", "name", "value", "raw_value", "r_squared", "p_value"])


def compare_along(
    *,
    variable: str,
    values: npt.ArrayLike,
    params: ParameterRecord,
    models: Iterable[tuple[Scale | str, str]],
) -> pd.DataFrame:
    """
    Sweep several registry models over the same record field.

    Returns
    -------
    pandas.DataFrame
        Column ``variable`` and one column of clamped predictions per model,
        named by the model label such as ``'midi/B'``.
    """
    frame = None
    for scale, key in models:
        sweep = sweep_over_variable(scale, key, variable=variable, values=values, fixed_params=params)
        column = sweep[["value"]].rename(columns={"value": get_model(scale, key).label})
        frame = sweep[[variable]].join(column) if frame is None else frame.join(column)
    if frame is None:
        msg = "models must name at least one registry model"
        raise ValueError(msg)
    return frame
