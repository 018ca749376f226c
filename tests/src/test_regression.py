import dataclasses
import logging

import pytest
from numpy.testing import assert_allclose

from ssfremoval import regression
from ssfremoval.exceptions import MissingParameterError
from ssfremoval.parameters import ParameterRecord
from ssfremoval.regression import (
    REGISTRY,
    Scale,
    best_available,
    compare_along,
    compare_models,
    evaluate,
    evaluate_all,
    get_model,
    models_for_scale,
    sweep_over_variable,
)


def test_registry_contents():
    """Eleven models over five scales."""
    assert len(REGISTRY) == 11
    assert {scale for scale, _ in REGISTRY} == set(Scale)
    assert [m.key for m in models_for_scale("pilot")] == ["A", "B", "C"]
    assert [m.key for m in models_for_scale(Scale.MINI_4MONTH)] == ["A"]


def test_registry_is_read_only():
    """Neither the registry nor its definitions can be changed."""
    with pytest.raises(TypeError):
        REGISTRY[Scale.PILOT, "D"] = REGISTRY[Scale.PILOT, "A"]
    with pytest.raises(dataclasses.FrozenInstanceError):
        REGISTRY[Scale.PILOT, "A"].intercept = 0.0


def test_get_model_errors():
    """Unknown scales and models are reported."""
    with pytest.raises(ValueError, match="available: A, B"):
        get_model("midi", "C")
    with pytest.raises(ValueError, match="not a valid Scale"):
        get_model("giant", "A")


def test_required_fields():
    """Derived predictors expand to the record fields they read."""
    assert get_model("mini_75day", "C").required_fields == ("protein", "carbohydrate", "inoculated")
    assert get_model("pilot", "B").required_fields == ("age_days",)


def test_pilot_model_c_worked_example():
    """Carbohydrate 390, protein 185, inoculated."""
    params = ParameterRecord(carbohydrate=390.0, protein=185.0, inoculated=True)
    result = evaluate("pilot", "C", params)
    expected = -2.2556 + 4.78e-3 * 390.0 + 0.0124 * 185.0 - 0.1935
    assert_allclose(result.value, expected, rtol=1e-12)
    assert_allclose(result.value, 1.7091, atol=1e-4)
    assert result.raw_value == result.value
    assert result.model.r_squared == 0.99


def test_contributions_add_up(full_record):
    """Intercept plus term contributions give the raw value."""
    result = evaluate("mini_75day", "C", full_record)
    total = result.model.intercept + sum(contribution for _, _, contribution in result.contributions)
    assert_allclose(total, result.raw_value)
    assert result.contributions[1] == ("inoculated", 1.0, 0.34)


def test_carbohydrate_floor():
    """The ratio divides by at least 0.1 µg/g."""
    result = evaluate("mini_75day", "A", ParameterRecord(protein=10.0, carbohydrate=0.0))
    assert_allclose(result.raw_value, -0.17 + 2.14 * 10.0 / regression.CARBOHYDRATE_FLOOR)


def test_missing_parameter_is_reported():
    """A missing field is never replaced by zero."""
    with pytest.raises(MissingParameterError, match="'pilot/C'.*'carbohydrate'"):
        evaluate("pilot", "C", ParameterRecord(protein=185.0, inoculated=True))


def test_negative_prediction_is_clamped_and_logged(caplog):
    """Young filters fall below the fitted range; the raw value stays available."""
    with caplog.at_level(logging.WARNING, logger="ssfremoval.regression"):
        result = evaluate("pilot", "B", ParameterRecord(age_days=30.0))
    assert_allclose(result.raw_value, -0.3748 + 0.0029 * 30.0)
    assert result.value == 0.0
    assert result.clamped
    assert "pilot/B" in caplog.text


def test_evaluate_all_uses_one_record(full_record):
    """Every model is evaluated against the same record."""
    results = evaluate_all(full_record)
    assert list(results) == list(REGISTRY)
    for (scale, key), result in results.items():
        assert result == evaluate(scale, key, full_record)


def test_evaluate_all_missing_fields():
    """Incomplete records raise unless missing models are skipped."""
    partial = ParameterRecord(protein=100.0)
    with pytest.raises(MissingParameterError):
        evaluate_all(partial)
    assert list(evaluate_all(partial, skip_missing=True)) == [(Scale.MINI_4MONTH, "A")]


def test_best_available_highest_r_squared(full_record):
    """The pilot scale takes its full model."""
    assert best_available("pilot", full_record).model.key == "C"


def test_best_available_largest_prediction(full_record):
    """The midi scale takes the largest prediction."""
    assert best_available("midi", full_record).model.key == "B"
    assert best_available("midi", ParameterRecord(biomass=3e8)).model.key == "A"


def test_best_available_skips_incomplete_models():
    """Only models with all fields set take part."""
    result = best_available("pilot", ParameterRecord(age_days=365.0))
    assert result.model.key == "B"


def test_best_available_without_any_model():
    """A record that no model of the scale can use fails."""
    with pytest.raises(MissingParameterError):
        best_available("combined", ParameterRecord(protein=100.0))


def test_sweep_over_variable(full_record):
    """Sweeping age re-evaluates the age model and keeps raw values."""
    frame = sweep_over_variable("pilot", "B", variable="age_days", values=[0.0, 100.0, 200.0], fixed_params=full_record)
    assert list(frame.columns) == ["age_days", "value", "raw_value"]
    assert_allclose(frame["raw_value"], [-0.3748, -0.3748 + 0.29, -0.3748 + 0.58])
    assert_allclose(frame["value"], [0.0, 0.0, -0.3748 + 0.58])
    assert full_record.age_days == 730.0


def test_sweep_over_unknown_variable(full_record):
    """Sweeping a name that is not a record field is a ValueError naming it."""
    with pytest.raises(ValueError, match="'ph'.*not a ParameterRecord field"):
        sweep_over_variable("pilot", "B", variable="ph", values=[6.0, 7.0], fixed_params=full_record)


def test_sweep_inoculation_flag(full_record):
    """The inoculation flag can be swept as 0 and 1."""
    frame = sweep_over_variable("mini_75day", "B", variable="inoculated", values=[0, 1], fixed_params=full_record)
    assert_allclose(frame["raw_value"].diff().iloc[1], 0.64)


def test_compare_models(full_record):
    """One row per model with its statistics."""
    table = compare_models(full_record)
    assert len(table) == 11
    assert list(table.columns) == ["scale", "model", "name", "value", "raw_value", "r_squared", "p_value"]
    assert (table["value"] >= 0.0).all()


def test_compare_models_skips_incomplete():
    """Models that cannot be evaluated are left out."""
    assert list(compare_models(ParameterRecord(age_days=365.0))["scale"]) == ["midi", "combined", "pilot"]


def test_compare_along(full_record):
    """Several age models on a shared axis."""
    frame = compare_along(
        variable="age_days", values=[100.0, 400.0], params=full_record, models=[("midi", "B"), ("combined", "B")]
    )
    assert list(frame.columns) == ["age_days", "midi/B", "combined/B"]
    assert_allclose(frame["midi/B"], [-0.0106 + 0.136, -0.0106 + 0.544])


def test_compare_along_needs_models(full_record):
    """An empty model list is an error."""
    with pytest.raises(ValueError, match="at least one"):
        compare_along(variable="age_days", values=[1.0], params=full_record, models=[])
