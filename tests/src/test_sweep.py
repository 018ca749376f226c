import numpy as np
import pytest
from numpy.testing import assert_allclose

from ssfremoval.exceptions import DomainError
from ssfremoval.sweep import evaluate_sweep, sample_values


def test_linear_sampling():
    """Linear samples include both ends."""
    assert_allclose(sample_values(start=0.05, stop=4.95, num=50), np.linspace(0.05, 4.95, 50))


def test_log_sampling_spans_decades():
    """Log samples are evenly spaced in log10."""
    values = sample_values(start=0.01, stop=10.0, num=61, spacing="log")
    assert len(values) == 61
    assert_allclose(values[[0, 20, 40, 60]], [0.01, 0.1, 1.0, 10.0], rtol=1e-12)
    assert_allclose(np.diff(np.log10(values)), 0.05, rtol=1e-9)


def test_single_sample():
    """One sample is the start value."""
    assert_allclose(sample_values(start=2.0, stop=3.0, num=1), [2.0])


def test_sampling_errors():
    """Invalid sampling requests are rejected."""
    with pytest.raises(DomainError, match="at least 1"):
        sample_values(start=0.0, stop=1.0, num=0)
    with pytest.raises(DomainError, match="positive"):
        sample_values(start=0.0, stop=1.0, spacing="log")
    with pytest.raises(ValueError, match="spacing"):
        sample_values(start=0.0, stop=1.0, spacing="quadratic")


def test_scalar_model_sweep():
    """A scalar-valued model fills a value column."""

    def model(*, x, offset):
        return x + offset

    frame = evaluate_sweep(model, variable="x", values=[1.0, 2.0, 3.0], fixed_params={"offset": 10.0})
    assert list(frame.columns) == ["x", "value"]
    assert_allclose(frame["value"], [11.0, 12.0, 13.0])


def test_mapping_model_sweep_keeps_scalar_outputs():
    """Mapping-valued models give one column per scalar output."""

    def model(*, x):
        return {"double": 2 * x, "square": x**2, "array": np.array([x, x]), "nested": {"a": x}}

    frame = evaluate_sweep(model, variable="x", values=[1.0, 2.0], fixed_params={})
    assert list(frame.columns) == ["x", "double", "square"]
    assert_allclose(frame["square"], [1.0, 4.0])


def test_selected_outputs_and_override():
    """Selected outputs are kept in order and the swept value overrides a fixed one."""

    def model(*, x, y):
        return {"sum": x + y, "product": x * y}

    frame = evaluate_sweep(model, variable="x", values=[2.0], fixed_params={"x": 100.0, "y": 3.0}, outputs=["product"])
    assert list(frame.columns) == ["x", "product"]
    assert frame["product"].iloc[0] == 6.0


def test_sweep_is_reproducible():
    """Sweeps hold no state."""

    def model(*, x):
        return np.sqrt(x)

    first = evaluate_sweep(model, variable="x", values=[1.0, 4.0, 9.0], fixed_params={})
    second = evaluate_sweep(model, variable="x", values=[1.0, 4.0, 9.0], fixed_params={})
    assert first.equals(second)
