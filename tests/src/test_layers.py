import numpy as np
import pytest
from numpy.testing import assert_allclose

from ssfremoval import presets
from ssfremoval.exceptions import DomainError
from ssfremoval.layers import regression_removal_model, split_removal, time_series, upper_layer_fraction


def test_fully_mature_inoculated_is_capped():
    """Two years with inoculation reaches the ceiling."""
    fraction = upper_layer_fraction(age_days=730.0, inoculated=True)
    assert_allclose(fraction, 0.98)
    assert_allclose(1.0 - fraction, 0.02)


def test_fraction_without_inoculation():
    """The maturation curve without bonus."""
    expected = min(0.95, 0.25 + 0.70 * (1.0 - np.exp(-0.15 * 730.0 / 30.0)))
    assert_allclose(upper_layer_fraction(age_days=730.0, inoculated=False), expected)


def test_fraction_limits():
    """Baseline for a new filter, cap for an old one."""
    assert_allclose(upper_layer_fraction(age_days=0.0, inoculated=False), 0.25)
    assert_allclose(upper_layer_fraction(age_days=0.0, inoculated=True), 0.35)
    assert_allclose(upper_layer_fraction(age_days=1e5, inoculated=False), 0.95)


def test_fraction_is_monotone_in_age():
    """The upper layer never loses its share as the filter matures."""
    ages = np.linspace(0.0, 1000.0, 101)
    for inoculated in (False, True):
        fractions = upper_layer_fraction(age_days=ages, inoculated=inoculated)
        assert np.all(np.diff(fractions) >= 0.0)
        assert np.all((fractions > 0.0) & (fractions <= 0.98))


def test_split_removal():
    """Deeper removal follows (1 - f) / f times the scale factor."""
    split = split_removal(total_removal=1.0, upper_fraction=0.5)
    assert_allclose(split["upper_layer_removal"], 1.0)
    assert_allclose(split["deeper_layer_removal"], 0.3)
    assert_allclose(split["total_removal"], 1.3)
    assert split_removal(total_removal=1.0, upper_fraction=1.0)["deeper_layer_removal"] == 0.0


@pytest.mark.parametrize("fraction", [0.0, -0.2, 1.2])
def test_split_removal_domain(fraction):
    """The upper fraction must be in (0, 1]."""
    with pytest.raises(DomainError, match="upper_fraction"):
        split_removal(total_removal=1.0, upper_fraction=fraction)


def test_time_series_default_months():
    """Months 1-24 with the deeper share shrinking."""
    frame = time_series(inoculated=False, removal_model=lambda age_days: 1.0)
    assert_allclose(frame["month"], np.arange(1, 25))
    assert_allclose(frame["upper_layer_removal"], 1.0)
    assert np.all(np.diff(frame["deeper_layer_removal"]) < 0.0)
    assert_allclose(frame["upper_percent"] + frame["deeper_percent"], 100.0)


def test_time_series_clamps_negative_estimates():
    """Negative regression estimates count as no removal."""
    frame = time_series(inoculated=True, removal_model=lambda age_days: -0.5, months=[1, 2])
    assert_allclose(frame["total_removal"], 0.0)


def test_time_series_passes_fraction_options():
    """Maturation options reach the fraction."""
    frame = time_series(inoculated=False, removal_model=lambda age_days: 1.0, months=[0], baseline=0.5)
    assert_allclose(frame["upper_fraction"], 0.5)


def test_regression_removal_model():
    """The pilot age model as a function of age."""
    record = presets.parameter_record(presets.LAYER["mature_filter"])
    model = regression_removal_model("pilot", "B", record)
    assert_allclose(model(365.0), -0.3748 + 0.0029 * 365.0)
    assert_allclose(model(30.0), -0.3748 + 0.0029 * 30.0)


def test_time_series_with_regression_model():
    """Upper-layer removal grows with age for the pilot age model."""
    record = presets.parameter_record(presets.LAYER["fully_mature"])
    frame = time_series(inoculated=True, removal_model=regression_removal_model("pilot", "B", record), months=[6, 24])
    assert_allclose(frame["upper_layer_removal"], [-0.3748 + 0.0029 * 180.0, -0.3748 + 0.0029 * 720.0])
    assert frame["deeper_layer_removal"].iloc[1] < frame["upper_layer_removal"].iloc[1]
