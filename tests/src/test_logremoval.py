import numpy as np
import pytest
from numpy.testing import assert_allclose

from ssfremoval.exceptions import DomainError
from ssfremoval.logremoval import (
    LN10,
    clamp_non_negative,
    concentration_ratio_to_log10_removal,
    ln_removal_to_log10_removal,
    log10_removal_to_concentration_ratio,
    log10_removal_to_ln_removal,
    removal_coefficient_to_log10_removal,
)


def test_ln_to_log10_known_value():
    """A thousandfold reduction is 3 log10 units."""
    assert_allclose(ln_removal_to_log10_removal(np.log(1000.0)), 3.0, rtol=1e-12)


def test_ln_log10_roundtrip():
    """Converting to log10 and back reproduces the natural-log removal."""
    values = np.array([-8.23, 0.0, 0.5, 4.6])
    assert_allclose(log10_removal_to_ln_removal(ln_removal_to_log10_removal(values)), values, rtol=1e-12)


def test_natural_log_overstates_log10():
    """The natural-log removal is ln(10) times the log10 removal."""
    assert_allclose(log10_removal_to_ln_removal(1.0), LN10)
    assert LN10 > 2.3


@pytest.mark.parametrize(("ratio", "expected"), [(1.0, 0.0), (0.1, 1.0), (0.01, 2.0), (1e-4, 4.0)])
def test_concentration_ratio_to_log10_removal(ratio, expected):
    """Log removal of common concentration ratios."""
    assert_allclose(concentration_ratio_to_log10_removal(ratio), expected, atol=1e-12)


@pytest.mark.parametrize("ratio", [0.0, -0.5])
def test_concentration_ratio_must_be_positive(ratio):
    """Non-positive ratios have no log removal."""
    with pytest.raises(DomainError, match="must be positive"):
        concentration_ratio_to_log10_removal(ratio)


def test_log10_removal_to_concentration_ratio():
    """Two log removal leaves one percent."""
    assert_allclose(log10_removal_to_concentration_ratio(2.0), 0.01)


def test_removal_coefficient_to_log10_removal():
    """First-order removal over a depth scales linearly with both."""
    assert_allclose(removal_coefficient_to_log10_removal(removal_coefficient=LN10, depth=2.0), 2.0)
    depths = np.array([0.0, 0.5, 1.0])
    assert_allclose(removal_coefficient_to_log10_removal(removal_coefficient=LN10, depth=depths), depths)


def test_clamp_non_negative():
    """Negative removal is presented as zero, positive removal is unchanged."""
    assert_allclose(clamp_non_negative([-8.2297, 0.0, 1.7]), [0.0, 0.0, 1.7])
