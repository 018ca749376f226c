import numpy as np
import pytest
from numpy.testing import assert_allclose

from ssfremoval.exceptions import DomainError
from ssfremoval.logremoval import removal_coefficient_to_log10_removal
from ssfremoval.twosite import (
    concentration_profile,
    depth_for_target_removal,
    effective_removal_coefficient,
    exponent_coefficient,
    removal_coefficient_breakdown,
    site_contribution,
    steady_state_metrics,
)


def test_effective_removal_coefficient_worked_example(schijven_rates):
    """0.1 + 50 / 1.2 + 30 / 21 per day."""
    expected = 0.1 + 50.0 / (1.0 + 0.1 / 0.5) + 30.0 / (1.0 + 10.0 / 0.5)
    result = effective_removal_coefficient(**schijven_rates)
    assert_allclose(result, expected, rtol=1e-12)
    assert_allclose(result, 43.1952, atol=1e-4)


def test_breakdown_sums_to_total(schijven_rates):
    """Liquid phase and both sites add up to the effective coefficient."""
    parts = removal_coefficient_breakdown(**schijven_rates)
    assert_allclose(parts["liquid"] + parts["site1"] + parts["site2"], parts["total"])
    assert_allclose(parts["site1"], 50.0 / 1.2)
    assert_allclose(parts["site2"], 30.0 / 21.0)


@pytest.mark.parametrize("rate", ["k_att1", "k_att2"])
def test_monotone_in_attachment_rate(schijven_rates, rate):
    """More attachment capacity never lowers the removal coefficient."""
    values = [
        effective_removal_coefficient(**{**schijven_rates, rate: k_att}) for k_att in np.linspace(0.0, 200.0, 41)
    ]
    assert np.all(np.diff(values) >= 0.0)


@pytest.mark.parametrize("mu_s", [0.0, -0.5])
def test_zero_solid_inactivation_is_a_domain_error(schijven_rates, mu_s):
    """Without solid-phase inactivation the steady-state site term is singular."""
    with pytest.raises(DomainError, match="inactivation rate"):
        effective_removal_coefficient(**{**schijven_rates, "mu_s2": mu_s})


def test_site_contribution_clamps_negative_rates():
    """Negative attachment or detachment rates count as zero."""
    assert site_contribution(k_att=-5.0, k_det=0.1, mu_s=0.5) == 0.0
    assert_allclose(site_contribution(k_att=10.0, k_det=-1.0, mu_s=0.5), 10.0)


def test_no_detachment_gives_full_attachment():
    """Without detachment every attached organism is removed."""
    assert_allclose(site_contribution(k_att=12.0, k_det=0.0, mu_s=0.3), 12.0)


def test_exponent_coefficient_value():
    """Closed-form exponent of the dispersive solution."""
    k = exponent_coefficient(velocity=0.5, dispersivity=0.005, removal_coefficient=43.2)
    expected = (1.0 - np.sqrt(1.0 + 4.0 * 0.005 * 43.2 / 0.5)) / (2.0 * 0.005)
    assert_allclose(k, expected, rtol=1e-12)
    assert k < 0.0


def test_exponent_coefficient_approaches_advective_limit():
    """Vanishing dispersivity gives the plug-flow exponent -lambda / v."""
    k = exponent_coefficient(velocity=0.5, dispersivity=1e-9, removal_coefficient=2.0)
    assert_allclose(k, -4.0, rtol=1e-6)


def test_zero_removal_gives_flat_profile():
    """Without removal the concentration does not change with depth."""
    assert exponent_coefficient(velocity=0.5, dispersivity=0.005, removal_coefficient=0.0) == 0.0


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        ({"velocity": 0.0, "dispersivity": 0.005, "removal_coefficient": 1.0}, "velocity"),
        ({"velocity": 0.5, "dispersivity": 0.0, "removal_coefficient": 1.0}, "dispersivity"),
        ({"velocity": 1.0, "dispersivity": 0.01, "removal_coefficient": -100.0}, "discriminant"),
    ],
)
def test_exponent_coefficient_domain(kwargs, match):
    """Invalid transport parameters fail instead of producing NaN."""
    with pytest.raises(DomainError, match=match):
        exponent_coefficient(**kwargs)


def test_profile_roundtrip_matches_direct_log_removal():
    """-log10(C(L)/C0) from the profile equals the first-order formula with the exponent."""
    velocity, dispersivity, lam, depth = 0.3, 0.008, 55.0, 0.8
    profile = concentration_profile(
        velocity=velocity, dispersivity=dispersivity, removal_coefficient=lam, depths=[depth]
    )
    k = exponent_coefficient(velocity=velocity, dispersivity=dispersivity, removal_coefficient=lam)
    direct = removal_coefficient_to_log10_removal(removal_coefficient=-k, depth=depth)
    assert_allclose(profile["log10_removal"].iloc[0], direct, rtol=1e-9)
    assert_allclose(-np.log10(profile["concentration_ratio"].iloc[0]), direct, rtol=1e-9)


def test_profile_default_depths():
    """The default profile covers the filter depth in equal steps."""
    profile = concentration_profile(velocity=0.5, dispersivity=0.005, removal_coefficient=10.0, filter_depth=0.8)
    assert list(profile.columns) == ["depth", "concentration_ratio", "concentration_percent", "log10_removal", "ln_ratio"]
    assert len(profile) == 101
    assert_allclose(profile["depth"].iloc[[0, -1]], [0.0, 0.8])
    assert profile["concentration_ratio"].iloc[0] == 1.0
    assert np.all(np.diff(profile["concentration_ratio"]) < 0.0)
    assert_allclose(profile["concentration_percent"], profile["concentration_ratio"] * 100.0)


def test_profile_deep_bed_does_not_underflow_log_removal():
    """Log removal stays finite where C/C0 underflows to zero."""
    profile = concentration_profile(velocity=0.1, dispersivity=0.001, removal_coefficient=500.0, depths=[5.0])
    assert np.isfinite(profile["log10_removal"].iloc[0])
    assert profile["log10_removal"].iloc[0] > 300.0


def test_depth_for_target_removal():
    """Depth at which the profile reaches two-log removal."""
    assert_allclose(depth_for_target_removal(target_ratio=0.01, exponent_coefficient=-2.0), np.log(100.0) / 2.0)


@pytest.mark.parametrize(
    ("k", "max_depth"),
    [(0.0, None), (0.5, None), (-2.0, 2.0)],
)
def test_depth_for_target_removal_not_available(k, max_depth):
    """No finite depth, or one beyond the plausible range, is reported as None."""
    assert depth_for_target_removal(target_ratio=0.01, exponent_coefficient=k, max_depth=max_depth) is None


@pytest.mark.parametrize("target", [0.0, 1.0, 1.5])
def test_depth_for_target_removal_rejects_invalid_targets(target):
    """Targets must be a reduction."""
    with pytest.raises(DomainError, match="target_ratio"):
        depth_for_target_removal(target_ratio=target, exponent_coefficient=-1.0)


def test_steady_state_metrics_are_consistent(dutch_ssf):
    """Effluent ratio, total log removal and target depths agree with each other."""
    rates, transport = dutch_ssf
    lam = effective_removal_coefficient(**rates)
    metrics = steady_state_metrics(removal_coefficient=lam, **transport)
    assert_allclose(metrics["effluent_ratio"], 10.0 ** -metrics["total_log10_removal"], rtol=1e-9)
    assert_allclose(metrics["depth_2log"], 2.0 / metrics["total_log10_removal"] * transport["filter_depth"])
    assert_allclose(metrics["depth_4log"], 2.0 * metrics["depth_2log"])


def test_steady_state_metrics_unreachable_depths():
    """Weak removal reaches four-log only beyond twice the filter depth."""
    metrics = steady_state_metrics(velocity=1.0, dispersivity=0.005, removal_coefficient=1.0, filter_depth=1.0)
    assert metrics["depth_4log"] is None
    assert metrics["total_log10_removal"] > 0.0


def test_repeated_evaluation_is_identical(schijven_rates):
    """Evaluation has no hidden state."""
    first = effective_removal_coefficient(**schijven_rates)
    assert effective_removal_coefficient(**schijven_rates) == first


@pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
@pytest.mark.parametrize("rate", ["mu_l", "k_att1", "k_det1", "mu_s1", "k_att2", "k_det2", "mu_s2"])
def test_non_finite_rates_are_domain_errors(schijven_rates, rate, bad):
    """NaN or infinite rate constants fail instead of producing NaN."""
    with pytest.raises(DomainError, match=rate):
        effective_removal_coefficient(**{**schijven_rates, rate: bad})


@pytest.mark.parametrize("bad", [np.nan, np.inf])
@pytest.mark.parametrize("name", ["velocity", "dispersivity", "removal_coefficient"])
def test_exponent_coefficient_rejects_non_finite(name, bad):
    kwargs = {"velocity": 0.3, "dispersivity": 0.02, "removal_coefficient": 1.0, name: bad}
    with pytest.raises(DomainError, match=name):
        exponent_coefficient(**kwargs)


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        ({"target_ratio": 1e-2, "exponent_coefficient": np.nan}, "exponent_coefficient"),
        ({"target_ratio": np.nan, "exponent_coefficient": -5.0}, "target_ratio"),
        ({"target_ratio": 1e-2, "exponent_coefficient": -5.0, "max_depth": np.nan}, "max_depth"),
    ],
)
def test_depth_for_target_removal_rejects_non_finite(kwargs, match):
    with pytest.raises(DomainError, match=match):
        depth_for_target_removal(**kwargs)


@pytest.mark.parametrize("name", ["velocity", "dispersivity", "removal_coefficient", "filter_depth"])
def test_steady_state_metrics_rejects_nan(name):
    """A NaN input never comes back as NaN depths."""
    kwargs = {"velocity": 0.3, "dispersivity": 0.02, "removal_coefficient": 1.0, "filter_depth": 0.8, name: np.nan}
    with pytest.raises(DomainError, match=name):
        steady_state_metrics(**kwargs)
