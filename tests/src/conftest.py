"""
Shared pytest fixtures for the removal model tests.

Operating points used across multiple test files, taken from the scenario presets
and the worked examples in the module docstrings.
"""

import pytest

from ssfremoval import presets
from ssfremoval.parameters import ParameterRecord

# ============================================================================
# Two-Site Kinetic Fixtures
# ============================================================================


@pytest.fixture
def schijven_rates():
    """Site rate constants of the worked two-site example [1/day]."""
    return {"mu_l": 0.1, "k_att1": 50.0, "k_det1": 0.1, "mu_s1": 0.5, "k_att2": 30.0, "k_det2": 10.0, "mu_s2": 0.5}


@pytest.fixture
def dutch_ssf():
    """Dutch practice two-site preset, split into rates and transport parameters."""
    params = dict(presets.TWO_SITE["dutch_ssf"]["params"])
    transport = {key: params.pop(key) for key in ("velocity", "dispersivity", "filter_depth")}
    return params, transport


# ============================================================================
# Collector Fixtures
# ============================================================================


@pytest.fixture
def bacteria_params():
    """E. coli in fine sand, in operator units."""
    return dict(presets.COLLECTOR["bacteria"]["params"])


@pytest.fixture
def bacteria_si():
    """E. coli in fine sand, in SI units for the building-block functions."""
    return {
        "particle_diameter": 1e-6,
        "collector_diameter": 2e-4,
        "approach_velocity": 0.5 / 3600.0,
        "porosity": 0.4,
        "particle_density": 1050.0,
        "temperature": 293.15,
        "hamaker": 1e-20,
    }


# ============================================================================
# Biofilm Fixtures
# ============================================================================


@pytest.fixture
def young_biofilm():
    """System properties of the young biofilm stage."""
    return dict(presets.BIOFILM_STAGES["young"]["params"])


@pytest.fixture
def three_stage_params():
    """A partly developed biofilm for the three-stage model."""
    return {
        "eta_base": 0.02,
        "porosity": 0.20,
        "svr": 0.3,
        "particle_diameter": 1.0,
        "hydraulic_conductivity": 0.5,
        "shape_factor": 1.2,
        "concavity_factor": 0.3,
    }


# ============================================================================
# Regression Fixtures
# ============================================================================


@pytest.fixture
def full_record():
    """Record with every field a registry model reads."""
    return ParameterRecord(
        protein=185.0,
        carbohydrate=390.0,
        biomass=1.5e8,
        age_days=730.0,
        grain_size=0.3,
        inoculated=True,
    )


@pytest.fixture
def young_record():
    """Young filter EPS preset."""
    return presets.parameter_record(presets.EPS["young_filter"])
