"""
Scenario Presets.

Canned operating points for each model, as used for filter scenarios in the
literature behind this package. Each preset is a mapping with a ``name``, a
``description`` and ``params``; ``params`` are keyword arguments of the model's
entry point or, for the biochemical presets, fields of
:class:`~ssfremoval.parameters.ParameterRecord`.

- :data:`TWO_SITE` - keywords of the two-site model functions.
- :data:`COLLECTOR` - keywords of :func:`ssfremoval.collector.single_collector_efficiency`.
- :data:`BIOFILM_STAGES` - system properties of the four biofilm development stages.
- :data:`EPS` - biochemical states for the regression registry.
- :data:`SCALE` - scale-comparison states, with the sand type as metadata.
- :data:`LAYER` - pilot-scale maturation states for the layer splitter.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

from collections.abc import Mapping

from ssfremoval.parameters import ParameterRecord

TWO_SITE = {
    "clean_bed": {
        "name": "Clean Bed (New Filter)",
        "description": "Fresh filter bed without developed Schmutzdecke",
        "params": {
            "velocity": 0.5,
            "dispersivity": 0.005,
            "filter_depth": 1.0,
            "k_att1": 20.0,
            "k_det1": 0.5,
            "mu_s1": 0.3,
            "k_att2": 15.0,
            "k_det2": 15.0,
            "mu_s2": 0.3,
            "mu_l": 0.1,
        },
    },
    "mature_filter": {
        "name": "Mature Filter (6+ weeks)",
        "description": "Well-ripened filter with active Schmutzdecke",
        "params": {
            "velocity": 0.5,
            "dispersivity": 0.005,
            "filter_depth": 1.0,
            "k_att1": 80.0,
            "k_det1": 0.05,
            "mu_s1": 0.8,
            "k_att2": 40.0,
            "k_det2": 8.0,
            "mu_s2": 0.6,
            "mu_l": 0.1,
        },
    },
    "dutch_ssf": {
        "name": "Dutch Practice (QMRA)",
        "description": "Typical parameters for Dutch waterworks",
        "params": {
            "velocity": 0.3,
            "dispersivity": 0.008,
            "filter_depth": 0.8,
            "k_att1": 60.0,
            "k_det1": 0.1,
            "mu_s1": 0.5,
            "k_att2": 35.0,
            "k_det2": 12.0,
            "mu_s2": 0.5,
            "mu_l": 0.05,
        },
    },
    "high_loading": {
        "name": "High Hydraulic Loading",
        "description": "Increased flow rate scenario",
        "params": {
            "velocity": 1.2,
            "dispersivity": 0.003,
            "filter_depth": 1.2,
            "k_att1": 50.0,
            "k_det1": 0.1,
            "mu_s1": 0.5,
            "k_att2": 30.0,
            "k_det2": 10.0,
            "mu_s2": 0.5,
            "mu_l": 0.1,
        },
    },
}

COLLECTOR = {
    "bacteria": {
        "name": "E. coli (Fine Sand)",
        "description": "Typical bacteria capture in fine-grained SSF",
        "params": {
            "particle_diameter": 1.0,
            "collector_diameter": 0.2,
            "velocity": 0.5,
            "porosity": 0.4,
            "particle_density": 1050.0,
            "temperature": 20.0,
            "hamaker": 1.0,
            "sticking_efficiency": 0.1,
        },
    },
    "virus": {
        "name": "Virus (50 nm)",
        "description": "Diffusion-dominated regime, very small particles",
        "params": {
            "particle_diameter": 0.05,
            "collector_diameter": 0.2,
            "velocity": 0.5,
            "porosity": 0.4,
            "particle_density": 1200.0,
            "temperature": 20.0,
            "hamaker": 1.0,
            "sticking_efficiency": 0.01,
        },
    },
    "coarse_sand": {
        "name": "Coarse Sand (0.5 mm)",
        "description": "Larger grains reduce collection efficiency",
        "params": {
            "particle_diameter": 1.0,
            "collector_diameter": 0.5,
            "velocity": 0.5,
            "porosity": 0.4,
            "particle_density": 1050.0,
            "temperature": 20.0,
            "hamaker": 1.0,
            "sticking_efficiency": 0.1,
        },
    },
    "high_flow": {
        "name": "High Flow Rate",
        "description": "Increased velocity reduces contact time",
        "params": {
            "particle_diameter": 1.0,
            "collector_diameter": 0.2,
            "velocity": 1.8,
            "porosity": 0.4,
            "particle_density": 1050.0,
            "temperature": 20.0,
            "hamaker": 1.0,
            "sticking_efficiency": 0.1,
        },
    },
}

BIOFILM_STAGES = {
    "clean": {
        "name": "Clean Bed",
        "description": "No biofilm present, classical CFT baseline",
        "days": 0.0,
        "params": {"porosity": 0.35, "hydraulic_conductivity": 1.0, "tortuosity": 1.15, "svr": 0.0},
    },
    "young": {
        "name": "Young Biofilm",
        "description": "Early roughening, roughness stage dominates",
        "days": 1.0,
        "params": {"porosity": 0.26, "hydraulic_conductivity": 0.68, "tortuosity": 1.25, "svr": 0.21},
    },
    "matured": {
        "name": "Matured Biofilm",
        "description": "Network formation between grains",
        "days": 2.5,
        "params": {"porosity": 0.15, "hydraulic_conductivity": 0.46, "tortuosity": 1.46, "svr": 0.44},
    },
    "fully_matured": {
        "name": "Fully Matured",
        "description": "Occlusion and straining, pore blocking dominates",
        "days": 7.0,
        "params": {"porosity": 0.05, "hydraulic_conductivity": 0.0009, "tortuosity": 1.24, "svr": 1.0},
    },
}

EPS = {
    "young_filter": {
        "name": "Young Filter (1 month)",
        "description": "Early ripening phase, low EPS and minimal removal",
        "params": {
            "protein": 50.0,
            "carbohydrate": 80.0,
            "biomass": 5e7,
            "age_days": 30.0,
            "grain_size": 0.3,
            "inoculated": False,
        },
    },
    "mature_filter": {
        "name": "Mature Filter (6 months)",
        "description": "Well-developed Schmutzdecke with a high protein/carbohydrate ratio",
        "params": {
            "protein": 200.0,
            "carbohydrate": 120.0,
            "biomass": 2e8,
            "age_days": 180.0,
            "grain_size": 0.3,
            "inoculated": True,
        },
    },
    "fine_sand": {
        "name": "Fine Sand Filter",
        "description": "Fine sand with cohesive protein-rich EPS matrix",
        "params": {
            "protein": 250.0,
            "carbohydrate": 100.0,
            "biomass": 3e8,
            "age_days": 90.0,
            "grain_size": 0.15,
            "inoculated": True,
        },
    },
    "coarse_sand": {
        "name": "Coarse Sand Filter",
        "description": "Coarse sand with lower EPS accumulation",
        "params": {
            "protein": 100.0,
            "carbohydrate": 150.0,
            "biomass": 1e8,
            "age_days": 90.0,
            "grain_size": 0.5,
            "inoculated": False,
        },
    },
    "high_eps": {
        "name": "High EPS Production",
        "description": "Optimal Schmutzdecke, maximum removal potential",
        "params": {
            "protein": 350.0,
            "carbohydrate": 180.0,
            "biomass": 5e8,
            "age_days": 365.0,
            "grain_size": 0.3,
            "inoculated": True,
        },
    },
}

SCALE = {
    "young_mini": {
        "name": "Young Mini (1 month)",
        "description": "Early mini-scale filter with minimal EPS",
        "sand_type": "fine",
        "params": {"protein": 40.0, "carbohydrate": 50.0, "biomass": 1e7, "age_days": 30.0, "inoculated": False},
    },
    "mature_mini": {
        "name": "Mature Mini (4 months)",
        "description": "Well-developed mini-scale Schmutzdecke",
        "sand_type": "fine",
        "params": {"protein": 150.0, "carbohydrate": 90.0, "biomass": 1e8, "age_days": 120.0, "inoculated": True},
    },
    "young_midi": {
        "name": "Young Midi (3 months)",
        "description": "Early midi-scale filter",
        "sand_type": "mixed",
        "params": {"protein": 50.0, "carbohydrate": 60.0, "biomass": 5e7, "age_days": 100.0, "inoculated": True},
    },
    "mature_midi": {
        "name": "Mature Midi (12 months)",
        "description": "Well-developed midi-scale Schmutzdecke",
        "sand_type": "fine",
        "params": {"protein": 80.0, "carbohydrate": 100.0, "biomass": 3e8, "age_days": 365.0, "inoculated": True},
    },
    "slow_ripening": {
        "name": "Slow Ripening Scenario",
        "description": "Limited EPS accumulation, age as proxy",
        "sand_type": "coarse",
        "params": {"protein": 45.0, "carbohydrate": 55.0, "biomass": 2e7, "age_days": 200.0, "inoculated": False},
    },
}

LAYER = {
    "early_ripening": {
        "name": "Early Ripening (6 months)",
        "description": "Young filter, deeper layer still contributes significantly",
        "params": {"protein": 80.0, "carbohydrate": 200.0, "biomass": 5e7, "age_days": 180.0, "inoculated": False},
    },
    "mature_filter": {
        "name": "Mature Filter (12 months)",
        "description": "Well-developed Schmutzdecke, upper layer dominates",
        "params": {"protein": 150.0, "carbohydrate": 300.0, "biomass": 1e8, "age_days": 365.0, "inoculated": True},
    },
    "fully_mature": {
        "name": "Fully Mature (24 months)",
        "description": "Converged performance, deeper layer negligible",
        "params": {"protein": 200.0, "carbohydrate": 400.0, "biomass": 1.5e8, "age_days": 730.0, "inoculated": True},
    },
    "inoculated_early": {
        "name": "Inoculated (6 months)",
        "description": "Accelerated development via inoculation",
        "params": {"protein": 120.0, "carbohydrate": 280.0, "biomass": 8e7, "age_days": 180.0, "inoculated": True},
    },
    "low_eps": {
        "name": "Low EPS Development",
        "description": "Slow biochemical maturation scenario",
        "params": {"protein": 50.0, "carbohydrate": 150.0, "biomass": 3e7, "age_days": 365.0, "inoculated": False},
    },
}


def parameter_record(preset: Mapping) -> ParameterRecord:
    """
    Build a :class:`~ssfremoval.parameters.ParameterRecord` from an EPS, scale or layer preset.

    Examples
    --------
    >>> from ssfremoval import presets
    >>> presets.parameter_record(presets.LAYER["fully_mature"]).age_days
    730.0
    """
    return ParameterRecord.from_mapping(preset["params"])
