"""
Microbial removal models for slow sand filters.

Five independent model families, each a set of pure functions:

- :mod:`ssfremoval.twosite` - steady-state two-site kinetic removal (Schijven et al.)
- :mod:`ssfremoval.collector` - Tufenkji-Elimelech single-collector contact efficiency
- :mod:`ssfremoval.biofilm` - biofilm-extended colloid filtration theory
- :mod:`ssfremoval.regression` - per-scale EPS/age/biomass removal regressions
- :mod:`ssfremoval.layers` - upper versus deeper layer removal split

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

__version__ = "0.1.0"
