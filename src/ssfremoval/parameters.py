"""
Parameter Record Shared by the Removal Models.

A :class:`ParameterRecord` holds the physical and biochemical state of a filter at
one operating point. Fields are optional because no model needs all of them; each
model states which fields it consumes and fails with
:class:`~ssfremoval.exceptions.MissingParameterError` when one of those is unset.

Records are immutable. A sweep derives modified copies with :meth:`ParameterRecord.replace`,
so one record can be shared by many evaluations without any of them observing
another's changes.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import dataclasses
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass

from ssfremoval.exceptions import DomainError, MissingParameterError

logger = logging.getLogger(__name__)

# Quantities that cannot be negative; negative inputs are clamped to zero.
NON_NEGATIVE_FIELDS = (
    "protein",
    "carbohydrate",
    "biomass",
    "age_days",
    "grain_size",
    "hydraulic_conductivity",
    "svr",
    "particle_diameter",
    "collector_diameter",
    "velocity",
    "particle_density",
    "hamaker",
    "sticking_efficiency",
)


@dataclass(frozen=True)
class ParameterRecord:
    """
    Operating point of a slow sand filter.

    Parameters
    ----------
    protein : float, optional
        EPS protein content of the Schmutzdecke [µg/g dry sand].
    carbohydrate : float, optional
        EPS carbohydrate content [µg/g dry sand].
    biomass : float, optional
        Bacterial biomass as 16S rRNA gene copies [copies/g].
    age_days : float, optional
        Schmutzdecke age [days].
    grain_size : float, optional
        Median grain diameter D50 [mm].
    inoculated : bool, optional
        Whether the Schmutzdecke was inoculated at start-up.
    porosity : float, optional
        Bed porosity [-].
    hydraulic_conductivity : float, optional
        Hydraulic conductivity normalised by its clean-bed value [-].
    tortuosity : float, optional
        Tortuosity [-], at least 1.
    svr : float, optional
        Biofilm surface-to-volume ratio [1/µm].
    particle_diameter : float, optional
        Microorganism diameter [µm].
    collector_diameter : float, optional
        Collector (grain) diameter [mm].
    velocity : float, optional
        Approach (filtration) velocity [m/h].
    temperature : float, optional
        Water temperature [°C].
    particle_density : float, optional
        Microorganism density [kg/m³].
    hamaker : float, optional
        Hamaker constant [1e-20 J].
    sticking_efficiency : float, optional
        Attachment (sticking) efficiency alpha [-].
    """

    protein: float | None = None
    carbohydrate: float | None = None
    biomass: float | None = None
    age_days: float | None = None
    grain_size: float | None = None
    inoculated: bool | None = None
    porosity: float | None = None
    hydraulic_conductivity: float | None = None
    tortuosity: float | None = None
    svr: float | None = None
    particle_diameter: float | None = None
    collector_diameter: float | None = None
    velocity: float | None = None
    temperature: float | None = None
    particle_density: float | None = None
    hamaker: float | None = None
    sticking_efficiency: float | None = None

    def __post_init__(self):
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value is None or field.name == "inoculated":
                continue
            if not math.isfinite(value):
                msg = f"Parameter {field.name!r} must be finite, got {value!r}"
                raise DomainError(msg)
            if field.name in NON_NEGATIVE_FIELDS and value < 0.0:
                logger.debug("Clamping negative %s=%s to zero", field.name, value)
                object.__setattr__(self, field.name, 0.0)
        if self.inoculated is not None:
            object.__setattr__(self, "inoculated", bool(self.inoculated))

    @classmethod
    def from_mapping(cls, values: Mapping[str, float | bool]) -> "ParameterRecord":
        """
        Build a record from a flat mapping, for example a preset.

        Raises
        ------
        ValueError
            If the mapping contains names that are not record fields.
        """
        names = {field.name for field in dataclasses.fields(cls)}
        unknown = sorted(set(values) - names)
        if unknown:
            msg = f"Unknown parameter(s): {', '.join(unknown)}"
            raise ValueError(msg)
        return cls(**values)

    def replace(self, **changes) -> "ParameterRecord":
        """Return a copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    def require(self, model: str, field: str) -> float:
        """
        Return a field value, failing if it is unset.

        Parameters
        ----------
        model : str
            Name of the requesting model, used in the error message.
        field : str
            Field name.

        Raises
        ------
        MissingParameterError
            If the field is ``None``.
        """
        value = getattr(self, field)
        if value is None:
            raise MissingParameterError(model, field)
        return value

    def as_dict(self) -> dict[str, float | bool]:
        """Return the set fields as a plain dictionary."""
        return {key: value for key, value in dataclasses.asdict(self).items() if value is not None}
