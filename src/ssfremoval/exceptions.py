"""
Exceptions raised by the removal models.

Both exceptions derive from :class:`ValueError`, so callers that only care about
"invalid input" can keep catching that.

This file is part of ssfremoval which is released under AGPL-3.0 license.
"""

import math


class DomainError(ValueError):
    """Input lies outside the mathematical or physical domain of a model."""


class MissingParameterError(ValueError):
    """A model needs a parameter that the parameter record does not provide."""

    def __init__(self, model: str, field: str):
        self.model = model
        self.field = field
        super().__init__(f"Model {model!r} requires parameter {field!r}, which is not set")


def ensure_finite(**values: float) -> None:
    """
    Raise :class:`DomainError` if any keyword value is NaN or infinite.

    Examples
    --------
    >>> from ssfremoval.exceptions import ensure_finite
    >>> ensure_finite(velocity=1.0, dispersivity=0.02)
    """
    for name, value in values.items():
        if not math.isfinite(value):
            msg = f"{name} must be finite, got {value!r}"
            raise DomainError(msg)
