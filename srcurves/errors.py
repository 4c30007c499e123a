"""Exception types for srcurves.

Parameter problems surface as ``ValueError`` subclasses so callers that
already guard numeric input with ``except ValueError`` keep working.
"""

from typing import Any


class ParameterDomainError(ValueError):
    """A model parameter violates its documented mathematical domain.

    Attributes:
        model: Name of the model class (e.g. ``"GammaModel"``).
        parameter: Offending parameter name (``"alpha"``, ``"beta"``, ``"gamma"``).
        value: The rejected value.
        constraint: Human-readable constraint, e.g. ``"> 0"``.
    """

    def __init__(self, model: str, parameter: str, value: Any, constraint: str):
        self.model = model
        self.parameter = parameter
        self.value = value
        self.constraint = constraint
        super().__init__(
            f"{model}.{parameter} must be {constraint}, got {value}"
        )
