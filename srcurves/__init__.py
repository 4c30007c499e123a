"""srcurves: closed-form spawner-recruit curves for fisheries population dynamics.

Seven classical stock-recruitment models behind one interface:
  - Beverton-Holt, Ricker, Ludwig-Walters, Cushing
  - Deriso-Schnute, Shepherd, Gamma
  - recruit / max_recruits / max_spawnrecruits work on any of them

References:
  - Quinn & Deriso (1999), Quantitative Fish Dynamics, ch. 3
"""

from srcurves.errors import ParameterDomainError
from srcurves.models import (  # noqa: F401
    BevertonHolt,
    Cushing,
    DerisoSchnute,
    Gamma,
    GammaModel,
    LudwigWalters,
    Ricker,
    Shepherd,
    SpawnerRecruitModel,
    max_recruits,
    max_spawnrecruits,
    recruit,
    validate_model,
)
from srcurves.types import CurveShape, ModelKind, PeakSummary  # noqa: F401

__version__ = "0.1.0"
