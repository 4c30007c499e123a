"""Core enumerations and transfer objects for srcurves.

This module is the single place that names:
  - ModelKind: the closed set of spawner-recruit curve families
  - CurveShape: the qualitative form of a curve (asymptotic, dome, unbounded)
  - PeakSummary: the peak of a curve bundled with its shape

Configuration keys and model classes both refer back to these values.

References:
  - Quinn & Deriso (1999), Quantitative Fish Dynamics, §3.1–3.2
"""

import math
from dataclasses import dataclass
from enum import Enum


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class ModelKind(str, Enum):
    """Spawner-recruit curve families.

    Values double as the ``model.kind`` key in YAML configuration.
    """
    BEVERTON_HOLT  = "beverton_holt"    # Eq. 3.6
    RICKER         = "ricker"           # Eq. 3.8
    LUDWIG_WALTERS = "ludwig_walters"   # Eq. 3.9
    CUSHING        = "cushing"          # Eq. 3.12
    DERISO_SCHNUTE = "deriso_schnute"   # Eq. 3.20
    SHEPHERD       = "shepherd"         # Eq. 3.21
    GAMMA          = "gamma"            # unnormalised gamma function


class CurveShape(str, Enum):
    """Qualitative shape of recruitment as spawners → ∞.

      ASYMPTOTIC: rises monotonically toward a finite limit
      DOME:       rises to a finite peak, then declines (overcompensation)
      UNBOUNDED:  rises without limit
    """
    ASYMPTOTIC = "asymptotic"
    DOME       = "dome"
    UNBOUNDED  = "unbounded"


# ═══════════════════════════════════════════════════════════════════════
# TRANSFER OBJECTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PeakSummary:
    """Location and height of a curve's maximum.

    Attributes:
        spawners: Spawner abundance at the maximum (inf for
            asymptotic/unbounded curves).
        recruits: Maximum recruitment (inf for unbounded curves).
        shape: Qualitative curve shape.
    """
    spawners: float
    recruits: float
    shape: CurveShape

    @property
    def is_finite(self) -> bool:
        """True when the maximum is attained at a finite abundance."""
        return math.isfinite(self.spawners)
