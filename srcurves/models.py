"""Closed-form spawner-recruit models.

Seven curve families, each an immutable value object with the same
three-operation contract:

  - recruit(S):          recruitment produced by S spawners
  - max_recruits():      supremum of recruitment over S ≥ 0
  - max_spawnrecruits(): (S at the supremum, supremum)

plus recruits_per_spawner(S), the per-capita form R/S, evaluated from each
family's own expression so that S = 0 gives the limit rather than 0/0.

Arithmetic is float64 NumPy throughout. Overflow, division by zero and
fractional powers of negative bases yield inf/nan and are flagged through
NumPy's floating-point error state (RuntimeWarning by default); nothing is
clamped. Wrap calls in ``np.errstate(all='raise')`` to turn them into errors.

References:
  - Quinn & Deriso (1999), Quantitative Fish Dynamics, eqs. 3.6–3.21
  - Beverton & Holt (1957); Ricker (1954); Cushing (1971);
    Deriso (1980) / Schnute (1985); Shepherd (1982)
"""

from __future__ import annotations

import dataclasses
import math
import warnings
from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Tuple, Union

import numpy as np

from srcurves.errors import ParameterDomainError
from srcurves.types import ModelKind

# Spawner abundance: a scalar or anything np.asarray accepts.
ArrayLike = Union[float, Sequence[float], np.ndarray]


def _unwrap(values: np.ndarray) -> Union[float, np.ndarray]:
    """Return a Python float for 0-d results, the array otherwise."""
    if np.ndim(values) == 0:
        return float(values)
    return values


def _spawners(spawners: ArrayLike) -> np.ndarray:
    return np.asarray(spawners, dtype=np.float64)


class _SpawnerRecruitBase:
    """Shared plumbing for the model dataclasses.

    Parameters are stored as ``np.float64`` (a ``float`` subclass) so that
    scalar arithmetic follows IEEE semantics instead of raising
    ``ZeroDivisionError`` / ``OverflowError``.
    """

    kind: ModelKind
    reference: str = ""

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            object.__setattr__(self, f.name, np.float64(getattr(self, f.name)))

    def params(self) -> Dict[str, float]:
        """Parameter name → value."""
        return {f.name: float(getattr(self, f.name)) for f in dataclasses.fields(self)}


# ═══════════════════════════════════════════════════════════════════════
# ASYMPTOTIC AND DOME-SHAPED TWO-PARAMETER MODELS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BevertonHolt(_SpawnerRecruitBase):
    """Beverton-Holt model.

    R = α·S / (1 + β·S)

    Asymptotic: recruitment approaches α/β as spawner biomass grows.

    Attributes:
        alpha: Density-independent productivity (α).
        beta: Density-dependence parameter (β).
    """
    alpha: float
    beta: float

    kind = ModelKind.BEVERTON_HOLT
    reference = "Quinn & Deriso eq. 3.6"

    def recruit(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * S / (1.0 + self.beta * S))

    def recruits_per_spawner(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha / (1.0 + self.beta * S))

    def max_recruits(self) -> float:
        return float(self.alpha / self.beta)

    def max_spawnrecruits(self) -> Tuple[float, float]:
        return (math.inf, self.max_recruits())


@dataclass(frozen=True)
class Ricker(_SpawnerRecruitBase):
    """Ricker model.

    R = α·S·exp(−β·S)

    Dome-shaped, peaking at S = 1/β with R = α/(β·e).

    Attributes:
        alpha: Productivity (α).
        beta: Density-dependence parameter (β).
    """
    alpha: float
    beta: float

    kind = ModelKind.RICKER
    reference = "Quinn & Deriso eq. 3.8"

    def recruit(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * S * np.exp(-self.beta * S))

    def recruits_per_spawner(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * np.exp(-self.beta * S))

    def max_recruits(self) -> float:
        return float(self.alpha / (self.beta * np.e))

    def max_spawnrecruits(self) -> Tuple[float, float]:
        return (float(1.0 / self.beta), self.max_recruits())


@dataclass(frozen=True)
class Cushing(_SpawnerRecruitBase):
    """Cushing power-law model.

    R = α·S^γ

    No density-dependent ceiling: recruitment is unbounded for γ > 0.

    Attributes:
        alpha: Productivity (α).
        gamma: Index of density dependence (γ).
    """
    alpha: float
    gamma: float

    kind = ModelKind.CUSHING
    reference = "Quinn & Deriso eq. 3.12"

    def recruit(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * np.power(S, self.gamma))

    def recruits_per_spawner(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * np.power(S, self.gamma - 1.0))

    def max_recruits(self) -> float:
        return math.inf

    def max_spawnrecruits(self) -> Tuple[float, float]:
        return (math.inf, math.inf)


# ═══════════════════════════════════════════════════════════════════════
# THREE-PARAMETER GENERALISATIONS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LudwigWalters(_SpawnerRecruitBase):
    """Ludwig-Walters generalisation of the Ricker model.

    R = α·S·exp(−β·S^γ)

    Dome-shaped. The peak is the stationary point 1 − β·γ·S^γ = 0:
    S* = (β·γ)^(−1/γ), R* = α·S*·e^(−1/γ). With γ = 1 both collapse to
    the Ricker values 1/β and α/(β·e).

    Attributes:
        alpha: Productivity (α).
        beta: Density-dependence parameter (β).
        gamma: Density-dependence power (γ).
    """
    alpha: float
    beta: float
    gamma: float

    kind = ModelKind.LUDWIG_WALTERS
    reference = "Quinn & Deriso eq. 3.9"

    def recruit(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * S * np.exp(-self.beta * np.power(S, self.gamma)))

    def recruits_per_spawner(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * np.exp(-self.beta * np.power(S, self.gamma)))

    def _spawners_at_max(self) -> float:
        return float(np.power(self.beta * self.gamma, -1.0 / self.gamma))

    def max_recruits(self) -> float:
        return float(self.alpha * self._spawners_at_max() * np.exp(-1.0 / self.gamma))

    def max_spawnrecruits(self) -> Tuple[float, float]:
        return (self._spawners_at_max(), self.max_recruits())


@dataclass(frozen=True)
class DerisoSchnute(_SpawnerRecruitBase):
    """Deriso-Schnute model.

    R = α·S·(1 − β·γ·S)^(1/γ)

    Generalises Beverton-Holt (γ = −1) and Ricker (γ → 0). Shape is set by γ:
      γ < −1  unbounded
      γ = −1  exactly Beverton-Holt
      γ > −1  dome-shaped, peak at S = 1/(β·(1+γ))
    The γ → 0 limit is not special-cased; γ = 0 evaluates to inf/nan.

    Attributes:
        alpha: Productivity (α).
        beta: Optimality parameter (β).
        gamma: Recruitment limitation / skewness parameter (γ).
    """
    alpha: float
    beta: float
    gamma: float

    kind = ModelKind.DERISO_SCHNUTE
    reference = "Quinn & Deriso eq. 3.20"

    def recruit(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * S * self._limitation(S))

    def recruits_per_spawner(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        return _unwrap(self.alpha * self._limitation(_spawners(spawners)))

    def _limitation(self, S: np.ndarray) -> np.ndarray:
        return np.power(1.0 - self.beta * self.gamma * S, 1.0 / self.gamma)

    def max_recruits(self) -> float:
        if self.gamma > -1:
            g1 = 1.0 + self.gamma
            return float((self.alpha / self.beta) * np.power(g1, -(g1 / self.gamma)))
        elif self.gamma == -1:
            return BevertonHolt(self.alpha, self.beta).max_recruits()
        elif self.gamma < -1:
            return math.inf
        return math.nan

    def max_spawnrecruits(self) -> Tuple[float, float]:
        if self.gamma > -1:
            return (float(1.0 / (self.beta * (1.0 + self.gamma))), self.max_recruits())
        elif self.gamma == -1:
            return BevertonHolt(self.alpha, self.beta).max_spawnrecruits()
        elif self.gamma < -1:
            return (math.inf, math.inf)
        return (math.nan, math.nan)


@dataclass(frozen=True)
class Shepherd(_SpawnerRecruitBase):
    """Shepherd model.

    R = α·S / (1 + β·S^γ)

    Shape is set by γ alone:
      γ < 1  unbounded, Cushing-like
      γ = 1  exactly Beverton-Holt
      γ > 1  dome-shaped, peak at S = (β·(γ−1))^(−1/γ)

    Attributes:
        alpha: Productivity (α).
        beta: Density-dependence parameter (β).
        gamma: Index of density dependence (γ).
    """
    alpha: float
    beta: float
    gamma: float

    kind = ModelKind.SHEPHERD
    reference = "Quinn & Deriso eq. 3.21"

    def recruit(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * S / (1.0 + self.beta * np.power(S, self.gamma)))

    def recruits_per_spawner(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha / (1.0 + self.beta * np.power(S, self.gamma)))

    def max_recruits(self) -> float:
        if self.gamma > 1:
            gm1 = self.gamma - 1.0
            return float(
                self.alpha / (self.beta * self.gamma)
                * np.power(self.beta * gm1, gm1 / self.gamma)
            )
        elif self.gamma == 1:
            return BevertonHolt(self.alpha, self.beta).max_recruits()
        elif self.gamma < 1:
            return math.inf
        return math.nan

    def max_spawnrecruits(self) -> Tuple[float, float]:
        if self.gamma > 1:
            spawnmax = float(np.power(self.beta * (self.gamma - 1.0), -1.0 / self.gamma))
        elif self.gamma == 1:
            return BevertonHolt(self.alpha, self.beta).max_spawnrecruits()
        elif self.gamma < 1:
            spawnmax = math.inf
        else:
            spawnmax = math.nan
        return (spawnmax, self.max_recruits())


@dataclass(frozen=True)
class GammaModel(_SpawnerRecruitBase):
    """Gamma-function model.

    R = α·S^γ·exp(−β·S)

    An unnormalised gamma density. Contains Ricker (γ = 1) and Cushing
    (β = 0) as special cases and approaches Beverton-Holt as γ → 0.
    Peaks at S = γ/β when β > 0; β = 0 is delegated to Cushing.

    Attributes:
        alpha: Productivity (α).
        beta: Density-dependence rate (β).
        gamma: Shape parameter (γ), must be > 0.

    Raises:
        ParameterDomainError: If γ ≤ 0 (or NaN).
    """
    alpha: float
    beta: float
    gamma: float

    kind = ModelKind.GAMMA

    def __post_init__(self) -> None:
        if not self.gamma > 0:
            raise ParameterDomainError(type(self).__name__, "gamma", self.gamma, "> 0")
        super().__post_init__()

    def recruit(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * np.power(S, self.gamma) * np.exp(-self.beta * S))

    def recruits_per_spawner(self, spawners: ArrayLike) -> Union[float, np.ndarray]:
        S = _spawners(spawners)
        return _unwrap(self.alpha * np.power(S, self.gamma - 1.0) * np.exp(-self.beta * S))

    def max_recruits(self) -> float:
        if self.beta == 0:
            return Cushing(self.alpha, self.gamma).max_recruits()
        return float(
            self.alpha * np.power(self.gamma / self.beta, self.gamma) * np.exp(-self.gamma)
        )

    def max_spawnrecruits(self) -> Tuple[float, float]:
        if self.beta == 0:
            return Cushing(self.alpha, self.gamma).max_spawnrecruits()
        return (float(self.gamma / self.beta), self.max_recruits())


Gamma = GammaModel

SpawnerRecruitModel = Union[
    BevertonHolt, Ricker, LudwigWalters, Cushing, DerisoSchnute, Shepherd, GammaModel,
]

MODEL_CLASSES: Dict[ModelKind, type] = {
    ModelKind.BEVERTON_HOLT: BevertonHolt,
    ModelKind.RICKER: Ricker,
    ModelKind.LUDWIG_WALTERS: LudwigWalters,
    ModelKind.CUSHING: Cushing,
    ModelKind.DERISO_SCHNUTE: DerisoSchnute,
    ModelKind.SHEPHERD: Shepherd,
    ModelKind.GAMMA: GammaModel,
}

_VARIANTS = tuple(MODEL_CLASSES.values())


def check_model(model) -> SpawnerRecruitModel:
    """Return model unchanged, or raise TypeError if it is not one of the seven variants."""
    if not isinstance(model, _VARIANTS):
        raise TypeError(
            f"expected one of {[cls.__name__ for cls in _VARIANTS]}, "
            f"got {type(model).__name__}"
        )
    return model


# ═══════════════════════════════════════════════════════════════════════
# POLYMORPHIC OPERATIONS
# ═══════════════════════════════════════════════════════════════════════


def recruit(spawners: ArrayLike, model: SpawnerRecruitModel) -> Union[float, np.ndarray]:
    """Recruitment produced by a spawner abundance.

    Args:
        spawners: Spawner abundance, scalar or array-like (≥ 0).
        model: Any of the seven spawner-recruit models.

    Returns:
        float for scalar input, np.ndarray of the same shape otherwise.

    Raises:
        TypeError: If model is not a spawner-recruit model.
    """
    return check_model(model).recruit(spawners)


def max_recruits(model: SpawnerRecruitModel) -> float:
    """Supremum of recruitment over all S ≥ 0 (math.inf when unbounded)."""
    return check_model(model).max_recruits()


def max_spawnrecruits(model: SpawnerRecruitModel) -> Tuple[float, float]:
    """(spawner abundance at the supremum, supremum).

    The abundance is math.inf for curves that only approach their
    supremum in the limit (asymptotic or unbounded).
    """
    return check_model(model).max_spawnrecruits()


# ═══════════════════════════════════════════════════════════════════════
# PARAMETER DOMAIN VALIDATION
# ═══════════════════════════════════════════════════════════════════════

_Check = Tuple[str, str, Callable[[float], bool]]

_POSITIVE = ("> 0", lambda v: v > 0)
_NON_NEGATIVE = (">= 0", lambda v: v >= 0)
_NON_ZERO = ("!= 0", lambda v: v != 0)

_DOMAINS: Dict[ModelKind, Tuple[_Check, ...]] = {
    ModelKind.BEVERTON_HOLT: (("alpha", *_POSITIVE), ("beta", *_POSITIVE)),
    ModelKind.RICKER: (("alpha", *_POSITIVE), ("beta", *_POSITIVE)),
    ModelKind.LUDWIG_WALTERS: (
        ("alpha", *_POSITIVE), ("beta", *_POSITIVE), ("gamma", *_POSITIVE),
    ),
    ModelKind.CUSHING: (("alpha", *_POSITIVE), ("gamma", *_POSITIVE)),
    ModelKind.DERISO_SCHNUTE: (
        ("alpha", *_POSITIVE), ("beta", *_POSITIVE), ("gamma", *_NON_ZERO),
    ),
    ModelKind.SHEPHERD: (
        ("alpha", *_POSITIVE), ("beta", *_POSITIVE), ("gamma", *_POSITIVE),
    ),
    ModelKind.GAMMA: (
        ("alpha", *_POSITIVE), ("beta", *_NON_NEGATIVE), ("gamma", *_POSITIVE),
    ),
}


def validate_model(model: SpawnerRecruitModel, strict: bool = True) -> SpawnerRecruitModel:
    """Check a model's parameters against their biological domains.

    Only GammaModel enforces a constraint at construction; this applies
    the full set on request:
      - every parameter finite
      - α > 0 everywhere
      - β > 0, except Gamma where β = 0 (the Cushing case) is allowed
      - γ > 0 for Ludwig-Walters, Cushing, Shepherd and Gamma
      - γ ≠ 0 for Deriso-Schnute (the Ricker limit has no closed form here)

    Args:
        model: Model to check.
        strict: Raise on the first violation if True; otherwise emit a
            UserWarning per violation.

    Returns:
        The model, unchanged.

    Raises:
        ParameterDomainError: On violation when strict.
        TypeError: If model is not a spawner-recruit model.
    """
    check_model(model)
    name = type(model).__name__
    for param, constraint, ok in _DOMAINS[model.kind]:
        value = float(getattr(model, param))
        if not math.isfinite(value):
            err = ParameterDomainError(name, param, value, "finite")
        elif not ok(value):
            err = ParameterDomainError(name, param, value, constraint)
        else:
            continue
        if strict:
            raise err
        warnings.warn(str(err), UserWarning, stacklevel=2)
    return model
