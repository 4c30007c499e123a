"""Derived curve utilities built on the spawner-recruit models.

  - Shape classification (asymptotic / dome / unbounded), piecewise in γ
    for Deriso-Schnute and Shepherd
  - Per-spawner recruitment R/S
  - Spawner grids and curve evaluation over them
  - Peak summaries and numeric sweeps that cross-check the closed forms
  - Replacement-line equilibria for every model with a closed form

References:
  - Quinn & Deriso (1999) §3.2 (shape families), §3.3 (replacement line)
"""

from __future__ import annotations

import math
from typing import Tuple, Union

import numpy as np

from srcurves.models import ArrayLike, SpawnerRecruitModel, check_model
from srcurves.types import CurveShape, ModelKind, PeakSummary


# ═══════════════════════════════════════════════════════════════════════
# SHAPE
# ═══════════════════════════════════════════════════════════════════════

_FIXED_SHAPES = {
    ModelKind.BEVERTON_HOLT: CurveShape.ASYMPTOTIC,
    ModelKind.RICKER: CurveShape.DOME,
    ModelKind.LUDWIG_WALTERS: CurveShape.DOME,
    ModelKind.CUSHING: CurveShape.UNBOUNDED,
    ModelKind.GAMMA: CurveShape.DOME,
}


def curve_shape(model: SpawnerRecruitModel) -> CurveShape:
    """Qualitative shape of a model's recruitment curve.

    Deriso-Schnute: dome for γ > −1, asymptotic at γ = −1 (Beverton-Holt
    in Schnute's parameterisation), unbounded for γ < −1.
    Shepherd: unbounded for γ < 1, asymptotic at γ = 1, dome for γ > 1.
    Gamma: dome, except β = 0 which is the unbounded Cushing curve.

    Args:
        model: Any spawner-recruit model.

    Returns:
        CurveShape.
    """
    kind = check_model(model).kind
    if kind == ModelKind.GAMMA and model.beta == 0:
        return CurveShape.UNBOUNDED
    if kind in _FIXED_SHAPES:
        return _FIXED_SHAPES[kind]
    if kind == ModelKind.DERISO_SCHNUTE:
        pivot = -1.0
    else:
        pivot = 1.0
    if model.gamma > pivot:
        return CurveShape.DOME
    if model.gamma == pivot:
        return CurveShape.ASYMPTOTIC
    return CurveShape.UNBOUNDED


def recruits_per_spawner(
    spawners: ArrayLike,
    model: SpawnerRecruitModel,
) -> Union[float, np.ndarray]:
    """Recruits per spawner R/S.

    Uses each model's per-capita expression, so S = 0 gives the
    density-independent limit (α for the models linear in S at the origin).

    Args:
        spawners: Spawner abundance, scalar or array-like.
        model: Any spawner-recruit model.

    Returns:
        float for scalar input, np.ndarray otherwise.
    """
    return check_model(model).recruits_per_spawner(spawners)


# ═══════════════════════════════════════════════════════════════════════
# GRIDS & SWEEPS
# ═══════════════════════════════════════════════════════════════════════


def spawner_grid(
    s_max: float,
    n_points: int = 1001,
    s_min: float = 0.0,
    log_spaced: bool = False,
) -> np.ndarray:
    """Spawner abundances for evaluating a curve.

    Args:
        s_max: Largest abundance (inclusive).
        n_points: Number of grid points (≥ 2).
        s_min: Smallest abundance (inclusive).
        log_spaced: Geometric spacing, for abundances spanning several
            orders of magnitude. Requires s_min > 0.

    Returns:
        (n_points,) float64 array.

    Raises:
        ValueError: On an empty or inverted range.
    """
    if n_points < 2:
        raise ValueError(f"n_points must be >= 2, got {n_points}")
    if s_max <= s_min:
        raise ValueError(f"s_max ({s_max}) must be > s_min ({s_min})")
    if s_min < 0:
        raise ValueError(f"s_min must be >= 0, got {s_min}")
    if log_spaced:
        if s_min <= 0:
            raise ValueError("log_spaced grids require s_min > 0")
        return np.geomspace(s_min, s_max, n_points)
    return np.linspace(s_min, s_max, n_points)


def evaluate_curve(
    model: SpawnerRecruitModel,
    spawners,
) -> Tuple[np.ndarray, np.ndarray]:
    """Evaluate a model over a set of spawner abundances.

    Returns:
        (S, R) as 1-D float64 arrays of equal length.
    """
    S = np.atleast_1d(np.asarray(spawners, dtype=np.float64))
    R = np.atleast_1d(np.asarray(check_model(model).recruit(S), dtype=np.float64))
    return S, R


def sweep_supremum(
    model: SpawnerRecruitModel,
    spawners,
) -> Tuple[float, float]:
    """Largest recruitment found on a sweep, and where it occurs.

    NaN evaluations are ignored. Used to cross-check max_spawnrecruits.

    Returns:
        (S, R) at the sweep maximum.

    Raises:
        ValueError: If every evaluation is NaN.
    """
    S, R = evaluate_curve(model, spawners)
    if np.all(np.isnan(R)):
        raise ValueError("recruitment is NaN at every spawner abundance")
    idx = int(np.nanargmax(R))
    return float(S[idx]), float(R[idx])


def peak_summary(model: SpawnerRecruitModel) -> PeakSummary:
    """Bundle max_spawnrecruits with the curve shape."""
    spawners, recruits = check_model(model).max_spawnrecruits()
    return PeakSummary(
        spawners=spawners,
        recruits=recruits,
        shape=curve_shape(model),
    )


# ═══════════════════════════════════════════════════════════════════════
# REPLACEMENT LINE
# ═══════════════════════════════════════════════════════════════════════


def replacement_spawners(
    model: SpawnerRecruitModel,
    slope: float = 1.0,
) -> float:
    """Non-zero equilibrium where the curve meets R = slope·S.

    slope is the replacement line's recruits-per-spawner (1/SPR in
    spawner-per-recruit units, or 1.0 when S and R share units). Each
    equilibrium solves R/S = slope:

      Beverton-Holt:  S_eq = (α/slope − 1) / β
      Ricker:         S_eq = ln(α/slope) / β
      Ludwig-Walters: S_eq = (ln(α/slope) / β)^(1/γ)
      Shepherd:       S_eq = ((α/slope − 1) / β)^(1/γ)
      Deriso-Schnute: S_eq = (1 − (slope/α)^γ) / (β·γ)
      Cushing:        S_eq = (slope/α)^(1/(γ−1))

    Args:
        model: Any spawner-recruit model except GammaModel.
        slope: Replacement-line slope (> 0).

    Returns:
        Equilibrium spawner abundance. For the models whose R/S starts at α
        and declines, 0.0 when α ≤ slope (the curve never rises above
        replacement).

    Raises:
        ValueError: If slope ≤ 0, for GammaModel (R/S = slope has no
            closed-form root), or for Cushing with γ = 1 (R/S is constant).
    """
    kind = check_model(model).kind
    if not slope > 0:
        raise ValueError(f"slope must be > 0, got {slope}")
    if kind == ModelKind.GAMMA:
        raise ValueError(
            f"no closed-form equilibrium for {type(model).__name__}"
        )

    if kind == ModelKind.CUSHING:
        if model.gamma == 1:
            raise ValueError(
                "Cushing with gamma = 1 has constant recruits per spawner; "
                "no unique equilibrium"
            )
        return float(np.power(slope / model.alpha, 1.0 / (model.gamma - 1.0)))

    if model.alpha <= slope:
        return 0.0
    ratio = model.alpha / slope
    if kind == ModelKind.BEVERTON_HOLT:
        return float((ratio - 1.0) / model.beta)
    if kind == ModelKind.RICKER:
        return float(math.log(ratio) / model.beta)
    if kind == ModelKind.LUDWIG_WALTERS:
        return float(np.power(math.log(ratio) / model.beta, 1.0 / model.gamma))
    if kind == ModelKind.SHEPHERD:
        return float(np.power((ratio - 1.0) / model.beta, 1.0 / model.gamma))
    # Deriso-Schnute
    return float(
        (1.0 - np.power(1.0 / ratio, model.gamma)) / (model.beta * model.gamma)
    )
