"""Configuration system for srcurves.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → override.yaml → sweep overrides

A configuration names one spawner-recruit model (kind + parameters) and the
spawner grid it is evaluated over. Loading always validates: the model is
built and its parameters are checked against their biological domains.
"""

from __future__ import annotations

import dataclasses
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml

from srcurves.curves import spawner_grid
from srcurves.models import MODEL_CLASSES, SpawnerRecruitModel, validate_model
from srcurves.types import ModelKind


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class ModelSection:
    """Which curve to use and its parameters.

    Parameters a model does not take are left as None; setting one anyway
    triggers a UserWarning when the model is built.
    """
    kind: str = "beverton_holt"
    alpha: Optional[float] = 2.0     # productivity (α)
    beta: Optional[float] = 0.5      # density dependence (β)
    gamma: Optional[float] = None    # shape / power (γ); 3-parameter models and Cushing


@dataclass
class GridSection:
    """Spawner abundances the curve is evaluated over."""
    s_min: float = 0.0
    s_max: float = 100.0
    n_points: int = 1001
    log_spaced: bool = False     # geometric spacing; needs s_min > 0


@dataclass
class CurveConfig:
    """Complete configuration.

    Load from YAML via `load_config()`. Sections map 1:1 to YAML top-level keys.
    """
    model: ModelSection = field(default_factory=ModelSection)
    grid: GridSection = field(default_factory=GridSection)


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into base. Modifies base in place.

    - Dict values are merged recursively
    - Non-dict values are replaced
    - Keys in override but not base are added

    Args:
        base: Base dictionary (modified in place).
        override: Override dictionary.

    Returns:
        The merged base dictionary.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> CurveConfig:
    """Convert a merged YAML dict to a CurveConfig."""
    sections = {}
    section_map = {
        'model': ModelSection,
        'grid': GridSection,
    }
    for key, cls in section_map.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()
    return CurveConfig(**sections)


# ═══════════════════════════════════════════════════════════════════════
# MODEL & GRID CONSTRUCTION
# ═══════════════════════════════════════════════════════════════════════

def build_model(section: ModelSection) -> SpawnerRecruitModel:
    """Construct the model named by a ModelSection.

    Only the parameters the model takes are passed; any others that are
    set produce a UserWarning.

    Raises:
        ValueError: Unknown kind or a required parameter is missing.
        ParameterDomainError: GammaModel with γ ≤ 0.
    """
    try:
        kind = ModelKind(section.kind)
    except ValueError:
        raise ValueError(
            f"model.kind must be one of {[k.value for k in ModelKind]}, "
            f"got '{section.kind}'"
        ) from None
    cls = MODEL_CLASSES[kind]
    names = [f.name for f in dataclasses.fields(cls)]

    kwargs = {}
    for name in names:
        value = getattr(section, name)
        if value is None:
            raise ValueError(f"model.{name} required for '{kind.value}' model")
        kwargs[name] = value

    for name in ('alpha', 'beta', 'gamma'):
        if name not in names and getattr(section, name) is not None:
            warnings.warn(
                f"model.{name} is ignored for '{kind.value}' model",
                UserWarning,
                stacklevel=2,
            )
    return cls(**kwargs)


def build_grid(section: GridSection) -> np.ndarray:
    """Spawner abundances described by a GridSection."""
    return spawner_grid(
        s_max=section.s_max,
        n_points=section.n_points,
        s_min=section.s_min,
        log_spaced=section.log_spaced,
    )


def validate_config(config: CurveConfig) -> None:
    """Validate configuration constraints. Raises ValueError on failure.

    Checks:
      - model.kind names a known model and its parameters are present
      - parameters lie in their biological domains (strict validate_model)
      - the grid is a non-empty, ordered range
    """
    g = config.grid
    if g.n_points < 2:
        raise ValueError(f"grid.n_points must be >= 2, got {g.n_points}")
    if g.s_min < 0:
        raise ValueError(f"grid.s_min must be >= 0, got {g.s_min}")
    if g.s_max <= g.s_min:
        raise ValueError(
            f"grid.s_max ({g.s_max}) must be > grid.s_min ({g.s_min})"
        )
    if g.log_spaced and g.s_min <= 0:
        raise ValueError("grid.s_min must be > 0 when grid.log_spaced is true")

    validate_model(build_model(config.model), strict=True)


def load_config(
    base_path: Union[str, Path],
    override_path: Optional[Union[str, Path]] = None,
    sweep_overrides: Optional[Dict] = None,
) -> CurveConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → override → sweep overrides.
    Each layer overrides only the fields it specifies.

    Args:
        base_path: Path to base configuration YAML.
        override_path: Optional override YAML (skipped if missing).
        sweep_overrides: Optional dict of parameter sweep overrides.

    Returns:
        Validated CurveConfig.

    Raises:
        FileNotFoundError: If base_path doesn't exist.
        ValueError: If validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    with open(base_path) as f:
        config_dict = yaml.safe_load(f) or {}

    if override_path is not None:
        override_path = Path(override_path)
        if override_path.exists():
            with open(override_path) as f:
                override = yaml.safe_load(f) or {}
            deep_merge(config_dict, override)

    if sweep_overrides is not None:
        deep_merge(config_dict, sweep_overrides)

    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def default_config() -> CurveConfig:
    """Return a CurveConfig with all default values."""
    config = CurveConfig()
    validate_config(config)
    return config
