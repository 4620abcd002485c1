from __future__ import annotations
import yaml
from pathlib import Path
from typing import Any, Dict, Literal
from pydantic import BaseModel, ConfigDict, Field

AccumulationPolicy = Literal["active_key_only","all_keys_proportional"]

class EngineConfig(BaseModel):
    """
    Full parameter set for one run. Defaults are the enhanced configuration;
    ``EngineConfig.baseline()`` gives the comparison baseline.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    # likelihood / prior
    sigma_ratio: float = Field(0.5, gt=0)
    default_sigma: float = Field(40.0, gt=0)
    prior_pseudocount: float = Field(1.0, gt=0)
    special_key_likelihood_boost: float = Field(0.75, ge=0)
    special_key_min_prior: float = Field(0.75, ge=0, le=1)
    active_key_sigma_expansion: float = Field(1.5, ge=1)

    # smoothing
    gaze_smoothing_alpha: float = Field(0.4, gt=0, le=1)
    gaze_history_size: int = Field(3, ge=1)

    # selection
    selection_threshold: float = Field(0.6, gt=0)
    hysteresis_threshold: float = Field(0.15, ge=0)
    min_dwell_before_switch: float = Field(0.1, ge=0)
    selection_damping: float = Field(0.5, ge=0, le=1)
    min_posterior_for_feedback: float = Field(0.15, ge=0, le=1)

    # fixation
    velocity_threshold: float = Field(400.0, gt=0)
    velocity_smoothing_alpha: float = Field(0.3, gt=0, le=1)
    min_fixation_duration: float = Field(0.08, ge=0)
    scan_decay: float = Field(0.3, ge=0, le=1)

    # gate / timing
    bounds_margin: float = Field(50.0, ge=0)
    max_frame_dt: float = Field(0.1, gt=0)
    snapshot_interval: float = Field(1.0/30.0, ge=0)

    # policy switches
    accumulation_policy: AccumulationPolicy = "active_key_only"
    use_velocity_gating: bool = True
    use_zoom_hysteresis: bool = True

    @classmethod
    def enhanced(cls, **overrides) -> "EngineConfig":
        return cls(**overrides)

    @classmethod
    def baseline(cls, **overrides) -> "EngineConfig":
        base = dict(selection_threshold=1.0, gaze_smoothing_alpha=0.15, gaze_history_size=8,
                    accumulation_policy="all_keys_proportional",
                    use_velocity_gating=False, use_zoom_hysteresis=False)
        base.update(overrides)
        return cls(**base)

PRESETS = {"enhanced": EngineConfig.enhanced, "baseline": EngineConfig.baseline}

def preset(name:str, **overrides) -> EngineConfig:
    if name not in PRESETS:
        raise ValueError(f"unknown preset {name!r} (expected one of {', '.join(PRESETS)})")
    return PRESETS[name](**overrides)

def load_config(path:str|Path) -> EngineConfig:
    """
    YAML mapping of EngineConfig fields; an optional ``preset`` key picks the base
    configuration the remaining keys override.
    """
    with open(path,"r") as f: cfg: Dict[str,Any] = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: expected a mapping")
    name = cfg.pop("preset", "enhanced")
    return preset(name, **cfg)

def dump_config(cfg: EngineConfig) -> str:
    return yaml.safe_dump(cfg.model_dump(), sort_keys=False)
