import pytest
from pydantic import ValidationError
from gazekeys.config import EngineConfig, load_config, preset, dump_config

def test_presets():
    enh, base = EngineConfig.enhanced(), EngineConfig.baseline()
    assert enh.accumulation_policy == "active_key_only" and enh.use_velocity_gating and enh.use_zoom_hysteresis
    assert enh.selection_threshold == 0.6 and enh.gaze_history_size == 3 and enh.gaze_smoothing_alpha == 0.4
    assert base.accumulation_policy == "all_keys_proportional"
    assert not base.use_velocity_gating and not base.use_zoom_hysteresis
    assert base.selection_threshold == 1.0 and base.gaze_history_size == 8 and base.gaze_smoothing_alpha == 0.15
    assert base.sigma_ratio == enh.sigma_ratio == 0.5

def test_load_yaml_with_overrides(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("preset: baseline\nselection_threshold: 0.8\n")
    cfg = load_config(p)
    assert cfg.accumulation_policy == "all_keys_proportional"
    assert cfg.selection_threshold == 0.8

def test_dump_roundtrip(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text(dump_config(EngineConfig.baseline()))
    assert load_config(p) == EngineConfig.baseline()

def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        EngineConfig(gaze_smoothing_alpha=1.5)
    with pytest.raises(ValidationError):
        EngineConfig(gaze_history_size=0)
    with pytest.raises(ValidationError):
        EngineConfig(accumulation_policy="everything")
    with pytest.raises(ValidationError):
        EngineConfig(sigma_rato=0.4)
    with pytest.raises(ValueError):
        preset("fancy")

def test_frozen():
    cfg = EngineConfig()
    with pytest.raises(ValidationError):
        cfg.selection_threshold = 2.0

def test_shipped_example_configs():
    from pathlib import Path
    root = Path(__file__).resolve().parent.parent / "examples"
    assert load_config(root / "enhanced.yaml") == EngineConfig.enhanced()
    assert load_config(root / "baseline.yaml") == EngineConfig.baseline()
