import json
from typer.testing import CliRunner
from gazekeys.cli import app

runner = CliRunner()

def test_presets():
    res = runner.invoke(app, ["presets", "baseline"])
    assert res.exit_code == 0
    assert "all_keys_proportional" in res.output

def test_unknown_preset_fails():
    res = runner.invoke(app, ["presets", "fancy"])
    assert res.exit_code == 1

def test_simulate_then_replay(tmp_path):
    p = tmp_path / "trace.jsonl"
    res = runner.invoke(app, ["simulate", "h", "--out", str(p), "--dwell", "1.5", "--jitter", "2"])
    assert res.exit_code == 0 and p.exists()
    res = runner.invoke(app, ["replay", str(p), "--preset", "enhanced"])
    assert res.exit_code == 0
    events = [json.loads(l) for l in res.output.splitlines() if l.strip()]
    assert events and events[0]["key_id"] == "r3-h"

def test_compare_table():
    res = runner.invoke(app, ["compare", "no", "--dwell", "1.5"])
    assert res.exit_code == 0
    assert "enhanced" in res.output and "baseline" in res.output

def test_malformed_layout_exits_cleanly(tmp_path):
    p = tmp_path / "layout.yaml"
    p.write_text("rows:\n  - [a, b]\n")
    res = runner.invoke(app, ["compare", "a", "--layout", str(p)])
    assert res.exit_code == 1
    assert "invalid layout" in res.output
    p.write_text("- a\n")
    assert runner.invoke(app, ["simulate", "a", "--layout", str(p)]).exit_code == 1

def test_malformed_trace_exits_cleanly(tmp_path):
    p = tmp_path / "trace.jsonl"
    p.write_text("[1, 2]\n")
    res = runner.invoke(app, ["replay", str(p)])
    assert res.exit_code == 1
    assert "cannot read trace" in res.output
