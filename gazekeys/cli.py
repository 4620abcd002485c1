from __future__ import annotations
import typer, json, asyncio, logging, yaml
from rich import print
from rich.markup import escape
from rich.logging import RichHandler
from rich.table import Table
from typing import Optional
from pydantic import ValidationError
from .config import EngineConfig, load_config, preset, dump_config
from .keyboard.layout import Layout, default_layout, load_layout, keys_for_text
from .keyboard.geometry import layout_rects
from .runtime.engine import KeyboardEngine
from .runtime.loop import run_realtime
from .sim.trace import synthesize_typing, read_trace, write_trace
from .sim.replay import replay as replay_trace, compare as compare_configs

app = typer.Typer(add_completion=False, help="gazekeys: Bayesian gaze keyboard engine (gk)")

@app.callback()
def main(verbose: int = typer.Option(0, "--verbose", "-v", count=True)):
    level = logging.WARNING if verbose == 0 else (logging.INFO if verbose == 1 else logging.DEBUG)
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[RichHandler(rich_tracebacks=True)])

def _fail(msg: str):
    print(f"[red]{escape(msg)}[/red]")
    raise typer.Exit(1)

def _config(name: str, path: Optional[str]) -> EngineConfig:
    try:
        return load_config(path) if path else preset(name)
    except (ValidationError, ValueError, OSError, yaml.YAMLError) as e:
        _fail(f"invalid configuration: {e}")

def _layout(path: Optional[str]) -> Layout:
    try:
        return load_layout(path) if path else default_layout()
    except (ValidationError, ValueError, OSError, yaml.YAMLError) as e:
        _fail(f"invalid layout: {e}")

@app.command()
def presets(name: str = typer.Argument("enhanced")):
    """
    Print a preset configuration as YAML (a starting point for --config files).
    """
    print(dump_config(_config(name, None)))

@app.command()
def simulate(text: str, out: Optional[str]=typer.Option(None, help="write JSONL trace here instead of stdout"),
             dwell: float=1.2, jitter: float=4.0, rate: float=30.0, seed: int=0,
             width: int=1200, height: int=600, layout: Optional[str]=None):
    """
    Synthesize a gaze trace of someone typing TEXT on the rendered layout.
    """
    lay = _layout(layout)
    rects = layout_rects(lay, size=(width,height))
    try:
        samples = synthesize_typing(keys_for_text(lay, text), rects, rate=rate, dwell_s=dwell, jitter_px=jitter, seed=seed)
    except ValueError as e:
        _fail(str(e))
    if out:
        write_trace(samples, out); print(f"[green]Wrote {len(samples)} samples[/green]", out)
    else:
        for s in samples: typer.echo(s.model_dump_json())

@app.command()
def replay(trace: str, preset_name: str=typer.Option("enhanced", "--preset"), config: Optional[str]=None,
           layout: Optional[str]=None, width: int=1200, height: int=600, fps: float=60.0,
           realtime: bool=typer.Option(False, help="tick on the wall clock with an asyncio frame loop")):
    """
    Run the engine over a recorded/synthetic trace and print JSONL selection events.
    """
    cfg = _config(preset_name, config); lay = _layout(layout)
    try:
        samples = read_trace(trace)
    except (ValueError, OSError) as e:
        _fail(f"cannot read trace: {e}")
    eng = KeyboardEngine(cfg, lay)
    eng.update_geometry(layout_rects(lay, size=(width,height)))
    if realtime:
        eng.start(); eng.calibration_complete()
        events = asyncio.run(run_realtime(eng, samples, fps=fps))
        eng.stop()
    else:
        events = replay_trace(eng, samples, fps=fps)
    for ev in events:
        typer.echo(ev.model_dump_json())

@app.command()
def compare(text: Optional[str]=typer.Argument(None), trace: Optional[str]=None, layout: Optional[str]=None,
            dwell: float=1.2, jitter: float=4.0, seed: int=0, width: int=1200, height: int=600,
            enhanced: Optional[str]=typer.Option(None, help="config file for the enhanced run"),
            baseline: Optional[str]=typer.Option(None, help="config file for the baseline run")):
    """
    Type TEXT (or replay --trace) with the enhanced and baseline engines and tabulate the outcome.
    """
    lay = _layout(layout); rects = layout_rects(lay, size=(width,height))
    if text is None and trace is None:
        _fail("give TEXT or --trace")
    try:
        intended = keys_for_text(lay, text) if text is not None else []
        samples = read_trace(trace) if trace else synthesize_typing(intended, rects, dwell_s=dwell, jitter_px=jitter, seed=seed)
    except (ValueError, OSError) as e:
        _fail(str(e))
    cfgs = {"enhanced": _config("enhanced", enhanced), "baseline": _config("baseline", baseline)}
    results = compare_configs(samples, rects, cfgs, layout=lay, intended=intended)

    tbl = Table(title=f"{len(samples)} samples" + (f", intended {text!r}" if text else ""))
    for col in ("config", "selections", "typed", "in order", "stray"):
        tbl.add_column(col)
    for name, res in results.items():
        typed = "".join(lay[k].value or lay[k].label for k in res.typed)
        tbl.add_row(name, str(len(res.events)), json.dumps(typed), f"{res.hits}/{len(res.intended)}", str(len(res.stray)))
    print(tbl)

if __name__ == "__main__":
    app()
