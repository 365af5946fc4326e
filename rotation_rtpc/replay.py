"""
Command-line replay of recorded orientation traces.
Uses 'click' for argument parsing and 'rich' for the result tables.

A trace is a JSON list of frames (or an object with a "frames" list)::

    [{"elapsed": 0.1, "yaw": 0.0, "roll": 0.0, "pitch": 0.0},
     {"elapsed": 0.1, "yaw": 2.0, "roll": 0.0, "pitch": 0.0}]

Every frame sets the tracked orientation and then ticks the configured
samplers by `elapsed` seconds. Posted events and parameter values are
recorded and printed once the trace ends.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple
import asyncio
import json
import logging
import random

import click
from rich.console import Console
from rich.table import Table

from .config import RotationConfig, load_config
from .exceptions import ConfigurationError, RotationRtpcError
from .hysteresis import HysteresisTriggerSampler
from .interfaces import FileTabularDataStore, TabularDataStore
from .orientation import OrientationSample
from .parametric import ParametricMappingSampler
from .sinks import RecordingEventSink, RecordingParameterSink
from .tabular import TabularRandomizer

logger = logging.getLogger("RotationRtpcReplay")

REPLAY_SUBJECT = "replay-subject"

Frame = Tuple[float, OrientationSample]


class TraceOrientationSource:
    """Orientation source whose sample is set by the replay loop."""

    def __init__(self, initial: Optional[OrientationSample] = None):
        self.sample = initial or OrientationSample()

    def orientation(self) -> Optional[OrientationSample]:
        return self.sample


@dataclass
class ReplayReport:
    """Recorded output of one replay run."""
    frames: int = 0
    polls: int = 0
    events: RecordingEventSink = field(default_factory=RecordingEventSink)
    parameters: RecordingParameterSink = field(default_factory=RecordingParameterSink)


def load_trace(path: Path) -> List[Frame]:
    """
    Reads a trace file into `(elapsed, sample)` frames.

    Raises:
        ConfigurationError: If the file is not a valid trace.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read trace {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("frames")
    if not isinstance(data, list):
        raise ConfigurationError(f"Trace {path} must be a list of frames.")

    frames: List[Frame] = []
    for index, entry in enumerate(data):
        try:
            elapsed = float(entry["elapsed"])
            sample = OrientationSample(
                yaw=float(entry.get("yaw", 0.0)),
                roll=float(entry.get("roll", 0.0)),
                pitch=float(entry.get("pitch", 0.0)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ConfigurationError(f"Trace frame #{index} is invalid: {exc!r}") from exc
        frames.append((elapsed, sample))
    return frames


async def replay_trace(
    config: RotationConfig,
    frames: List[Frame],
    store: Optional[TabularDataStore] = None,
    seed: Optional[int] = None,
) -> ReplayReport:
    """
    Feeds `frames` through the samplers configured in `config`.

    The first frame's orientation is the baseline; its elapsed time still
    counts towards the first poll.
    """
    report = ReplayReport()
    if not frames:
        return report

    source = TraceOrientationSource(frames[0][1])
    samplers: List[Any] = []
    if config.hysteresis is not None:
        samplers.append(HysteresisTriggerSampler.from_config(
            config, source, report.events, REPLAY_SUBJECT, name="hysteresis"
        ))
    parametric = None
    if config.parametric is not None:
        randomizer = None
        if store is not None:
            randomizer = TabularRandomizer(
                store, report.parameters, rng=random.Random(seed), name="replay-tabular"
            )
        parametric = ParametricMappingSampler.from_config(
            config, source, report.events, report.parameters, REPLAY_SUBJECT,
            randomizer=randomizer, name="parametric",
        )
        samplers.append(parametric)

    for sampler in samplers:
        sampler.start()

    for elapsed, sample in frames:
        source.sample = sample
        for sampler in samplers:
            if sampler.tick(elapsed) is not None:
                report.polls += 1
        report.frames += 1
        # let scheduled tabular loads make progress between frames
        await asyncio.sleep(0)

    if parametric is not None:
        await parametric.wait_for_loads()
        await parametric.close()
    return report


def render_report(report: ReplayReport, console: Console) -> None:
    """Prints the recorded events and parameter values as tables."""
    events = Table(title=f"Events ({report.frames} frames, {report.polls} polls)")
    events.add_column("#", justify="right", style="dim")
    events.add_column("Action", style="cyan")
    events.add_column("Event", style="green")
    for index, call in enumerate(report.events.calls, start=1):
        events.add_row(str(index), call.action, str(call.target))
    console.print(events)

    parameters = Table(title="Parameters")
    parameters.add_column("Parameter", style="magenta")
    parameters.add_column("Scope")
    parameters.add_column("Updates", justify="right")
    parameters.add_column("Last value", justify="right", style="yellow")
    seen = []
    for call in report.parameters.calls:
        key = (call.action, call.target)
        if key not in seen:
            seen.append(key)
    for action, target in seen:
        values = [
            call.value for call in report.parameters.calls
            if call.action == action and call.target == target
        ]
        scope = "global" if action == "set_global" else "subject"
        parameters.add_row(str(target), scope, str(len(values)), f"{values[-1]:.6f}")
    console.print(parameters)


@click.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("trace_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--assets-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory tabular sources are resolved against.",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the tabular randomizer.",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level.",
    show_default=True,
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
)
def main(
    config_file: Path,
    trace_file: Path,
    assets_root: Optional[Path],
    seed: Optional[int],
    log_level: str,
    no_color: bool,
):
    """Replays TRACE_FILE through the samplers configured in CONFIG_FILE."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console = Console(no_color=no_color)
    try:
        config = load_config(config_file)
        frames = load_trace(trace_file)
    except RotationRtpcError as exc:
        raise click.ClickException(str(exc)) from exc

    store = FileTabularDataStore(assets_root) if assets_root is not None else None
    if store is None and config.parametric is not None and config.parametric.tabular_sources():
        raise click.ClickException(
            "Configuration references tabular sources; pass --assets-root."
        )

    logger.info(f"Replaying {len(frames)} frames from {trace_file}")
    report = asyncio.run(replay_trace(config, frames, store=store, seed=seed))
    render_report(report, console)


if __name__ == "__main__":
    main()
