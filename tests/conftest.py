"""
Shared test fixtures for the rotation RTPC library.

This module provides in-memory collaborators so samplers can be exercised
without a scene graph, an audio engine or data files on disk.

## Key Features

- **Scripted Orientation**: `FakeOrientationSource` returns whatever sample
  the test assigned last, or None to simulate a destroyed object.
- **Recording Sinks**: the library's own `RecordingEventSink` and
  `RecordingParameterSink` capture every post, stop and value.
- **In-Memory Tabular Store**: `InMemoryTabularStore` serves tabular sources
  from a dict and counts reads.

## Usage Patterns

```python
def test_start(hysteresis_factory, orientation_source, event_sink):
    sampler = hysteresis_factory()
    sampler.start()
    orientation_source.set(yaw=2.0)
    sampler.tick(0.1)
    assert event_sink.actions() == [("post", "Play_Yaw")]
```
"""
from typing import Dict, List, Optional
import random

import pytest

from rotation_rtpc import (
    AxisTrigger,
    HysteresisTriggerSampler,
    OrientationSample,
    RecordingEventSink,
    RecordingParameterSink,
    TabularRandomizer,
)
from rotation_rtpc.exceptions import DataSourceNotFoundError

SUBJECT = "test-subject"
POLL = 0.1


class FakeOrientationSource:
    """Orientation source driven by the test."""

    def __init__(self):
        self.sample: Optional[OrientationSample] = OrientationSample()
        self.reads = 0

    def set(self, yaw: float = 0.0, roll: float = 0.0, pitch: float = 0.0) -> None:
        self.sample = OrientationSample(yaw=yaw, roll=roll, pitch=pitch)

    def orientation(self) -> Optional[OrientationSample]:
        self.reads += 1
        return self.sample


class InMemoryTabularStore:
    """Tabular data store serving sources from a dict."""

    def __init__(self, sources: Optional[Dict[str, List[str]]] = None):
        self.sources: Dict[str, List[str]] = dict(sources or {})
        self.reads: List[str] = []

    def exists(self, name: str) -> bool:
        return name in self.sources

    def read_lines(self, name: str) -> List[str]:
        if name not in self.sources:
            raise DataSourceNotFoundError(f"Tabular source not found: {name}", source=name)
        self.reads.append(name)
        return list(self.sources[name])


@pytest.fixture
def orientation_source() -> FakeOrientationSource:
    return FakeOrientationSource()


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def parameter_sink() -> RecordingParameterSink:
    return RecordingParameterSink()


@pytest.fixture
def tabular_store() -> InMemoryTabularStore:
    return InMemoryTabularStore({
        "music.csv": [
            "Music,MasterVolume,5.000000,-1.0,1.0",
            "Music,Muted,0.000000,-1.0,1.0",
        ],
        "sfx.csv": [
            "Sfx,Pitch,1.500000,-0.5,0.5",
        ],
    })


@pytest.fixture
def randomizer(tabular_store: InMemoryTabularStore, parameter_sink: RecordingParameterSink) -> TabularRandomizer:
    return TabularRandomizer(tabular_store, parameter_sink, rng=random.Random(1234), name="test-tabular")


@pytest.fixture
def hysteresis_factory(orientation_source, event_sink):
    """Builds hysteresis samplers over the shared fakes."""
    def build(yaw_threshold: float = 1.0, roll_threshold: float = 1.0, **kwargs) -> HysteresisTriggerSampler:
        triggers = [
            AxisTrigger("yaw", "Play_Yaw", yaw_threshold),
            AxisTrigger("roll", "Play_Roll", roll_threshold),
        ]
        kwargs.setdefault("update_interval", POLL)
        return HysteresisTriggerSampler(orientation_source, event_sink, SUBJECT, triggers, **kwargs)
    return build


@pytest.fixture
def make_store():
    """Factory for additional in-memory tabular stores."""
    return InMemoryTabularStore
