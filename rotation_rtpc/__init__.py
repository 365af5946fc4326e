"""
Rotation RTPC Library
=====================

This library turns a stream of orientation samples of a moving object into
trigger events and continuous parameter values for an audio engine. It
includes a hysteresis start/stop sampler, a window-matching sampler with
RTPC and panorama mapping, and a tabular randomization pipeline.
"""

# Import the constants module and alias it as 'const' for patterned access
from . import constants as const

from .orientation import (
    Axis,
    OrientationSample,
    wrap_angle,
    absolute_delta,
    shortest_angle_delta,
    compute_deltas,
    rotation_speed,
)
from .mapping import lerp, inverse_lerp, map_range, map_rotation, map_panorama
from .polling import PollAccumulator, PollResult, TriggerEmission
from .base_sampler import RotationSampler
from .hysteresis import AxisLatch, AxisTrigger, HysteresisTriggerSampler
from .windows import TriggerWindow, window_matches, matching_windows
from .channels import RtpcChannel, PanoramaChannel
from .tabular import (
    TabularRow,
    LoadReport,
    TabularRandomizer,
    parse_row,
    randomize_value,
)
from .parametric import ParametricMappingSampler
from .interfaces import (
    OrientationSource,
    EventSink,
    ParameterSink,
    GlobalParameterSink,
    TabularDataStore,
    FileTabularDataStore,
)
from .sinks import (
    LoggingEventSink,
    LoggingParameterSink,
    RecordingEventSink,
    RecordingParameterSink,
)
from .config import (
    RotationConfig,
    HysteresisConfig,
    ParametricConfig,
    config_from_dict,
    config_to_dict,
    load_config,
    save_config,
)
from .exceptions import (
    RotationRtpcError,
    ConfigurationError,
    MappingError,
    TabularDataError,
    TabularFormatError,
    DataSourceNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "const",

    # Orientation
    "Axis",
    "OrientationSample",
    "wrap_angle",
    "absolute_delta",
    "shortest_angle_delta",
    "compute_deltas",
    "rotation_speed",

    # Mapping
    "lerp",
    "inverse_lerp",
    "map_range",
    "map_rotation",
    "map_panorama",

    # Samplers
    "PollAccumulator",
    "PollResult",
    "TriggerEmission",
    "RotationSampler",
    "AxisLatch",
    "AxisTrigger",
    "HysteresisTriggerSampler",
    "TriggerWindow",
    "window_matches",
    "matching_windows",
    "RtpcChannel",
    "PanoramaChannel",
    "ParametricMappingSampler",

    # Tabular randomization
    "TabularRow",
    "LoadReport",
    "TabularRandomizer",
    "parse_row",
    "randomize_value",

    # Collaborators
    "OrientationSource",
    "EventSink",
    "ParameterSink",
    "GlobalParameterSink",
    "TabularDataStore",
    "FileTabularDataStore",
    "LoggingEventSink",
    "LoggingParameterSink",
    "RecordingEventSink",
    "RecordingParameterSink",

    # Configuration
    "RotationConfig",
    "HysteresisConfig",
    "ParametricConfig",
    "config_from_dict",
    "config_to_dict",
    "load_config",
    "save_config",

    # Exceptions
    "RotationRtpcError",
    "ConfigurationError",
    "MappingError",
    "TabularDataError",
    "TabularFormatError",
    "DataSourceNotFoundError",
]
