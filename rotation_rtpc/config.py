"""
Configuration for the rotation samplers.

Configurations are dataclasses that round-trip through JSON files::

    {
      "update_interval": 0.1,
      "carry_remainder": false,
      "shortest_path_deltas": false,
      "hysteresis": {
        "triggers": [{"axis": "yaw", "threshold": 1.0, "event": "Play_Turn_Yaw"}]
      },
      "parametric": {
        "windows": {
          "yaw": [{"event": "Play_Whoosh", "min_rotation": 5, "max_rotation": 90,
                   "min_speed": 50, "max_speed": 900, "tabular_source": "whoosh.csv"}]
        },
        "rtpc_channels": [{"parameter": "Heading", "axis": "yaw",
                           "min_value": -3600, "max_value": 3600}],
        "panorama_channels": [{"left_right": "Pan_LR", "up_down": "Pan_UD"}]
      }
    }

All validation happens while the configuration is built; a configuration
that loads is safe to hand to the samplers.
"""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging
import math

from . import constants as const
from .channels import PanoramaChannel, RtpcChannel
from .exceptions import ConfigurationError
from .hysteresis import AxisTrigger
from .orientation import Axis, parse_flag, parse_number
from .windows import TriggerWindow

logger = logging.getLogger(__name__)


@dataclass
class HysteresisConfig:
    """Axis triggers of a `HysteresisTriggerSampler`."""
    triggers: List[AxisTrigger] = field(default_factory=list)


@dataclass
class ParametricConfig:
    """Windows and channels of a `ParametricMappingSampler`."""
    windows: Dict[Axis, List[TriggerWindow]] = field(default_factory=dict)
    rtpc_channels: List[RtpcChannel] = field(default_factory=list)
    panorama_channels: List[PanoramaChannel] = field(default_factory=list)

    def tabular_sources(self) -> List[str]:
        """Distinct tabular sources referenced by the windows, in config order."""
        sources: List[str] = []
        for axis_windows in self.windows.values():
            for window in axis_windows:
                if window.tabular_source and window.tabular_source not in sources:
                    sources.append(window.tabular_source)
        return sources


@dataclass
class RotationConfig:
    """Shared cadence settings plus the optional sampler sections."""
    update_interval: float = const.DEFAULT_UPDATE_INTERVAL
    carry_remainder: bool = False
    shortest_path_deltas: bool = False
    hysteresis: Optional[HysteresisConfig] = None
    parametric: Optional[ParametricConfig] = None

    def __post_init__(self):
        self.update_interval = parse_number(self.update_interval, "update_interval")
        if not self.update_interval > 0:
            raise ConfigurationError(
                f"Invalid update_interval: {self.update_interval}. Must be a positive number."
            )


def _build(cls, entry: Any, what: str):
    """Instantiates a config dataclass from a JSON object, reporting bad keys."""
    if not isinstance(entry, dict):
        raise ConfigurationError(f"{what} must be an object, got {type(entry).__name__}.")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(entry) - known)
    if unknown:
        raise ConfigurationError(f"{what} has unknown keys: {', '.join(unknown)}.")
    try:
        return cls(**entry)
    except TypeError as exc:
        raise ConfigurationError(f"{what} is incomplete: {exc}") from exc


def _window_from_dict(entry: Any, what: str) -> TriggerWindow:
    if isinstance(entry, dict):
        # JSON has no infinity; a null bound means unbounded
        entry = dict(entry)
        for key, default in (("max_rotation", math.inf), ("max_speed", math.inf)):
            if key in entry and entry[key] is None:
                entry[key] = default
    return _build(TriggerWindow, entry, what)


def config_from_dict(data: Dict[str, Any]) -> RotationConfig:
    """
    Builds a `RotationConfig` from plain JSON-compatible data.

    Raises:
        ConfigurationError: On unknown keys, missing fields or invalid values.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration root must be an object.")
    data = dict(data)

    hysteresis = None
    hysteresis_data = data.pop("hysteresis", None)
    if hysteresis_data is not None:
        if not isinstance(hysteresis_data, dict):
            raise ConfigurationError("hysteresis section must be an object.")
        triggers = [
            _build(AxisTrigger, entry, f"hysteresis trigger #{index}")
            for index, entry in enumerate(hysteresis_data.get("triggers", []))
        ]
        hysteresis = HysteresisConfig(triggers=triggers)

    parametric = None
    parametric_data = data.pop("parametric", None)
    if parametric_data is not None:
        if not isinstance(parametric_data, dict):
            raise ConfigurationError("parametric section must be an object.")
        windows: Dict[Axis, List[TriggerWindow]] = {}
        for axis_name, entries in parametric_data.get("windows", {}).items():
            axis = Axis.parse(axis_name)
            windows[axis] = [
                _window_from_dict(entry, f"{axis.value} window #{index}")
                for index, entry in enumerate(entries)
            ]
        rtpc_channels = [
            _build(RtpcChannel, entry, f"RTPC channel #{index}")
            for index, entry in enumerate(parametric_data.get("rtpc_channels", []))
        ]
        panorama_channels = [
            _build(PanoramaChannel, entry, f"panorama channel #{index}")
            for index, entry in enumerate(parametric_data.get("panorama_channels", []))
        ]
        parametric = ParametricConfig(windows, rtpc_channels, panorama_channels)

    unknown = sorted(set(data) - {"update_interval", "carry_remainder", "shortest_path_deltas"})
    if unknown:
        raise ConfigurationError(f"Configuration has unknown keys: {', '.join(unknown)}.")

    return RotationConfig(
        update_interval=data.get("update_interval", const.DEFAULT_UPDATE_INTERVAL),
        carry_remainder=parse_flag(data.get("carry_remainder", False), "carry_remainder"),
        shortest_path_deltas=parse_flag(data.get("shortest_path_deltas", False), "shortest_path_deltas"),
        hysteresis=hysteresis,
        parametric=parametric,
    )


def _bound(value: float) -> Optional[float]:
    return None if math.isinf(value) else value


def config_to_dict(config: RotationConfig) -> Dict[str, Any]:
    """Converts a `RotationConfig` into JSON-compatible data."""
    data: Dict[str, Any] = {
        "update_interval": config.update_interval,
        "carry_remainder": config.carry_remainder,
        "shortest_path_deltas": config.shortest_path_deltas,
    }
    if config.hysteresis is not None:
        data["hysteresis"] = {
            "triggers": [
                {"axis": t.axis.value, "event": t.event, "threshold": t.threshold}
                for t in config.hysteresis.triggers
            ]
        }
    if config.parametric is not None:
        section = config.parametric
        data["parametric"] = {
            "windows": {
                axis.value: [
                    {
                        "event": w.event,
                        "min_rotation": w.min_rotation,
                        "max_rotation": _bound(w.max_rotation),
                        "min_speed": w.min_speed,
                        "max_speed": _bound(w.max_speed),
                        "tabular_source": w.tabular_source,
                    }
                    for w in axis_windows
                ]
                for axis, axis_windows in section.windows.items()
            },
            "rtpc_channels": [
                {
                    "parameter": c.parameter,
                    "axis": c.axis.value,
                    "min_value": c.min_value,
                    "max_value": c.max_value,
                    "clamp": c.clamp,
                }
                for c in section.rtpc_channels
            ],
            "panorama_channels": [
                {
                    "left_right": p.left_right,
                    "front_back": p.front_back,
                    "up_down": p.up_down,
                    "min_pan": p.min_pan,
                    "max_pan": p.max_pan,
                    "clamp": p.clamp,
                }
                for p in section.panorama_channels
            ],
        }
    return data


def load_config(path: Union[str, Path]) -> RotationConfig:
    """
    Loads a configuration file.

    Raises:
        ConfigurationError: If the file is missing, not valid JSON or invalid.
    """
    config_file = Path(path)
    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_file}")
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Configuration file {config_file} is not valid JSON: {exc}") from exc

    config = config_from_dict(data)
    logger.info(f"Loaded rotation configuration from {config_file}")
    return config


def save_config(config: RotationConfig, path: Union[str, Path]) -> Path:
    """Writes `config` as JSON and returns the file path."""
    config_file = Path(path)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w", encoding="utf-8") as f:
        json.dump(config_to_dict(config), f, indent=2)
    logger.info(f"Saved rotation configuration to {config_file}")
    return config_file
