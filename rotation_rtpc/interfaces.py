"""
Collaborator interfaces consumed by the samplers.

The samplers never talk to a scene graph, an audio engine or the file system
directly. Hosts provide objects satisfying these protocols; `sinks.py` holds
logging and recording implementations and `FileTabularDataStore` resolves
tabular data files below an assets root.
"""
from pathlib import Path
from typing import Any, Hashable, List, Optional, Protocol, Union, runtime_checkable
import logging

from .exceptions import DataSourceNotFoundError
from .orientation import OrientationSample

logger = logging.getLogger(__name__)

EventRef = Hashable
ParameterRef = Hashable


@runtime_checkable
class OrientationSource(Protocol):
    """Exposes the current orientation of a tracked object. Polled, not pushed."""

    def orientation(self) -> Optional[OrientationSample]:
        """Returns the current sample, or None when the object is gone."""
        ...


@runtime_checkable
class EventSink(Protocol):
    """Fire-and-forget trigger events of the audio engine."""

    def post(self, event: EventRef, subject: Any) -> None:
        ...

    def stop(self, event: EventRef, subject: Any) -> None:
        ...


@runtime_checkable
class ParameterSink(Protocol):
    """Continuous per-subject parameters (RTPCs) of the audio engine."""

    def set_value(self, parameter: ParameterRef, subject: Any, value: float) -> None:
        ...


@runtime_checkable
class GlobalParameterSink(Protocol):
    """Name-addressed global parameters, used by the tabular randomizer."""

    def set_global_value(self, name: str, value: float) -> None:
        ...


@runtime_checkable
class TabularDataStore(Protocol):
    """Read-only access to tabular data sources addressed by logical name."""

    def exists(self, name: str) -> bool:
        ...

    def read_lines(self, name: str) -> List[str]:
        ...


class FileTabularDataStore:
    """
    Tabular data store backed by text files below an assets root directory.

    Logical names are resolved relative to `assets_root`; a name that escapes
    the root (absolute path or `..` traversal) is treated as missing.
    """

    def __init__(self, assets_root: Union[str, Path], encoding: str = "utf-8"):
        """
        Args:
            assets_root: Directory that logical file names are resolved against.
            encoding: Text encoding of the data files.
        """
        self.assets_root = Path(assets_root)
        self.encoding = encoding

    def resolve(self, name: str) -> Path:
        """Returns the absolute path a logical name refers to."""
        return (self.assets_root / name).resolve()

    def _is_inside_root(self, path: Path) -> bool:
        root = self.assets_root.resolve()
        return path == root or root in path.parents

    def exists(self, name: str) -> bool:
        if not name:
            return False
        path = self.resolve(name)
        if not self._is_inside_root(path):
            logger.warning(f"Tabular source '{name}' resolves outside assets root {self.assets_root}.")
            return False
        return path.is_file()

    def read_lines(self, name: str) -> List[str]:
        """
        Reads the whole source and returns its lines without line endings.

        Raises:
            DataSourceNotFoundError: If the source does not exist.
        """
        if not self.exists(name):
            raise DataSourceNotFoundError(
                f"Tabular source not found at path: {self.resolve(name) if name else name}",
                source=name,
            )
        with open(self.resolve(name), "r", encoding=self.encoding) as f:
            return f.read().splitlines()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(assets_root={str(self.assets_root)!r})"
