"""
Tabular randomization pipeline.

Tabular sources are comma separated text with five fields per row::

    category,parameter,value,min_offset,max_offset
    Music,MasterVolume,5.000000,-1.0,1.0

Loading a source replaces the stored rows and, for every row with a usable
value, sends `uniform(value + min_offset, value + max_offset)` rounded to six
decimals to the named global parameter. Loads run as asyncio tasks so the
poll cadence never waits on the file system.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple
import asyncio
import logging
import math
import random
import re

from . import constants as const
from .exceptions import DataSourceNotFoundError, TabularDataError, TabularFormatError
from .interfaces import GlobalParameterSink, TabularDataStore

logger = logging.getLogger(__name__)

# Culture-invariant decimal: optional sign, '.' separator, optional exponent
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


@dataclass
class TabularRow:
    """One parsed row of a tabular source."""
    category: str
    parameter: str
    value: float = 0.0
    min_offset: float = 0.0
    max_offset: float = 0.0
    has_value: bool = False  # True when the row is forwarded to the sink


@dataclass
class LoadReport:
    """Outcome of one `TabularRandomizer.load` call."""
    source: str
    found: bool = True
    rows_loaded: int = 0
    rows_rejected: int = 0
    forwarded: List[Tuple[str, float]] = field(default_factory=list)


def parse_decimal(text: str) -> Optional[float]:
    """Parses a culture-invariant decimal number, None when invalid or not finite."""
    text = text.strip()
    if not _DECIMAL_RE.match(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def parse_row(line: str, source: Optional[str] = None) -> TabularRow:
    """
    Parses one line of a tabular source.

    A value field equal to "0.000000" is stored as 0 and not forwarded. Any
    other value that does not parse is logged and the row is stored with a
    value of 0, again without forwarding.

    Raises:
        TabularFormatError: If the line does not have exactly five fields or
                            an offset is not a number.
    """
    columns = line.split(const.TABULAR_DELIMITER)
    if len(columns) != const.TABULAR_FIELD_COUNT:
        raise TabularFormatError(
            f"Row format is incorrect: expected {const.TABULAR_FIELD_COUNT} fields, got {len(columns)}",
            row=line,
            source=source,
        )
    columns = [column.strip() for column in columns]

    min_offset = parse_decimal(columns[const.TABULAR_COL_MIN_OFFSET])
    max_offset = parse_decimal(columns[const.TABULAR_COL_MAX_OFFSET])
    if min_offset is None or max_offset is None:
        raise TabularFormatError("Failed to parse random offsets", row=line, source=source)

    row = TabularRow(
        category=columns[const.TABULAR_COL_CATEGORY],
        parameter=columns[const.TABULAR_COL_PARAMETER],
        min_offset=min_offset,
        max_offset=max_offset,
    )

    value_text = columns[const.TABULAR_COL_VALUE]
    if value_text == const.TABULAR_ZERO_LITERAL:
        row.value = 0.0
        return row

    value = parse_decimal(value_text)
    if value is None:
        logger.warning(f"Failed to parse value: {value_text!r} (source {source})")
        return row

    row.value = value
    row.has_value = True
    return row


def randomize_value(row: TabularRow, rng: Optional[random.Random] = None) -> float:
    """
    Draws a value uniformly from [value + min_offset, value + max_offset].

    The draw is formatted with six decimals and parsed back, limiting the
    precision of what reaches the audio engine.
    """
    rng = rng or random
    drawn = rng.uniform(row.value + row.min_offset, row.value + row.max_offset)
    return float(f"{drawn:.{const.TABULAR_VALUE_PRECISION}f}")


class TabularRandomizer:
    """
    Loads tabular sources and sends randomized values to a global parameter sink.

    Loads of one randomizer are serialized: a load requested while another
    is in flight waits for it and then replaces the rows with its own.
    Between `close()` calls a randomizer belongs to the event loop that runs
    its loads.
    """

    def __init__(
        self,
        store: TabularDataStore,
        sink: GlobalParameterSink,
        rng: Optional[random.Random] = None,
        name: str = "tabular",
    ):
        """
        Args:
            store: Resolves and reads tabular sources by logical name.
            sink: Receives `set_global_value(parameter, value)` per forwarded row.
            rng: Random generator; a fresh `random.Random` when None.
            name: Label used in logs.
        """
        self.store = store
        self.sink = sink
        self.rng = rng or random.Random()
        self.name = name
        self.rows: List[TabularRow] = []
        self._lock: Optional[asyncio.Lock] = None
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending_loads(self) -> int:
        return len(self._pending)

    async def load(self, source: str) -> LoadReport:
        """
        Loads `source`, replaces `rows` and forwards randomized values.

        Missing sources and unreadable files are logged and end the load.
        Malformed rows are logged and skipped; the rest of the load continues.
        """
        if self._lock is None:
            # created lazily so it binds to the loop that runs the loads
            self._lock = asyncio.Lock()
        async with self._lock:
            report = LoadReport(source=source)
            if not self.store.exists(source):
                logger.error(f"'{self.name}': tabular source not found: {source}")
                report.found = False
                return report

            loop = asyncio.get_running_loop()
            try:
                lines = await loop.run_in_executor(None, self.store.read_lines, source)
            except DataSourceNotFoundError as exc:
                logger.error(f"'{self.name}': {exc}")
                report.found = False
                return report
            except (OSError, UnicodeDecodeError, TabularDataError) as exc:
                logger.error(f"'{self.name}': failed to read tabular source {source}: {exc}")
                return report

            self.rows.clear()
            for line in lines:
                try:
                    row = parse_row(line, source=source)
                except TabularFormatError as exc:
                    logger.warning(f"'{self.name}': {exc}")
                    report.rows_rejected += 1
                    continue

                self.rows.append(row)
                report.rows_loaded += 1
                if row.has_value:
                    value = randomize_value(row, self.rng)
                    self.sink.set_global_value(row.parameter, value)
                    report.forwarded.append((row.parameter, value))

            logger.info(
                f"'{self.name}': loaded {source}: {report.rows_loaded} rows, "
                f"{report.rows_rejected} rejected, {len(report.forwarded)} values sent."
            )
            return report

    def request_load(
        self, source: str, loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> Optional[asyncio.Task]:
        """
        Schedules `load(source)` without waiting for it.

        Args:
            source: Logical name of the tabular source.
            loop: Loop to schedule on. Defaults to the running loop.

        Returns:
            The scheduled task, or None when there is no loop to run it on.
        """
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning(f"'{self.name}': no running event loop, dropping load of {source}.")
                return None
        task = loop.create_task(self.load(source))
        self._pending.add(task)
        task.add_done_callback(self._on_load_done)
        return task

    def _on_load_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"'{self.name}': tabular load failed: {exc!r}")

    async def wait_for_loads(self) -> None:
        """Waits until every scheduled load has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """
        Cancels scheduled loads and drops the stored rows.

        The load lock is released too, so a closed randomizer can be reused
        on another event loop.
        """
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self.rows.clear()
        self._lock = None
