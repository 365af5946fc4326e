"""Unit tests for the tabular randomization pipeline.

These tests cover row parsing, the six-decimal randomization and the
asynchronous `TabularRandomizer` loads, using an in-memory store.
"""
# Loads run on the test's event loop. The in-memory store is read through
# `run_in_executor` exactly as a file store would be.

import asyncio
import logging
import random

import pytest

from rotation_rtpc import constants as const
from rotation_rtpc.exceptions import TabularFormatError
from rotation_rtpc.tabular import (
    TabularRandomizer,
    TabularRow,
    parse_decimal,
    parse_row,
    randomize_value,
)


class TestParseDecimal:

    @pytest.mark.parametrize(
        "text, expected",
        [("5.000000", 5.0), ("-1.0", -1.0), (" 2.5 ", 2.5), (".5", 0.5), ("1e3", 1000.0), ("+3", 3.0)],
    )
    def test_valid(self, text, expected):
        assert parse_decimal(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "1,5", "nan", "inf", "1_000", "--1"])
    def test_invalid(self, text):
        assert parse_decimal(text) is None


class TestParseRow:

    def test_value_row(self):
        row = parse_row("Music,MasterVolume,5.000000,-1.0,1.0")
        assert row == TabularRow("Music", "MasterVolume", 5.0, -1.0, 1.0, has_value=True)

    def test_zero_literal_is_stored_not_forwarded(self):
        row = parse_row("Music,MasterVolume,0.000000,-1.0,1.0")
        assert row.value == 0.0
        assert row.has_value is False

    def test_fields_are_trimmed(self):
        row = parse_row(" Music , MasterVolume , 0.000000 , -1.0 , 1.0 ")
        assert row.category == "Music"
        assert row.parameter == "MasterVolume"
        assert row.has_value is False

    def test_other_zero_spellings_are_forwarded(self):
        assert parse_row("Music,MasterVolume,0.0,-1.0,1.0").has_value is True

    def test_unparsable_value_keeps_row(self, caplog):
        with caplog.at_level(logging.WARNING):
            row = parse_row("Music,MasterVolume,loud,-1.0,1.0")
        assert row.value == 0.0
        assert row.has_value is False
        assert "Failed to parse value" in caplog.text

    @pytest.mark.parametrize("line", ["a,b,c", "", "a,b,1,2,3,4"])
    def test_wrong_field_count(self, line):
        with pytest.raises(TabularFormatError, match="Row format is incorrect"):
            parse_row(line)

    def test_bad_offsets(self):
        with pytest.raises(TabularFormatError, match="offsets") as exc_info:
            parse_row("Music,MasterVolume,1.0,low,1.0", source="music.csv")
        assert exc_info.value.row == "Music,MasterVolume,1.0,low,1.0"
        assert "music.csv" in str(exc_info.value)


class TestRandomizeValue:

    def test_within_offsets(self):
        rng = random.Random(3)
        row = TabularRow("Music", "MasterVolume", 5.0, -1.0, 1.0, has_value=True)
        for _ in range(200):
            assert 4.0 <= randomize_value(row, rng) <= 6.0

    def test_six_decimal_precision(self):
        rng = random.Random(11)
        row = TabularRow("Sfx", "Pitch", 0.123456789, 0.0, 0.001, has_value=True)
        value = randomize_value(row, rng)
        assert value == round(value, const.TABULAR_VALUE_PRECISION)

    def test_zero_width_range(self):
        row = TabularRow("Sfx", "Pitch", 2.5, 0.0, 0.0, has_value=True)
        assert randomize_value(row, random.Random(0)) == 2.5


class TestTabularRandomizer:

    @pytest.mark.asyncio
    async def test_load_forwards_values(self, randomizer, parameter_sink):
        report = await randomizer.load("music.csv")

        assert report.found
        assert report.rows_loaded == 2
        assert report.rows_rejected == 0
        # Only MasterVolume is sent; the 0.000000 row is stored only.
        assert [name for name, _ in report.forwarded] == ["MasterVolume"]
        assert [call.target for call in parameter_sink.calls] == ["MasterVolume"]
        assert parameter_sink.calls[0].action == "set_global"
        assert 4.0 <= parameter_sink.calls[0].value <= 6.0
        assert [row.parameter for row in randomizer.rows] == ["MasterVolume", "Muted"]

    @pytest.mark.asyncio
    async def test_zero_row_never_reaches_sink(self, make_store, parameter_sink):
        store = make_store({"zero.csv": ["Music,MasterVolume,0.000000,-1.0,1.0"]})
        randomizer = TabularRandomizer(store, parameter_sink)
        report = await randomizer.load("zero.csv")
        assert report.rows_loaded == 1
        assert randomizer.rows[0].value == 0.0
        assert parameter_sink.calls == []

    @pytest.mark.asyncio
    async def test_malformed_rows_are_skipped(self, make_store, parameter_sink, caplog):
        store = make_store({
            "mixed.csv": ["a,b,c", "Music,MasterVolume,5.000000,-1.0,1.0", "x,y,1.0,bad,1.0"],
        })
        randomizer = TabularRandomizer(store, parameter_sink)
        with caplog.at_level(logging.WARNING):
            report = await randomizer.load("mixed.csv")

        assert report.rows_rejected == 2
        assert report.rows_loaded == 1
        assert parameter_sink.values_for("MasterVolume")
        assert "Row format is incorrect" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_source_is_reported(self, randomizer, parameter_sink, caplog):
        await randomizer.load("music.csv")
        rows_before = list(randomizer.rows)
        parameter_sink.clear()

        report = await randomizer.load("missing.csv")

        assert report.found is False
        assert randomizer.rows == rows_before
        assert parameter_sink.calls == []
        assert "not found" in caplog.text

    @pytest.mark.asyncio
    async def test_each_load_replaces_rows(self, randomizer):
        await randomizer.load("music.csv")
        await randomizer.load("sfx.csv")
        assert [row.parameter for row in randomizer.rows] == ["Pitch"]

    @pytest.mark.asyncio
    async def test_requested_loads_are_serialized(self, randomizer, tabular_store):
        first = randomizer.request_load("music.csv")
        second = randomizer.request_load("sfx.csv")
        assert randomizer.pending_loads == 2

        await randomizer.wait_for_loads()

        assert first.result().rows_loaded == 2
        assert second.result().rows_loaded == 1
        assert tabular_store.reads == ["music.csv", "sfx.csv"]
        # The later load wins and nothing from the first one is mixed in.
        assert [row.parameter for row in randomizer.rows] == ["Pitch"]
        assert randomizer.pending_loads == 0

    @pytest.mark.asyncio
    async def test_close_cancels_pending_loads(self, randomizer, parameter_sink):
        randomizer.request_load("music.csv")
        await randomizer.close()
        assert randomizer.pending_loads == 0
        assert randomizer.rows == []

    @pytest.mark.asyncio
    async def test_sink_failure_is_logged_not_raised(self, tabular_store, caplog):
        class FailingSink:
            def set_global_value(self, name, value):
                raise RuntimeError("engine offline")

        randomizer = TabularRandomizer(tabular_store, FailingSink())
        randomizer.request_load("music.csv")
        await randomizer.wait_for_loads()
        assert "tabular load failed" in caplog.text

    def test_request_without_loop_is_dropped(self, randomizer, caplog):
        assert randomizer.request_load("music.csv") is None
        assert "no running event loop" in caplog.text

    @pytest.mark.asyncio
    async def test_request_on_explicit_loop(self, randomizer):
        loop = asyncio.get_running_loop()
        task = randomizer.request_load("sfx.csv", loop=loop)
        report = await task
        assert report.forwarded[0][0] == "Pitch"
        assert 1.0 <= report.forwarded[0][1] <= 2.0

    def test_reusable_after_close_on_another_loop(self, randomizer, tabular_store):
        async def contended_loads():
            randomizer.request_load("music.csv")
            randomizer.request_load("sfx.csv")
            await randomizer.wait_for_loads()
            await randomizer.close()

        asyncio.run(contended_loads())
        asyncio.run(contended_loads())

        assert tabular_store.reads == ["music.csv", "sfx.csv", "music.csv", "sfx.csv"]
