"""Unit tests for the ready-made sinks and the file-backed tabular store."""
import logging

import pytest

from rotation_rtpc.exceptions import DataSourceNotFoundError
from rotation_rtpc.interfaces import (
    EventSink,
    FileTabularDataStore,
    GlobalParameterSink,
    ParameterSink,
    TabularDataStore,
)
from rotation_rtpc.sinks import (
    LoggingEventSink,
    LoggingParameterSink,
    RecordingEventSink,
    RecordingParameterSink,
)


@pytest.fixture
def assets(tmp_path):
    (tmp_path / "music.csv").write_text(
        "Music,MasterVolume,5.000000,-1.0,1.0\r\nMusic,Muted,0.000000,-1.0,1.0\n", encoding="utf-8"
    )
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "sfx.csv").write_text("Sfx,Pitch,1.5,-0.5,0.5", encoding="utf-8")
    return tmp_path


class TestFileTabularDataStore:

    def test_exists(self, assets):
        store = FileTabularDataStore(assets)
        assert store.exists("music.csv")
        assert store.exists("sub/sfx.csv")
        assert not store.exists("missing.csv")
        assert not store.exists("")
        # directories are not sources
        assert not store.exists("sub")

    def test_read_lines_strips_line_endings(self, assets):
        lines = FileTabularDataStore(assets).read_lines("music.csv")
        assert lines == ["Music,MasterVolume,5.000000,-1.0,1.0", "Music,Muted,0.000000,-1.0,1.0"]

    def test_missing_source(self, assets):
        with pytest.raises(DataSourceNotFoundError) as exc_info:
            FileTabularDataStore(assets).read_lines("missing.csv")
        assert exc_info.value.source == "missing.csv"

    def test_names_outside_root_are_missing(self, assets, caplog):
        store = FileTabularDataStore(assets / "sub")
        with caplog.at_level(logging.WARNING):
            assert not store.exists("../music.csv")
        assert "outside assets root" in caplog.text
        with pytest.raises(DataSourceNotFoundError):
            store.read_lines("../music.csv")

    def test_satisfies_protocol(self, assets):
        assert isinstance(FileTabularDataStore(assets), TabularDataStore)


class TestSinks:

    def test_logging_event_sink(self, caplog):
        sink = LoggingEventSink()
        with caplog.at_level(logging.INFO, logger="rotation_rtpc.sinks"):
            sink.post("Play_Yaw", "subject-1")
            sink.stop("Play_Yaw", "subject-1")
        assert "post event='Play_Yaw'" in caplog.text
        assert "stop event='Play_Yaw'" in caplog.text

    def test_logging_parameter_sink(self, caplog):
        sink = LoggingParameterSink()
        with caplog.at_level(logging.DEBUG, logger="rotation_rtpc.sinks"):
            sink.set_value("Heading", "subject-1", 0.5)
            sink.set_global_value("MasterVolume", 4.25)
        assert "set 'Heading'=0.500000" in caplog.text
        assert "set global 'MasterVolume'=4.250000" in caplog.text

    def test_recording_sinks(self):
        events = RecordingEventSink()
        events.post("A", "s")
        events.stop("A", "s")
        assert events.actions() == [("post", "A"), ("stop", "A")]
        events.clear()
        assert events.calls == []

        parameters = RecordingParameterSink()
        parameters.set_value("Heading", "s", 1.0)
        parameters.set_value("Heading", "s", 2.0)
        parameters.set_global_value("MasterVolume", 3.0)
        assert parameters.values_for("Heading") == [1.0, 2.0]
        assert parameters.last_value("MasterVolume") == 3.0
        assert parameters.last_value("Unknown") is None
        assert parameters.calls[-1].subject is None

    @pytest.mark.parametrize(
        "sink, protocol",
        [
            (LoggingEventSink(), EventSink),
            (RecordingEventSink(), EventSink),
            (LoggingParameterSink(), ParameterSink),
            (LoggingParameterSink(), GlobalParameterSink),
            (RecordingParameterSink(), ParameterSink),
            (RecordingParameterSink(), GlobalParameterSink),
        ],
    )
    def test_sinks_satisfy_protocols(self, sink, protocol):
        assert isinstance(sink, protocol)
