"""Tests for LogBuffer ordering, drain and restore."""
from core.buffer.log_buffer import LogBuffer
from runtime.models.log_models import LogEntry, LogLevel


def _entry(message):
    return LogEntry(timestamp="2024-01-01T00:00:00.000Z", level=LogLevel.LOG, message=message)


def _messages(buffer):
    return [entry.message for entry in buffer]


class TestLogBuffer:
    def test_preserves_insertion_order(self):
        buffer = LogBuffer()
        for message in ("a", "b", "c"):
            buffer.append(_entry(message))

        assert len(buffer) == 3
        assert _messages(buffer) == ["a", "b", "c"]

    def test_drain_empties_buffer(self):
        buffer = LogBuffer()
        buffer.append(_entry("a"))
        buffer.append(_entry("b"))

        drained = buffer.drain()

        assert [e.message for e in drained] == ["a", "b"]
        assert len(buffer) == 0
        assert not buffer

    def test_restore_goes_in_front_of_newer_entries(self):
        buffer = LogBuffer()
        buffer.append(_entry("a"))
        buffer.append(_entry("b"))
        drained = buffer.drain()

        buffer.append(_entry("c"))
        buffer.restore(drained)

        assert _messages(buffer) == ["a", "b", "c"]

    def test_restore_empty_is_a_no_op(self):
        buffer = LogBuffer()
        buffer.append(_entry("a"))

        buffer.restore([])

        assert _messages(buffer) == ["a"]

    def test_snapshot_and_clear(self):
        buffer = LogBuffer()
        buffer.append(_entry("a"))

        snapshot = buffer.snapshot()
        buffer.clear()

        assert [e.message for e in snapshot] == ["a"]
        assert len(buffer) == 0
