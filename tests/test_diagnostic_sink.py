"""Tests for the rate-limited DiagnosticSink."""
import logging

from core.diagnostics.diagnostic_sink import DiagnosticSink


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestDiagnosticSink:
    def test_rate_limits_and_counts_suppressed(self, caplog):
        clock = FakeClock()
        sink = DiagnosticSink(interval=10, clock=clock)

        with caplog.at_level(logging.ERROR, logger="rolling_log.diagnostics"):
            assert sink.report("write failed", OSError("disk")) is True
            assert sink.report("write failed") is False
            assert sink.report("write failed") is False
            clock.now += 10
            assert sink.report("write failed") is True

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "[DIAG] write failed: disk"
        assert messages[1] == "[DIAG] write failed (2 similar failure(s) suppressed)"
        assert sink.suppressed == 0

    def test_zero_interval_emits_everything(self, caplog):
        sink = DiagnosticSink(interval=0)

        with caplog.at_level(logging.ERROR, logger="rolling_log.diagnostics"):
            for _ in range(3):
                sink.report("failed")

        assert len(caplog.records) == 3
