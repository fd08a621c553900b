"""Tests for the pause signal subscription and pause-triggered flushes."""
import asyncio
import logging
import signal
import sys
from unittest.mock import MagicMock

import pytest

from core.diagnostics.diagnostic_sink import DiagnosticSink
from core.dispatcher.log_dispatcher import LogDispatcher
from core.writer.rotating_writer import RotatingWriter
from runtime.lifecycle.pause_hook import LocalPauseSignal, PauseHook, PosixPauseSignal
from runtime.models.config_models import LogConfig
from runtime.models.log_models import WriterState


def _dispatcher(store, pause_signal, **options):
    config = LogConfig()
    config.update(options)
    return LogDispatcher(
        RotatingWriter(store),
        config=config,
        diagnostics=DiagnosticSink(interval=0),
        pause_signal=pause_signal,
    )


class TestPauseHook:
    def test_enable_and_disable(self):
        pause_signal = LocalPauseSignal()
        on_pause = MagicMock()
        hook = PauseHook(pause_signal, on_pause)

        hook.enable()
        hook.enable()
        assert hook.enabled
        assert pause_signal.subscriber_count == 1

        pause_signal.emit()
        on_pause.assert_called_once()

        hook.disable()
        assert not hook.enabled
        assert pause_signal.subscriber_count == 0

        pause_signal.emit()
        on_pause.assert_called_once()

    def test_failing_callback_does_not_break_emit(self):
        pause_signal = LocalPauseSignal()
        other = MagicMock()
        pause_signal.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        pause_signal.subscribe(other)

        pause_signal.emit()

        other.assert_called_once()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
    def test_posix_signal_binds_to_running_loop(self):
        loop = MagicMock()
        pause_signal = PosixPauseSignal(loop=loop)
        callback = MagicMock()

        subscription = pause_signal.subscribe(callback)
        loop.add_signal_handler.assert_called_once_with(signal.SIGUSR1, callback)

        subscription.cancel()
        subscription.cancel()
        loop.remove_signal_handler.assert_called_once_with(signal.SIGUSR1)


class TestWriteOnPause:
    def test_disabled_by_default(self, memory_store):
        pause_signal = LocalPauseSignal()

        dispatcher = _dispatcher(memory_store, pause_signal)

        assert pause_signal.subscriber_count == 0
        assert not dispatcher.pause_hook.enabled

    def test_set_config_toggles_subscription(self, memory_store):
        pause_signal = LocalPauseSignal()
        dispatcher = _dispatcher(memory_store, pause_signal)

        dispatcher.set_config({"writeOnPause": True})
        assert pause_signal.subscriber_count == 1

        dispatcher.set_config({"writeOnPause": False})
        assert pause_signal.subscriber_count == 0

    def test_pause_flushes_below_event_buffer(self, memory_store):
        pause_signal = LocalPauseSignal()

        async def scenario():
            dispatcher = _dispatcher(memory_store, pause_signal, writeOnPause=True, eventBuffer=100)
            await dispatcher.writer.start("dataDirectory")
            dispatcher.log("before pause")
            pause_signal.emit()
            assert dispatcher.state is WriterState.FLUSHING
            return dispatcher, await dispatcher.pending_flush()

        dispatcher, result = asyncio.run(scenario())

        assert result.ok
        content = memory_store.files["log.0"]
        assert "before pause" in content
        assert "App pausing" in content
        assert len(dispatcher.buffer) == 0

    def test_pause_rejected_while_flushing(self, memory_store):
        pause_signal = LocalPauseSignal()

        async def scenario():
            dispatcher = _dispatcher(memory_store, pause_signal, writeOnPause=True)
            await dispatcher.writer.start("dataDirectory")
            memory_store.block("write")
            dispatcher.error("boom")
            await memory_store.wait_until_blocked("write")
            pause_signal.emit()
            memory_store.release("write")
            await dispatcher.pending_flush()
            return dispatcher

        dispatcher = asyncio.run(scenario())

        assert memory_store.calls.count("write") == 1
        assert [e.message for e in dispatcher.buffer] == ["App pausing"]

    def test_pause_ignored_while_degraded(self, memory_store):
        pause_signal = LocalPauseSignal()

        async def scenario():
            dispatcher = _dispatcher(memory_store, pause_signal, writeOnPause=True)
            pause_signal.emit()
            await asyncio.sleep(0)
            return dispatcher

        dispatcher = asyncio.run(scenario())

        assert dispatcher._flush_task is None
        assert memory_store.calls == []

    def test_close_unsubscribes(self, memory_store):
        pause_signal = LocalPauseSignal()

        async def scenario():
            dispatcher = _dispatcher(memory_store, pause_signal, writeOnPause=True)
            await dispatcher.close()

        asyncio.run(scenario())

        assert pause_signal.subscriber_count == 0


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
class TestSubscriptionRetry:
    def test_set_config_resubscribes_after_failure_outside_loop(self, memory_store):
        dispatcher = _dispatcher(memory_store, PosixPauseSignal(), writeOnPause=True)
        assert not dispatcher.pause_hook.enabled

        async def scenario():
            dispatcher.set_config({"writeOnPause": True})
            enabled = dispatcher.pause_hook.enabled
            await dispatcher.close()
            return enabled

        assert asyncio.run(scenario()) is True
        assert not dispatcher.pause_hook.enabled

    def test_start_resubscribes_after_failure_outside_loop(self, memory_store):
        dispatcher = _dispatcher(memory_store, PosixPauseSignal(), writeOnPause=True)
        assert not dispatcher.pause_hook.enabled

        async def scenario():
            await dispatcher.start()
            enabled = dispatcher.pause_hook.enabled
            await dispatcher.close()
            return enabled

        assert asyncio.run(scenario()) is True


class TestPauseCrossingThreshold:
    def test_pause_entry_that_triggers_flush_is_not_reported_as_rejected(self, memory_store, caplog):
        pause_signal = LocalPauseSignal()

        async def scenario():
            dispatcher = _dispatcher(memory_store, pause_signal, writeOnPause=True, eventBuffer=1)
            await dispatcher.writer.start("dataDirectory")
            dispatcher.log("a")
            pause_signal.emit()
            return await dispatcher.pending_flush()

        with caplog.at_level(logging.DEBUG, logger="core.dispatcher.log_dispatcher"):
            result = asyncio.run(scenario())

        assert result.ok
        assert memory_store.calls.count("write") == 1
        assert "App pausing" in memory_store.files["log.0"]
        assert not [r for r in caplog.records if "rejected" in r.getMessage()]
