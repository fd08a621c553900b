"""Pause signal subscription used when ``writeOnPause`` is enabled.

The dispatcher only needs "an event that requests an immediate flush", so
the host lifecycle is modelled as a PauseSignal: anything that accepts a
callback and returns a cancellable Subscription.

Provided signals:
- LocalPauseSignal: in-process emitter; the host calls emit() when it is
  about to be suspended.
- PosixPauseSignal: binds a POSIX signal (SIGUSR1 by default) on the running
  asyncio loop.
"""

import asyncio
import logging
import signal
from typing import Callable, List, Optional, Protocol


logger = logging.getLogger(__name__)

PauseCallback = Callable[[], None]


class Subscription(Protocol):
    def cancel(self) -> None:
        ...


class PauseSignal(Protocol):
    def subscribe(self, callback: PauseCallback) -> Subscription:
        ...


class _CallbackSubscription:
    def __init__(self, on_cancel: Callable[[], None]) -> None:
        self._on_cancel: Optional[Callable[[], None]] = on_cancel

    def cancel(self) -> None:
        if self._on_cancel is not None:
            on_cancel, self._on_cancel = self._on_cancel, None
            on_cancel()


class LocalPauseSignal:
    """In-process pause signal."""

    def __init__(self) -> None:
        self._callbacks: List[PauseCallback] = []

    def subscribe(self, callback: PauseCallback) -> Subscription:
        self._callbacks.append(callback)
        return _CallbackSubscription(lambda: self._discard(callback))

    def emit(self) -> None:
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception:
                logger.exception("[PAUSE] Pause callback failed")

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def _discard(self, callback: PauseCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)


class PosixPauseSignal:
    """Pause signal driven by a POSIX signal on an asyncio loop.

    Only one callback can be bound per signal number; subscribing again
    replaces the previous handler.
    """

    def __init__(
        self,
        signum: Optional[int] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.signum = signum if signum is not None else signal.SIGUSR1
        self._loop = loop

    def subscribe(self, callback: PauseCallback) -> Subscription:
        loop = self._loop or asyncio.get_running_loop()
        loop.add_signal_handler(self.signum, callback)
        return _CallbackSubscription(lambda: loop.remove_signal_handler(self.signum))


class PauseHook:
    """Subscribes ``on_pause`` to a PauseSignal while enabled."""

    def __init__(self, pause_signal: PauseSignal, on_pause: PauseCallback) -> None:
        self.pause_signal = pause_signal
        self.on_pause = on_pause
        self._subscription: Optional[Subscription] = None

    @property
    def enabled(self) -> bool:
        return self._subscription is not None

    def enable(self) -> None:
        if self._subscription is None:
            self._subscription = self.pause_signal.subscribe(self._fire)

    def disable(self) -> None:
        if self._subscription is not None:
            subscription, self._subscription = self._subscription, None
            subscription.cancel()

    def _fire(self) -> None:
        self.on_pause()
