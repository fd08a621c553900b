"""
Factory for a ready-to-use rolling logger.

Responsibilities:
- build the LogConfig (defaults -> environment overrides -> caller options)
- construct the shared pieces (LocalFileStore, RotatingWriter,
  DiagnosticSink) from Settings
- return the LogDispatcher that hosts call log/info/error/debug on

Typical use inside an asyncio application:

    rolling = create_rolling_log({"prefix": "app", "eventBuffer": 50})
    await rolling.start()
    rolling.info("ready")
"""

from typing import Any, Mapping, Optional

from configs.settings import Settings, settings as default_settings
from core.diagnostics.diagnostic_sink import DiagnosticSink
from core.dispatcher.log_dispatcher import LogDispatcher
from core.writer.rotating_writer import RotatingWriter

from .lifecycle.pause_hook import LocalPauseSignal, PauseSignal
from .models.config_models import LogConfig
from .store.file_store import FileStore
from .store.local_file_store import LocalFileStore


def build_config(
    options: Optional[Mapping[str, Any]] = None,
    settings: Optional[Settings] = None,
) -> LogConfig:
    """Default config, then environment overrides, then explicit options."""
    settings = settings or default_settings
    config = LogConfig()
    config.update(settings.config_overrides())
    config.update(options)
    return config


def create_rolling_log(
    options: Optional[Mapping[str, Any]] = None,
    *,
    file_store: Optional[FileStore] = None,
    pause_signal: Optional[PauseSignal] = None,
    settings: Optional[Settings] = None,
) -> LogDispatcher:
    """Assemble a LogDispatcher backed by the local filesystem.

    If ``pause_signal`` is omitted, a LocalPauseSignal is created; the host
    can reach it as ``dispatcher.pause_hook.pause_signal`` and call emit().
    """
    settings = settings or default_settings

    config = build_config(options, settings)
    store = file_store or LocalFileStore(settings.symbolic_locations())
    diagnostics = DiagnosticSink(interval=settings.diagnostic_interval)

    return LogDispatcher(
        RotatingWriter(store),
        config=config,
        diagnostics=diagnostics,
        pause_signal=pause_signal or LocalPauseSignal(),
    )
