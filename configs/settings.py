from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv


load_dotenv()


# Environment variable -> LogConfig option it overrides.
_CONFIG_ENV_VARS: Dict[str, str] = {
    "ROLLING_LOG_LOG_SIZE": "logSize",
    "ROLLING_LOG_EVENT_BUFFER": "eventBuffer",
    "ROLLING_LOG_DEBUG": "debug",
    "ROLLING_LOG_CONSOLE": "console",
    "ROLLING_LOG_WRITE_ON_PAUSE": "writeOnPause",
    "ROLLING_LOG_PREFIX": "prefix",
    "ROLLING_LOG_DIRECTORY": "directory",
}


class Settings:
    """
    Central configuration for the rolling log writer.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # Storage locations behind the symbolic directory names
        self._data_dir = Path(os.getenv("ROLLING_LOG_DATA_DIR", "runtime/data/logs"))
        self._cache_dir = Path(
            os.getenv("ROLLING_LOG_CACHE_DIR", "runtime/data/cache")
        )
        self._temp_dir = Path(tempfile.gettempdir())

        # Diagnostics (stdlib logging level + failure report interval)
        self._log_level = os.getenv("ROLLING_LOG_LOG_LEVEL", "WARNING").upper()
        self._diagnostic_interval = _parse_float(
            os.getenv("ROLLING_LOG_DIAGNOSTIC_INTERVAL"), default=30.0
        )

        # Raw LogConfig overrides; validated later by LogConfig.update()
        self._config_overrides: Dict[str, str] = {}
        for env_name, option in _CONFIG_ENV_VARS.items():
            value = os.getenv(env_name)
            if value is not None:
                self._config_overrides[option] = value

    # ------------------------------------------------------------------
    # Storage locations
    # ------------------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    def symbolic_locations(self) -> Dict[str, Path]:
        """Mapping of symbolic directory names to concrete paths."""
        return {
            "dataDirectory": self._data_dir,
            "cacheDirectory": self._cache_dir,
            "tempDirectory": self._temp_dir,
        }

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def log_level(self) -> str:
        return self._log_level

    @property
    def diagnostic_interval(self) -> float:
        return self._diagnostic_interval

    # ------------------------------------------------------------------
    # LogConfig overrides
    # ------------------------------------------------------------------

    def config_overrides(self) -> Dict[str, str]:
        return dict(self._config_overrides)


def _parse_float(raw: Optional[str], default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


settings = Settings()
