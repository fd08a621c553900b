"""
LogConfig: validated, mutable settings for the rolling log writer.

Options can be given either with their original camelCase names
(``logSize``, ``eventBuffer``, ``writeOnPause``) or as snake_case field
names. Unrecognized options are ignored; recognized options with invalid
values are skipped with a warning and the previous value is kept.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"", "0", "false", "no", "off"}


class LogConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    log_size: int = Field(default=25600, alias="logSize", gt=0)          # bytes
    event_buffer: int = Field(default=25, alias="eventBuffer", gt=0)     # entries
    debug: bool = False
    console: bool = False
    write_on_pause: bool = Field(default=False, alias="writeOnPause")
    prefix: str = "log"
    directory: str = "dataDirectory"

    @field_validator("log_size", "event_buffer", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError("expected an integer, got a boolean")
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text, 10)
            except ValueError:
                value = float(text)
        if isinstance(value, (int, float)):
            try:
                return int(value)
            except OverflowError:
                raise ValueError(f"not a finite number: {value!r}")
        raise ValueError(f"expected an integer, got {type(value).__name__}")

    @field_validator("debug", "console", "write_on_pause", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
            raise ValueError(f"not a boolean flag: {value!r}")
        return bool(value)

    @field_validator("prefix", "directory", mode="before")
    @classmethod
    def _non_empty_text(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError(f"expected a string, got {type(value).__name__}")
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("prefix")
    @classmethod
    def _plain_file_prefix(cls, value: str) -> str:
        # Log files must stay inside the resolved directory.
        separators = {"/", os.sep} | ({os.altsep} if os.altsep else set())
        if any(sep in value for sep in separators):
            raise ValueError(f"prefix must be a plain file name: {value!r}")
        return value

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def current_name(self) -> str:
        return f"{self.prefix}.0"

    @property
    def previous_name(self) -> str:
        return f"{self.prefix}.1"

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update(self, options: Optional[Mapping[str, Any]]) -> Set[str]:
        """Apply recognized options in place.

        Each option is validated on its own, so one bad value does not
        prevent the others from being applied.

        Returns
        -------
        set[str]
            Field names whose value actually changed.
        """
        changed: Set[str] = set()
        if not options:
            return changed

        for key, value in options.items():
            name = _OPTION_NAMES.get(key)
            if name is None:
                continue
            try:
                candidate = type(self).model_validate(
                    {**self.model_dump(), name: value}
                )
            except ValidationError as e:
                logger.warning(
                    "[CONFIG] Ignoring invalid value for %s: %r (%s)",
                    key,
                    value,
                    e.errors()[0].get("msg"),
                )
                continue

            new_value = getattr(candidate, name)
            if new_value != getattr(self, name):
                setattr(self, name, new_value)
                changed.add(name)

        return changed

    def snapshot(self) -> "LogConfig":
        """Return an independent copy, safe to hold across a flush."""
        return self.model_copy()

    def to_options(self) -> Dict[str, Any]:
        """Return the config keyed by its camelCase option names."""
        return self.model_dump(by_alias=True)


def _build_option_names() -> Dict[str, str]:
    names: Dict[str, str] = {}
    for name, field in LogConfig.model_fields.items():
        names[name] = name
        if field.alias:
            names[field.alias] = name
    return names


# option name (alias or field name) -> field name
_OPTION_NAMES = _build_option_names()
