from __future__ import annotations

"""Runtime configuration: the enable switch and environment-derived settings.

The switch may be toggled while requests are in flight; every write reads
its current state. `TrimSwitch` wraps a `threading.Event`, so reads and
toggles are thread-safe.
"""

import logging
import os
import threading
from dataclasses import dataclass
from typing import Mapping, Optional

from htmltrim.constants import (
    ENV_DISABLE,
    ENV_JSON_LOGS,
    ENV_LOG_LEVEL,
    HTML_CONTENT_TYPES,
)
from htmltrim.logging.helpers import get_logger, parse_level

logger = get_logger('runtime.config')


class TrimSwitch:
    """Thread-safe on/off flag controlling whether pages are trimmed."""

    def __init__(self, enabled: bool = True) -> None:
        self._flag = threading.Event()
        if enabled:
            self._flag.set()

    def is_enabled(self) -> bool:
        return self._flag.is_set()

    def enable(self) -> None:
        self._flag.set()

    def disable(self) -> None:
        self._flag.clear()

    def set(self, enabled: bool) -> None:
        if enabled:
            self.enable()
        else:
            self.disable()

    def __repr__(self) -> str:
        return f'TrimSwitch(enabled={self.is_enabled()})'


@dataclass(frozen=True)
class TrimConfig:
    """Immutable settings read once at startup."""
    enabled: bool = True
    json_logs: bool = False
    log_level: int = logging.INFO
    content_types: tuple[str, ...] = HTML_CONTENT_TYPES

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'TrimConfig':
        env = os.environ if environ is None else environ
        raw_level = env.get(ENV_LOG_LEVEL)
        level = parse_level(raw_level)
        if raw_level and level == logging.INFO and raw_level.strip().upper() not in ('INFO', '20'):
            logger.warning('⚠  unknown log level %r in %s, using INFO', raw_level, ENV_LOG_LEVEL)
        return cls(
            enabled=env.get(ENV_DISABLE) != '1',
            json_logs=env.get(ENV_JSON_LOGS) == '1',
            log_level=level,
        )

    def make_switch(self) -> TrimSwitch:
        return TrimSwitch(enabled=self.enabled)


_DEFAULT_SWITCH: Optional[TrimSwitch] = None


def get_default_switch() -> TrimSwitch:
    """Return the process-wide switch, created from the environment on first use."""
    global _DEFAULT_SWITCH
    if _DEFAULT_SWITCH is None:
        _DEFAULT_SWITCH = TrimConfig.from_env().make_switch()
    return _DEFAULT_SWITCH


def set_default_switch(switch: Optional[TrimSwitch]) -> None:
    """Install `switch` as the process-wide default (None re-reads the environment lazily)."""
    global _DEFAULT_SWITCH
    _DEFAULT_SWITCH = switch
