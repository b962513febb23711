"""
Logging utility with timestamps and level filtering.
Provides structured, colourful console output for tracking Sendblue
requests and failures.

The minimum level comes from ``SENDBLUE_LOG_LEVEL`` (default ``warn``)
so that a library embedded in someone else's application stays quiet
unless asked.  ``set_level`` overrides it at runtime.
"""

from __future__ import annotations

import contextvars
import functools
import re
import sys
import time
from datetime import UTC, datetime

import pydantic

from sendblue import config

# ============================================================================
# Per-context timers
# ============================================================================

_timers_var: contextvars.ContextVar[dict[str, tuple[float, str]]] = contextvars.ContextVar("_timers_var")


def _get_timers() -> dict[str, tuple[float, str]]:
    """Return the per-context timer dict, creating it on first access."""
    try:
        return _timers_var.get()
    except LookupError:
        timers: dict[str, tuple[float, str]] = {}
        _timers_var.set(timers)
        return timers


# ============================================================================
# Level filtering
# ============================================================================

_level_rank = {
    "debug": 10,
    "timing": 10,
    "info": 20,
    "warn": 30,
    "error": 40,
}

_DEFAULT_LEVEL = "warn"

_level_override: str | None = None


@functools.cache
def _configured_level() -> str:
    """Read the minimum level from settings once per process.

    An invalid ``SENDBLUE_LOG_LEVEL`` falls back to ``warn`` so that a
    logging setting never breaks requests.
    """
    try:
        return config.SendblueSettings().log_level
    except pydantic.ValidationError:
        print(
            f"\033[33m⚠ [Logger] Ignoring invalid SENDBLUE_LOG_LEVEL, using \"{_DEFAULT_LEVEL}\"\033[0m",
            file=sys.stderr,
        )
        return _DEFAULT_LEVEL


def get_level() -> str:
    """Return the minimum level currently emitted."""
    return _level_override or _configured_level()


def set_level(level: str | None) -> None:
    """Override the minimum level; ``None`` restores the configured one."""
    global _level_override
    if level is not None and level.lower() not in _level_rank:
        raise ValueError(f"Unknown log level: {level!r}")
    _level_override = level.lower() if level is not None else None


def is_enabled(level: str) -> bool:
    """Check whether messages at *level* are currently emitted."""
    return _level_rank.get(level, 20) >= _level_rank[get_level()]


# ============================================================================
# ANSI Colours
# ============================================================================

_colours = {
    "reset": "\033[0m",
    "bright": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "magenta": "\033[35m",
    "gray": "\033[90m",
}

_level_colour = {
    "warn": _colours["yellow"],
    "debug": _colours["gray"],
    "timing": _colours["magenta"],
}

_level_symbol = {
    "warn": "⚠",
    "debug": "•",
    "timing": "⏱",
}

_ANSI_PATTERN = re.compile(r"\033\[[0-9;]*m")


def strip_ansi(line: str) -> str:
    """Remove ANSI colour codes from *line*."""
    return _ANSI_PATTERN.sub("", line)


def _get_timestamp() -> str:
    """Return the current UTC time as HH:MM:SS.mmm."""
    now = datetime.now(UTC)
    return now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def format_duration(ms: float) -> str:
    """Format a duration in milliseconds for display."""
    if ms < 1000:
        return f"{int(ms)}ms"
    if ms < 60000:
        return f"{ms / 1000:.2f}s"
    minutes = int(ms // 60000)
    seconds = (ms % 60000) / 1000
    return f"{minutes}m {seconds:.1f}s"


def _format_value(value: object) -> str:
    """Return an ANSI-coloured representation of *value*."""
    c = _colours
    if value is None:
        return f"{c['dim']}None{c['reset']}"
    if isinstance(value, bool):
        return f"{c['green']}True{c['reset']}" if value else f"{c['red']}False{c['reset']}"
    if isinstance(value, (int, float)):
        return f"{c['yellow']}{value}{c['reset']}"
    if isinstance(value, str):
        display = value[:197] + "..." if len(value) > 200 else value
        return f'{c["green"]}"{display}"{c["reset"]}'
    if isinstance(value, list):
        return f"{c['cyan']}[{len(value)} items]{c['reset']}"
    if isinstance(value, dict):
        return f"{c['cyan']}{{{len(value)} keys}}{c['reset']}"
    return str(value)


# ============================================================================
# Logger Class
# ============================================================================


class Logger:
    """Structured logger with context prefix and level filtering."""

    def __init__(self, context: str = "Sendblue") -> None:
        """Create a logger that prefixes messages with *context*."""
        self._context = context

    def _log(self, level: str, message: str, data: dict[str, object] | None = None) -> None:
        """Format and emit a log line at the given level."""
        if not is_enabled(level):
            return

        ts = _get_timestamp()
        colour = _level_colour.get(level, _colours["cyan"])
        symbol = _level_symbol.get(level, "ℹ")
        c = _colours

        prefix = f"{c['gray']}[{ts}]{c['reset']} {colour}{symbol}{c['reset']} {c['bright']}[{self._context}]{c['reset']}"

        if data:
            data_str = " ".join(f"{c['dim']}{k}={c['reset']}{_format_value(v)}" for k, v in data.items())
            log_line = f"{prefix} {message} {data_str}"
        else:
            log_line = f"{prefix} {message}"

        print(log_line, file=sys.stderr)

    def warn(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log a warning message."""
        self._log("warn", message, data)

    def debug(self, message: str, data: dict[str, object] | None = None) -> None:
        """Log a debug-level message."""
        self._log("debug", message, data)

    def start_timer(self, label: str) -> None:
        """Start a named timer for performance measurement."""
        key = f"{self._context}:{label}"
        _get_timers()[key] = (time.monotonic() * 1000, _get_timestamp())
        self._log("timing", f"Starting: {label}")

    def end_timer(self, label: str, message: str | None = None) -> float:
        """Stop a named timer and log the elapsed time."""
        key = f"{self._context}:{label}"
        entry = _get_timers().pop(key, None)
        if entry is None:
            self.warn(f'Timer "{label}" was not started')
            return 0.0

        start_ms, start_ts = entry
        duration = time.monotonic() * 1000 - start_ms
        c = _colours
        duration_str = f"{c['magenta']}{format_duration(duration)}{c['reset']}"
        display_message = message or f"Completed: {label}"
        self._log(
            "timing",
            f"{display_message} {c['dim']}took{c['reset']} {duration_str} {c['dim']}(started {start_ts}){c['reset']}",
        )
        return duration


def create_logger(context: str) -> Logger:
    """Create a logger for a specific module."""
    return Logger(context)
