"""Shell diagnostics log.

The logger records structured entries for everything that goes wrong
(and, at DEBUG, for what went right) while the shell runs.  It mirrors
a kernel log buffer:

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source).
- **Logger** — an append-only log with filtering, clearing, and an
  optional text sink that echoes entries to ``stderr``.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries** — log records should be immutable.
    - **The sink is the user-facing channel.**  Anything at or above the
      sink level is written as ``<program>: <message>``, which is the
      format every diagnostic of the shell uses.
"""

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "proc").

    """

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer with filtering and a diagnostic sink."""

    def __init__(
        self,
        *,
        program: str = "simple_shell",
        stream: TextIO | None = None,
        level: LogLevel = LogLevel.WARNING,
    ) -> None:
        """Create an empty logger.

        Args:
            program: Prefix written before every echoed message.
            stream: Where echoed entries go; ``None`` means ``sys.stderr``
                    looked up at write time.
            level: Minimum level echoed to the stream.

        """
        self._entries: list[LogEntry] = []
        self._program = program
        self._stream = stream
        self._level = level

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Append a new entry and echo it if it is severe enough.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source))
        if level >= self._level:
            stream = self._stream if self._stream is not None else sys.stderr
            stream.write(f"{self._program}: {message}\n")
            stream.flush()

    def debug(self, message: str, *, source: str) -> None:
        """Log at DEBUG."""
        self.log(LogLevel.DEBUG, message, source=source)

    def warning(self, message: str, *, source: str) -> None:
        """Log at WARNING."""
        self.log(LogLevel.WARNING, message, source=source)

    def error(self, message: str, *, source: str) -> None:
        """Log at ERROR."""
        self.log(LogLevel.ERROR, message, source=source)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
