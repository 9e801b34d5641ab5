"""Error taxonomy for the shell.

Every failure the interpreter can report is a ``ShellError`` subclass
tagged with a ``ShellErrorKind``.  Builtins raise them; the dispatcher
catches them, logs the message, and keeps the session alive.  Only
``AllocationError`` is fatal — the loop driver lets it end the process.

The ``/proc`` resolution failures live next to the resolver in
``simple_shell.procfs`` but share this base class.
"""

from enum import StrEnum


class ShellErrorKind(StrEnum):
    """The kind of failure a ``ShellError`` represents."""

    USAGE = "usage"
    TOO_MANY_ARGUMENTS = "too-many-arguments"
    UNSUPPORTED_FILE = "unsupported-file"
    PATH_TOO_LONG = "path-too-long"
    FILE_NOT_FOUND = "file-not-found"
    READ = "read"
    PARSE = "parse"
    SPAWN = "spawn"
    ALLOCATION = "allocation"


class ShellError(Exception):
    """Base class for every error the shell reports."""

    kind: ShellErrorKind = ShellErrorKind.USAGE


class UsageError(ShellError):
    """Raise when a builtin is called with the wrong arguments."""

    kind = ShellErrorKind.USAGE


class TooManyArgumentsError(UsageError):
    """Raise when a builtin receives more arguments than it accepts."""

    kind = ShellErrorKind.TOO_MANY_ARGUMENTS


class ParseError(ShellError):
    """Raise when an argument cannot be parsed (e.g. ``exit abc``)."""

    kind = ShellErrorKind.PARSE


class SpawnError(ShellError):
    """Raise when an external program cannot be started."""

    kind = ShellErrorKind.SPAWN


class AllocationError(ShellError):
    """Raise when token storage cannot grow.  Fatal."""

    kind = ShellErrorKind.ALLOCATION
