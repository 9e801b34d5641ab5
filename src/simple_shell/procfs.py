"""The ``proc`` builtin — read files from the process information tree.

``proc`` takes one pseudo-path and prints the matching file under
``/proc``.  Two shapes are accepted::

    proc cpuinfo        → /proc/cpuinfo      (global file)
    proc 1/status       → /proc/1/status     (per-process file)

Any argument containing a ``/`` is per-process: the first segment is
the process id (used verbatim, not validated) and the second is the
file inside that process directory.  Segments past the second are
ignored.  Without a ``/`` the argument must be one of the global
allow-list names::

    /proc/
    ├── cpuinfo
    ├── loadavg
    ├── filesystems
    ├── mounts
    └── [pid]/
        └── <any file>

The concrete path must fit in the path buffer (64 bytes including the
terminator by default).  A path that does not fit is rejected with
``PathTooLongError``, never truncated.
"""

from dataclasses import dataclass
from typing import BinaryIO, TypeAlias

from simple_shell.config import DEFAULT_PATH_CAPACITY, DEFAULT_PROC_ROOT, GLOBAL_PROC_FILES
from simple_shell.errors import ShellError, ShellErrorKind, UsageError

PROC_DELIM = "/"

# Read size used when streaming a file to the output.
_CHUNK_SIZE = 4096


class ProcError(ShellError):
    """Raise when a ``proc`` command cannot be resolved or read."""


class ProcUsageError(ProcError, UsageError):
    """Raise when ``proc`` is not called as ``proc <folder>/<file>``."""

    kind = ShellErrorKind.USAGE


class UnsupportedFileError(ProcError):
    """Raise when a global file is not on the allow-list."""

    kind = ShellErrorKind.UNSUPPORTED_FILE


class PathTooLongError(ProcError):
    """Raise when the concrete path exceeds the path buffer capacity."""

    kind = ShellErrorKind.PATH_TOO_LONG


class ProcFileNotFoundError(ProcError):
    """Raise when the resolved file does not exist or cannot be opened."""

    kind = ShellErrorKind.FILE_NOT_FOUND


class ProcReadError(ProcError):
    """Raise when the resolved file opens but reading it fails."""

    kind = ShellErrorKind.READ


@dataclass(frozen=True)
class GlobalFile:
    """A file directly under the proc root (e.g. ``cpuinfo``)."""

    name: str

    def path(self, root: str = DEFAULT_PROC_ROOT) -> str:
        """Return the concrete path under *root*."""
        return f"{root.rstrip(PROC_DELIM)}/{self.name}"


@dataclass(frozen=True)
class PerProcessFile:
    """A file inside a process directory (e.g. ``1/status``)."""

    pid: str
    subpath: str

    def path(self, root: str = DEFAULT_PROC_ROOT) -> str:
        """Return the concrete path under *root*."""
        return f"{root.rstrip(PROC_DELIM)}/{self.pid}/{self.subpath}"


ProcPath: TypeAlias = GlobalFile | PerProcessFile


def usage_message() -> str:
    """Return the message shown when ``proc`` is called incorrectly."""
    return "proc command must be like in the following format: proc <folder>/<file>"


def unsupported_message(global_files: tuple[str, ...] = GLOBAL_PROC_FILES) -> str:
    """Return the message listing the supported global files."""
    names = " ".join(f"<{name}>" for name in global_files)
    return f"Files supported by proc are {names}"


def parse_proc_arg(arg: str, global_files: tuple[str, ...] = GLOBAL_PROC_FILES) -> ProcPath:
    """Classify the ``proc`` argument as a global or per-process file.

    Args:
        arg: The single argument given to ``proc``.
        global_files: Names accepted without a process id.

    Returns:
        The parsed ``ProcPath``.

    Raises:
        ProcUsageError: If a per-process argument lacks a pid or file segment.
        UnsupportedFileError: If a global name is not on the allow-list.

    """
    if PROC_DELIM in arg:
        # Empty segments vanish, so "/1//status" still means 1/status.
        segments = [s for s in arg.split(PROC_DELIM) if s]
        if len(segments) < 2:  # noqa: PLR2004
            raise ProcUsageError(usage_message())
        return PerProcessFile(pid=segments[0], subpath=segments[1])

    if arg not in global_files:
        raise UnsupportedFileError(unsupported_message(global_files))
    return GlobalFile(name=arg)


def check_capacity(path: str, capacity: int = DEFAULT_PATH_CAPACITY) -> str:
    """Return *path* unchanged if it fits in a buffer of *capacity* bytes.

    The capacity counts the terminating NUL, so at most ``capacity - 1``
    bytes of UTF-8 text fit.

    Raises:
        PathTooLongError: If the path does not fit.

    """
    size = len(path.encode()) + 1
    if size > capacity:
        msg = f"proc path is too long ({size - 1} bytes, limit is {capacity - 1})"
        raise PathTooLongError(msg)
    return path


def resolve_proc_path(
    args: list[str],
    *,
    root: str = DEFAULT_PROC_ROOT,
    capacity: int = DEFAULT_PATH_CAPACITY,
    global_files: tuple[str, ...] = GLOBAL_PROC_FILES,
) -> str:
    """Resolve ``proc <arg>`` to a concrete filesystem path.

    Args:
        args: The full argument vector, ``["proc", <arg>]``.
        root: Mount point of the process information tree.
        capacity: Path buffer size in bytes, terminator included.
        global_files: Names accepted without a process id.

    Returns:
        The concrete path, e.g. ``/proc/1/status``.

    Raises:
        ProcUsageError: If *args* does not hold exactly one argument.
        UnsupportedFileError: If a global name is not on the allow-list.
        PathTooLongError: If the path exceeds *capacity*.

    """
    if len(args) != 2:  # noqa: PLR2004
        raise ProcUsageError(usage_message())
    proc_path = parse_proc_arg(args[1], global_files)
    return check_capacity(proc_path.path(root), capacity)


def dump_file(path: str, out: BinaryIO) -> int:
    """Stream the file at *path* to *out*, followed by a newline.

    The newline is written after the whole file, whether or not the
    file already ends with one.

    Args:
        path: Concrete path to read.
        out: Binary stream receiving the bytes.

    Returns:
        Number of bytes written, trailing newline included.

    Raises:
        ProcFileNotFoundError: If the file cannot be opened.
        ProcReadError: If reading fails part way; the bytes already
            copied and the trailing newline are still written.

    """
    try:
        f = open(path, "rb")  # noqa: SIM115
    except OSError:
        msg = "File not found."
        raise ProcFileNotFoundError(msg) from None

    written = 0
    try:
        with f:
            while chunk := f.read(_CHUNK_SIZE):
                out.write(chunk)
                written += len(chunk)
    except OSError as e:
        msg = f"Error reading {path}: {e.strerror or e}"
        raise ProcReadError(msg) from e
    finally:
        out.write(b"\n")
        out.flush()
    return written + 1
