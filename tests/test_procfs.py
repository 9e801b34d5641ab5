"""Tests for the proc path resolver and file dump.

``proc cpuinfo`` reads a global file; ``proc 1/status`` reads a file
inside a process directory.  Anything else is a usage error, an
unsupported file, or a path too long for the path buffer.
"""

import errno
import io
from pathlib import Path

import pytest

from simple_shell.errors import ShellErrorKind, UsageError
from simple_shell.procfs import (
    GlobalFile,
    PathTooLongError,
    PerProcessFile,
    ProcError,
    ProcFileNotFoundError,
    ProcReadError,
    ProcUsageError,
    UnsupportedFileError,
    check_capacity,
    dump_file,
    parse_proc_arg,
    resolve_proc_path,
)

PATH_CAPACITY = 64


class _FailingFile:
    """A file that yields one chunk and then fails with EIO."""

    def __init__(self, first: bytes) -> None:
        self._chunks = [first]

    def __enter__(self) -> "_FailingFile":
        return self

    def __exit__(self, *_exc: object) -> None:
        return None

    def read(self, _size: int) -> bytes:
        if self._chunks:
            return self._chunks.pop()
        raise OSError(errno.EIO, "Input/output error")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestProcErrors:
    """Verify the proc error hierarchy."""

    def test_proc_error_is_exception(self) -> None:
        """ProcError should be a standard exception."""
        with pytest.raises(ProcError, match="oops"):
            raise ProcError("oops")

    def test_usage_error_is_both_kinds(self) -> None:
        """A proc usage error is also a generic usage error."""
        err = ProcUsageError("bad")
        assert isinstance(err, ProcError)
        assert isinstance(err, UsageError)
        assert err.kind is ShellErrorKind.USAGE

    @pytest.mark.parametrize(
        ("cls", "kind"),
        [
            (UnsupportedFileError, ShellErrorKind.UNSUPPORTED_FILE),
            (PathTooLongError, ShellErrorKind.PATH_TOO_LONG),
            (ProcFileNotFoundError, ShellErrorKind.FILE_NOT_FOUND),
            (ProcReadError, ShellErrorKind.READ),
        ],
    )
    def test_error_kinds(self, cls: type[ProcError], kind: ShellErrorKind) -> None:
        """Each proc error carries its own kind."""
        assert cls("x").kind is kind


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseProcArg:
    """Verify global vs per-process classification."""

    @pytest.mark.parametrize("name", ["cpuinfo", "loadavg", "filesystems", "mounts"])
    def test_global_allow_list(self, name: str) -> None:
        """Every allow-listed name is a global file."""
        assert parse_proc_arg(name) == GlobalFile(name=name)

    def test_unknown_global_rejected(self) -> None:
        """A name not on the allow-list is unsupported."""
        with pytest.raises(UnsupportedFileError, match="<cpuinfo> <loadavg>"):
            parse_proc_arg("meminfo")

    def test_global_match_is_exact(self) -> None:
        """Prefixes and case variants do not match."""
        for name in ("cpu", "CPUINFO", "cpuinfo2"):
            with pytest.raises(UnsupportedFileError):
                parse_proc_arg(name)

    def test_per_process(self) -> None:
        """'1/status' names status inside process 1."""
        assert parse_proc_arg("1/status") == PerProcessFile(pid="1", subpath="status")

    def test_pid_not_validated(self) -> None:
        """Any pid segment is accepted verbatim."""
        assert parse_proc_arg("self/maps") == PerProcessFile(pid="self", subpath="maps")

    def test_extra_segments_dropped(self) -> None:
        """Only the first two segments are used."""
        assert parse_proc_arg("1/task/2/status") == PerProcessFile(pid="1", subpath="task")

    def test_empty_segments_skipped(self) -> None:
        """Leading and doubled slashes do not create empty segments."""
        assert parse_proc_arg("/1//status") == PerProcessFile(pid="1", subpath="status")

    @pytest.mark.parametrize("arg", ["1/", "/", "//", "/status"])
    def test_missing_segment_is_usage_error(self, arg: str) -> None:
        """A per-process argument needs both a pid and a file."""
        with pytest.raises(ProcUsageError, match="proc <folder>/<file>"):
            parse_proc_arg(arg)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class TestResolveProcPath:
    """Verify the full resolution from argument vector to path."""

    def test_global_file(self) -> None:
        """'proc cpuinfo' resolves to /proc/cpuinfo."""
        assert resolve_proc_path(["proc", "cpuinfo"]) == "/proc/cpuinfo"

    def test_per_process_file(self) -> None:
        """'proc 1/status' resolves to /proc/1/status."""
        assert resolve_proc_path(["proc", "1/status"]) == "/proc/1/status"

    def test_unknown_is_unsupported(self) -> None:
        """'proc unknown' is an unsupported file."""
        with pytest.raises(UnsupportedFileError):
            resolve_proc_path(["proc", "unknown"])

    @pytest.mark.parametrize("args", [["proc"], ["proc", "1/status", "extra"], []])
    def test_wrong_arity_is_usage_error(self, args: list[str]) -> None:
        """Anything but exactly one argument is a usage error."""
        with pytest.raises(ProcUsageError):
            resolve_proc_path(args)

    def test_custom_root(self) -> None:
        """The root prefix is configurable."""
        assert resolve_proc_path(["proc", "loadavg"], root="/fake/proc/") == "/fake/proc/loadavg"

    def test_custom_allow_list(self) -> None:
        """The allow-list is configurable."""
        path = resolve_proc_path(["proc", "uptime"], global_files=("uptime",))
        assert path == "/proc/uptime"

    def test_same_call_is_repeatable(self) -> None:
        """Resolving twice gives the same answer."""
        first = resolve_proc_path(["proc", "mounts"])
        second = resolve_proc_path(["proc", "mounts"])
        assert first == second == "/proc/mounts"


class TestPathCapacity:
    """Verify the path buffer limit is enforced, never truncated."""

    def test_longest_fitting_path(self) -> None:
        """A path of capacity - 1 bytes fits."""
        pid = "1" * (PATH_CAPACITY - 1 - len("/proc//status"))
        path = resolve_proc_path(["proc", f"{pid}/status"])
        assert len(path) == PATH_CAPACITY - 1

    def test_one_byte_too_long(self) -> None:
        """A path of exactly capacity bytes does not fit (NUL needs room)."""
        pid = "1" * (PATH_CAPACITY - len("/proc//status"))
        with pytest.raises(PathTooLongError):
            resolve_proc_path(["proc", f"{pid}/status"])

    def test_very_long_path(self) -> None:
        """A very long argument fails rather than being cut short."""
        with pytest.raises(PathTooLongError, match="too long"):
            resolve_proc_path(["proc", "9" * 200 + "/status"])

    def test_capacity_counts_bytes(self) -> None:
        """Multi-byte characters count by their UTF-8 size."""
        with pytest.raises(PathTooLongError):
            check_capacity("é" * 5, capacity=10)
        assert check_capacity("é" * 4, capacity=10) == "é" * 4


# ---------------------------------------------------------------------------
# Dumping
# ---------------------------------------------------------------------------


class TestDumpFile:
    """Verify files are streamed byte-for-byte plus a trailing newline."""

    def test_contents_and_newline(self, tmp_path: Path) -> None:
        """The file is copied and a newline appended."""
        target = tmp_path / "cpuinfo"
        target.write_bytes(b"processor\t: 0")
        out = io.BytesIO()
        written = dump_file(str(target), out)
        assert out.getvalue() == b"processor\t: 0\n"
        assert written == len(b"processor\t: 0\n")

    def test_newline_added_even_if_present(self, tmp_path: Path) -> None:
        """A file ending in a newline still gets another one."""
        target = tmp_path / "loadavg"
        target.write_bytes(b"0.00 0.01 0.05\n")
        out = io.BytesIO()
        dump_file(str(target), out)
        assert out.getvalue() == b"0.00 0.01 0.05\n\n"

    def test_binary_contents_untouched(self, tmp_path: Path) -> None:
        """Arbitrary bytes pass through unchanged."""
        data = bytes(range(256)) * 40
        target = tmp_path / "cmdline"
        target.write_bytes(data)
        out = io.BytesIO()
        dump_file(str(target), out)
        assert out.getvalue() == data + b"\n"

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file prints just the newline."""
        target = tmp_path / "mounts"
        target.write_bytes(b"")
        out = io.BytesIO()
        dump_file(str(target), out)
        assert out.getvalue() == b"\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises and writes nothing."""
        out = io.BytesIO()
        with pytest.raises(ProcFileNotFoundError, match="File not found"):
            dump_file(str(tmp_path / "nope"), out)
        assert out.getvalue() == b""

    def test_read_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A read error is reported after the partial bytes and the newline."""
        monkeypatch.setattr(
            "simple_shell.procfs.open",
            lambda _path, _mode: _FailingFile(b"partial"),
            raising=False,
        )
        out = io.BytesIO()
        with pytest.raises(ProcReadError, match="Input/output error") as exc_info:
            dump_file("/proc/1/status", out)
        assert exc_info.value.kind is ShellErrorKind.READ
        assert out.getvalue() == b"partial\n"

    def test_real_proc_file(self) -> None:
        """The running process's own status file can be read."""
        if not Path("/proc/self/status").exists():
            pytest.skip("no /proc on this system")
        out = io.BytesIO()
        dump_file(resolve_proc_path(["proc", "self/status"]), out)
        assert b"Pid:" in out.getvalue()
