"""Process executor — run an external program in the foreground.

Anything that is not a builtin is handed to the executor.  It starts a
new process image from ``args[0]`` (searched on ``PATH``), with
``args`` as its argument list and the shell's own stdin/stdout/stderr,
then blocks until the child has really finished.

"Finished" means exited or killed by a signal.  A child that is merely
*stopped* (``SIGSTOP``, ``SIGTSTP``) is not finished, so the wait keeps
going until it is resumed and terminates::

    spawn ──► running ──► exited(code)
                 │  ▲
          SIGSTOP│  │SIGCONT
                 ▼  │
               stopped          killed(signal)

The executor never stops the session: whatever the child does, and even
if it cannot be started at all, the caller gets ``CONTINUE`` back.
"""

import os
import signal
from dataclasses import dataclass
from typing import TypeAlias

from simple_shell.errors import SpawnError


@dataclass(frozen=True)
class Exited:
    """The child called ``exit`` (or returned from ``main``)."""

    code: int

    def __str__(self) -> str:
        """Format as ``exited with code N``."""
        return f"exited with code {self.code}"


@dataclass(frozen=True)
class KilledBySignal:
    """The child was terminated by a signal."""

    signal: int

    def __str__(self) -> str:
        """Format as ``killed by SIGNAME``."""
        try:
            name = signal.Signals(self.signal).name
        except ValueError:
            name = f"signal {self.signal}"
        return f"killed by {name}"


ChildOutcome: TypeAlias = Exited | KilledBySignal


def spawn(args: list[str]) -> int:
    """Start *args* as a child process and return its pid.

    The child inherits the environment, the working directory, and the
    standard streams of the shell.

    Raises:
        SpawnError: If the program cannot be found or executed.

    """
    if not args:
        msg = "no command to execute"
        raise SpawnError(msg)
    try:
        return os.posix_spawnp(args[0], args, os.environ)
    except OSError as e:
        msg = f"{args[0]}: {e.strerror or e}"
        raise SpawnError(msg) from e
    except ValueError as e:
        # e.g. an argument holding an embedded NUL
        msg = f"{args[0]}: {e}"
        raise SpawnError(msg) from e


def classify(status: int) -> ChildOutcome | None:
    """Turn a raw ``waitpid`` status into an outcome.

    Returns:
        The terminal outcome, or ``None`` if the child is only stopped
        or continued.

    """
    if os.WIFEXITED(status):
        return Exited(code=os.WEXITSTATUS(status))
    if os.WIFSIGNALED(status):
        return KilledBySignal(signal=os.WTERMSIG(status))
    return None


def wait_for(pid: int) -> ChildOutcome:
    """Block until child *pid* exits or is killed.

    Stop notifications are reported by ``waitpid`` (``WUNTRACED``) but
    do not end the wait.
    """
    while True:
        _pid, status = os.waitpid(pid, os.WUNTRACED)
        outcome = classify(status)
        if outcome is not None:
            return outcome


def run_foreground(args: list[str]) -> ChildOutcome:
    """Spawn *args* and wait for it to finish.

    Raises:
        SpawnError: If the program cannot be started.

    """
    pid = spawn(args)
    return wait_for(pid)
