"""The shell — command interpreter.

The shell takes one line of input, splits it into arguments, and
decides what to do with it: run a builtin, or start an external
program.  It returns an ``ExecutionStatus`` telling the loop driver
whether to keep going.

Two builtins exist:

- ``exit [N]`` — leave the shell, with status *N* if given.
- ``proc <file>`` — print a file from the process information tree
  (see ``simple_shell.procfs``).

Everything else is run as an external program in the foreground.

Design choices:
    - **Command dispatch via a read-only mapping.**  The builtin table
      is built once in the constructor and never changes afterwards.
    - **Errors are absorbed at the dispatcher.**  Builtins raise
      ``ShellError``; the dispatcher logs the message to stderr and
      returns ``CONTINUE``.  Only ``AllocationError`` escapes, and
      ``exit N`` ends the process with ``SystemExit``.
"""

import re
import sys
from collections.abc import Callable, Mapping
from enum import IntEnum
from functools import partial
from types import MappingProxyType
from typing import BinaryIO, TypeAlias

from simple_shell.config import ShellConfig
from simple_shell.errors import (
    AllocationError,
    ParseError,
    ShellError,
    SpawnError,
    TooManyArgumentsError,
)
from simple_shell.escapes import decode
from simple_shell.executor import ChildOutcome, run_foreground
from simple_shell.logging import Logger
from simple_shell.procfs import dump_file, resolve_proc_path
from simple_shell.tokenizer import ArgumentVector, tokenize


class ExecutionStatus(IntEnum):
    """Whether the loop driver should read another line.

    The values match the old integer convention: non-zero keeps the
    shell running.
    """

    STOP = 0
    CONTINUE = 1


# A builtin handler: takes the raw line and its arguments.
_Handler: TypeAlias = Callable[[str, ArgumentVector], ExecutionStatus]

# Leading blanks, optional sign, decimal digits, nothing else.
_EXIT_STATUS_RE = re.compile(r"\s*[+-]?[0-9]+")

# Process exit statuses are truncated to one byte.
_EXIT_STATUS_MASK = 0xFF


def parse_exit_status(text: str) -> int:
    """Parse the argument of ``exit`` as a base-10 integer.

    Args:
        text: The argument as typed (e.g. ``"9"``, ``"-1"``).

    Returns:
        The parsed value.

    Raises:
        ParseError: If *text* is not entirely a decimal integer.

    """
    if not _EXIT_STATUS_RE.fullmatch(text):
        msg = f"invalid exit status '{text}'"
        raise ParseError(msg)
    return int(text)


class Shell:
    """Command interpreter for one interactive session."""

    def __init__(
        self,
        *,
        config: ShellConfig | None = None,
        logger: Logger | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        """Create a shell.

        Args:
            config: Session settings; defaults to ``ShellConfig()``.
            logger: Diagnostic log; defaults to one writing to stderr.
            stdout: Binary stream for builtin output; ``None`` means the
                    process's standard output.

        """
        self._config = config if config is not None else ShellConfig()
        self._logger = (
            logger
            if logger is not None
            else Logger(program=self._config.program_name, level=self._config.log_level)
        )
        self._stdout = stdout
        self._decoder = partial(decode, logger=self._logger)
        self._last_outcome: ChildOutcome | None = None

        # Builtin table, checked in this order.
        self._builtins: Mapping[str, _Handler] = MappingProxyType(
            {
                "exit": self._cmd_exit,
                "proc": self._cmd_proc,
            }
        )

    @property
    def config(self) -> ShellConfig:
        """Return the session settings."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the diagnostic log."""
        return self._logger

    @property
    def command_names(self) -> list[str]:
        """Return the builtin command names in table order."""
        return list(self._builtins)

    @property
    def last_outcome(self) -> ChildOutcome | None:
        """Return how the most recent external program finished, if any."""
        return self._last_outcome

    def execute(self, line: str) -> ExecutionStatus:
        """Tokenize and run one command line.

        Args:
            line: Raw input, possibly with a trailing newline.

        Returns:
            ``STOP`` for a bare ``exit`` or a line with no arguments,
            ``CONTINUE`` otherwise.

        Raises:
            AllocationError: If argument storage cannot grow.
            SystemExit: For ``exit N``.

        """
        args = tokenize(
            line,
            decoder=self._decoder,
            growth=self._config.arg_growth,
            logger=self._logger,
        )
        if not args:
            return ExecutionStatus.STOP
        return self.dispatch(line, args)

    def dispatch(self, line: str, args: ArgumentVector) -> ExecutionStatus:
        """Route *args* to a builtin or to the process executor.

        Args:
            line: The raw line the arguments came from.
            args: Non-empty argument vector; ``args[0]`` is the command.

        Returns:
            The status produced by the handler.

        """
        handler = self._builtins.get(args[0])
        try:
            if handler is not None:
                return handler(line, args)
            return self._execute_external(args)
        except AllocationError:
            raise
        except ShellError as e:
            self._logger.error(str(e), source=args[0])
            self._logger.debug(f"{args[0]} failed: {e.kind}", source="dispatch")
            return ExecutionStatus.CONTINUE

    # -- Builtins ----------------------------------------------------------

    def _cmd_exit(self, _line: str, args: ArgumentVector) -> ExecutionStatus:
        """Leave the shell, optionally with a numeric status."""
        if len(args) > 2:  # noqa: PLR2004
            msg = "Too many arguments for <exit> command!"
            raise TooManyArgumentsError(msg)

        if len(args) == 2:  # noqa: PLR2004
            try:
                status = parse_exit_status(args[1])
            except ParseError as e:
                # A malformed status keeps the shell running, silently.
                self._logger.debug(str(e), source="exit")
                return ExecutionStatus.CONTINUE
            self._flush()
            raise SystemExit(status & _EXIT_STATUS_MASK)

        return ExecutionStatus.STOP

    def _cmd_proc(self, _line: str, args: ArgumentVector) -> ExecutionStatus:
        """Print a file from the process information tree."""
        path = resolve_proc_path(
            args,
            root=self._config.proc_root,
            capacity=self._config.path_capacity,
            global_files=self._config.global_files,
        )
        self._logger.debug(f"{args[1]} -> {path}", source="proc")
        dump_file(path, self._output())
        return ExecutionStatus.CONTINUE

    # -- External programs -------------------------------------------------

    def _execute_external(self, args: ArgumentVector) -> ExecutionStatus:
        """Run *args* as a foreground child; always keep the shell running."""
        self._flush()
        try:
            outcome = run_foreground(args)
        except SpawnError as e:
            self._logger.error(str(e), source="exec")
            return ExecutionStatus.CONTINUE

        self._last_outcome = outcome
        self._logger.debug(f"{args[0]} {outcome}", source="exec")
        return ExecutionStatus.CONTINUE

    # -- Output ------------------------------------------------------------

    def _output(self) -> BinaryIO:
        """Return the binary stream builtins write to."""
        if self._stdout is not None:
            return self._stdout
        sys.stdout.flush()
        return sys.stdout.buffer

    def _flush(self) -> None:
        """Flush pending output before handing the terminal over."""
        if self._stdout is not None:
            self._stdout.flush()
        sys.stdout.flush()
