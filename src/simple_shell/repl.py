"""Interactive REPL (Read-Eval-Print Loop) for the shell.

The REPL is the terminal interface.  It creates a shell and enters the
classic loop:

    1. **Read** — print the prompt and read one line.
    2. **Eval** — pass the line to ``shell.execute()``.
    3. **Loop** — repeat until the shell says ``STOP``.

A blank line, a line with no arguments (only delimiters such as BEL),
or end of input also ends the session, with status 1.
``exit N`` ends the process directly through ``SystemExit``.

The shell itself takes no command-line arguments; passing any is an
error.
"""

import os
import readline
import sys
from collections.abc import Sequence
from typing import TextIO

from simple_shell.completer import Completer
from simple_shell.config import ShellConfig
from simple_shell.errors import AllocationError
from simple_shell.logging import Logger
from simple_shell.shell import ExecutionStatus, Shell
from simple_shell.tokenizer import has_arguments, is_blank

# Status when the session ends on blank input or an error.
EXIT_FAILURE = 1
EXIT_SUCCESS = 0


def read_line(prompt: str, stdin: TextIO, stdout: TextIO) -> str:
    """Print *prompt* and read one line; return ``""`` at end of input.

    On an interactive terminal the line is read with ``input()`` so
    readline editing and completion are available.
    """
    if stdin is sys.stdin and stdin.isatty():
        try:
            return input(prompt)
        except EOFError:
            # Ctrl+D
            print()  # noqa: T201
            return ""
    stdout.write(prompt)
    stdout.flush()
    return stdin.readline()


def _install_completer(shell: Shell) -> None:
    """Wire tab completion into readline."""
    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")


def run(
    argv: Sequence[str] = (),
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    config: ShellConfig | None = None,
    logger: Logger | None = None,
) -> int:
    """Run the shell until it stops and return the process exit status.

    Args:
        argv: Command-line arguments after the program name.
        stdin: Input stream; defaults to ``sys.stdin``.
        stdout: Prompt stream; defaults to ``sys.stdout``.
        config: Session settings; defaults to ``ShellConfig.from_env``.
        logger: Diagnostic log; defaults to one writing to stderr.

    Returns:
        ``0`` after a bare ``exit``, ``1`` on blank input, end of input,
        bad invocation, or a fatal allocation error.

    """
    config = config if config is not None else ShellConfig.from_env(os.environ)
    logger = (
        logger
        if logger is not None
        else Logger(program=config.program_name, level=config.log_level)
    )
    if argv:
        logger.error("Simple Shell takes no arguments!\nExiting...", source="main")
        return EXIT_FAILURE

    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    shell = Shell(config=config, logger=logger)
    if stdin.isatty():
        _install_completer(shell)

    while True:
        try:
            line = read_line(config.prompt, stdin, stdout)
        except KeyboardInterrupt:
            # Ctrl+C at the prompt: discard the line, prompt again
            stdout.write("\n")
            continue

        if is_blank(line) or not has_arguments(line):
            return EXIT_FAILURE

        try:
            status = shell.execute(line)
        except AllocationError as e:
            logger.error(str(e), source="tokenizer")
            return EXIT_FAILURE

        if status is ExecutionStatus.STOP:
            return EXIT_SUCCESS


def main() -> None:
    """Console entry point for ``simple-shell``."""
    sys.exit(run(sys.argv[1:]))
