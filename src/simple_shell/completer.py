"""Tab completer for the shell.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (readline integration in the REPL).

The ``complete(text, state)`` method is the readline callback.  It
delegates to ``completions(text, line)`` which looks at the input so
far and returns a list of candidates:

- first word → builtin names;
- argument of ``proc`` → global file names and ``<pid>/`` directories,
  then the files inside the chosen process directory.
"""

from __future__ import annotations

import readline
from pathlib import Path
from typing import TYPE_CHECKING

from simple_shell.procfs import PROC_DELIM

if TYPE_CHECKING:
    from simple_shell.shell import Shell


class Completer:
    """Context-aware tab completer for the shell."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance.

        Args:
            shell: The shell whose builtins and config drive completion.

        """
        self._shell = shell

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th candidate for *text*.

        Args:
            text: The partial word being completed.
            state: Index into the candidate list (0, 1, 2, …).

        Returns:
            The candidate at *state*, or ``None`` when exhausted.

        """
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()

        # No words yet, or still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return [cmd for cmd in self._shell.command_names if cmd.startswith(text)]

        if words[0] == "proc":
            return self._complete_proc(text)
        return []

    def _complete_proc(self, text: str) -> list[str]:
        """Complete the argument of ``proc``."""
        root = Path(self._shell.config.proc_root)

        if PROC_DELIM in text:
            pid, _, prefix = text.partition(PROC_DELIM)
            return sorted(
                f"{pid}/{entry}" for entry in _list_dir(root / pid) if entry.startswith(prefix)
            )

        names = [name for name in self._shell.config.global_files if name.startswith(text)]
        pids = [f"{entry}/" for entry in _list_dir(root) if entry.isdigit()]
        names.extend(pid for pid in pids if pid.startswith(text))
        return sorted(names)


def _list_dir(path: Path) -> list[str]:
    """Return entry names in *path*, or nothing if it cannot be listed."""
    try:
        return [entry.name for entry in path.iterdir()]
    except OSError:
        return []
