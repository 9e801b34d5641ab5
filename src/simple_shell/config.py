"""Shell configuration — the knobs the interpreter is built with.

Every value here used to be a hard-coded constant: the prompt, the
``/proc`` mount point, the size of the path buffer, the allow-list of
global ``/proc`` files.  Gathering them in one frozen dataclass keeps
the rest of the code free of magic numbers and lets tests point the
shell at a fake ``/proc`` tree.

Design choices:
    - **Frozen dataclass** — configuration is read-only once the shell
      starts; nothing may mutate the allow-list between commands.
    - **Environment overrides are opt-in** — ``from_env()`` reads a
      small set of ``SIMPLE_SHELL_*`` variables; the default
      constructor never touches the environment.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace

from simple_shell.logging import LogLevel

DEFAULT_PROGRAM_NAME = "simple_shell"
DEFAULT_PROMPT = "$ "
DEFAULT_PROC_ROOT = "/proc"

# Size of the path buffer in bytes, including the terminating NUL.
DEFAULT_PATH_CAPACITY = 64

# Token storage grows in blocks of this many slots.
DEFAULT_ARG_GROWTH = 64

GLOBAL_PROC_FILES: tuple[str, ...] = ("cpuinfo", "loadavg", "filesystems", "mounts")

_ENV_PROMPT = "SIMPLE_SHELL_PROMPT"
_ENV_PROC_ROOT = "SIMPLE_SHELL_PROC_ROOT"
_ENV_PATH_CAPACITY = "SIMPLE_SHELL_PATH_CAPACITY"


@dataclass(frozen=True)
class ShellConfig:
    """Immutable settings for one shell session.

    Attributes:
        program_name: Prefix for every diagnostic written to stderr.
        prompt: Text printed before each line is read.
        proc_root: Mount point of the process information tree.
        path_capacity: Byte capacity of a resolved path, terminator included.
        global_files: Names allowed directly under ``proc_root``.
        arg_growth: Block size used when reserving token storage.
        log_level: Minimum level echoed to the diagnostic stream.

    """

    program_name: str = DEFAULT_PROGRAM_NAME
    prompt: str = DEFAULT_PROMPT
    proc_root: str = DEFAULT_PROC_ROOT
    path_capacity: int = DEFAULT_PATH_CAPACITY
    global_files: tuple[str, ...] = GLOBAL_PROC_FILES
    arg_growth: int = DEFAULT_ARG_GROWTH
    log_level: LogLevel = LogLevel.WARNING

    def __post_init__(self) -> None:
        """Reject settings the resolver and tokenizer cannot honour."""
        if self.path_capacity < 1:
            msg = f"path_capacity must be positive, got {self.path_capacity}"
            raise ValueError(msg)
        if self.arg_growth < 1:
            msg = f"arg_growth must be positive, got {self.arg_growth}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "ShellConfig":
        """Build a config, overriding defaults from ``SIMPLE_SHELL_*`` variables.

        Args:
            environ: Usually ``os.environ``.

        Returns:
            A new config with any overrides applied.

        Raises:
            ValueError: If ``SIMPLE_SHELL_PATH_CAPACITY`` is not a positive int.

        """
        config = cls()
        if prompt := environ.get(_ENV_PROMPT):
            config = replace(config, prompt=prompt)
        if proc_root := environ.get(_ENV_PROC_ROOT):
            config = replace(config, proc_root=proc_root.rstrip("/") or "/")
        if capacity := environ.get(_ENV_PATH_CAPACITY):
            try:
                value = int(capacity)
            except ValueError:
                msg = f"{_ENV_PATH_CAPACITY} must be an integer, got {capacity!r}"
                raise ValueError(msg) from None
            config = replace(config, path_capacity=value)
        return config
