"""Tokenizer — turn a raw input line into an argument vector.

The line is split on the delimiter set ``space, tab, CR, LF, BEL``.
Runs of delimiters collapse, so no token is ever empty.  Storage for
the tokens is reserved in fixed-size blocks and grown on demand; if
growth fails the error is fatal (``AllocationError``).

When the command is ``echo`` every argument after the name is passed
through the escape decoder.  A decoded argument replaces the original
token outright, so the decoded text is never squeezed into the space
the original occupied.
"""

import re
from collections.abc import Callable
from typing import TypeAlias

from simple_shell.config import DEFAULT_ARG_GROWTH
from simple_shell.errors import AllocationError
from simple_shell.escapes import decode
from simple_shell.logging import Logger

# An argument vector: the command name followed by its arguments.
ArgumentVector: TypeAlias = list[str]

# Given one token, return its decoded form or None when unchanged.
Decoder: TypeAlias = Callable[[str], str | None]

ARG_DELIMITERS = " \t\r\n\a"

_SPLIT_RE = re.compile(f"[{re.escape(ARG_DELIMITERS)}]+")

# Commands whose arguments get escape-decoded.
_UNESCAPE_COMMANDS: frozenset[str] = frozenset({"echo"})


def _new_slots(size: int) -> list[str]:
    """Reserve *size* empty token slots."""
    return [""] * size


def split_line(
    line: str,
    *,
    growth: int = DEFAULT_ARG_GROWTH,
    logger: Logger | None = None,
) -> ArgumentVector:
    """Split *line* on the argument delimiters.

    Args:
        line: Raw input, possibly with a trailing newline.
        growth: Number of slots reserved each time storage runs out.
        logger: Receives a DEBUG entry each time storage grows.

    Returns:
        The non-empty tokens in order.

    Raises:
        AllocationError: If token storage cannot be grown.

    """
    slots = _new_slots(growth)
    count = 0
    for token in _SPLIT_RE.split(line):
        if not token:
            continue
        slots[count] = token
        count += 1
        if count >= len(slots):
            try:
                slots.extend([""] * growth)
            except MemoryError:
                msg = "reallocation error"
                raise AllocationError(msg) from None
            if logger is not None:
                logger.debug(f"argument storage grown to {len(slots)} slots", source="tokenizer")
    return slots[:count]


def tokenize(
    line: str,
    *,
    decoder: Decoder = decode,
    growth: int = DEFAULT_ARG_GROWTH,
    logger: Logger | None = None,
) -> ArgumentVector:
    """Split *line* into arguments, decoding escapes for ``echo``.

    A decoded argument ends at its first NUL character.

    Args:
        line: Raw input line.
        decoder: Escape decoder applied to ``echo`` arguments.
        growth: Block size for token storage.
        logger: Receives DEBUG entries about storage growth.

    Returns:
        The argument vector; empty when the line holds only delimiters.

    """
    args = split_line(line, growth=growth, logger=logger)
    if args and args[0] in _UNESCAPE_COMMANDS:
        for i in range(1, len(args)):
            decoded = decoder(args[i])
            if decoded is not None:
                args[i] = decoded.partition("\0")[0]
    return args


def is_blank(line: str) -> bool:
    """Return True if *line* is empty or holds only whitespace."""
    return not line or line.isspace()


def has_arguments(line: str) -> bool:
    """Return True if *line* splits into at least one argument."""
    return bool(_SPLIT_RE.sub("", line))
