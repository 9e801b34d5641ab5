"""Backslash escape decoding for ``echo`` arguments.

``echo`` is an external program, but the shell decodes escape
sequences in its arguments before handing them over, so
``echo a\\tb`` prints a real tab.  The grammar is the familiar
``echo -e`` one::

    \\\\  backslash        \\a  bell            \\b  backspace
    \\e   escape (0x1b)    \\f  form feed       \\n  newline
    \\r   carriage return  \\t  tab             \\v  vertical tab
    \\0NNN  octal byte (up to three digits)
    \\xHH   hex byte (one or two digits)

Numeric escapes name bytes, not code points: ``\\xff`` reaches the
program as the single byte 0xff.  Unknown sequences are kept as
written and reported as a warning.
"""

import re

from simple_shell.logging import Logger

_SIMPLE_ESCAPES: dict[str, str] = {
    "\\": "\\",
    "a": "\a",
    "b": "\b",
    "e": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}

_BYTE_MASK = 0xFF
_FIRST_HIGH_BYTE = 0x80
_SURROGATE_BASE = 0xDC00

_ESCAPE_RE = re.compile(r"\\(0[0-7]{0,3}|x[0-9A-Fa-f]{1,2}|.?)", re.DOTALL)


def _byte(value: int) -> str:
    """Return the character that encodes to the single byte *value*.

    Values above 0xFF wrap to one byte.  Bytes 0x80-0xFF map to their
    ``surrogateescape`` form so ``os.fsencode`` passes them through raw.
    """
    value &= _BYTE_MASK
    if value < _FIRST_HIGH_BYTE:
        return chr(value)
    return chr(_SURROGATE_BASE + value)


def decode(token: str, logger: Logger | None = None) -> str | None:
    """Decode backslash escapes in *token*.

    Args:
        token: One argument as typed by the user.
        logger: Receives a warning for each unknown escape sequence.

    Returns:
        The decoded string, or ``None`` if *token* contains no escapes.

    """
    if "\\" not in token:
        return None

    def _replace(match: re.Match[str]) -> str:
        body = match.group(1)
        if not body:
            # Lone trailing backslash
            return "\\"
        if body in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[body]
        if body[0] == "0":
            return _byte(int(body, 8)) if len(body) > 1 else "\0"
        if body[0] == "x" and len(body) > 1:
            return _byte(int(body[1:], 16))
        if logger is not None:
            logger.warning(f"unknown escape sequence '\\{body}'", source="escape")
        return match.group(0)

    return _ESCAPE_RE.sub(_replace, token)
