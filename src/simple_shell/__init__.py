"""simple_shell — a small line-oriented command interpreter.

Reads a line, splits it into arguments, and either runs a builtin
(``exit``, ``proc``) or starts an external program in the foreground.
"""

__version__ = "0.1.0"
