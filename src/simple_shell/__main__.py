"""Allow ``python -m simple_shell``."""

from simple_shell.repl import main

main()
