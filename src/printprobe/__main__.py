"""Allow ``python -m printprobe``."""

from printprobe.cli import main

main()
