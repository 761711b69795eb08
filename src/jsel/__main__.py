"""
CLI entry point for JSEL.

This allows the tool to be run as:
    python -m jsel program.json
"""

import sys
from jsel.jsel_cli import main

if __name__ == "__main__":
    sys.exit(main())
