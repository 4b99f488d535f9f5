"""Entry point for running cfgowatch as a module.

Usage:
    python -m cfgowatch [WORKSPACE]
"""

import sys

from cfgowatch.cli import main

if __name__ == "__main__":
    sys.exit(main())
