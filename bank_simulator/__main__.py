"""Main entry point for python -m bank_simulator"""

import sys

from bank_simulator.cli import main

if __name__ == "__main__":
    sys.exit(main())
