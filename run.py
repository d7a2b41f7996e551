#!/usr/bin/env python3
"""
Bank Account Simulator Entry Point

Starts the interactive menu against the configured account file.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from bank_simulator.cli import main


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted, accounts not saved.")
        sys.exit(130)
