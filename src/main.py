# src/main.py
"""
Bottle Up - source checkout launcher
====================================

Run ``python src/main.py`` without installing the package.
"""

import sys

from bottle_sim.app import main


if __name__ == "__main__":
    sys.exit(main())
