"""
Package entry point.

Allows running: python -m gmaps_reviews reviews ChIJN1t_tDeuEmsRUsoyG83frY4
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
