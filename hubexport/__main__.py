"""
Entry point when running as a module: python -m hubexport
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
