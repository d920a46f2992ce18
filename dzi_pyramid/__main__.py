"""
Main entry point for the pyramid generator.

Allows running: python -m dzi_pyramid <inputs>
"""

import sys
from dzi_pyramid.cli import main

if __name__ == "__main__":
    sys.exit(main())
