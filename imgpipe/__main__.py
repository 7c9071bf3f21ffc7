"""
Main entry point for running the package as a module.

Usage:
    python -m imgpipe read photo.jpg
    python -m imgpipe thumbnail photo.jpg -s 200 -s 400 -o thumbs
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
