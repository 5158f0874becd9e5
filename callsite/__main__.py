"""
Entry point for running callsite as a module.

Usage:
    python -m callsite SYMBOL [PATH ...]
"""

import sys

from .main import main


if __name__ == "__main__":
    sys.exit(main())
