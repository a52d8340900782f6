"""Entry point for task-deadline when run as a module.

This allows the package to be run with: python -m taskdeadline
"""

import sys

from taskdeadline.cli import main

if __name__ == "__main__":
    sys.exit(main())
