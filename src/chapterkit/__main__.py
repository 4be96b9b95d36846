"""Allow running as ``python -m chapterkit``."""

import sys

from chapterkit.cli import main

if __name__ == "__main__":
    sys.exit(main())
