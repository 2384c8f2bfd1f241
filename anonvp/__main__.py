"""anonvp CLI entry point: python -m anonvp"""

from __future__ import annotations

import sys

from anonvp.cli import main

if __name__ == "__main__":
    sys.exit(main())
