"""Convenience shim to run the Travis build restarter."""

from __future__ import annotations

import sys

from src.restart.runner import main as restart_main


if __name__ == "__main__":
    sys.exit(restart_main(sys.argv[1:]))
