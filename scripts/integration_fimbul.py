"""CLI entry point for upserting the latest Fimbul station readings."""

from __future__ import annotations

import sys

from integration_fimbul.main import main


if __name__ == "__main__":
    sys.exit(main())
