#!/usr/bin/env python3
"""Validate a jobscout configuration file without touching the database.

Usage:
    python verify_config.py [path]   # defaults to config.example.yaml
"""

import sys
from pathlib import Path

from jobscout.config import validate_config_file


def main() -> int:
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.example.yaml")
    return 0 if validate_config_file(path) else 1


if __name__ == "__main__":
    sys.exit(main())
