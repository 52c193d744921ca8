#!/usr/bin/env python3
"""
pimctl CLI.

Script entry point for running from a source checkout. An installed
package provides the same command as `pimctl`.

Usage:
    python cli.py --help
    python cli.py show status
    python cli.py -d show pim routes
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from pimctl.cli.main import main

if __name__ == "__main__":
    main()
