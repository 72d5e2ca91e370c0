#!/usr/bin/env python3
"""
UTAP Flight Analysis Script

Runs the utap-analyze command line from a source checkout.

Usage:
    python scripts/analyze.py FLIGHT.json [FLIGHT.json ...] [--output REPORT]
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from utap.cli import main

if __name__ == "__main__":
    main()
