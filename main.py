#!/usr/bin/env python3
# /revtui/main.py
"""
revtui Main Entry Point
=======================

This script launches revtui from a source checkout. It performs:
1) Path Setup: ensures the revtui package under src/ is importable.
2) Startup: hands over to `revtui.core.App.main`, the same entry point the
   installed `revtui` console script runs.

Usage: python main.py [REPO_DIR]
"""

import os
import sys

# --- Step 1: Set up the Python Path ---
project_root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# --- Step 2: Hand over to the package entry point ---
from revtui.core.App import main  # noqa: E402


if __name__ == "__main__":
    main()
