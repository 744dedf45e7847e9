"""
Pytest configuration for the wiring diagram router.
Ensures that the root directory is in the Python path so imports work correctly.
"""

import sys
from pathlib import Path

import matplotlib

# Tests render debug plots without a display
matplotlib.use("Agg")

# Add the project root to Python path
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
