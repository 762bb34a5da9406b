"""Pytest configuration file to set up the Python path for testing."""

import sys
from pathlib import Path

# Add the repository root to Python path so that 'hemnet_search' imports work
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))
