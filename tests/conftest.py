"""Pytest configuration for root-level integration tests.

Adds the form core and the shared package to sys.path so the Streamlit shell
and cross-package tests import without an install.
"""

import sys
from pathlib import Path

SERVICES_ROOT = Path(__file__).resolve().parents[1] / "services"

SERVICE_PATHS = [
    SERVICES_ROOT / "expense-form" / "src",
    SERVICES_ROOT,
]

for path in SERVICE_PATHS:
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)
