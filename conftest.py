"""Pytest bootstrap so the src/ layout imports without an editable install."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent

EXTRA_PATHS = [
    ROOT / "src",
]

for path in EXTRA_PATHS:
    if path.exists() and str(path) not in sys.path:
        sys.path.insert(0, str(path))
