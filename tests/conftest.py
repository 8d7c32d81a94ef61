"""Pytest configuration for path setup.

The test suite requires access to modules located under ``botkit/src``.
When pytest is executed as an installed script, the repository root is not
automatically added to ``sys.path``.  This file ensures that both the project
root (for ``tests.helpers`` and ``scripts``) and the ``botkit/src`` directory
are available for imports during test collection.
"""

from __future__ import annotations

import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]

for path in (ROOT, ROOT / "botkit" / "src"):
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)
