"""Pytest configuration.

Allows running tests directly from the repo without requiring an editable install.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))


def require_slow() -> None:
    """Skip tests marked as slow unless RUN_SLOW=1 is set."""
    if os.environ.get("RUN_SLOW", "") != "1":
        pytest.skip("Set RUN_SLOW=1 to run the full-range square search")


@pytest.fixture(scope="session")
def squares_below_48():
    """Every qualifying square with entries below 48, the smallest range holding the Parker Square."""
    from parker_mcp.squares import find_semi_magic_squares

    return find_semi_magic_squares(48)
