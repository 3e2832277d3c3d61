"""Configuration defaults for the Parker MCP package.

Environment Variables:
    PARKER_VAL_MAX: Exclusive upper bound of the values the search tries
        when the CLI or the MCP tools are not given one (default 100)
    PARKER_LOG_LEVEL: Logging level name used by the CLI (default WARNING)
"""
import logging
import os
from typing import Optional

from .squares import MAX_VAL_MAX, VAL_MAX

logger = logging.getLogger(__name__)


def read_val_max(raw: Optional[str]) -> int:
    """Parse PARKER_VAL_MAX, falling back to VAL_MAX when it is unset or unusable."""
    if raw is None or not raw.strip():
        return VAL_MAX
    try:
        val_max = int(raw)
    except ValueError:
        logger.warning("Ignoring PARKER_VAL_MAX=%r: not an integer, using %d", raw, VAL_MAX)
        return VAL_MAX
    if not 2 <= val_max <= MAX_VAL_MAX:
        logger.warning(
            "Ignoring PARKER_VAL_MAX=%d: outside [2, %d], using %d", val_max, MAX_VAL_MAX, VAL_MAX
        )
        return VAL_MAX
    return val_max


# Search range used by the CLI and the MCP server
DEFAULT_VAL_MAX = read_val_max(os.getenv("PARKER_VAL_MAX"))

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_LOG_LEVEL = os.getenv("PARKER_LOG_LEVEL", "WARNING").upper()
if DEFAULT_LOG_LEVEL not in LOG_LEVELS:
    DEFAULT_LOG_LEVEL = "WARNING"

# Transport used by `python -m parker_mcp serve`
SERVER_TRANSPORT = "streamable-http"
