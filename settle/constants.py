"""Centralized constants for settle.

Default timings and configuration paths live here so waiters and
per-resource presets agree on them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

# =============================================================================
# Polling (seconds)
# =============================================================================

DEFAULT_POLL_INTERVAL: Final = 10.0
"""Default interval between probes."""

DEFAULT_NOT_FOUND_CHECKS: Final = 20
"""NotFound probes tolerated by creation waiters before giving up."""


# =============================================================================
# Configuration
# =============================================================================

GLOBAL_CONFIG_PATH: Final = Path.home() / ".settle" / "defaults.toml"
PROJECT_CONFIG_NAME: Final = "settle.toml"
