"""Type definitions for configuration resolution."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

# Read-only mapping handed to downstream collaborators.
EffectiveConfig = Mapping[str, Any]


class ConfigSource(str, Enum):
    """Where a resolved configuration value comes from."""

    PREFIXED = "prefixed"  # Subsystem-scoped key, prefix stripped
    AMBIENT = "ambient"  # Non-prefixed default
