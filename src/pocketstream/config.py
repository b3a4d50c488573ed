"""
Configuration helpers for pocketstream.

Configuration is resolved from a hierarchy: explicit instance configuration
first, then ``POCKETSTREAM_*`` environment variables, then defaults.
"""

import os
from typing import Any, Dict, Optional

ENV_PREFIX = "POCKETSTREAM_"


def get_env_config(key: str) -> Optional[str]:
    """Get a configuration value from the environment.

    Args:
        key: The configuration key, e.g. ``channel_size``

    Returns:
        The raw string value of ``POCKETSTREAM_<KEY>``, or None if unset
    """
    return os.environ.get(f"{ENV_PREFIX}{key.upper()}")


def merge_configs(*configs: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge configuration dictionaries, later ones taking precedence.

    Args:
        *configs: Configuration dictionaries; None entries are skipped

    Returns:
        A new merged dictionary
    """
    merged: Dict[str, Any] = {}
    for config in configs:
        if config:
            merged.update(config)
    return merged
