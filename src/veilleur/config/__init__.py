"""
Configuration.
"""

from veilleur.config.settings import (
    TrackingConfig,
    VeilleurConfig,
    get_settings,
    load_config,
    reset_settings,
)

__all__ = [
    "TrackingConfig",
    "VeilleurConfig",
    "get_settings",
    "load_config",
    "reset_settings",
]
