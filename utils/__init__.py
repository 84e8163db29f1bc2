"""
Utilities - shared helpers for the integration engine.

- config: TOML config loading with fallback defaults
"""

from .config import load_config, get_fallback_config, get_section

__all__ = [
    "load_config",
    "get_fallback_config",
    "get_section",
]
