"""
Simple config loader for engine components.
Reads directly from the centralized TOML config.

@.architecture
Incoming: config/engine.toml, config/settings.py --- {TOML file, load_config calls}
Processing: load_config(), get_fallback_config(), get_section() --- {3 jobs: config_loading, fallback_generation, section_extraction}
Outgoing: config/settings.py --- {Dict[str, Any] config data}
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path(__file__).parent.parent / "config" / "engine.toml"


def load_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from the centralized TOML file."""
    path = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    try:
        with open(path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except Exception as e:
        logger.warning(f"Failed to load centralized config {path}: {e}")
        return get_fallback_config()


def get_fallback_config() -> Dict[str, Any]:
    """Fallback configuration if TOML file can't be loaded."""
    return {
        "ENGINE": {
            "environment": "development",
        },
        "STORAGE": {
            "backend": "file",
            "settings_dir": "./data/settings",
            "settings_key": "epqs_integration_settings",
        },
        "EXPORT": {
            "output_dir": "./data/exports",
        },
        "MONITORING": {
            "log_level": "INFO",
            "log_format": "text",
        },
    }


def get_section(name: str, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Get a single top-level section, empty if absent."""
    config = config if config is not None else load_config()
    section = config.get(name, {})
    return section if isinstance(section, dict) else {}
