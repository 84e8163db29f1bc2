"""
Settings Management

Pydantic-based settings schema with environment variable support.
Integrates with the TOML config and provides type-safe access.

@.architecture
Incoming: utils/config.py, Environment variables, config/engine.toml, app.py --- {Dict from load_toml_config, str from os.getenv, TOML config dict, get_settings calls}
Processing: get_settings(), reload_settings(), Settings.__init__(), field_validator() --- {4 jobs: configuration_loading, environment_variable_merging, schema_validation, caching}
Outgoing: app.py, main.py, data/storage/*.py --- {Settings Pydantic model with typed config sections}
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from utils.config import get_section, load_config as load_toml_config


# =============================================================================
# Settings Schemas
# =============================================================================

class StorageSettings(BaseModel):
    """Durable key-value slot holding the integration overrides."""
    backend: str = "file"  # file|memory
    settings_dir: Path = Field(default_factory=lambda: Path("./data/settings"))
    settings_key: str = "epqs_integration_settings"

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        allowed = ["file", "memory"]
        if v not in allowed:
            raise ValueError(f"Storage backend must be one of {allowed}")
        return v


class ExportSettings(BaseModel):
    """Where rendered artifacts are written by the CLI."""
    output_dir: Path = Field(default_factory=lambda: Path("./data/exports"))


class MonitoringSettings(BaseModel):
    """Logging configuration."""
    log_level: str = "INFO"
    log_format: str = "text"  # json|text


class Settings(BaseModel):
    """
    Main engine settings.

    Loads configuration from:
    1. TOML config file (engine.toml)
    2. Environment variables (prefixed by section)
    3. Defaults defined in schemas

    Priority: Environment variables > TOML config > Defaults
    """

    app_name: str = "EPQS Integration Engine"
    app_version: str = "1.0.0"
    environment: str = "development"  # development|production|test

    registry_path: Path = Field(
        default_factory=lambda: Path(__file__).parent / "integrations_registry.yaml",
        description="Built-in catalog registry (YAML)"
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = ['development', 'production', 'test']
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v


# =============================================================================
# Settings Loader
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Load and return engine settings (cached).

    Returns:
        Settings: Complete engine settings
    """
    toml_config = load_toml_config()

    engine_config = get_section("ENGINE", toml_config)
    storage_settings: Dict[str, Any] = dict(get_section("STORAGE", toml_config))
    export_settings: Dict[str, Any] = dict(get_section("EXPORT", toml_config))
    monitoring_settings: Dict[str, Any] = dict(get_section("MONITORING", toml_config))

    settings_dict: Dict[str, Any] = {
        "environment": os.getenv(
            "EPQS_ENVIRONMENT", engine_config.get("environment", "development")
        ),
    }

    if registry_path := os.getenv("EPQS_REGISTRY_PATH"):
        settings_dict["registry_path"] = Path(registry_path)

    # Override with environment variables if present
    if settings_dir := os.getenv("STORAGE_SETTINGS_DIR"):
        storage_settings["settings_dir"] = settings_dir
    if settings_key := os.getenv("STORAGE_SETTINGS_KEY"):
        storage_settings["settings_key"] = settings_key
    if backend := os.getenv("STORAGE_BACKEND"):
        storage_settings["backend"] = backend

    if output_dir := os.getenv("EXPORT_OUTPUT_DIR"):
        export_settings["output_dir"] = output_dir

    if log_level := os.getenv("MONITORING_LOG_LEVEL"):
        monitoring_settings["log_level"] = log_level
    if log_format := os.getenv("MONITORING_LOG_FORMAT"):
        monitoring_settings["log_format"] = log_format

    if storage_settings:
        settings_dict["storage"] = storage_settings
    if export_settings:
        settings_dict["export"] = export_settings
    if monitoring_settings:
        settings_dict["monitoring"] = monitoring_settings

    return Settings(**settings_dict)


def reload_settings() -> Settings:
    """
    Reload settings (clears cache).

    Returns:
        Settings: Reloaded engine settings
    """
    get_settings.cache_clear()
    return get_settings()
