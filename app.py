"""
Integration Engine Factory

Creates and configures the IntegrationEngine with:
- Settings (TOML + environment variables)
- Logging preset matching the environment
- Built-in registry loaded from YAML
- Settings persistence backend (file or memory)

@.architecture
Incoming: main.py, config/settings.py, core/integrations/framework/loader.py, data/storage/*.py --- {Settings object, BuiltinRegistry, KeyValueStore}
Processing: create_engine(), create_settings_backend(), configure_engine_logging() --- {4 jobs: configuration_loading, logging_setup, registry_loading, backend_selection}
Outgoing: main.py, presentation layer --- {IntegrationEngine instance}
"""

from typing import Optional

from config.settings import Settings, get_settings
from core.integrations.engine import IntegrationEngine
from core.integrations.framework.loader import RegistryLoader
from data.storage import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SettingsStore,
)
from monitoring import configure_from_preset, get_logger

logger = get_logger(__name__)


def configure_engine_logging(settings: Settings) -> None:
    """Configure logging based on environment"""
    if settings.environment == "production":
        configure_from_preset(
            "production",
            level=settings.monitoring.log_level,
            format_type=settings.monitoring.log_format,
        )
    elif settings.environment == "test":
        configure_from_preset("testing")
    else:
        configure_from_preset(
            "development",
            level=settings.monitoring.log_level,
            format_type=settings.monitoring.log_format,
        )


def create_settings_backend(settings: Settings) -> KeyValueStore:
    """Key-value slot for persisted integration settings"""
    if settings.storage.backend == "memory":
        return MemoryKeyValueStore()
    return FileKeyValueStore(settings.storage.settings_dir)


def create_engine(
    settings: Optional[Settings] = None,
    backend: Optional[KeyValueStore] = None,
    configure_logs: bool = False,
) -> IntegrationEngine:
    """
    Create and configure the integration engine.

    Args:
        settings: Engine settings (defaults to get_settings())
        backend: Explicit key-value backend, bypassing settings.storage.backend
        configure_logs: Install the logging preset for settings.environment

    Returns:
        IntegrationEngine: Engine with persisted overrides applied

    Raises:
        CatalogConfigurationError: If the built-in registry is missing or invalid
    """
    settings = settings or get_settings()

    if configure_logs:
        configure_engine_logging(settings)

    registry = RegistryLoader(settings.registry_path).load()
    store = SettingsStore(
        backend if backend is not None else create_settings_backend(settings),
        key=settings.storage.settings_key,
    )

    engine = IntegrationEngine(registry, settings_store=store)
    logger.debug(
        f"Created {settings.app_name} {settings.app_version}",
        environment=settings.environment,
        registry_version=registry.version,
    )
    return engine
