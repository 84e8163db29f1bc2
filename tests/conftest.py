"""
Pytest Configuration and Shared Fixtures

Provides the built-in registry, in-memory settings backends and engines
shared by the unit and integration tests.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, Optional

import pytest

# Test environment setup
os.environ["EPQS_ENVIRONMENT"] = "test"
os.environ["STORAGE_BACKEND"] = "memory"

from config.settings import get_settings, reload_settings
from core.integrations.engine import IntegrationEngine
from core.integrations.framework.loader import BuiltinRegistry, RegistryLoader
from data.storage import DEFAULT_SETTINGS_KEY, MemoryKeyValueStore, SettingsStore


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test component interactions"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def test_settings():
    """Load test settings."""
    reload_settings()  # Clear cache and reload with test environment
    return get_settings()


@pytest.fixture
def fresh_settings() -> Generator[None, None, None]:
    """Clear the settings cache around a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Registry Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def registry() -> BuiltinRegistry:
    """Built-in registry parsed from config/integrations_registry.yaml."""
    return RegistryLoader().load()


# =============================================================================
# Storage Fixtures
# =============================================================================

def make_backend(overrides: Optional[Dict[str, Any]] = None, raw: Optional[str] = None) -> MemoryKeyValueStore:
    """Memory backend pre-seeded with an override blob (or a raw string)."""
    if raw is not None:
        return MemoryKeyValueStore({DEFAULT_SETTINGS_KEY: raw})
    if overrides is not None:
        return MemoryKeyValueStore({DEFAULT_SETTINGS_KEY: json.dumps(overrides)})
    return MemoryKeyValueStore()


@pytest.fixture
def memory_backend() -> MemoryKeyValueStore:
    """Empty in-memory settings backend."""
    return make_backend()


@pytest.fixture
def settings_store(memory_backend) -> SettingsStore:
    return SettingsStore(memory_backend)


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def engine(registry, settings_store) -> IntegrationEngine:
    """Engine with built-ins only (nothing persisted)."""
    return IntegrationEngine(registry, settings_store=settings_store)


@pytest.fixture
def backend_factory():
    """Factory for memory backends seeded with an override blob."""
    return make_backend


@pytest.fixture
def engine_factory(registry):
    """Factory for engines over a given backend."""
    def _create(backend: MemoryKeyValueStore) -> IntegrationEngine:
        return IntegrationEngine(registry, settings_store=SettingsStore(backend))
    return _create
