"""
Unit Tests: Storage

Tests for key-value backends, SettingsStore and local artifact storage.
"""

import json
import logging

import pytest

from core.integrations.framework import RenderedArtifact, SettingsPersistenceError
from data.storage import (
    DEFAULT_SETTINGS_KEY,
    FileKeyValueStore,
    LocalArtifactStorage,
    MemoryKeyValueStore,
    SettingsStore,
)


class FailingBackend:
    """Backend whose every operation fails."""

    def get(self, key):
        raise SettingsPersistenceError("disk unavailable")

    def set(self, key, value):
        raise SettingsPersistenceError("disk full")


# =============================================================================
# Key-Value Backends
# =============================================================================

@pytest.mark.unit
class TestFileKeyValueStore:
    """Test file-backed settings slots."""

    def test_set_and_get(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("settings", '{"a": 1}')

        assert store.get("settings") == '{"a": 1}'
        assert (tmp_path / "settings.json").exists()
        assert not list(tmp_path.glob("*.tmp"))

    def test_missing_key(self, tmp_path):
        assert FileKeyValueStore(tmp_path).get("settings") is None

    def test_creates_directory(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "nested" / "dir")
        store.set("k", "v")

        assert store.get("k") == "v"

    def test_invalid_key(self, tmp_path):
        with pytest.raises(SettingsPersistenceError):
            FileKeyValueStore(tmp_path).get("../escape")

    def test_delete(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("k", "v")
        store.delete("k")
        store.delete("k")

        assert store.get("k") is None


@pytest.mark.unit
class TestMemoryKeyValueStore:

    def test_roundtrip(self):
        store = MemoryKeyValueStore({"k": "v"})

        assert store.get("k") == "v"
        store.delete("k")
        assert store.get("k") is None


# =============================================================================
# Settings Store
# =============================================================================

@pytest.mark.unit
class TestSettingsStore:
    """Test best-effort loading and saving of overrides."""

    def test_load_missing_slot(self, settings_store):
        assert settings_store.load() == {}
        assert settings_store.last_error is None

    def test_load_valid_blob(self, backend_factory):
        store = SettingsStore(backend_factory({"jamovi": {"name": "X"}}))

        assert store.load() == {"jamovi": {"name": "X"}}

    def test_load_corrupted_blob(self, backend_factory, caplog):
        store = SettingsStore(backend_factory(raw="{not json"))

        with caplog.at_level(logging.WARNING):
            assert store.load() == {}

        assert store.last_error is not None
        assert "unparsable" in caplog.text

    def test_load_non_object_blob(self, backend_factory):
        store = SettingsStore(backend_factory(raw="[1, 2, 3]"))

        assert store.load() == {}
        assert "expected a JSON object" in store.last_error

    def test_load_backend_failure(self):
        store = SettingsStore(FailingBackend())

        assert store.load() == {}
        assert "disk unavailable" in store.last_error

    def test_load_with_unusable_file_key(self, tmp_path):
        store = SettingsStore(FileKeyValueStore(tmp_path), key="epqs integration settings")

        assert store.load() == {}
        assert "Invalid storage key" in store.last_error

    def test_save_with_unusable_file_key(self, tmp_path):
        store = SettingsStore(FileKeyValueStore(tmp_path), key="epqs integration settings")

        assert store.save({"jamovi": {"name": "X"}}) is False
        assert not list(tmp_path.iterdir())

    def test_load_deeply_nested_blob(self, backend_factory):
        store = SettingsStore(backend_factory(raw="[" * 100000 + "]" * 100000))

        assert store.load() == {}
        assert store.last_error is not None

    def test_save(self, memory_backend):
        store = SettingsStore(memory_backend)

        assert store.save({"jamovi": {"name": "Jamovi", "downloadUrl": "https://jamovi.org"}}) is True
        assert json.loads(memory_backend.get(DEFAULT_SETTINGS_KEY)) == {
            "jamovi": {"name": "Jamovi", "downloadUrl": "https://jamovi.org"}
        }

    def test_save_keeps_non_ascii(self, memory_backend):
        SettingsStore(memory_backend).save({"jamovi": {"description": "Análise"}})

        assert "Análise" in memory_backend.get(DEFAULT_SETTINGS_KEY)

    def test_save_failure_is_swallowed(self, caplog):
        store = SettingsStore(FailingBackend())

        with caplog.at_level(logging.ERROR):
            assert store.save({"jamovi": {"name": "X"}}) is False

        assert "disk full" in store.last_error
        assert "disk full" in caplog.text

    def test_custom_key(self, memory_backend):
        SettingsStore(memory_backend, key="other").save({})

        assert memory_backend.get("other") == "{}"
        assert memory_backend.get(DEFAULT_SETTINGS_KEY) is None


# =============================================================================
# Local Artifact Storage
# =============================================================================

@pytest.mark.unit
class TestLocalArtifactStorage:
    """Test writing rendered artifacts to disk."""

    def test_save_by_media_type(self, tmp_path):
        storage = LocalArtifactStorage(str(tmp_path))
        artifact = RenderedArtifact(content="a,b\n1,2", filename="t_template.csv", media_type="text/csv")

        path = storage.save_artifact(artifact)

        assert path == (tmp_path / "csv" / "t_template.csv").resolve()
        assert storage.read_artifact("t_template.csv") == "a,b\n1,2"
        assert storage.artifact_exists("t_template.csv")
        assert storage.list_artifacts() == [path]

    def test_save_to_explicit_subdirectory(self, tmp_path):
        storage = LocalArtifactStorage(str(tmp_path))
        artifact = RenderedArtifact(content="x", filename="t_template.cfg", media_type="text/plain")

        path = storage.save_artifact(artifact, subdirectory="jaamsim")

        assert path.parent.name == "jaamsim"
        assert storage.read_artifact("t_template.cfg", subdirectory="jaamsim") == "x"

    def test_path_traversal_rejected(self, tmp_path):
        storage = LocalArtifactStorage(str(tmp_path / "exports"))
        artifact = RenderedArtifact(content="x", filename="../../escape.csv", media_type="text/csv")

        with pytest.raises(ValueError):
            storage.save_artifact(artifact)

    def test_read_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalArtifactStorage(str(tmp_path)).read_artifact("missing.csv")
