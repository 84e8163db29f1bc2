"""
Local Artifact Storage - writes rendered export templates to disk

@.architecture
Incoming: main.py (render --output-dir), Local filesystem (base_dir) --- {RenderedArtifact, subdirectory}
Processing: save_artifact(), read_artifact(), artifact_exists(), list_artifacts(), _get_subdirectory(), _validate_path() --- {4 jobs: artifact_persistence, type_categorization, path_validation, directory_management}
Outgoing: Local filesystem (Path.write_text/read_text) --- {files organized in csv/scripts/config/json subdirectories, Path of saved artifact}

Artifacts are organized by media type:
- csv/      - tabular seed data (.csv)
- scripts/  - generated scripts (.py)
- config/   - simulation configuration (.cfg)
- json/     - structured dumps (.json)
"""

import logging
from pathlib import Path
from typing import List, Optional

from core.integrations.framework.base import RenderedArtifact

logger = logging.getLogger(__name__)


class LocalArtifactStorage:
    """
    Local storage for rendered artifacts with type-based organization.

    Directory Structure:
        exports/
        ├── csv/       # text/csv
        ├── scripts/   # text/x-python
        ├── config/    # text/plain
        └── json/      # application/json
    """

    MEDIA_TYPE_DIRS = {
        "text/csv": "csv",
        "text/x-python": "scripts",
        "text/plain": "config",
        "application/json": "json",
    }

    def __init__(self, base_dir: str = "./data/exports"):
        """
        Initialize local artifact storage.

        Args:
            base_dir: Base directory for exported artifacts
        """
        self.base_dir = Path(base_dir).resolve()
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Create storage directories if they don't exist."""
        directories = [self.base_dir] + [
            self.base_dir / subdir for subdir in self.MEDIA_TYPE_DIRS.values()
        ]

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

        logger.debug(f"Export directories ensured at {self.base_dir}")

    def _get_subdirectory(self, artifact: RenderedArtifact) -> Path:
        subdir_name = self.MEDIA_TYPE_DIRS.get(artifact.media_type)
        if subdir_name is None:
            return self.base_dir
        return self.base_dir / subdir_name

    def _validate_path(self, path: Path) -> None:
        """
        Validate that path is within storage directory.

        Raises:
            ValueError: If path is outside storage directory
        """
        try:
            path.resolve().relative_to(self.base_dir)
        except ValueError:
            raise ValueError(f"Invalid path: {path} is outside storage directory")

    # =========================================================================
    # ARTIFACT OPERATIONS
    # =========================================================================

    def save_artifact(
        self,
        artifact: RenderedArtifact,
        subdirectory: Optional[str] = None
    ) -> Path:
        """
        Save a rendered artifact.

        Args:
            artifact: Rendered artifact
            subdirectory: Optional explicit subdirectory override

        Returns:
            Absolute path to saved file

        Raises:
            ValueError: If path is invalid
            OSError: If the write fails
        """
        if subdirectory:
            target_dir = self.base_dir / subdirectory
            target_dir.mkdir(parents=True, exist_ok=True)
        else:
            target_dir = self._get_subdirectory(artifact)

        file_path = target_dir / artifact.filename
        self._validate_path(file_path)

        try:
            file_path.write_text(artifact.content, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save artifact {artifact.filename}: {e}")
            raise

        logger.info(f"Saved artifact: {file_path} ({artifact.size} bytes)")
        return file_path

    def read_artifact(self, filename: str, subdirectory: Optional[str] = None) -> str:
        """
        Read a previously saved artifact.

        Raises:
            FileNotFoundError: If the artifact doesn't exist
            ValueError: If path is invalid
        """
        file_path = self._find(filename, subdirectory)
        if file_path is None:
            raise FileNotFoundError(f"Artifact not found: {filename}")
        return file_path.read_text(encoding="utf-8")

    def artifact_exists(self, filename: str, subdirectory: Optional[str] = None) -> bool:
        return self._find(filename, subdirectory) is not None

    def list_artifacts(self) -> List[Path]:
        """All saved artifacts, sorted by path"""
        return sorted(path for path in self.base_dir.rglob("*") if path.is_file())

    def _find(self, filename: str, subdirectory: Optional[str]) -> Optional[Path]:
        if subdirectory:
            search_dirs = [self.base_dir / subdirectory]
        else:
            search_dirs = [self.base_dir] + [
                self.base_dir / subdir for subdir in self.MEDIA_TYPE_DIRS.values()
            ]

        for search_dir in search_dirs:
            candidate = search_dir / filename
            self._validate_path(candidate)
            if candidate.exists():
                return candidate
        return None
