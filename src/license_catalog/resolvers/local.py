"""Fetchers that read POM files already present on disk.

Supports the Maven local repository layout (``~/.m2/repository``) and the
Gradle module cache layout
(``~/.gradle/caches/modules-2/files-2.1/<group>/<name>/<version>/<hash>/``).
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from license_catalog.models import Coordinate
from license_catalog.resolvers.base import MetadataFetcher, pom_path

logger = logging.getLogger(__name__)


def _read_bytes(path: Path) -> Optional[bytes]:
    try:
        return path.read_bytes()
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
        return None


class LocalRepositoryFetcher(MetadataFetcher):
    """Reads POM files from a Maven-layout directory."""

    def __init__(self, root: Optional[Path] = None) -> None:
        """Initialize the fetcher.

        Args:
            root: Repository root. Defaults to ~/.m2/repository.
        """
        self.root = root if root is not None else Path.home() / ".m2" / "repository"

    @property
    def name(self) -> str:
        return "maven-local"

    async def fetch(self, coordinate: Coordinate) -> Optional[bytes]:
        if not coordinate.version:
            return None
        path = self.root / pom_path(coordinate)
        if not path.is_file():
            return None
        return await asyncio.to_thread(_read_bytes, path)


class GradleCacheFetcher(MetadataFetcher):
    """Reads POM files from Gradle's module cache."""

    def __init__(self, root: Optional[Path] = None) -> None:
        """Initialize the fetcher.

        Args:
            root: The ``files-2.1`` directory. Defaults to the one under
                ~/.gradle/caches/modules-2.
        """
        self.root = (
            root
            if root is not None
            else Path.home() / ".gradle" / "caches" / "modules-2" / "files-2.1"
        )

    @property
    def name(self) -> str:
        return "gradle-cache"

    async def fetch(self, coordinate: Coordinate) -> Optional[bytes]:
        if not coordinate.version:
            return None
        version_dir = self.root / coordinate.namespace / coordinate.name / coordinate.version
        if not version_dir.is_dir():
            return None
        file_name = f"{coordinate.name}-{coordinate.version}.pom"
        # Hash directories are not ordered; sort for a stable pick.
        for candidate in sorted(version_dir.glob(f"*/{file_name}")):
            data = await asyncio.to_thread(_read_bytes, candidate)
            if data is not None:
                return data
        return None
