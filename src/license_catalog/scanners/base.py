"""Base interface for dependency scanners.

Scanners turn the output of a build tool's dependency resolution into a
:class:`~license_catalog.models.DependencyGraph` without running the build
tool themselves.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from license_catalog.models import DependencyGraph


class BaseScanner(ABC):
    """Abstract base class for dependency scanners.

    Attributes:
        source_path: Optional path to the file being scanned.
    """

    def __init__(self, source_path: Optional[Path] = None) -> None:
        """Initialize the scanner.

        Args:
            source_path: Optional path to the source file.
        """
        self.source_path = source_path

    def _read_source(self) -> str:
        if not self.source_path:
            raise ValueError("source_path must be provided")
        if not self.source_path.exists():
            raise FileNotFoundError(f"Dependency file not found: {self.source_path}")
        return self.source_path.read_text(encoding="utf-8")

    def scan(self) -> DependencyGraph:
        """Scan the source file and build the dependency graph.

        Returns:
            DependencyGraph of the resolved dependencies.

        Raises:
            FileNotFoundError: If the source file does not exist.
            ValueError: If the source path was not provided.
        """
        return self.parse(self._read_source())

    @abstractmethod
    def parse(self, text: str) -> DependencyGraph:
        """Parse dependency text into a graph.

        Args:
            text: Content of the dependency file.

        Returns:
            DependencyGraph of the resolved dependencies.
        """
        ...

    @classmethod
    @abstractmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if this scanner can process the file, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return a human-readable name for this scanner's source type."""
        ...
