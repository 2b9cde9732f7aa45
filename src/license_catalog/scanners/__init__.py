"""Dependency scanners for build tool outputs.

This module provides scanners that turn resolved dependency listings into a
dependency graph.
"""

from pathlib import Path
from typing import Optional

from license_catalog.scanners.base import BaseScanner
from license_catalog.scanners.coords import CoordinateListScanner
from license_catalog.scanners.gradle import GradleDependenciesScanner

__all__ = [
    "BaseScanner",
    "CoordinateListScanner",
    "GradleDependenciesScanner",
    "get_scanner",
]


def get_scanner(path: Path, configuration: Optional[str] = None) -> BaseScanner:
    """Get the appropriate scanner for a given file path.

    Gradle output is detected by content; coordinate lists by file name.

    Args:
        path: Path to the dependency listing.
        configuration: Gradle configuration to read, if the file holds several.

    Returns:
        Scanner instance configured for the given file.

    Raises:
        ValueError: If no scanner can handle the given file.
    """
    if GradleDependenciesScanner.can_handle(path):
        return GradleDependenciesScanner(path, configuration=configuration)
    if CoordinateListScanner.can_handle(path):
        return CoordinateListScanner(path)

    raise ValueError(
        f"No scanner available for '{path.name}'. "
        f"Supported files: gradle dependencies output (*.txt, *.log), "
        f"dependencies.txt, *.coords"
    )
