"""License Catalog - License compliance metadata for Maven-style dependencies.

This package resolves dependency metadata from POM files, keeps a catalog of
licenses and their artifacts, reconciles it with the live dependency set and
generates code and reports from it.
"""

__version__ = "0.1.0"

from license_catalog.models import (
    ArtifactRecord,
    Catalog,
    Coordinate,
    DependencyGraph,
    LicenseClaim,
    LicenseRecord,
    PackageMetadata,
)

__all__ = [
    "__version__",
    "ArtifactRecord",
    "Catalog",
    "Coordinate",
    "DependencyGraph",
    "LicenseClaim",
    "LicenseRecord",
    "PackageMetadata",
]
