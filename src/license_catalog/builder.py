"""Catalog builder.

Folds resolved dependencies into a :class:`~license_catalog.models.Catalog`:
each artifact is filed under the normalized key of its first declared
license (or ``unknown``) and its namespace. Output is fully sorted so that
rebuilding from unchanged input yields a byte-identical catalog file.
"""

import logging
from typing import Optional

from license_catalog.models import (
    UNKNOWN_LICENSE_KEY,
    AmbiguousLicense,
    ArtifactRecord,
    Catalog,
    Coordinate,
    LicenseRecord,
    PackageMetadata,
)
from license_catalog.normalizer import is_ambiguous, normalize_key, strip_version_from_url
from license_catalog.well_known import (
    UNKNOWN_LICENSE_NAME,
    default_copyright_holders,
    supplement,
)

logger = logging.getLogger(__name__)


class CatalogBuilder:
    """Accumulates artifacts by license key and namespace, then freezes.

    The builder is fed sequentially after all metadata has been resolved,
    so the result does not depend on resolution order.

    Attributes:
        ambiguous: Artifacts whose license needs manual verification, in the
            order they were added.
    """

    def __init__(self, seed: Optional[Catalog] = None) -> None:
        """Initialize the builder.

        Args:
            seed: Optional existing catalog whose license names and URLs are
                kept for keys that end up used. Its artifacts are not copied.
        """
        self._license_info: dict[str, tuple[str, Optional[str]]] = {}
        self._groups: dict[str, dict[str, list[ArtifactRecord]]] = {}
        self._seen: set[str] = set()
        self.ambiguous: list[AmbiguousLicense] = []

        if seed is not None:
            for key, record in seed.licenses.items():
                self._license_info[key] = (record.name, record.url)

    def _register_license(self, key: str, name: str, url: Optional[str]) -> None:
        if key not in self._license_info:
            self._license_info[key] = (name, url)

    def _file(self, key: str, namespace: str, artifact: ArtifactRecord) -> bool:
        artifact_id = f"{namespace}:{artifact.name}"
        if artifact_id in self._seen:
            logger.debug("Skipping duplicate artifact %s", artifact_id)
            return False
        self._seen.add(artifact_id)
        self._groups.setdefault(key, {}).setdefault(namespace, []).append(artifact)
        return True

    def add_existing(self, key: str, namespace: str, artifact: ArtifactRecord) -> None:
        """Keep an artifact under the license key it already has."""
        self._file(key, namespace, artifact)

    def add_resolved(
        self, coordinate: Coordinate, metadata: Optional[PackageMetadata]
    ) -> str:
        """File a dependency using its resolved metadata.

        Args:
            coordinate: Dependency coordinate.
            metadata: Resolved metadata, or None when unavailable.

        Returns:
            The license key the artifact was filed under.
        """
        claim = metadata.primary_license if metadata is not None else None
        if claim is not None:
            key = normalize_key(claim.name, claim.url)
            self._register_license(key, claim.name, claim.url)
            if is_ambiguous(claim.name, claim.url):
                self.ambiguous.append(
                    AmbiguousLicense(
                        coordinate=coordinate.id,
                        license_name=claim.name,
                        license_url=claim.url,
                    )
                )
        else:
            key = UNKNOWN_LICENSE_KEY
            self._register_license(key, UNKNOWN_LICENSE_NAME, None)

        homepage = metadata.homepage_url if metadata is not None else None
        contributors = list(metadata.contributors) if metadata is not None else []
        artifact = ArtifactRecord(
            name=coordinate.name,
            url=strip_version_from_url(homepage) if homepage else None,
            copyright_holders=contributors or default_copyright_holders(key),
        )
        self._file(key, coordinate.namespace, artifact)
        return key

    def build(self) -> Catalog:
        """Freeze the accumulated state into a sorted Catalog.

        Registry names and URLs are applied. License keys without any
        artifact are dropped unless a kept artifact refers to them as an
        alternative or additional license.
        """
        license_info = dict(self._license_info)
        supplement(license_info)

        keys = set(self._groups)
        for groups in self._groups.values():
            for artifacts in groups.values():
                for artifact in artifacts:
                    refs = (artifact.alternative_licenses or []) + (artifact.additional_licenses or [])
                    keys.update(ref for ref in refs if ref in license_info)

        licenses = {}
        for key in sorted(keys):
            name, url = license_info.get(key, (key, None))
            groups = self._groups.get(key, {})
            licenses[key] = LicenseRecord(
                name=name,
                url=url,
                artifacts={
                    namespace: sorted(groups[namespace], key=lambda a: a.name)
                    for namespace in sorted(groups)
                },
            )
        return Catalog(licenses=licenses)


def build_catalog(
    dependencies: list[tuple[Coordinate, Optional[PackageMetadata]]],
) -> Catalog:
    """Build a Catalog from (coordinate, metadata) pairs.

    Args:
        dependencies: Dependencies with their resolved metadata (or None).

    Returns:
        A sorted Catalog containing only license keys that have artifacts.
    """
    builder = CatalogBuilder()
    for coordinate, metadata in dependencies:
        builder.add_resolved(coordinate, metadata)
    return builder.build()
