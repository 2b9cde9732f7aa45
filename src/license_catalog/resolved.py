"""Flattens a catalog into the per-artifact license list used by generators."""

from typing import Optional

from license_catalog.models import Catalog, LicenseRef, ResolvedLicense


def _refs(catalog: Catalog, keys: Optional[list[str]]) -> Optional[list[LicenseRef]]:
    if not keys:
        return None
    refs = []
    for key in keys:
        record = catalog.get_license(key)
        if record is not None:
            refs.append(LicenseRef(key=key, name=record.name, url=record.url))
    return refs or None


def resolve_licenses(catalog: Catalog) -> list[ResolvedLicense]:
    """Resolve every catalog artifact to its license information.

    Alternative and additional license keys missing from the catalog are
    dropped here; ``check`` reports them.

    Args:
        catalog: The license catalog.

    Returns:
        Resolved licenses sorted by ``namespace:name``.
    """
    resolved = []
    for key, record in catalog.licenses.items():
        main = LicenseRef(key=key, name=record.name, url=record.url)
        for namespace, artifacts in record.artifacts.items():
            for artifact in artifacts:
                resolved.append(
                    ResolvedLicense(
                        coordinate=f"{namespace}:{artifact.name}",
                        artifact_name=artifact.name,
                        artifact_url=artifact.url,
                        copyright_holders=list(artifact.copyright_holders),
                        license=main,
                        alternative_licenses=_refs(catalog, artifact.alternative_licenses),
                        additional_licenses=_refs(catalog, artifact.additional_licenses),
                    )
                )
    return sorted(resolved, key=lambda license: license.coordinate)
