"""Parser and serializer for the license catalog file.

Expected format::

    licenses:
      apache-2.0:
        name: Apache License 2.0
        url: https://www.apache.org/licenses/LICENSE-2.0
        artifacts:
          com.squareup.okhttp3:
            - name: okhttp
              url: https://square.github.io/okhttp/
              copyrightHolders:
                - Square, Inc.
      mit:
        name: MIT License
        url: https://opensource.org/licenses/MIT
        artifacts:
          some.library:
            - name: dual-licensed-lib
              copyrightHolders:
                - Someone
              alternativeLicenses:
                - apache-2.0

Only ``yaml.safe_load`` is used, so documents cannot instantiate arbitrary
Python objects. Serialization emits license keys, namespaces and artifacts
in sorted order and omits empty optional fields, so unchanged catalogs
produce byte-identical files.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from license_catalog.errors import CatalogFormatError
from license_catalog.models import ArtifactRecord, Catalog, LicenseRecord

logger = logging.getLogger(__name__)


class _CatalogDumper(yaml.SafeDumper):
    """Safe dumper that never emits anchors or aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _string_list(value: Any) -> Optional[list[str]]:
    if isinstance(value, list):
        return [str(item) for item in value if item is not None]
    if isinstance(value, str):
        return [value]
    return None


def _parse_artifact(data: Any) -> Optional[ArtifactRecord]:
    if not isinstance(data, dict):
        return None
    name = data.get("name")
    if name is None:
        return None
    url = data.get("url")
    return ArtifactRecord(
        name=str(name),
        url=str(url) if url is not None else None,
        copyright_holders=_string_list(data.get("copyrightHolders")) or [],
        alternative_licenses=_string_list(data.get("alternativeLicenses")),
        additional_licenses=_string_list(data.get("additionalLicenses")),
    )


def _parse_license(key: str, data: Any) -> Optional[LicenseRecord]:
    if not isinstance(data, dict):
        logger.warning("Skipping license '%s': entry is not a mapping", key)
        return None

    artifacts: dict[str, list[ArtifactRecord]] = {}
    groups = data.get("artifacts")
    if isinstance(groups, dict):
        for namespace, entries in groups.items():
            if not isinstance(entries, list):
                logger.warning("Skipping artifacts of %s under '%s': not a list", namespace, key)
                continue
            records = [record for record in map(_parse_artifact, entries) if record is not None]
            artifacts[str(namespace)] = records

    name = data.get("name")
    url = data.get("url")
    return LicenseRecord(
        name=str(name) if name is not None else key,
        url=str(url) if url is not None else None,
        artifacts=artifacts,
    )


def parse_catalog(data: Union[str, bytes, None]) -> Catalog:
    """Parse catalog text into a Catalog.

    Args:
        data: YAML document. None or blank input yields an empty catalog.

    Returns:
        The parsed Catalog.

    Raises:
        CatalogFormatError: If the document is not valid YAML, uses tags that
            a safe loader rejects, or is not a mapping at the top level.
    """
    if data is None:
        return Catalog.empty()
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    if not data.strip():
        return Catalog.empty()

    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise CatalogFormatError(f"Invalid license catalog: {e}") from e

    if document is None:
        return Catalog.empty()
    if not isinstance(document, dict):
        raise CatalogFormatError("Invalid license catalog: top level must be a mapping")

    licenses_data = document.get("licenses")
    if not isinstance(licenses_data, dict):
        return Catalog.empty()

    licenses = {}
    for key, value in licenses_data.items():
        record = _parse_license(str(key), value)
        if record is not None:
            licenses[str(key)] = record
    return Catalog(licenses=licenses)


def _artifact_to_dict(artifact: ArtifactRecord) -> dict[str, Any]:
    data: dict[str, Any] = {"name": artifact.name}
    if artifact.url:
        data["url"] = artifact.url
    if artifact.copyright_holders:
        data["copyrightHolders"] = list(artifact.copyright_holders)
    if artifact.alternative_licenses:
        data["alternativeLicenses"] = list(artifact.alternative_licenses)
    if artifact.additional_licenses:
        data["additionalLicenses"] = list(artifact.additional_licenses)
    return data


def catalog_to_dict(catalog: Catalog) -> dict[str, Any]:
    """Convert a Catalog to plain, sorted data ready for dumping."""
    licenses: dict[str, Any] = {}
    for key in sorted(catalog.licenses):
        record = catalog.licenses[key]
        entry: dict[str, Any] = {"name": record.name}
        if record.url:
            entry["url"] = record.url
        groups = {
            namespace: [
                _artifact_to_dict(artifact)
                for artifact in sorted(record.artifacts[namespace], key=lambda a: a.name)
            ]
            for namespace in sorted(record.artifacts)
            if record.artifacts[namespace]
        }
        if groups:
            entry["artifacts"] = groups
        licenses[key] = entry
    return {"licenses": licenses}


def serialize_catalog(catalog: Catalog) -> str:
    """Serialize a Catalog to deterministic YAML text."""
    return yaml.dump(
        catalog_to_dict(catalog),
        Dumper=_CatalogDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=4096,
    )


def load_catalog(path: Path) -> Catalog:
    """Load a catalog file, returning an empty catalog if it does not exist."""
    if not path.exists():
        return Catalog.empty()
    return parse_catalog(path.read_text(encoding="utf-8"))


def write_catalog(catalog: Catalog, path: Path) -> None:
    """Serialize and write a catalog, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_catalog(catalog), encoding="utf-8")
