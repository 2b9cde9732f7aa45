"""Runtime types used by generated license modules.

A generated module defines a :class:`LicenseProvider` subclass whose
``licenses`` tuple is filled in at generation time, so applications can
list their third-party licenses without reading the catalog file.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AlternativeLicenseInfo:
    """A license the artifact may be used under instead of the primary one."""

    license_key: str
    license_name: str
    license_url: Optional[str] = None


@dataclass(frozen=True)
class AdditionalLicenseInfo:
    """A license that applies on top of the primary one."""

    license_key: str
    license_name: str
    license_url: Optional[str] = None


@dataclass(frozen=True)
class LicenseInfo:
    """License information of one third-party artifact.

    Attributes:
        artifact_id: ``namespace:name`` of the artifact.
        artifact_name: Artifact name.
        artifact_url: Project homepage, if known.
        copyright_holders: Copyright holders, possibly empty.
        license_key: Catalog license key.
        license_name: License display name.
        license_url: License URL, if known.
        alternative_licenses: Licenses that may be chosen instead.
        additional_licenses: Licenses that apply as well.
    """

    artifact_id: str
    artifact_name: str
    artifact_url: Optional[str]
    copyright_holders: tuple[str, ...]
    license_key: str
    license_name: str
    license_url: Optional[str] = None
    alternative_licenses: tuple[AlternativeLicenseInfo, ...] = ()
    additional_licenses: tuple[AdditionalLicenseInfo, ...] = ()


class LicenseProvider:
    """Base class of generated license providers."""

    licenses: tuple[LicenseInfo, ...] = ()

    @classmethod
    def all(cls) -> list[LicenseInfo]:
        """Return every license entry, sorted by artifact id."""
        return list(cls.licenses)

    @classmethod
    def find_by_artifact_id(cls, artifact_id: str) -> Optional[LicenseInfo]:
        for info in cls.licenses:
            if info.artifact_id == artifact_id:
                return info
        return None

    @classmethod
    def find_by_license_name(cls, license_name: str) -> list[LicenseInfo]:
        """Return the entries whose primary license has this display name."""
        return [info for info in cls.licenses if info.license_name == license_name]
