"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from license_catalog.models import (
    ArtifactRecord,
    Catalog,
    Coordinate,
    LicenseClaim,
    LicenseRecord,
    PackageMetadata,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_pom(
    group: str = "org.example",
    artifact: str = "lib",
    version: str = "1.0.0",
    name: str = "Example Library",
    url: str = "https://example.org/lib",
    licenses: tuple[tuple[str, str], ...] = (("MIT License", "https://opensource.org/licenses/MIT"),),
    developers: tuple[str, ...] = ("Jane Doe",),
    parent: tuple[str, str, str] = None,
) -> bytes:
    """Build a minimal POM document."""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<project xmlns="http://maven.apache.org/POM/4.0.0">',
        "  <modelVersion>4.0.0</modelVersion>",
    ]
    if parent:
        parts.append(
            f"  <parent><groupId>{parent[0]}</groupId><artifactId>{parent[1]}</artifactId>"
            f"<version>{parent[2]}</version></parent>"
        )
    parts += [
        f"  <groupId>{group}</groupId>",
        f"  <artifactId>{artifact}</artifactId>",
        f"  <version>{version}</version>",
    ]
    if name:
        parts.append(f"  <name>{name}</name>")
    if url:
        parts.append(f"  <url>{url}</url>")
    if licenses:
        parts.append("  <licenses>")
        for license_name, license_url in licenses:
            parts.append(
                f"    <license><name>{license_name}</name><url>{license_url}</url></license>"
            )
        parts.append("  </licenses>")
    if developers:
        parts.append("  <developers>")
        for developer in developers:
            parts.append(f"    <developer><name>{developer}</name></developer>")
        parts.append("  </developers>")
    parts.append("</project>")
    return "\n".join(parts).encode("utf-8")


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding text fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def sample_pom() -> bytes:
    """Return a POM declaring the MIT license and one developer."""
    return make_pom()


@pytest.fixture
def mit_metadata() -> PackageMetadata:
    """Return metadata declaring the MIT license."""
    return PackageMetadata(
        display_name="Example Library",
        homepage_url="https://example.org/lib",
        license_claims=(LicenseClaim("MIT License", "https://opensource.org/licenses/MIT"),),
        contributors=("Jane Doe",),
    )


@pytest.fixture
def sample_catalog() -> Catalog:
    """Return a small catalog with two licenses and an alternative license."""
    return Catalog(
        licenses={
            "apache-2.0": LicenseRecord(
                name="Apache License 2.0",
                url="https://www.apache.org/licenses/LICENSE-2.0",
                artifacts={
                    "com.squareup.okhttp3": [
                        ArtifactRecord(
                            name="okhttp",
                            url="https://square.github.io/okhttp/",
                            copyright_holders=["Square, Inc."],
                        )
                    ],
                    "com.squareup.okio": [
                        ArtifactRecord(name="okio", copyright_holders=["Square, Inc."])
                    ],
                },
            ),
            "mit": LicenseRecord(
                name="MIT License",
                url="https://opensource.org/licenses/MIT",
                artifacts={
                    "org.example": [
                        ArtifactRecord(
                            name="dual",
                            url="https://example.org/dual",
                            copyright_holders=["Jane Doe"],
                            alternative_licenses=["apache-2.0"],
                        )
                    ],
                },
            ),
        }
    )


@pytest.fixture
def okhttp() -> Coordinate:
    return Coordinate("com.squareup.okhttp3", "okhttp", "4.12.0")


@pytest.fixture
def pom_factory():
    """Return the POM document builder."""
    return make_pom
