"""Unit tests for flattening a catalog into resolved licenses."""

from license_catalog.models import ArtifactRecord, LicenseRef
from license_catalog.resolved import resolve_licenses


def test_sorted_by_coordinate(sample_catalog):
    resolved = resolve_licenses(sample_catalog)
    assert [r.coordinate for r in resolved] == [
        "com.squareup.okhttp3:okhttp",
        "com.squareup.okio:okio",
        "org.example:dual",
    ]


def test_main_license_and_artifact_fields(sample_catalog):
    okhttp = resolve_licenses(sample_catalog)[0]

    assert okhttp.artifact_name == "okhttp"
    assert okhttp.artifact_url == "https://square.github.io/okhttp/"
    assert okhttp.copyright_holders == ["Square, Inc."]
    assert okhttp.license == LicenseRef(
        "apache-2.0", "Apache License 2.0", "https://www.apache.org/licenses/LICENSE-2.0"
    )
    assert okhttp.alternative_licenses is None
    assert okhttp.additional_licenses is None


def test_alternative_licenses_are_resolved(sample_catalog):
    dual = resolve_licenses(sample_catalog)[2]
    assert dual.license.key == "mit"
    assert dual.alternative_licenses == [
        LicenseRef("apache-2.0", "Apache License 2.0", "https://www.apache.org/licenses/LICENSE-2.0")
    ]


def test_dangling_references_are_dropped(sample_catalog):
    sample_catalog.licenses["mit"].artifacts["org.example"].append(
        ArtifactRecord("broken", additional_licenses=["missing-key"])
    )
    broken = [r for r in resolve_licenses(sample_catalog) if r.artifact_name == "broken"][0]
    assert broken.additional_licenses is None
