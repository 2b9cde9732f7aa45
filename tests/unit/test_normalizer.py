"""Unit tests for license key normalization."""

import pytest

from license_catalog.normalizer import (
    extract_vendor,
    is_ambiguous,
    normalize_key,
    slugify,
    strip_version_from_url,
)


class TestNormalizeKey:
    @pytest.mark.parametrize(
        "name,url,expected",
        [
            ("Some License", "https://www.apache.org/licenses/LICENSE-2.0", "apache-2.0"),
            ("Whatever", "https://opensource.org/licenses/MIT", "mit"),
            ("X", "https://opensource.org/licenses/BSD-3-Clause", "bsd-3-clause"),
            ("X", "https://www.gnu.org/licenses/lgpl-3.0.html", "lgpl-3.0"),
            ("X", "https://www.gnu.org/licenses/lgpl-2.1.html", "lgpl-2.1"),
            ("X", "https://www.gnu.org/licenses/gpl-3.0.html", "gpl-3.0"),
            ("X", "https://www.eclipse.org/legal/epl-v20.html", "epl-1.0"),
            ("X", "https://www.mozilla.org/en-US/MPL/2.0/", "mpl-2.0"),
            ("X", "https://creativecommons.org/publicdomain/zero/1.0/", "cc0-1.0"),
            ("X", "https://unlicense.org", "unlicense"),
        ],
    )
    def test_url_rules_win_over_name(self, name, url, expected):
        assert normalize_key(name, url) == expected

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("The Apache Software License, Version 2.0", "apache-2.0"),
            ("MIT", "mit"),
            ("New BSD License (3-clause)", "bsd-3-clause"),
            ("Simplified BSD 2", "bsd-2-clause"),
            ("BSD", "bsd"),
            ("GNU Lesser General Public License v3 (LGPL 3)", "lgpl-3.0"),
            ("GNU GPL v2", "gpl-2.0"),
            ("Eclipse Public License", "epl-1.0"),
            ("Mozilla Public License", "mpl-2.0"),
            ("ISC", "isc"),
        ],
    )
    def test_name_rules(self, name, expected):
        assert normalize_key(name) == expected

    def test_proprietary_gets_vendor_suffix(self):
        acme = normalize_key("Proprietary", "https://github.com/acme/x/LICENSE")
        other = normalize_key("Proprietary", "https://github.com/other/y/LICENSE")
        assert acme == "proprietary-acme"
        assert other == "proprietary-other"

    def test_proprietary_without_url(self):
        assert normalize_key("Proprietary") == "proprietary"

    def test_proprietary_uses_host_label(self):
        assert normalize_key("Proprietary", "https://www.example.com/terms") == "proprietary-example"

    def test_ambiguous_name_gets_vendor_suffix(self):
        assert normalize_key("LICENSE", "https://github.com/acme/x/blob/main/LICENSE") == "license-acme"
        assert normalize_key("The License") == "the-license"

    def test_fallback_slug(self):
        assert normalize_key("Android Software Development Kit License") == (
            "android-software-development-kit-license"
        )

    def test_blank_name_is_unknown(self):
        assert normalize_key("  ") == "unknown"
        assert normalize_key("!!!") == "unknown"

    def test_deterministic(self):
        assert normalize_key("Foo License 1.0", None) == normalize_key("Foo License 1.0", None)


class TestIsAmbiguous:
    def test_generic_name(self):
        assert is_ambiguous("LICENSE", "https://github.com/acme/x/blob/main/LICENSE")
        assert is_ambiguous("license")

    def test_well_known(self):
        assert not is_ambiguous(
            "Apache License 2.0", "https://www.apache.org/licenses/LICENSE-2.0"
        )

    def test_forge_license_file(self):
        assert is_ambiguous("Custom", "https://github.com/acme/x/blob/main/LICENSE.txt")
        assert is_ambiguous("Custom", "https://gitlab.com/acme/x/-/blob/main/LICENSE")

    def test_forge_url_matching_well_known_rule(self):
        assert not is_ambiguous("Custom", "https://github.com/acme/x/blob/main/licenses/apache-2.0.txt")

    def test_plain_name(self):
        assert not is_ambiguous("MIT License")


class TestExtractVendor:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://github.com/Acme/x", "acme"),
            ("https://gitlab.com/some_org/y", "some-org"),
            ("https://www.example.com/license", "example"),
            ("https://bitbucket.org/acme/x", "bitbucket"),
            (None, None),
            ("", None),
            ("not a url", None),
        ],
    )
    def test_extract(self, url, expected):
        assert extract_vendor(url) == expected


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://example.org/lib#1.2.3", "https://example.org/lib"),
        ("https://example.org/lib/1.2.3/", "https://example.org/lib"),
        ("https://example.org/lib/1.2.3", "https://example.org/lib"),
        ("https://example.org/lib", "https://example.org/lib"),
    ],
)
def test_strip_version_from_url(url, expected):
    assert strip_version_from_url(url) == expected


def test_slugify():
    assert slugify("  Foo  Bar/Baz ") == "foo-bar-baz"
