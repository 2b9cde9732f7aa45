"""Well-known license registry.

Static, process-wide table of canonical display names and URLs for the
license keys produced by :mod:`license_catalog.normalizer`. The table only
supplements licenses that were actually detected; it never adds entries.
"""

from collections.abc import MutableMapping
from types import MappingProxyType
from typing import Optional

from license_catalog.models import UNKNOWN_LICENSE_KEY

UNKNOWN_LICENSE_NAME = "Unknown License"

# Based on the canonical pages published by each license steward.
WELL_KNOWN_LICENSES: MappingProxyType = MappingProxyType(
    {
        "apache-2.0": ("Apache License 2.0", "https://www.apache.org/licenses/LICENSE-2.0"),
        "mit": ("MIT License", "https://opensource.org/licenses/MIT"),
        "bsd-3-clause": ("BSD 3-Clause License", "https://opensource.org/licenses/BSD-3-Clause"),
        "bsd-2-clause": ("BSD 2-Clause License", "https://opensource.org/licenses/BSD-2-Clause"),
        "lgpl-2.1": (
            "GNU Lesser General Public License v2.1",
            "https://www.gnu.org/licenses/lgpl-2.1.html",
        ),
        "lgpl-3.0": (
            "GNU Lesser General Public License v3.0",
            "https://www.gnu.org/licenses/lgpl-3.0.html",
        ),
        "epl-1.0": ("Eclipse Public License 1.0", "https://www.eclipse.org/legal/epl-v10.html"),
        "mpl-2.0": ("Mozilla Public License 2.0", "https://www.mozilla.org/en-US/MPL/2.0/"),
        "gpl-2.0": ("GNU General Public License v2.0", "https://www.gnu.org/licenses/gpl-2.0.html"),
        "gpl-3.0": ("GNU General Public License v3.0", "https://www.gnu.org/licenses/gpl-3.0.html"),
        "cc0-1.0": ("CC0 1.0 Universal", "https://creativecommons.org/publicdomain/zero/1.0/"),
        "unlicense": ("The Unlicense", "https://unlicense.org/"),
        "isc": ("ISC License", "https://opensource.org/licenses/ISC"),
        UNKNOWN_LICENSE_KEY: (UNKNOWN_LICENSE_NAME, None),
    }
)

# Used when a POM lists no developers for artifacts under these licenses.
DEFAULT_COPYRIGHT_HOLDERS: MappingProxyType = MappingProxyType(
    {
        "android-software-development-kit-license": ("Google LLC",),
    }
)


def supplement(license_info: MutableMapping[str, tuple[str, Optional[str]]]) -> None:
    """Supplement detected licenses with well-known names and URLs.

    For every key already in ``license_info`` that the registry knows, the
    display name is replaced by the registry's name and the URL is filled in
    only when the detected URL is missing.

    Args:
        license_info: Mapping of license key -> (name, url), updated in place.
    """
    for key in list(license_info):
        known = WELL_KNOWN_LICENSES.get(key)
        if known is None:
            continue
        name, url = known
        _, current_url = license_info[key]
        license_info[key] = (name, current_url if current_url is not None else url)


def default_copyright_holders(license_key: str) -> list[str]:
    """Return default copyright holders for a license key (may be empty)."""
    return list(DEFAULT_COPYRIGHT_HOLDERS.get(license_key, ()))
