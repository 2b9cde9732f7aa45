"""License key normalization.

Maps free-text license names and URLs taken from POM files to short,
lowercase, hyphenated catalog keys such as ``apache-2.0`` or ``mit``, and
flags name/URL pairs that are too generic to classify without a human.

The heuristics are substring based on purpose: POM license sections are
free text and rarely carry SPDX identifiers.
"""

import logging
import re
from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse

from license_catalog.models import UNKNOWN_LICENSE_KEY

logger = logging.getLogger(__name__)

# Ordered URL rules. A rule matches when every fragment of any one of its
# alternatives occurs in the lowercased URL; the first matching rule wins.
# LGPL rules precede GPL rules because "lgpl-3.0" contains "gpl-3.0".
URL_RULES: tuple[tuple[tuple[tuple[str, ...], ...], str], ...] = (
    ((("apache.org/licenses/license-2.0",), ("apache-2.0",)), "apache-2.0"),
    ((("opensource.org/licenses/mit",), ("mit-license",)), "mit"),
    ((("opensource.org/licenses/bsd-3-clause",), ("bsd-3-clause",)), "bsd-3-clause"),
    ((("opensource.org/licenses/bsd-2-clause",), ("bsd-2-clause",)), "bsd-2-clause"),
    ((("gnu.org/licenses/lgpl-3",), ("lgpl-3.0",)), "lgpl-3.0"),
    ((("gnu.org/licenses/lgpl-2.1",), ("lgpl-2.1",)), "lgpl-2.1"),
    ((("gnu.org/licenses/gpl-3",), ("gpl-3.0",)), "gpl-3.0"),
    ((("gnu.org/licenses/gpl-2",), ("gpl-2.0",)), "gpl-2.0"),
    ((("eclipse.org/legal/epl",),), "epl-1.0"),
    ((("mozilla.org", "mpl"),), "mpl-2.0"),
    ((("creativecommons.org/publicdomain/zero",),), "cc0-1.0"),
    ((("unlicense.org",),), "unlicense"),
    ((("opensource.org/licenses/isc",),), "isc"),
)

# Ordered name rules; every token of a rule must appear in the lowercased name.
NAME_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("apache", "2"), "apache-2.0"),
    (("mit",), "mit"),
    (("bsd", "3"), "bsd-3-clause"),
    (("bsd", "2"), "bsd-2-clause"),
    (("bsd",), "bsd"),
    (("lgpl", "3"), "lgpl-3.0"),
    (("lgpl", "2.1"), "lgpl-2.1"),
    (("gpl", "3"), "gpl-3.0"),
    (("gpl", "2"), "gpl-2.0"),
    (("eclipse",), "epl-1.0"),
    (("epl",), "epl-1.0"),
    (("mozilla",), "mpl-2.0"),
    (("mpl",), "mpl-2.0"),
    (("creative commons", "zero"), "cc0-1.0"),
    (("unlicense",), "unlicense"),
    (("isc",), "isc"),
)

AMBIGUOUS_LICENSE_NAMES = frozenset(
    {
        "license",
        "licence",
        "the license",
        "the licence",
        "see license",
        "see licence",
    }
)

# Hosts whose license pages identify a specific license.
WELL_KNOWN_LICENSE_URL_PATTERNS = (
    "apache.org/licenses",
    "opensource.org/licenses",
    "gnu.org/licenses",
    "eclipse.org/legal",
    "mozilla.org",
    "creativecommons.org",
    "unlicense.org",
)

FORGE_HOSTS = ("github.com", "gitlab.com", "bitbucket.org")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_VERSION_ANCHOR = re.compile(r"#[\d.]+$")
_VERSION_SEGMENT = re.compile(r"/[\d.]+/?$")
_FORGE_ORG = re.compile(r"(?:github|gitlab)\.com/([^/?#]+)")


def slugify(text: str) -> str:
    """Lowercase ``text`` and collapse non-alphanumeric runs into hyphens."""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def _key_from_url(url: str) -> Optional[str]:
    url_lower = url.lower()
    for alternatives, key in URL_RULES:
        if any(
            all(fragment in url_lower for fragment in fragments)
            for fragments in alternatives
        ):
            return key
    return None


def _key_from_name(name_lower: str) -> Optional[str]:
    for tokens, key in NAME_RULES:
        if all(token in name_lower for token in tokens):
            return key
    return None


def extract_vendor(url: Optional[str]) -> Optional[str]:
    """Extract a vendor identifier from a license URL.

    GitHub and GitLab URLs yield the organisation segment; other URLs yield
    the first host label after an optional ``www.`` prefix.

    Args:
        url: License URL, possibly None or malformed.

    Returns:
        A slugified vendor identifier, or None if nothing usable was found.
    """
    if not url:
        return None

    url_lower = url.strip().lower()
    match = _FORGE_ORG.search(url_lower)
    if match:
        vendor = slugify(match.group(1))
        return vendor or None

    try:
        host = urlparse(url_lower).hostname
    except ValueError as e:
        logger.debug("Could not parse license URL %r: %s", url, e)
        return None

    if not host:
        return None
    if host.startswith("www."):
        host = host[4:]
    labels = [label for label in host.split(".") if label]
    if not labels:
        return None
    vendor = slugify(labels[0])
    return vendor or None


@lru_cache(maxsize=1024)
def normalize_key(name: str, url: Optional[str] = None) -> str:
    """Normalize a license name and URL to a catalog key.

    URL rules are tried first because license URLs are less ambiguous than
    free-text names. Proprietary and generic names get a vendor suffix
    derived from the URL so unrelated vendors never share a key.

    Args:
        name: License name as declared in metadata.
        url: Optional license URL.

    Returns:
        The normalized license key (e.g., "apache-2.0", "proprietary-acme").
    """
    if url:
        key = _key_from_url(url)
        if key is not None:
            return key

    name_lower = name.strip().lower()
    key = _key_from_name(name_lower)
    if key is not None:
        return key

    if name_lower == "proprietary":
        vendor = extract_vendor(url)
        return f"proprietary-{vendor}" if vendor else "proprietary"

    if name_lower in AMBIGUOUS_LICENSE_NAMES:
        base = slugify(name_lower) or UNKNOWN_LICENSE_KEY
        vendor = extract_vendor(url)
        return f"{base}-{vendor}" if vendor else base

    return slugify(name_lower) or UNKNOWN_LICENSE_KEY


def is_ambiguous(name: str, url: Optional[str] = None) -> bool:
    """Check whether a license name/URL pair needs manual verification.

    True for generic names such as "LICENSE", and for URLs pointing at a
    LICENSE file hosted on a code forge that do not also match a well-known
    license URL.

    Args:
        name: License name as declared in metadata.
        url: Optional license URL.

    Returns:
        True if a human should confirm the license.
    """
    if name.strip().lower() in AMBIGUOUS_LICENSE_NAMES:
        return True

    if url:
        url_lower = url.lower()
        if "/license" in url_lower and any(host in url_lower for host in FORGE_HOSTS):
            well_known = _key_from_url(url) is not None or any(
                pattern in url_lower for pattern in WELL_KNOWN_LICENSE_URL_PATTERNS
            )
            if not well_known:
                return True

    return False


def strip_version_from_url(url: str) -> str:
    """Remove a trailing ``#1.2.3`` anchor or ``/1.2.3/`` path segment."""
    url = _VERSION_ANCHOR.sub("", url)
    return _VERSION_SEGMENT.sub("", url)
