"""Parser for Maven POM documents.

POM files come from remote repositories and are untrusted, so parsing goes
through ``defusedxml`` with DTDs, entity declarations and external references
forbidden. Each section (name, URL, licenses, developers, parent) is
extracted independently: a malformed section yields an empty value for that
field only.
"""

import logging
from typing import Optional
from xml.etree.ElementTree import Element, ParseError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from license_catalog.models import Coordinate, LicenseClaim, PackageMetadata

logger = logging.getLogger(__name__)


def _local_name(tag: object) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on qualified tags."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _child(element: Optional[Element], name: str) -> Optional[Element]:
    if element is None:
        return None
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: Optional[Element], name: str) -> list[Element]:
    if element is None:
        return []
    return [child for child in element if _local_name(child.tag) == name]


def _text(element: Optional[Element], name: str) -> Optional[str]:
    """Return the stripped text of a direct child, or None if blank."""
    child = _child(element, name)
    if child is None:
        return None
    text = "".join(child.itertext()).strip()
    return text or None


def _parse_licenses(root: Element) -> tuple[LicenseClaim, ...]:
    try:
        claims = []
        for node in _children(_child(root, "licenses"), "license"):
            name = _text(node, "name")
            if name is None:
                continue
            claims.append(LicenseClaim(name=name, url=_text(node, "url")))
        return tuple(claims)
    except Exception as e:
        logger.debug("Ignoring malformed <licenses> section: %s", e)
        return ()


def _parse_developers(root: Element) -> tuple[str, ...]:
    try:
        names = []
        for node in _children(_child(root, "developers"), "developer"):
            name = _text(node, "name")
            if name is not None:
                names.append(name)
        return tuple(names)
    except Exception as e:
        logger.debug("Ignoring malformed <developers> section: %s", e)
        return ()


def _parse_parent(root: Element) -> Optional[Coordinate]:
    try:
        parent = _child(root, "parent")
        if parent is None:
            return None
        group_id = _text(parent, "groupId")
        artifact_id = _text(parent, "artifactId")
        version = _text(parent, "version")
        if group_id and artifact_id and version:
            return Coordinate(group_id, artifact_id, version)
        return None
    except Exception as e:
        logger.debug("Ignoring malformed <parent> section: %s", e)
        return None


def _parse_scalar(root: Element, name: str) -> Optional[str]:
    try:
        return _text(root, name)
    except Exception as e:
        logger.debug("Ignoring malformed <%s> element: %s", name, e)
        return None


def parse_pom(data: bytes) -> Optional[PackageMetadata]:
    """Parse POM bytes into PackageMetadata.

    Args:
        data: Raw POM document.

    Returns:
        Extracted metadata (fields may be empty), or None if the document is
        not well-formed XML or uses forbidden DTD/entity constructs.
    """
    if not data or not data.strip():
        return None

    try:
        root = fromstring(data, forbid_dtd=True, forbid_entities=True, forbid_external=True)
    except (ParseError, DefusedXmlException) as e:
        logger.debug("Could not parse POM document: %s", e)
        return None

    return PackageMetadata(
        display_name=_parse_scalar(root, "name"),
        homepage_url=_parse_scalar(root, "url"),
        license_claims=_parse_licenses(root),
        contributors=_parse_developers(root),
        parent=_parse_parent(root),
    )
