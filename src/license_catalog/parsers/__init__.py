"""Parsers for the files kept alongside a project.

This module provides the license catalog (YAML) parser/serializer and the
ignore rules parser.
"""

from license_catalog.parsers.catalog import (
    load_catalog,
    parse_catalog,
    serialize_catalog,
    write_catalog,
)
from license_catalog.parsers.ignore import (
    IgnoreRule,
    IgnoreRules,
    load_ignore_rules,
    parse_ignore_rules,
    serialize_ignore_rules,
)

__all__ = [
    "IgnoreRule",
    "IgnoreRules",
    "load_catalog",
    "load_ignore_rules",
    "parse_catalog",
    "parse_ignore_rules",
    "serialize_catalog",
    "serialize_ignore_rules",
    "write_catalog",
]
