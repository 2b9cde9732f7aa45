"""Ignore rules excluding coordinates from reconciliation.

Expected file format::

    # Comment lines start with #
    com.example:artifact-to-ignore
    com.example:*

A rule with ``*`` and no regex syntax is a glob; anything else is a regular
expression. Rules are matched against the whole ``namespace:name`` string.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from license_catalog.models import Coordinate

logger = logging.getLogger(__name__)

IGNORE_FILE_TEMPLATE = """\
# Patterns to ignore artifacts
# Examples:
# com.example:artifact-name
# com.example:*
"""

_REGEX_SYNTAX = (".*", ".+", "\\", "(", "[", "{", "|", "^", "$", "?", "+")


def _is_glob(pattern: str) -> bool:
    return "*" in pattern and not any(token in pattern for token in _REGEX_SYNTAX)


def _to_regex(pattern: str) -> str:
    if _is_glob(pattern):
        return pattern.replace(".", "\\.").replace("*", ".*")
    return pattern


@dataclass
class IgnoreRule:
    """A single glob-or-regex ignore pattern, compiled on first use."""

    pattern: str
    _compiled: Optional[re.Pattern] = field(default=None, init=False, repr=False, compare=False)
    _invalid: bool = field(default=False, init=False, repr=False, compare=False)

    def _regex(self) -> Optional[re.Pattern]:
        if self._compiled is None and not self._invalid:
            try:
                self._compiled = re.compile(_to_regex(self.pattern))
            except re.error as e:
                logger.warning("Invalid ignore pattern %r: %s", self.pattern, e)
                self._invalid = True
        return self._compiled

    def matches(self, coordinate: str) -> bool:
        """Return True if the whole ``namespace:name`` string matches."""
        regex = self._regex()
        return regex is not None and regex.fullmatch(coordinate) is not None


def _coordinate_id(coordinate: Union[Coordinate, str]) -> str:
    if isinstance(coordinate, Coordinate):
        return coordinate.id
    return ":".join(coordinate.split(":")[:2])


@dataclass
class IgnoreRules:
    """A collection of ignore rules."""

    rules: list[IgnoreRule] = field(default_factory=list)

    def should_ignore(self, coordinate: Union[Coordinate, str]) -> bool:
        """Check whether a coordinate is excluded.

        Args:
            coordinate: Coordinate or ``namespace:name[:version]`` string; the
                version is never part of the match.

        Returns:
            True if any rule matches.
        """
        coordinate_id = _coordinate_id(coordinate)
        return any(rule.matches(coordinate_id) for rule in self.rules)

    def filter(self, coordinates: list[Coordinate]) -> list[Coordinate]:
        """Return the coordinates that are not ignored, preserving order."""
        return [coordinate for coordinate in coordinates if not self.should_ignore(coordinate)]


def parse_ignore_rules(text: Optional[str]) -> IgnoreRules:
    """Parse ignore file text; blank lines and ``#`` comments are skipped."""
    if not text:
        return IgnoreRules()
    rules = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        rules.append(IgnoreRule(line))
    return IgnoreRules(rules)


def serialize_ignore_rules(rules: IgnoreRules) -> str:
    return "\n".join(rule.pattern for rule in rules.rules)


def load_ignore_rules(path: Path) -> IgnoreRules:
    """Load an ignore file, returning no rules if it does not exist."""
    if not path.exists():
        return IgnoreRules()
    return parse_ignore_rules(path.read_text(encoding="utf-8"))
