"""Markdown reporter for third-party notice files.

This module provides a reporter that renders the flattened license list
into a Markdown attribution document, grouped by license.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from license_catalog.models import ResolvedLicense
from license_catalog.reporters.base import BaseReporter, load_template


@dataclass
class NoticeGroup:
    """Artifacts sharing one primary license."""

    key: str
    name: str
    url: Optional[str]
    entries: list[ResolvedLicense] = field(default_factory=list)


def group_by_license(licenses: list[ResolvedLicense]) -> list[NoticeGroup]:
    """Group resolved licenses by primary license, sorted by license name."""
    groups: dict[str, NoticeGroup] = {}
    for entry in licenses:
        group = groups.get(entry.license.key)
        if group is None:
            group = groups[entry.license.key] = NoticeGroup(
                key=entry.license.key, name=entry.license.name, url=entry.license.url
            )
        group.entries.append(entry)

    for group in groups.values():
        group.entries.sort(key=lambda e: e.coordinate)
    return sorted(groups.values(), key=lambda g: (g.name.lower(), g.key))


class MarkdownReporter(BaseReporter):
    """Reporter that generates a Markdown third-party notice.

    Attributes:
        template: The Jinja2 template to use for rendering.
    """

    def __init__(self, template_path: Optional[Path] = None) -> None:
        """Initialize the Markdown reporter.

        Args:
            template_path: Optional path to a custom Jinja2 template. It is
                rendered with ``groups`` and ``generated_at``.
        """
        self.template = load_template("notice.md.j2", template_path)

    def render(self, licenses: list[ResolvedLicense]) -> str:
        return self.template.render(
            groups=group_by_license(licenses),
            generated_at=datetime.now(),
        )

    @property
    def format_name(self) -> str:
        return "markdown"

    @property
    def default_extension(self) -> str:
        return ".md"
