"""HTML reporter for license diff reports.

Renders a :class:`~license_catalog.models.DiffReport` as a standalone HTML
page showing the summary counts, the dependency tree annotated with catalog
license keys (in the style of ``gradle dependencies``) and the entries that
are missing from or extra in the catalog.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from license_catalog.models import DependencyTreeNode, DiffReport, DiffStatus
from license_catalog.reporters.base import BaseReporter, load_template

DEFAULT_REPORT_NAME = "license-diff-report.html"


@dataclass(frozen=True)
class TreeLine:
    """One rendered line of the dependency tree."""

    prefix: str
    connector: str
    node: DependencyTreeNode

    @property
    def status(self) -> str:
        if self.node.is_revisit:
            return "visited"
        return "matched" if self.node.in_catalog else "missing"


def flatten_tree(nodes: list[DependencyTreeNode], prefix: str = "") -> list[TreeLine]:
    """Flatten tree nodes into lines with ``+---``/``\\---`` connectors."""
    lines = []
    for index, node in enumerate(nodes):
        is_last = index == len(nodes) - 1
        lines.append(TreeLine(prefix, "\\--- " if is_last else "+--- ", node))
        lines.extend(flatten_tree(node.children, prefix + ("     " if is_last else "|    ")))
    return lines


class HtmlReporter(BaseReporter):
    """Reporter that generates the HTML diff report.

    Values are HTML-escaped by the template environment.
    """

    def __init__(self, template_path: Optional[Path] = None) -> None:
        self.template = load_template("diff_report.html.j2", template_path, autoescape=True)

    def render(self, report: DiffReport) -> str:
        """Render a diff report to HTML.

        Args:
            report: The diff report.

        Returns:
            Rendered HTML document.
        """
        return self.template.render(
            report=report,
            tree_lines=flatten_tree(report.dependency_tree),
            missing=[e for e in report.entries if e.status is DiffStatus.MISSING_IN_CATALOG],
        )

    @property
    def format_name(self) -> str:
        return "html"

    @property
    def default_extension(self) -> str:
        return ".html"
