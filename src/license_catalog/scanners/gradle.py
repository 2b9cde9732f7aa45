"""Scanner for ``gradle dependencies`` text output.

Parses the tree printed by ``./gradlew :app:dependencies --configuration
releaseRuntimeClasspath``::

    releaseRuntimeClasspath - Resolved configuration for runtime for variant: release
    +--- androidx.core:core-ktx:1.12.0
    |    +--- androidx.annotation:annotation:1.6.0
    |    \\--- org.jetbrains.kotlin:kotlin-stdlib:1.8.22 -> 1.9.22 (*)
    +--- project :library
    |    \\--- com.squareup.okio:okio:3.6.0
    \\--- com.squareup.okhttp3:okhttp:4.12.0 (c)

Each tree level is indented by five columns. ``(*)`` marks a subtree that
was already printed, ``(c)`` a dependency constraint and ``(n)`` an
unresolved dependency; constraints and unresolved entries are skipped.
Project dependencies are not modules: they are dropped, and their
dependencies are attached to the enclosing level.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from license_catalog.models import Coordinate, DependencyGraph
from license_catalog.scanners.base import BaseScanner

logger = logging.getLogger(__name__)

_PROJECT = object()


class GradleDependenciesScanner(BaseScanner):
    """Scanner for the output of Gradle's ``dependencies`` task.

    Attributes:
        configuration: Optional configuration name to read. When omitted, the
            first configuration block containing dependencies is used.
    """

    TREE_LINE = re.compile(r"^(?P<indent>[| ]*)(?:\+---|\\---) (?P<body>.+?)\s*$")

    MODULE = re.compile(
        r"^(?P<group>[^:\s]+):(?P<name>[^:\s]+)"
        r"(?::(?P<requested>\{[^}]*\}|[^\s]+))?"
        r"(?: -> (?P<selected>[^\s]+))?"
        r"(?P<flags>(?: \([^)]*\)| FAILED)*)$"
    )

    INDENT_WIDTH = 5

    def __init__(
        self, source_path: Optional[Path] = None, configuration: Optional[str] = None
    ) -> None:
        super().__init__(source_path)
        self.configuration = configuration

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check whether the file looks like ``gradle dependencies`` output.

        Args:
            path: Path to check.

        Returns:
            True for readable .txt/.log files containing tree markers.
        """
        if path.suffix.lower() not in (".txt", ".log") or not path.is_file():
            return False
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                head = f.read(64 * 1024)
        except OSError:
            return False
        return "+--- " in head or "\\--- " in head

    @property
    def source_name(self) -> str:
        return "gradle dependencies"

    def _block_lines(self, text: str) -> tuple[str, list[str]]:
        """Return the header and tree lines of the selected configuration block."""
        selected: list[str] = []
        header: Optional[str] = None
        selected_header = ""
        for line in text.splitlines():
            if not line.strip():
                continue
            if self.TREE_LINE.match(line):
                if self.configuration is None or header == self.configuration:
                    if not selected:
                        selected_header = header or ""
                    selected.append(line)
                continue
            if line[0].isspace():
                continue
            if selected and self.configuration is None:
                break
            header = line.split(" - ", 1)[0].strip()
        return selected_header, selected

    def _parse_module(self, body: str) -> Optional[tuple[Coordinate, Optional[str], str]]:
        match = self.MODULE.match(body)
        if not match:
            return None

        requested = match.group("requested")
        selected = match.group("selected")
        flags = match.group("flags") or ""

        if requested and requested.startswith("{"):
            # Rich version constraints such as "{strictly 1.0}".
            requested = requested.strip("{}").split()[-1] if requested.strip("{}") else None

        version = selected or requested
        conflict = None
        if requested and selected and requested != selected:
            conflict = f"{requested} -> {selected}"

        return Coordinate(match.group("group"), match.group("name"), version), conflict, flags

    def parse(self, text: str) -> DependencyGraph:
        """Parse ``gradle dependencies`` output.

        Args:
            text: Task output, possibly containing several configurations.

        Returns:
            DependencyGraph of the selected configuration.
        """
        header, lines = self._block_lines(text)
        graph = DependencyGraph(configuration=self.configuration or header)
        # Stack of (depth, node id or _PROJECT) for the current branch.
        stack: list[tuple[int, object]] = []

        for line in lines:
            match = self.TREE_LINE.match(line)
            depth = len(match.group("indent")) // self.INDENT_WIDTH
            body = match.group("body")

            while stack and stack[-1][0] >= depth:
                stack.pop()
            parent_id = next(
                (node for _, node in reversed(stack) if node is not _PROJECT), None
            )

            if body.startswith("project "):
                stack.append((depth, _PROJECT))
                continue

            parsed = self._parse_module(body)
            if parsed is None:
                logger.debug("Could not parse dependency line: %s", line.strip())
                continue

            coordinate, conflict, flags = parsed
            if "(c)" in flags or "(n)" in flags or "FAILED" in flags:
                continue
            if not coordinate.namespace.strip() or not coordinate.name.strip():
                continue

            node_id = graph.add_node(coordinate, conflict)
            graph.add_edge(parent_id, node_id)
            stack.append((depth, node_id))

        return graph

