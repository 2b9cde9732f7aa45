"""Scanner for plain coordinate lists.

One ``group:name:version`` per line. Lines starting with ``#`` and blank
lines are skipped, as are trailing ``# ...`` comments.
"""

import logging
from pathlib import Path

from license_catalog.models import Coordinate, DependencyGraph
from license_catalog.scanners.base import BaseScanner

logger = logging.getLogger(__name__)


class CoordinateListScanner(BaseScanner):
    """Scanner for flat coordinate lists.

    Every coordinate becomes a root of the graph with no children.
    """

    FILE_NAMES = ("dependencies.txt", "dependencies.lst")
    SUFFIXES = (".coords",)

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        name = path.name.lower()
        return name in cls.FILE_NAMES or path.suffix.lower() in cls.SUFFIXES

    @property
    def source_name(self) -> str:
        return "coordinate list"

    def parse(self, text: str) -> DependencyGraph:
        """Parse a coordinate list.

        Args:
            text: File content.

        Returns:
            DependencyGraph whose roots are the listed coordinates.
        """
        graph = DependencyGraph()

        for line_num, raw in enumerate(text.splitlines(), start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue

            try:
                coordinate = Coordinate.parse(line)
            except ValueError:
                logger.warning("Skipping invalid coordinate on line %d: %s", line_num, line)
                continue

            if not coordinate.namespace.strip() or not coordinate.name.strip():
                logger.warning("Skipping blank coordinate on line %d: %s", line_num, line)
                continue

            graph.add_edge(None, graph.add_node(coordinate))

        return graph
