"""Base interface for metadata fetchers.

Fetchers retrieve raw POM bytes for a coordinate from some artifact
repository. They are the seam between the resolver and the host's
repository client: tests inject in-memory fakes, the CLI wires remote and
local Maven repositories.
"""

from abc import ABC, abstractmethod
from typing import Optional

from license_catalog.models import Coordinate


def pom_path(coordinate: Coordinate) -> str:
    """Return the repository-relative path of a coordinate's POM file.

    Args:
        coordinate: Coordinate with a version.

    Returns:
        Path like "com/squareup/okhttp3/okhttp/4.12.0/okhttp-4.12.0.pom".
    """
    group_path = coordinate.namespace.replace(".", "/")
    return (
        f"{group_path}/{coordinate.name}/{coordinate.version}/"
        f"{coordinate.name}-{coordinate.version}.pom"
    )


class MetadataFetcher(ABC):
    """Abstract base class for POM fetchers.

    Implementations must not raise for missing or unreachable documents;
    they return None and let the resolver treat the artifact as having no
    metadata.
    """

    @abstractmethod
    async def fetch(self, coordinate: Coordinate) -> Optional[bytes]:
        """Fetch the raw POM document for a coordinate.

        Args:
            coordinate: Fully specified coordinate (version required).

        Returns:
            POM bytes, or None if not found or the fetch failed.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the fetcher name for logging/debugging."""
        ...

    async def close(self) -> None:
        """Release any resources held by the fetcher."""

    async def __aenter__(self) -> "MetadataFetcher":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


class ChainedFetcher(MetadataFetcher):
    """Tries several fetchers in order and returns the first document found."""

    def __init__(self, fetchers: list[MetadataFetcher]) -> None:
        self.fetchers = list(fetchers)

    @property
    def name(self) -> str:
        return " -> ".join(fetcher.name for fetcher in self.fetchers) or "empty"

    async def fetch(self, coordinate: Coordinate) -> Optional[bytes]:
        for fetcher in self.fetchers:
            data = await fetcher.fetch(coordinate)
            if data is not None:
                return data
        return None

    async def close(self) -> None:
        for fetcher in self.fetchers:
            await fetcher.close()


class InMemoryFetcher(MetadataFetcher):
    """Serves POM documents from a mapping keyed by full coordinate string.

    Useful for tests and for callers that already hold POM bytes (for
    example, a build tool that resolved them itself).
    """

    def __init__(self, documents: dict[str, bytes]) -> None:
        self.documents = dict(documents)
        self.requests: list[str] = []

    @property
    def name(self) -> str:
        return "memory"

    async def fetch(self, coordinate: Coordinate) -> Optional[bytes]:
        self.requests.append(coordinate.coordinate)
        return self.documents.get(coordinate.coordinate)
