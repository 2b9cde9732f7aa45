"""Metadata resolver following POM parent chains.

Resolution of a coordinate fetches and parses its POM. When the POM declares
no licenses the parent POM is resolved recursively (bounded by a depth
limit) and merged into the child, child values taking precedence.
"""

import asyncio
import logging
from typing import Optional

from license_catalog.models import Coordinate, PackageMetadata
from license_catalog.resolvers.base import MetadataFetcher
from license_catalog.resolvers.pom import parse_pom

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5
DEFAULT_MAX_WORKERS = 8


def merge_with_parent(child: PackageMetadata, parent: PackageMetadata) -> PackageMetadata:
    """Merge parent metadata into child metadata.

    Child display name and homepage win when present; licenses and
    contributors come from the child unless the child's list is empty.

    Args:
        child: Metadata of the artifact itself.
        parent: Resolved metadata of its parent POM.

    Returns:
        New merged PackageMetadata.
    """
    return PackageMetadata(
        display_name=child.display_name if child.display_name is not None else parent.display_name,
        homepage_url=child.homepage_url if child.homepage_url is not None else parent.homepage_url,
        license_claims=child.license_claims or parent.license_claims,
        contributors=child.contributors or parent.contributors,
        parent=child.parent,
    )


class MetadataResolver:
    """Resolves package metadata for coordinates through a fetcher.

    Failures never propagate: a coordinate that cannot be fetched, parsed
    or resolved within the depth bound yields None.

    Attributes:
        fetcher: Source of raw POM documents.
        max_depth: Maximum number of POMs consulted along a parent chain.
        max_workers: Maximum concurrent resolutions in resolve_batch().
    """

    def __init__(
        self,
        fetcher: MetadataFetcher,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.fetcher = fetcher
        self.max_depth = max_depth
        self.max_workers = max(1, max_workers)

    async def resolve(
        self, coordinate: Coordinate, max_depth: Optional[int] = None
    ) -> Optional[PackageMetadata]:
        """Resolve metadata for a single coordinate.

        Args:
            coordinate: Coordinate to resolve; the version is required.
            max_depth: Override for the parent chain bound.

        Returns:
            Resolved PackageMetadata, or None if the version is missing, the
            POM cannot be fetched or parsed, or the depth bound is exhausted.
        """
        if not coordinate.version or not coordinate.version.strip():
            logger.debug("Cannot resolve POM for %s: version is missing", coordinate)
            return None

        depth = self.max_depth if max_depth is None else max_depth
        try:
            return await self._resolve_recursive(coordinate, depth)
        except Exception as e:
            logger.debug("Failed to resolve POM for %s: %s", coordinate, e)
            return None

    async def _resolve_recursive(
        self, coordinate: Coordinate, max_depth: int
    ) -> Optional[PackageMetadata]:
        if max_depth <= 0:
            logger.debug("Max depth reached while resolving parent POM for %s", coordinate)
            return None

        data = await self.fetcher.fetch(coordinate)
        if data is None:
            logger.debug("No POM available for %s from %s", coordinate, self.fetcher.name)
            return None

        metadata = parse_pom(data)
        if metadata is None:
            return None

        if metadata.license_claims:
            return metadata

        if metadata.parent is None:
            return metadata

        parent = await self._resolve_recursive(metadata.parent, max_depth - 1)
        if parent is None:
            return metadata

        return merge_with_parent(metadata, parent)

    async def resolve_batch(
        self, coordinates: list[Coordinate]
    ) -> dict[Coordinate, Optional[PackageMetadata]]:
        """Resolve many coordinates concurrently.

        Concurrency is bounded by ``max_workers``. Every input coordinate has
        an entry in the result; exceptions degrade to None.

        Args:
            coordinates: Coordinates to resolve.

        Returns:
            Dictionary mapping each coordinate to its metadata (or None).
        """
        logger.info("Starting batch resolution of %d coordinates", len(coordinates))
        semaphore = asyncio.Semaphore(self.max_workers)

        async def _bounded(coordinate: Coordinate) -> Optional[PackageMetadata]:
            async with semaphore:
                return await self.resolve(coordinate)

        results = await asyncio.gather(
            *(_bounded(coordinate) for coordinate in coordinates),
            return_exceptions=True,
        )

        resolved: dict[Coordinate, Optional[PackageMetadata]] = {}
        for coordinate, result in zip(coordinates, results):
            if isinstance(result, BaseException):
                logger.error("Exception resolving %s: %s", coordinate, result)
                resolved[coordinate] = None
            else:
                resolved[coordinate] = result

        successful = sum(1 for metadata in resolved.values() if metadata is not None)
        logger.info("Batch resolution complete: %d/%d successful", successful, len(coordinates))
        return resolved

    async def close(self) -> None:
        await self.fetcher.close()

    async def __aenter__(self) -> "MetadataResolver":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
