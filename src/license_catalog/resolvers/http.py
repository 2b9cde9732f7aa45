"""Fetchers that download POM files from remote Maven repositories."""

import asyncio
import logging
from typing import Optional

import aiohttp

from license_catalog.models import Coordinate
from license_catalog.resolvers.base import MetadataFetcher, pom_path

logger = logging.getLogger(__name__)

MAVEN_CENTRAL = "https://repo.maven.apache.org/maven2"
GOOGLE_MAVEN = "https://dl.google.com/dl/android/maven2"


class HttpFetcher(MetadataFetcher):
    """Base class for fetchers that make HTTP requests.

    Manages a shared aiohttp.ClientSession for connection pooling and reuse.
    """

    def __init__(self, timeout: float = 10.0) -> None:
        """Initialize the HttpFetcher.

        Args:
            timeout: Total timeout in seconds for a single request.
        """
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Returns:
            The shared aiohttp ClientSession.
        """
        if self._session is None or self._session.closed:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> aiohttp.ClientSession:
        """Create a new aiohttp.ClientSession.

        Subclasses can override this to provide custom session configuration.
        """
        connector = aiohttp.TCPConnector(ttl_dns_cache=300)
        return aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None


class MavenRepositoryFetcher(HttpFetcher):
    """Fetches POM files from one or more Maven repository base URLs.

    Repositories are tried in order; a 404 moves on to the next repository,
    any other failure is logged and also moves on.

    Attributes:
        repositories: Base URLs without trailing slash.
    """

    def __init__(
        self,
        repositories: Optional[list[str]] = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.repositories = [
            repo.rstrip("/") for repo in (repositories or [MAVEN_CENTRAL, GOOGLE_MAVEN])
        ]

    @property
    def name(self) -> str:
        return "maven"

    async def fetch(self, coordinate: Coordinate) -> Optional[bytes]:
        if not coordinate.version:
            return None

        path = pom_path(coordinate)
        for repository in self.repositories:
            data = await self._fetch_url(f"{repository}/{path}", coordinate)
            if data is not None:
                return data

        logger.debug("POM for %s not found in any repository", coordinate)
        return None

    async def _fetch_url(self, url: str, coordinate: Coordinate) -> Optional[bytes]:
        logger.debug("Fetching POM from %s", url)
        try:
            session = await self._get_session()
            async with session.get(url) as response:
                if response.status == 404:
                    return None
                if response.status != 200:
                    logger.warning(
                        "Repository returned status %d for %s", response.status, coordinate
                    )
                    return None
                return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Network error fetching POM for %s: %s", coordinate, e)
            return None
