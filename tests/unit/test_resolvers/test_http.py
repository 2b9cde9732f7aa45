"""Unit tests for the Maven repository fetcher."""

import asyncio
from typing import AsyncGenerator

import pytest
from aiohttp import ClientError
from aioresponses import aioresponses

from license_catalog.models import Coordinate
from license_catalog.resolvers.base import pom_path
from license_catalog.resolvers.http import GOOGLE_MAVEN, MAVEN_CENTRAL, MavenRepositoryFetcher

OKHTTP_PATH = "com/squareup/okhttp3/okhttp/4.12.0/okhttp-4.12.0.pom"
FIRST = "https://repo.example.org/maven2"
SECOND = "https://mirror.example.org/maven"


@pytest.fixture
async def fetcher() -> AsyncGenerator[MavenRepositoryFetcher, None]:
    """Return a fetcher with two repositories."""
    fetcher = MavenRepositoryFetcher(repositories=[FIRST, SECOND + "/"])
    yield fetcher
    await fetcher.close()


def test_pom_path(okhttp) -> None:
    assert pom_path(okhttp) == OKHTTP_PATH


def test_default_repositories() -> None:
    assert MavenRepositoryFetcher().repositories == [MAVEN_CENTRAL, GOOGLE_MAVEN]


@pytest.mark.asyncio
async def test_fetch_from_first_repository(fetcher, okhttp, sample_pom) -> None:
    with aioresponses() as mock:
        mock.get(f"{FIRST}/{OKHTTP_PATH}", body=sample_pom)

        assert await fetcher.fetch(okhttp) == sample_pom


@pytest.mark.asyncio
async def test_404_falls_through_to_next_repository(fetcher, okhttp, sample_pom) -> None:
    with aioresponses() as mock:
        mock.get(f"{FIRST}/{OKHTTP_PATH}", status=404)
        mock.get(f"{SECOND}/{OKHTTP_PATH}", body=sample_pom)

        assert await fetcher.fetch(okhttp) == sample_pom


@pytest.mark.asyncio
async def test_not_found_anywhere(fetcher, okhttp) -> None:
    with aioresponses() as mock:
        mock.get(f"{FIRST}/{OKHTTP_PATH}", status=404)
        mock.get(f"{SECOND}/{OKHTTP_PATH}", status=404)

        assert await fetcher.fetch(okhttp) is None


@pytest.mark.asyncio
async def test_server_error_returns_none(fetcher, okhttp) -> None:
    with aioresponses() as mock:
        mock.get(f"{FIRST}/{OKHTTP_PATH}", status=500)
        mock.get(f"{SECOND}/{OKHTTP_PATH}", status=503)

        assert await fetcher.fetch(okhttp) is None


@pytest.mark.asyncio
async def test_network_errors_are_absorbed(fetcher, okhttp) -> None:
    with aioresponses() as mock:
        mock.get(f"{FIRST}/{OKHTTP_PATH}", exception=ClientError("connection refused"))
        mock.get(f"{SECOND}/{OKHTTP_PATH}", exception=asyncio.TimeoutError())

        assert await fetcher.fetch(okhttp) is None


@pytest.mark.asyncio
async def test_network_error_moves_to_next_repository(fetcher, okhttp, sample_pom) -> None:
    with aioresponses() as mock:
        mock.get(f"{FIRST}/{OKHTTP_PATH}", exception=ClientError("connection refused"))
        mock.get(f"{SECOND}/{OKHTTP_PATH}", body=sample_pom)

        assert await fetcher.fetch(okhttp) == sample_pom


@pytest.mark.asyncio
async def test_unversioned_coordinate_is_not_fetched(fetcher) -> None:
    with aioresponses():
        assert await fetcher.fetch(Coordinate("com.squareup.okhttp3", "okhttp")) is None


@pytest.mark.asyncio
async def test_close_is_idempotent() -> None:
    fetcher = MavenRepositoryFetcher()
    await fetcher._get_session()
    await fetcher.close()
    await fetcher.close()
    assert fetcher._session is None
