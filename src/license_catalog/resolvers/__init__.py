"""Metadata fetchers and the POM metadata resolver.

This package provides fetchers for retrieving POM documents from remote and
local Maven repositories, the hardened POM parser, and the resolver that
follows parent POM chains.
"""

from license_catalog.resolvers.base import (
    ChainedFetcher,
    InMemoryFetcher,
    MetadataFetcher,
)
from license_catalog.resolvers.http import MavenRepositoryFetcher
from license_catalog.resolvers.local import GradleCacheFetcher, LocalRepositoryFetcher
from license_catalog.resolvers.metadata import MetadataResolver, merge_with_parent
from license_catalog.resolvers.pom import parse_pom

__all__ = [
    "ChainedFetcher",
    "GradleCacheFetcher",
    "InMemoryFetcher",
    "LocalRepositoryFetcher",
    "MavenRepositoryFetcher",
    "MetadataFetcher",
    "MetadataResolver",
    "merge_with_parent",
    "parse_pom",
]
