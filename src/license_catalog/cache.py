"""SQLite-based cache layer for resolved package metadata.

This module provides a persistent cache to avoid fetching and parsing the
same POM chain again for package versions that were already resolved.
"""

import contextlib
import json
import sqlite3
from dataclasses import asdict
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, Optional

from license_catalog.models import Coordinate, LicenseClaim, PackageMetadata

CacheKey = tuple[str, str]


def _to_json(metadata: PackageMetadata) -> str:
    return json.dumps(asdict(metadata))


def _from_json(data: str) -> PackageMetadata:
    raw: dict[str, Any] = json.loads(data)
    parent = raw.get("parent")
    return PackageMetadata(
        display_name=raw.get("display_name"),
        homepage_url=raw.get("homepage_url"),
        license_claims=tuple(LicenseClaim(**claim) for claim in raw.get("license_claims", [])),
        contributors=tuple(raw.get("contributors", [])),
        parent=Coordinate(**parent) if parent else None,
    )


def cache_key(coordinate: Coordinate) -> CacheKey:
    """Return the ``(namespace:name, version)`` cache key of a coordinate."""
    return coordinate.id, coordinate.version or ""


class MetadataCache:
    """SQLite cache for storing resolved package metadata.

    Only successful resolutions are stored, so a package whose POM could not
    be fetched is retried on the next run.

    Attributes:
        db_path: Path to the SQLite database file.
        ttl_days: Number of days before cache entries expire (default: 30).
    """

    DEFAULT_TTL_DAYS = 30

    def __init__(
        self,
        db_path: Optional[Path] = None,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ):
        """Initialize the metadata cache.

        Args:
            db_path: Path to SQLite database. If None, uses
                ~/.cache/license_catalog/cache.db.
            ttl_days: Number of days before cache entries expire.
        """
        if db_path is None:
            cache_dir = Path.home() / ".cache" / "license_catalog"
            cache_dir.mkdir(parents=True, exist_ok=True)
            db_path = cache_dir / "cache.db"

        self.db_path = db_path
        self.ttl_days = ttl_days
        self._conn: Optional[sqlite3.Connection] = None
        self._init_database()

    def __enter__(self) -> "MetadataCache":
        """Enter context manager, keeping connection open."""
        self._conn = sqlite3.connect(self.db_path)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager, closing connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    @contextlib.contextmanager
    def _connect(self):
        """Get a database connection.

        Reuses the open connection inside a ``with`` block, otherwise opens
        one for the duration of the call.
        """
        if self._conn:
            yield self._conn
        else:
            conn = sqlite3.connect(self.db_path)
            try:
                yield conn
            finally:
                conn.close()

    def _init_database(self) -> None:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS metadata_cache (
                    artifact_id TEXT NOT NULL,
                    version TEXT NOT NULL,
                    metadata TEXT NOT NULL,
                    resolved_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL,
                    PRIMARY KEY (artifact_id, version)
                )
                """
            )
            cursor.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_expires
                ON metadata_cache(expires_at)
                """
            )
            conn.commit()

    def _decode(self, data: str, expires_at_str: str) -> Optional[PackageMetadata]:
        if datetime.now(UTC) >= datetime.fromisoformat(expires_at_str):
            return None
        try:
            return _from_json(data)
        except (json.JSONDecodeError, TypeError, KeyError, AttributeError):
            # Corrupted entries are treated as misses
            return None

    def get(self, coordinate: Coordinate) -> Optional[PackageMetadata]:
        """Retrieve cached metadata for a coordinate.

        Args:
            coordinate: Versioned coordinate.

        Returns:
            PackageMetadata on a fresh hit, None on a miss or expired entry.
        """
        artifact_id, version = cache_key(coordinate)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT metadata, expires_at
                FROM metadata_cache
                WHERE artifact_id = ? AND version = ?
                """,
                (artifact_id, version),
            )
            row = cursor.fetchone()

        if row is None:
            return None
        return self._decode(*row)

    def get_batch(self, coordinates: list[Coordinate]) -> dict[Coordinate, PackageMetadata]:
        """Retrieve cached metadata for multiple coordinates.

        Args:
            coordinates: Versioned coordinates.

        Returns:
            Dictionary mapping coordinate -> metadata. Only hits are included.
        """
        wanted: dict[CacheKey, list[Coordinate]] = {}
        for coordinate in coordinates:
            wanted.setdefault(cache_key(coordinate), []).append(coordinate)
        ids = list({artifact_id for artifact_id, _ in wanted})
        if not ids:
            return {}

        results: dict[Coordinate, PackageMetadata] = {}
        # Chunk to stay under SQLite's variable limit
        chunk_size = 900
        for i in range(0, len(ids), chunk_size):
            chunk = ids[i : i + chunk_size]
            placeholders = ",".join(["?"] * len(chunk))

            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f"""
                    SELECT artifact_id, version, metadata, expires_at
                    FROM metadata_cache
                    WHERE artifact_id IN ({placeholders})
                    """,
                    chunk,
                )
                rows = cursor.fetchall()

            for artifact_id, version, data, expires_at_str in rows:
                matches = wanted.get((artifact_id, version))
                if not matches:
                    continue
                metadata = self._decode(data, expires_at_str)
                if metadata is None:
                    continue
                for coordinate in matches:
                    results[coordinate] = metadata

        return results

    def set(self, coordinate: Coordinate, metadata: PackageMetadata) -> None:
        """Store metadata for a coordinate."""
        self.set_batch({coordinate: metadata})

    def set_batch(self, items: dict[Coordinate, Optional[PackageMetadata]]) -> None:
        """Store metadata for multiple coordinates.

        Entries whose metadata is None are skipped.

        Args:
            items: Dictionary mapping coordinate -> metadata.
        """
        resolved_at = datetime.now(UTC)
        expires_at = resolved_at + timedelta(days=self.ttl_days)
        resolved_at_str = resolved_at.isoformat()
        expires_at_str = expires_at.isoformat()

        rows = [
            (*cache_key(coordinate), _to_json(metadata), resolved_at_str, expires_at_str)
            for coordinate, metadata in items.items()
            if metadata is not None
        ]
        if not rows:
            return

        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.executemany(
                """
                REPLACE INTO metadata_cache
                (artifact_id, version, metadata, resolved_at, expires_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                rows,
            )
            conn.commit()

    def clear(self, artifact_id: Optional[str] = None, version: Optional[str] = None) -> None:
        """Clear cache entries.

        Args:
            artifact_id: If specified, clear only this ``namespace:name``.
                If None, clear all entries.
            version: If specified (with artifact_id), clear only this
                version. Ignored if artifact_id is None.
        """
        with self._connect() as conn:
            cursor = conn.cursor()
            if artifact_id is None:
                cursor.execute("DELETE FROM metadata_cache")
            elif version is None:
                cursor.execute(
                    "DELETE FROM metadata_cache WHERE artifact_id = ?",
                    (artifact_id,),
                )
            else:
                cursor.execute(
                    "DELETE FROM metadata_cache WHERE artifact_id = ? AND version = ?",
                    (artifact_id, version),
                )
            conn.commit()

    def info(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with ``path``, ``count`` and ``size_bytes``.
        """
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM metadata_cache")
            count = cursor.fetchone()[0]

        size_bytes = self.db_path.stat().st_size if self.db_path.exists() else 0

        return {
            "path": str(self.db_path),
            "count": count,
            "size_bytes": size_bytes,
        }
