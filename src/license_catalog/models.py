"""Core data models for license_catalog.

This module defines the data structures shared by the resolver, the catalog
builder and the reconciliation engine: dependency coordinates, package
metadata fetched from POM files, the persisted license catalog, and the
transient diff/report structures derived from it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

UNKNOWN_LICENSE_KEY = "unknown"


@dataclass(frozen=True)
class Coordinate:
    """Immutable Maven-style dependency coordinate.

    Frozen for hashability so coordinates can be used as dictionary keys
    during batch resolution.

    Attributes:
        namespace: Group identifier (e.g., "com.squareup.okhttp3").
        name: Artifact name (e.g., "okhttp").
        version: Optional version string (e.g., "4.12.0").
    """

    namespace: str
    name: str
    version: Optional[str] = None

    @property
    def id(self) -> str:
        """Return the version-independent ``namespace:name`` form."""
        return f"{self.namespace}:{self.name}"

    @property
    def coordinate(self) -> str:
        """Return the canonical ``namespace:name[:version]`` form."""
        if self.version:
            return f"{self.namespace}:{self.name}:{self.version}"
        return self.id

    def __str__(self) -> str:
        return self.coordinate

    @classmethod
    def parse(cls, text: str) -> "Coordinate":
        """Parse a ``namespace:name[:version]`` string.

        Args:
            text: Coordinate string.

        Returns:
            The parsed Coordinate.

        Raises:
            ValueError: If the string does not have two or three parts.
        """
        parts = text.strip().split(":")
        if len(parts) == 2:
            return cls(parts[0], parts[1])
        if len(parts) == 3:
            return cls(parts[0], parts[1], parts[2] or None)
        raise ValueError(f"Invalid coordinate: {text}")


@dataclass
class DependencyGraph:
    """Resolved dependency graph keyed by version-independent ``namespace:name``.

    Attributes:
        roots: Ids of the declared (first-level) dependencies, in order.
        nodes: Id -> selected coordinate.
        edges: Id -> ids of direct dependencies, in order.
        conflicts: Id -> version conflict description (e.g., "1.0 -> 2.0").
        configuration: Name of the resolved configuration, if known.
    """

    roots: list[str] = field(default_factory=list)
    nodes: dict[str, Coordinate] = field(default_factory=dict)
    edges: dict[str, list[str]] = field(default_factory=dict)
    conflicts: dict[str, str] = field(default_factory=dict)
    configuration: str = ""

    def add_node(self, coordinate: Coordinate, conflict: Optional[str] = None) -> str:
        """Register a coordinate (first registration wins) and return its id."""
        node_id = coordinate.id
        if node_id not in self.nodes:
            self.nodes[node_id] = coordinate
            if conflict:
                self.conflicts[node_id] = conflict
        return node_id

    def add_edge(self, parent_id: Optional[str], child_id: str) -> None:
        """Link ``child_id`` under ``parent_id``, or as a root when parent is None."""
        targets = self.roots if parent_id is None else self.edges.setdefault(parent_id, [])
        if child_id not in targets:
            targets.append(child_id)

    def children(self, node_id: str) -> list[str]:
        return self.edges.get(node_id, [])

    def coordinates(self) -> list[Coordinate]:
        """Return every coordinate once, in discovery order."""
        return list(self.nodes.values())


@dataclass(frozen=True)
class LicenseClaim:
    """A license as declared in package metadata (name plus optional URL)."""

    name: str
    url: Optional[str] = None


@dataclass(frozen=True)
class PackageMetadata:
    """Metadata extracted from a package's POM, possibly merged with parents.

    Attributes:
        display_name: Human-readable project name.
        homepage_url: Project homepage.
        license_claims: Declared licenses in document order.
        contributors: Developer names in document order.
        parent: Parent POM coordinate, when fully specified.
    """

    display_name: Optional[str] = None
    homepage_url: Optional[str] = None
    license_claims: tuple[LicenseClaim, ...] = ()
    contributors: tuple[str, ...] = ()
    parent: Optional[Coordinate] = None

    @property
    def primary_license(self) -> Optional[LicenseClaim]:
        """Return the first declared license, or None if there are none."""
        return self.license_claims[0] if self.license_claims else None


@dataclass
class ArtifactRecord:
    """An artifact entry stored under a license key and namespace.

    ``alternative_licenses`` lists keys the consumer may comply with instead
    of the primary license (OR); ``additional_licenses`` lists keys that must
    be complied with as well (AND).
    """

    name: str
    url: Optional[str] = None
    copyright_holders: list[str] = field(default_factory=list)
    alternative_licenses: Optional[list[str]] = None
    additional_licenses: Optional[list[str]] = None


@dataclass
class LicenseRecord:
    """A license entry in the catalog together with its artifacts.

    Attributes:
        name: Display name of the license.
        url: Canonical or detected license URL.
        artifacts: Artifacts grouped by namespace.
    """

    name: str
    url: Optional[str] = None
    artifacts: dict[str, list[ArtifactRecord]] = field(default_factory=dict)

    def artifact_ids(self) -> list[str]:
        """Return ``namespace:name`` for every artifact under this license."""
        return [
            f"{namespace}:{artifact.name}"
            for namespace, entries in self.artifacts.items()
            for artifact in entries
        ]

    def find_artifact(self, namespace: str, name: str) -> Optional[ArtifactRecord]:
        for artifact in self.artifacts.get(namespace, []):
            if artifact.name == name:
                return artifact
        return None


@dataclass
class Catalog:
    """The persisted mapping of license keys to licensed artifacts.

    The catalog is the single source of truth kept between runs. Every key
    referenced by an artifact (primary, alternative or additional) must be
    present in ``licenses``.
    """

    licenses: dict[str, LicenseRecord] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "Catalog":
        return cls(licenses={})

    def get_license(self, key: str) -> Optional[LicenseRecord]:
        return self.licenses.get(key)

    def contains_license(self, key: str) -> bool:
        return key in self.licenses

    def license_keys(self) -> set[str]:
        return set(self.licenses)

    def find_artifact(
        self, namespace: str, name: str
    ) -> Optional[tuple[str, ArtifactRecord]]:
        """Find the license an artifact is filed under.

        Args:
            namespace: Artifact namespace.
            name: Artifact name.

        Returns:
            Tuple of (license key, artifact record), or None if not found.
        """
        for key, record in self.licenses.items():
            artifact = record.find_artifact(namespace, name)
            if artifact is not None:
                return key, artifact
        return None

    def artifact_ids(self) -> set[str]:
        """Return every ``namespace:name`` filed in the catalog."""
        return {
            artifact_id
            for record in self.licenses.values()
            for artifact_id in record.artifact_ids()
        }

    def license_index(self) -> dict[str, str]:
        """Return a ``namespace:name`` -> license key lookup table.

        When an artifact is filed under several keys the first key in
        sorted order wins, matching :meth:`find_artifact` on a sorted catalog.
        """
        index: dict[str, str] = {}
        for key in sorted(self.licenses):
            for artifact_id in self.licenses[key].artifact_ids():
                index.setdefault(artifact_id, key)
        return index

    def validate(self) -> list[str]:
        """Check referential integrity of license references.

        Returns:
            Human-readable problems; empty when the catalog is consistent.
        """
        problems = []
        for key, record in sorted(self.licenses.items()):
            for namespace, entries in sorted(record.artifacts.items()):
                for artifact in entries:
                    prefix = f"{namespace}:{artifact.name}"
                    for ref in artifact.alternative_licenses or []:
                        if ref not in self.licenses:
                            problems.append(
                                f"{prefix}: Unknown alternative license key '{ref}' not in catalog"
                            )
                    for ref in artifact.additional_licenses or []:
                        if ref not in self.licenses:
                            problems.append(
                                f"{prefix}: Unknown additional license key '{ref}' not in catalog"
                            )
        return problems


@dataclass(frozen=True)
class LicenseRef:
    """A license resolved from the catalog (key, display name, URL)."""

    key: str
    name: str
    url: Optional[str] = None


@dataclass
class ResolvedLicense:
    """One artifact of the flattened license list consumed by generators."""

    coordinate: str
    artifact_name: str
    artifact_url: Optional[str]
    copyright_holders: list[str]
    license: LicenseRef
    alternative_licenses: Optional[list[LicenseRef]] = None
    additional_licenses: Optional[list[LicenseRef]] = None


@dataclass(frozen=True)
class AmbiguousLicense:
    """An artifact whose declared license needs a human to confirm it."""

    coordinate: str
    license_name: str
    license_url: Optional[str] = None


class DiffStatus(Enum):
    """Status of a coordinate when comparing live dependencies to the catalog."""

    MATCHED = "matched"
    MISSING_IN_CATALOG = "missing"
    EXTRA_IN_CATALOG = "extra"


@dataclass(frozen=True)
class DiffEntry:
    """A single coordinate classified by the diff.

    Attributes:
        coordinate: ``namespace:name`` form.
        status: Classification.
        license_key: Catalog key (matched and extra entries).
        license_name: Catalog license display name (matched and extra entries).
        claimed_license_name: License name from freshly resolved metadata
            (missing entries only, informational).
    """

    coordinate: str
    status: DiffStatus
    license_key: Optional[str] = None
    license_name: Optional[str] = None
    claimed_license_name: Optional[str] = None


@dataclass
class DependencyTreeNode:
    """A node of the annotated dependency tree.

    ``is_revisit`` marks a coordinate that was already expanded elsewhere in
    the tree; such nodes never have children.
    """

    coordinate: str
    license_key: Optional[str] = None
    in_catalog: bool = False
    children: list["DependencyTreeNode"] = field(default_factory=list)
    is_revisit: bool = False
    version_conflict: Optional[str] = None


@dataclass(frozen=True)
class DiffSummary:
    total_dependencies: int
    total_catalog_artifacts: int
    matched_count: int
    missing_count: int
    extra_count: int


@dataclass
class DiffReport:
    """Everything a diff report renderer needs."""

    variant: str
    configuration: str
    summary: DiffSummary
    entries: list[DiffEntry]
    dependency_tree: list[DependencyTreeNode]
    extra_in_catalog: list[DiffEntry]
    generated_at: str
