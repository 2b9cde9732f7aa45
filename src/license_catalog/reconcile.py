"""Reconciliation of live dependencies against the license catalog.

Provides the read-only diff, the incremental sync that merges new
dependencies into an existing catalog, the annotated dependency tree used
by reports, and the check that validates a catalog before it is shipped.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Optional, Union

from license_catalog.builder import CatalogBuilder
from license_catalog.models import (
    UNKNOWN_LICENSE_KEY,
    AmbiguousLicense,
    Catalog,
    Coordinate,
    DependencyGraph,
    DependencyTreeNode,
    DiffEntry,
    DiffReport,
    DiffStatus,
    DiffSummary,
    PackageMetadata,
)
from license_catalog.parsers.ignore import IgnoreRules

logger = logging.getLogger(__name__)

_STATUS_ORDER = {status: index for index, status in enumerate(DiffStatus)}


def _ids(coordinates: Iterable[Union[Coordinate, str]]) -> set[str]:
    ids = set()
    for coordinate in coordinates:
        if isinstance(coordinate, Coordinate):
            ids.add(coordinate.id)
        else:
            ids.add(":".join(coordinate.split(":")[:2]))
    return ids


@dataclass
class DiffResult:
    """Outcome of comparing live dependencies to the catalog.

    Each list is sorted by coordinate.
    """

    matched: list[DiffEntry] = field(default_factory=list)
    missing_in_catalog: list[DiffEntry] = field(default_factory=list)
    extra_in_catalog: list[DiffEntry] = field(default_factory=list)

    @property
    def entries(self) -> list[DiffEntry]:
        """All entries, ordered by status then coordinate."""
        return sorted(
            self.matched + self.missing_in_catalog + self.extra_in_catalog,
            key=lambda entry: (_STATUS_ORDER[entry.status], entry.coordinate),
        )

    @property
    def has_drift(self) -> bool:
        return bool(self.missing_in_catalog or self.extra_in_catalog)


def _catalog_entry(
    catalog: Catalog, index: dict[str, str], artifact_id: str, status: DiffStatus
) -> DiffEntry:
    key = index.get(artifact_id)
    record = catalog.get_license(key) if key else None
    return DiffEntry(
        coordinate=artifact_id,
        status=status,
        license_key=key,
        license_name=record.name if record else None,
    )


def diff(
    live: Iterable[Union[Coordinate, str]],
    catalog: Catalog,
    claimed: Optional[Mapping[str, Optional[PackageMetadata]]] = None,
) -> DiffResult:
    """Classify coordinates as matched, missing from or extra in the catalog.

    The comparison is done on version-independent ``namespace:name`` ids.
    Ignore rules must already have been applied to ``live``.

    Args:
        live: Current dependencies.
        catalog: The persisted catalog.
        claimed: Optional ``namespace:name`` -> freshly resolved metadata.
            The declared license name is attached to missing entries for
            review only; the catalog is not modified.

    Returns:
        DiffResult with the three classifications.
    """
    live_ids = _ids(live)
    catalog_ids = catalog.artifact_ids()
    index = catalog.license_index()
    claimed = claimed or {}

    result = DiffResult()
    for artifact_id in sorted(live_ids & catalog_ids):
        result.matched.append(_catalog_entry(catalog, index, artifact_id, DiffStatus.MATCHED))

    for artifact_id in sorted(live_ids - catalog_ids):
        metadata = claimed.get(artifact_id)
        claim = metadata.primary_license if metadata is not None else None
        result.missing_in_catalog.append(
            DiffEntry(
                coordinate=artifact_id,
                status=DiffStatus.MISSING_IN_CATALOG,
                claimed_license_name=claim.name if claim else None,
            )
        )

    for artifact_id in sorted(catalog_ids - live_ids):
        result.extra_in_catalog.append(
            _catalog_entry(catalog, index, artifact_id, DiffStatus.EXTRA_IN_CATALOG)
        )

    return result


@dataclass
class SyncResult:
    """Outcome of merging live dependencies into the catalog.

    Attributes:
        catalog: The merged catalog.
        added: Ids of artifacts that were not in the catalog before.
        removed: Ids of artifacts that were dropped because they are no
            longer live.
        ambiguous: Newly added artifacts whose license needs review.
    """

    catalog: Catalog
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    ambiguous: list[AmbiguousLicense] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def sync(
    catalog: Catalog,
    live: Iterable[Coordinate],
    metadata: Mapping[Coordinate, Optional[PackageMetadata]],
) -> SyncResult:
    """Merge the live dependency set into an existing catalog.

    Artifacts that are still live keep their catalog entry and license key,
    even if their metadata would now normalize differently. New artifacts
    are classified from ``metadata``. Artifacts no longer live are dropped,
    along with license keys left without artifacts.

    Args:
        catalog: The existing catalog.
        live: Current dependencies, after ignore rules.
        metadata: Resolved metadata for (at least) the new coordinates.

    Returns:
        SyncResult with the merged catalog and change counts.
    """
    coordinates: dict[str, Coordinate] = {}
    for coordinate in live:
        coordinates.setdefault(coordinate.id, coordinate)

    catalog_ids = catalog.artifact_ids()
    index = catalog.license_index()
    builder = CatalogBuilder(seed=catalog)
    added = []

    for artifact_id in sorted(coordinates):
        coordinate = coordinates[artifact_id]
        if artifact_id in catalog_ids:
            key = index[artifact_id]
            artifact = catalog.licenses[key].find_artifact(coordinate.namespace, coordinate.name)
            builder.add_existing(key, coordinate.namespace, artifact)
        else:
            key = builder.add_resolved(coordinate, metadata.get(coordinate))
            logger.debug("Added %s under license '%s'", artifact_id, key)
            added.append(artifact_id)

    removed = sorted(catalog_ids - set(coordinates))
    for artifact_id in removed:
        logger.debug("Removed %s (no longer a dependency)", artifact_id)

    return SyncResult(
        catalog=builder.build(),
        added=added,
        removed=removed,
        ambiguous=list(builder.ambiguous),
    )


def build_dependency_tree(
    graph: DependencyGraph,
    catalog: Catalog,
    ignore_rules: Optional[IgnoreRules] = None,
) -> list[DependencyTreeNode]:
    """Annotate the dependency graph with catalog information.

    Nodes are walked depth-first from the roots. A ``namespace:name`` met
    again after it was entered is emitted as a childless revisit node, so
    cycles and diamonds terminate. Ignored coordinates are pruned along with
    their subtrees.

    Args:
        graph: Resolved dependency graph.
        catalog: The persisted catalog.
        ignore_rules: Optional rules for pruning.

    Returns:
        One tree node per non-ignored root.
    """
    index = catalog.license_index()
    # Ids that are Visiting or Visited.
    entered: set[str] = set()

    def node_for(node_id: str, is_revisit: bool) -> DependencyTreeNode:
        return DependencyTreeNode(
            coordinate=graph.nodes[node_id].coordinate,
            license_key=index.get(node_id),
            in_catalog=node_id in index,
            is_revisit=is_revisit,
            version_conflict=graph.conflicts.get(node_id),
        )

    def visit(node_id: str) -> Optional[DependencyTreeNode]:
        if node_id not in graph.nodes:
            return None
        if ignore_rules is not None and ignore_rules.should_ignore(node_id):
            return None
        if node_id in entered:
            return node_for(node_id, is_revisit=True)

        entered.add(node_id)
        node = node_for(node_id, is_revisit=False)
        for child_id in graph.children(node_id):
            child = visit(child_id)
            if child is not None:
                node.children.append(child)
        return node

    tree = []
    for root_id in graph.roots:
        node = visit(root_id)
        if node is not None:
            tree.append(node)
    return tree


@dataclass
class CheckResult:
    """Outcome of validating a catalog.

    Attributes:
        issues: Problems that fail the check.
        warnings: Problems reported but not failing.
        artifact_count: Number of artifacts in the catalog.
        dependency_count: Number of live dependencies.
    """

    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    artifact_count: int = 0
    dependency_count: int = 0

    @property
    def passed(self) -> bool:
        return not self.issues


def check(catalog: Catalog, live: Iterable[Union[Coordinate, str]]) -> CheckResult:
    """Validate catalog definitions and compare them to live dependencies.

    Every problem is collected independently; nothing is raised.

    Args:
        catalog: The persisted catalog.
        live: Current dependencies, after ignore rules.

    Returns:
        CheckResult with issues and warnings.
    """
    result = CheckResult()
    referenced = {
        ref
        for record in catalog.licenses.values()
        for artifacts in record.artifacts.values()
        for artifact in artifacts
        for ref in (artifact.alternative_licenses or []) + (artifact.additional_licenses or [])
    }

    for key, record in sorted(catalog.licenses.items()):
        if not key.strip():
            result.issues.append("Blank license key in catalog")
        elif not (record.name or "").strip():
            result.issues.append(f"License '{key}': Missing license name")

        for namespace, artifacts in sorted(record.artifacts.items()):
            for artifact in artifacts:
                prefix = f"{namespace}:{artifact.name}"
                if not artifact.name.strip():
                    result.issues.append(f"{prefix}: Missing artifact name")
                if not artifact.url:
                    result.warnings.append(f"{prefix}: Missing URL (optional)")
                if not artifact.copyright_holders:
                    result.warnings.append(f"{prefix}: Missing copyright holders (optional)")

        used = any(record.artifacts.values()) or key in referenced
        if not used and key != UNKNOWN_LICENSE_KEY:
            result.warnings.append(f"License '{key}' is defined but not used by any artifact")

    result.issues.extend(catalog.validate())

    live_ids = _ids(live)
    catalog_ids = catalog.artifact_ids()
    missing = sorted(live_ids - catalog_ids)
    extra = sorted(catalog_ids - live_ids)

    for artifact_id in missing:
        result.issues.append(f"{artifact_id}: Dependency not in catalog")
    for artifact_id in extra:
        result.issues.append(f"{artifact_id}: In catalog but no longer a dependency")

    result.artifact_count = len(catalog_ids)
    result.dependency_count = len(live_ids)
    return result


def build_diff_report(
    graph: DependencyGraph,
    catalog: Catalog,
    ignore_rules: Optional[IgnoreRules] = None,
    claimed: Optional[Mapping[str, Optional[PackageMetadata]]] = None,
    variant: str = "",
    generated_at: Optional[str] = None,
) -> DiffReport:
    """Assemble everything a diff report renderer needs.

    Args:
        graph: Resolved dependency graph.
        catalog: The persisted catalog.
        ignore_rules: Optional rules applied to the live set and the tree.
        claimed: Optional metadata for missing entries.
        variant: Variant name shown in the report.
        generated_at: ISO timestamp; defaults to now (UTC).

    Returns:
        The DiffReport.
    """
    live = graph.coordinates()
    if ignore_rules is not None:
        live = ignore_rules.filter(live)

    result = diff(live, catalog, claimed)
    summary = DiffSummary(
        total_dependencies=len(_ids(live)),
        total_catalog_artifacts=len(catalog.artifact_ids()),
        matched_count=len(result.matched),
        missing_count=len(result.missing_in_catalog),
        extra_count=len(result.extra_in_catalog),
    )

    return DiffReport(
        variant=variant,
        configuration=graph.configuration,
        summary=summary,
        entries=result.entries,
        dependency_tree=build_dependency_tree(graph, catalog, ignore_rules),
        extra_in_catalog=list(result.extra_in_catalog),
        generated_at=generated_at or datetime.now(UTC).isoformat(timespec="seconds"),
    )
