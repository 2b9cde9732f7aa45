"""Command-line interface for license_catalog.

Provides the main entry point and subcommands for building, synchronizing,
checking and reporting on the license catalog, and for generating code and
notices from it.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from license_catalog.builder import CatalogBuilder
from license_catalog.cache import MetadataCache
from license_catalog.config import ProjectConfig, load_config
from license_catalog.errors import LicenseCatalogError, LicenseCheckError
from license_catalog.generators import PythonModuleGenerator
from license_catalog.models import AmbiguousLicense, Coordinate, DependencyGraph, PackageMetadata
from license_catalog.parsers.catalog import load_catalog, write_catalog
from license_catalog.parsers.ignore import IGNORE_FILE_TEMPLATE, IgnoreRules, load_ignore_rules
from license_catalog.reconcile import build_diff_report, check as check_catalog, diff, sync as sync_catalog
from license_catalog.reporters import HtmlReporter, JsonReporter, MarkdownReporter
from license_catalog.reporters.html import DEFAULT_REPORT_NAME
from license_catalog.resolved import resolve_licenses
from license_catalog.resolvers import (
    ChainedFetcher,
    GradleCacheFetcher,
    LocalRepositoryFetcher,
    MavenRepositoryFetcher,
    MetadataFetcher,
    MetadataResolver,
)
from license_catalog.scanners import get_scanner

app = typer.Typer(
    name="license-catalog",
    help="License catalog management for Maven-style dependencies.",
    no_args_is_help=True,
)
cache_app = typer.Typer(help="Manage the metadata resolution cache.", no_args_is_help=True)
app.add_typer(cache_app, name="cache")

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("license_catalog")


DepsOption = Annotated[
    Path,
    typer.Option(
        "--deps",
        "-d",
        help="Dependency listing (gradle dependencies output or coordinate list)",
        exists=True,
        readable=True,
    ),
]
ProjectOption = Annotated[
    Optional[Path],
    typer.Option(
        "--project",
        "-p",
        help="Project directory holding pyproject.toml and the catalog (default: cwd)",
        file_okay=False,
    ),
]
VariantOption = Annotated[
    Optional[str],
    typer.Option("--variant", help="Variant subdirectory for the catalog and ignore files"),
]
ConfigurationOption = Annotated[
    Optional[str],
    typer.Option(
        "--configuration",
        "-c",
        help="Configuration block to read from gradle output (default: first)",
    ),
]
RepositoryOption = Annotated[
    Optional[list[str]],
    typer.Option(
        "--repository",
        "-r",
        envvar="LICENSE_CATALOG_REPOSITORY",
        help="Maven repository base URL (repeatable)",
    ),
]
OfflineOption = Annotated[
    bool,
    typer.Option("--offline", help="Only read POM files from local caches"),
]
NoCacheOption = Annotated[
    bool,
    typer.Option("--no-cache", help="Do not read or write the metadata cache"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose output"),
]


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("license_catalog").setLevel(level)


def _load_project(
    project: Optional[Path],
    variant: Optional[str] = None,
    repositories: Optional[list[str]] = None,
) -> ProjectConfig:
    config = load_config(project)
    return config.with_overrides(variant=variant, repositories=repositories or None)


def _scan(deps: Path, configuration: Optional[str], verbose: bool) -> DependencyGraph:
    scanner = get_scanner(deps, configuration=configuration)
    if verbose:
        console.print(f"[dim]Using scanner: {scanner.source_name}[/dim]")
    return scanner.scan()


def _live_coordinates(graph: DependencyGraph, rules: IgnoreRules) -> list[Coordinate]:
    return rules.filter(graph.coordinates())


def _build_fetcher(config: ProjectConfig, offline: bool) -> MetadataFetcher:
    fetchers: list[MetadataFetcher] = [LocalRepositoryFetcher(), GradleCacheFetcher()]
    if not offline:
        fetchers.append(MavenRepositoryFetcher(repositories=config.repositories))
    return ChainedFetcher(fetchers)


async def _resolve_metadata(
    coordinates: list[Coordinate],
    config: ProjectConfig,
    offline: bool,
    use_cache: bool,
    verbose: bool,
) -> dict[Coordinate, Optional[PackageMetadata]]:
    """Resolve metadata for coordinates, consulting the cache first.

    Args:
        coordinates: Coordinates to resolve.
        config: Project configuration.
        offline: Only use local POM sources.
        use_cache: Whether to use the metadata cache.
        verbose: Whether to print verbose output.

    Returns:
        Dictionary mapping every coordinate to its metadata (or None).
    """
    if not coordinates:
        return {}

    cache = MetadataCache(ttl_days=config.cache_ttl_days) if use_cache else None
    cached: dict[Coordinate, Optional[PackageMetadata]] = {}
    if cache:
        cached.update(cache.get_batch(coordinates))
        if cached and verbose:
            console.print(f"[dim]Using {len(cached)} cached entries[/dim]")

    to_resolve = [c for c in coordinates if c not in cached]
    resolved: dict[Coordinate, Optional[PackageMetadata]] = {}
    if to_resolve:
        async with MetadataResolver(
            _build_fetcher(config, offline),
            max_depth=config.max_parent_depth,
            max_workers=config.max_workers,
        ) as resolver:
            resolved = await resolver.resolve_batch(to_resolve)
        if cache:
            cache.set_batch(resolved)

    return {**cached, **resolved}


def _resolve_with_progress(
    coordinates: list[Coordinate],
    config: ProjectConfig,
    offline: bool,
    use_cache: bool,
    verbose: bool,
) -> dict[Coordinate, Optional[PackageMetadata]]:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(
            f"Resolving metadata for {len(coordinates)} dependencies...", total=None
        )
        results = asyncio.run(
            _resolve_metadata(coordinates, config, offline, use_cache, verbose)
        )
        progress.update(task, completed=True)
    return results


def _print_ambiguous(ambiguous: list[AmbiguousLicense]) -> None:
    if not ambiguous:
        return
    console.print(
        f"\n[yellow]Ambiguous licenses ({len(ambiguous)}), please verify manually:[/yellow]"
    )
    for item in ambiguous:
        url = f" ({item.license_url})" if item.license_url else ""
        console.print(f"  - {item.coordinate}: {item.license_name}{url}")


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


@app.command()
def init(
    deps: DepsOption,
    project: ProjectOption = None,
    variant: VariantOption = None,
    configuration: ConfigurationOption = None,
    repository: RepositoryOption = None,
    offline: OfflineOption = False,
    no_cache: NoCacheOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Create the license catalog and ignore file from the current dependencies.

    An existing, non-empty catalog is left untouched.
    """
    _setup_logging(verbose)
    try:
        config = _load_project(project, variant, repository)
        ignore_path = config.ignore_path
        if not ignore_path.exists():
            ignore_path.parent.mkdir(parents=True, exist_ok=True)
            ignore_path.write_text(IGNORE_FILE_TEMPLATE, encoding="utf-8")
            console.print(f"[green]Created:[/green] {ignore_path}")

        catalog_path = config.licenses_path
        if catalog_path.exists() and load_catalog(catalog_path).licenses:
            console.print(f"[yellow]Catalog already exists:[/yellow] {catalog_path}")
            console.print("Run 'license-catalog sync' to update it.")
            return

        graph = _scan(deps, configuration, verbose)
        coordinates = _live_coordinates(graph, load_ignore_rules(ignore_path))
        metadata = _resolve_with_progress(coordinates, config, offline, not no_cache, verbose)
    except (LicenseCatalogError, ValueError, FileNotFoundError) as e:
        _fail(str(e))

    builder = CatalogBuilder()
    for coordinate in sorted(coordinates, key=lambda c: c.id):
        builder.add_resolved(coordinate, metadata.get(coordinate))
    catalog = builder.build()

    write_catalog(catalog, catalog_path)
    console.print(
        f"[green]Created:[/green] {catalog_path} "
        f"({len(catalog.artifact_ids())} artifacts, {len(catalog.licenses)} licenses)"
    )
    _print_ambiguous(builder.ambiguous)


@app.command()
def sync(
    deps: DepsOption,
    project: ProjectOption = None,
    variant: VariantOption = None,
    configuration: ConfigurationOption = None,
    repository: RepositoryOption = None,
    offline: OfflineOption = False,
    no_cache: NoCacheOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Add new dependencies to the catalog and drop removed ones.

    Artifacts already in the catalog keep their license key.
    """
    _setup_logging(verbose)
    try:
        config = _load_project(project, variant, repository)
        catalog = load_catalog(config.licenses_path)
        graph = _scan(deps, configuration, verbose)
        live = _live_coordinates(graph, load_ignore_rules(config.ignore_path))

        missing_ids = {entry.coordinate for entry in diff(live, catalog).missing_in_catalog}
        new_coordinates = [c for c in live if c.id in missing_ids]
        metadata = _resolve_with_progress(
            new_coordinates, config, offline, not no_cache, verbose
        )
    except (LicenseCatalogError, ValueError, FileNotFoundError) as e:
        _fail(str(e))

    result = sync_catalog(catalog, live, metadata)
    if result.changed or not config.licenses_path.exists():
        write_catalog(result.catalog, config.licenses_path)

    console.print(f"{len(result.added)} added, {len(result.removed)} removed")
    if verbose:
        for artifact_id in result.added:
            console.print(f"  [green]+[/green] {artifact_id}")
        for artifact_id in result.removed:
            console.print(f"  [red]-[/red] {artifact_id}")
    _print_ambiguous(result.ambiguous)


@app.command()
def check(
    deps: DepsOption,
    project: ProjectOption = None,
    variant: VariantOption = None,
    configuration: ConfigurationOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Validate the catalog and compare it with the current dependencies.

    Exit codes:
        0 - Catalog is valid and in sync
        1 - Issues found or error occurred
    """
    _setup_logging(verbose)
    try:
        config = _load_project(project, variant)
        catalog = load_catalog(config.licenses_path)
        graph = _scan(deps, configuration, verbose)
        live = _live_coordinates(graph, load_ignore_rules(config.ignore_path))

        result = check_catalog(catalog, live)
        for warning in result.warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        if not result.passed:
            raise LicenseCheckError(result.issues)
    except LicenseCheckError as e:
        for issue in e.issues:
            err_console.print(f"  - {issue}")
        _fail(f"{e} Run 'license-catalog sync' to update the catalog.")
    except (LicenseCatalogError, ValueError, FileNotFoundError) as e:
        _fail(str(e))

    console.print(
        f"[green]License check passed:[/green] {result.artifact_count} artifacts defined, "
        f"{result.dependency_count} dependencies"
    )


@app.command()
def report(
    deps: DepsOption,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output directory", file_okay=False),
    ] = Path("build/reports/license-catalog"),
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Also write the report as JSON"),
    ] = False,
    project: ProjectOption = None,
    variant: VariantOption = None,
    configuration: ConfigurationOption = None,
    repository: RepositoryOption = None,
    offline: OfflineOption = False,
    no_cache: NoCacheOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Write an HTML report comparing dependencies with the catalog."""
    _setup_logging(verbose)
    try:
        config = _load_project(project, variant, repository)
        catalog = load_catalog(config.licenses_path)
        rules = load_ignore_rules(config.ignore_path)
        graph = _scan(deps, configuration, verbose)

        live = _live_coordinates(graph, rules)
        missing_ids = {entry.coordinate for entry in diff(live, catalog).missing_in_catalog}
        metadata = _resolve_with_progress(
            [c for c in live if c.id in missing_ids], config, offline, not no_cache, verbose
        )
    except (LicenseCatalogError, ValueError, FileNotFoundError) as e:
        _fail(str(e))

    diff_report = build_diff_report(
        graph,
        catalog,
        rules,
        claimed={coordinate.id: data for coordinate, data in metadata.items()},
        variant=config.variant,
    )

    report_dir = output / config.variant if config.variant else output
    html_path = report_dir / DEFAULT_REPORT_NAME
    HtmlReporter().write(diff_report, html_path)
    console.print(f"[green]Generated:[/green] {html_path}")
    if json_output:
        json_path = html_path.with_suffix(JsonReporter().default_extension)
        JsonReporter().write(diff_report, json_path)
        console.print(f"[green]Generated:[/green] {json_path}")

    summary = diff_report.summary
    console.print("\n[bold]License Diff Summary[/bold]")
    console.print(f"Matched:    {summary.matched_count}")
    console.print(f"Missing:    {summary.missing_count}")
    console.print(f"Extra:      {summary.extra_count}")
    if summary.missing_count or summary.extra_count:
        console.print("[yellow]Run 'license-catalog sync' to synchronize.[/yellow]")


@app.command()
def generate(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Source root for the generated module", file_okay=False),
    ] = Path("src"),
    package: Annotated[
        Optional[str],
        typer.Option("--package", help="Dotted package of the generated module"),
    ] = None,
    class_name: Annotated[
        Optional[str],
        typer.Option("--class-name", help="Name of the generated provider class"),
    ] = None,
    project: ProjectOption = None,
    variant: VariantOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Generate a Python module exposing the catalog's license list."""
    _setup_logging(verbose)
    try:
        config = _load_project(project, variant).with_overrides(
            generated_package=package, generated_class=class_name
        )
        generator = PythonModuleGenerator.from_config(config)
        catalog = load_catalog(config.licenses_path)
    except LicenseCatalogError as e:
        _fail(str(e))

    for problem in catalog.validate():
        console.print(f"[yellow]Warning:[/yellow] {problem}")

    licenses = resolve_licenses(catalog)
    path = generator.write(licenses, output)
    console.print(f"[green]Generated:[/green] {path} ({len(licenses)} artifacts)")


@app.command()
def notice(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path"),
    ] = Path("THIRD_PARTY_NOTICES.md"),
    template: Annotated[
        Optional[Path],
        typer.Option(
            "--template",
            "-t",
            help="Custom Jinja2 template file",
            exists=True,
            readable=True,
        ),
    ] = None,
    project: ProjectOption = None,
    variant: VariantOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Generate a Markdown third-party notice from the catalog."""
    _setup_logging(verbose)
    try:
        config = _load_project(project, variant)
        catalog = load_catalog(config.licenses_path)
    except LicenseCatalogError as e:
        _fail(str(e))

    licenses = resolve_licenses(catalog)
    if not licenses:
        console.print("[yellow]Catalog is empty[/yellow]")

    MarkdownReporter(template_path=template).write(licenses, output)
    console.print(f"[green]Generated:[/green] {output}")


@cache_app.command("show")
def cache_show() -> None:
    """Display cache location, entry count, and size."""
    info = MetadataCache().info()
    console.print(f"[bold]Cache Location:[/bold] {info['path']}")
    console.print(f"[bold]Entries:[/bold] {info['count']}")
    console.print(f"[bold]Size:[/bold] {info['size_bytes'] / 1024:.1f} KB")


@cache_app.command("clear")
def cache_clear(
    artifact: Annotated[
        Optional[str],
        typer.Argument(help="Specific namespace:name to clear (optional)"),
    ] = None,
) -> None:
    """Clear all cached entries (or one artifact)."""
    if artifact:
        MetadataCache().clear(artifact_id=artifact)
        console.print(f"[green]Cleared cache for:[/green] {artifact}")
    else:
        MetadataCache().clear()
        console.print("[green]Cache cleared[/green]")


if __name__ == "__main__":
    app()
