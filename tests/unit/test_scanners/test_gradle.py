"""Tests for the GradleDependenciesScanner."""

from pathlib import Path

import pytest

from license_catalog.models import Coordinate
from license_catalog.scanners import CoordinateListScanner, GradleDependenciesScanner, get_scanner


class TestGradleDependenciesScanner:
    """Test suite for GradleDependenciesScanner."""

    @pytest.fixture
    def fixture_path(self, fixtures_dir: Path) -> Path:
        """Return path to the gradle dependencies fixture."""
        return fixtures_dir / "gradle_dependencies.txt"

    @pytest.fixture
    def graph(self, fixture_path: Path):
        """Scan the first configuration of the fixture."""
        return GradleDependenciesScanner(source_path=fixture_path).scan()

    def test_can_handle(self, fixture_path: Path, fixtures_dir: Path):
        assert GradleDependenciesScanner.can_handle(fixture_path)
        assert not GradleDependenciesScanner.can_handle(fixtures_dir / "dependencies.txt")
        assert not GradleDependenciesScanner.can_handle(Path("missing.txt"))
        assert not GradleDependenciesScanner.can_handle(Path("build.gradle"))

    def test_source_name(self):
        assert GradleDependenciesScanner().source_name == "gradle dependencies"

    def test_first_configuration_is_used(self, graph):
        assert graph.configuration == "releaseRuntimeClasspath"
        assert "com.squareup.leakcanary:leakcanary-android" not in graph.nodes

    def test_roots(self, graph):
        """Test that project dependencies are flattened into their parent level."""
        assert graph.roots == [
            "com.squareup.okhttp3:okhttp",
            "androidx.annotation:annotation",
            "androidx.core:core-ktx",
            "com.google.guava:guava",
        ]

    def test_nodes_and_selected_versions(self, graph):
        assert len(graph.nodes) == 7
        assert graph.nodes["org.jetbrains.kotlin:kotlin-stdlib"] == Coordinate(
            "org.jetbrains.kotlin", "kotlin-stdlib", "1.9.22"
        )
        assert graph.nodes["androidx.annotation:annotation"].version == "1.7.0"

    def test_edges(self, graph):
        assert graph.children("com.squareup.okhttp3:okhttp") == [
            "com.squareup.okio:okio",
            "org.jetbrains.kotlin:kotlin-stdlib",
        ]
        assert graph.children("com.squareup.okio:okio") == ["com.squareup.okio:okio-jvm"]
        assert graph.children("com.squareup.okio:okio-jvm") == ["org.jetbrains.kotlin:kotlin-stdlib"]
        assert graph.children("androidx.core:core-ktx") == [
            "androidx.annotation:annotation",
            "org.jetbrains.kotlin:kotlin-stdlib",
        ]
        assert graph.children("org.jetbrains.kotlin:kotlin-stdlib") == []

    def test_version_conflicts(self, graph):
        assert graph.conflicts["org.jetbrains.kotlin:kotlin-stdlib"] == "1.9.10 -> 1.9.22"
        assert "com.google.guava:guava" not in graph.conflicts

    def test_rich_version_constraint(self, graph):
        assert graph.nodes["com.google.guava:guava"].version == "32.1.3-android"

    def test_constraints_and_unresolved_are_skipped(self, graph):
        assert "com.example:constraint-only" not in graph.nodes
        assert "com.example:unresolved" not in graph.nodes

    def test_select_configuration(self, fixture_path: Path):
        scanner = GradleDependenciesScanner(fixture_path, configuration="debugRuntimeClasspath")
        graph = scanner.scan()

        assert graph.configuration == "debugRuntimeClasspath"
        assert set(graph.nodes) == {
            "com.squareup.okhttp3:okhttp",
            "com.squareup.okio:okio",
            "com.squareup.leakcanary:leakcanary-android",
        }
        assert graph.roots == [
            "com.squareup.okhttp3:okhttp",
            "com.squareup.leakcanary:leakcanary-android",
        ]

    def test_unknown_configuration_is_empty(self, fixture_path: Path):
        graph = GradleDependenciesScanner(fixture_path, configuration="testClasspath").scan()
        assert graph.nodes == {}
        assert graph.roots == []

    def test_parse_without_header(self):
        text = "+--- a:b:1.0\n\\--- c:d:2.0 -> 2.1\n"
        graph = GradleDependenciesScanner().parse(text)
        assert graph.roots == ["a:b", "c:d"]
        assert graph.conflicts == {"c:d": "2.0 -> 2.1"}
        assert graph.configuration == ""

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            GradleDependenciesScanner(tmp_path / "deps.txt").scan()


class TestGetScanner:
    """Test scanner selection."""

    def test_gradle_output(self, fixtures_dir: Path):
        scanner = get_scanner(fixtures_dir / "gradle_dependencies.txt", configuration="debugRuntimeClasspath")
        assert isinstance(scanner, GradleDependenciesScanner)
        assert scanner.configuration == "debugRuntimeClasspath"

    def test_coordinate_list(self, fixtures_dir: Path):
        assert isinstance(get_scanner(fixtures_dir / "dependencies.txt"), CoordinateListScanner)

    def test_coords_suffix(self, tmp_path: Path):
        path = tmp_path / "runtime.coords"
        path.write_text("a:b:1\n")
        assert isinstance(get_scanner(path), CoordinateListScanner)

    def test_unsupported_file(self, tmp_path: Path):
        path = tmp_path / "pom.xml"
        path.write_text("<project/>")
        with pytest.raises(ValueError, match="No scanner available"):
            get_scanner(path)
