"""Tests for the HTML diff reporter."""

from pathlib import Path

import pytest

from license_catalog.models import (
    DependencyTreeNode,
    DiffEntry,
    DiffReport,
    DiffStatus,
    DiffSummary,
)
from license_catalog.reporters.html import DEFAULT_REPORT_NAME, HtmlReporter, flatten_tree


@pytest.fixture
def report() -> DiffReport:
    """A report with one matched root, a missing child and a revisit."""
    shared = DependencyTreeNode("org.jetbrains.kotlin:kotlin-stdlib:1.9.22", "apache-2.0", True)
    tree = [
        DependencyTreeNode(
            "com.squareup.okhttp3:okhttp:4.12.0",
            "apache-2.0",
            True,
            children=[
                DependencyTreeNode("org.new:thing:1.0", version_conflict="0.9 -> 1.0"),
                shared,
            ],
        ),
        DependencyTreeNode(
            "org.jetbrains.kotlin:kotlin-stdlib:1.9.22", "apache-2.0", True, is_revisit=True
        ),
    ]
    return DiffReport(
        variant="release",
        configuration="releaseRuntimeClasspath",
        summary=DiffSummary(3, 3, 2, 1, 1),
        entries=[
            DiffEntry("com.squareup.okhttp3:okhttp", DiffStatus.MATCHED, "apache-2.0", "Apache License 2.0"),
            DiffEntry("org.new:thing", DiffStatus.MISSING_IN_CATALOG, claimed_license_name="MIT License"),
        ],
        dependency_tree=tree,
        extra_in_catalog=[
            DiffEntry("com.squareup.okio:okio", DiffStatus.EXTRA_IN_CATALOG, "apache-2.0", "Apache License 2.0")
        ],
        generated_at="2025-01-01T00:00:00+00:00",
    )


def test_flatten_tree_connectors(report):
    lines = flatten_tree(report.dependency_tree)

    assert [(line.prefix, line.connector) for line in lines] == [
        ("", "+--- "),
        ("|    ", "+--- "),
        ("|    ", "\\--- "),
        ("", "\\--- "),
    ]
    assert [line.status for line in lines] == ["matched", "missing", "matched", "visited"]


def test_flatten_nested_last_child_uses_blank_prefix():
    tree = [DependencyTreeNode("a:a:1", children=[DependencyTreeNode("b:b:1", children=[DependencyTreeNode("c:c:1")])])]
    assert [line.prefix for line in flatten_tree(tree)] == ["", "     ", "          "]


def test_render(report):
    html = HtmlReporter().render(report)

    assert "License Diff Report - release" in html
    assert "releaseRuntimeClasspath" in html
    assert '<span class="license-tag matched">[apache-2.0]</span>' in html
    assert '<span class="license-tag missing">[???]</span>' in html
    assert "(0.9 -&gt; 1.0)" in html
    assert '<span class="visited">(*)</span>' in html
    assert "Missing in Catalog (1)" in html
    assert "MIT License" in html
    assert "Extra in Catalog (1)" in html
    assert "com.squareup.okio:okio" in html
    assert "2025-01-01T00:00:00+00:00" in html


def test_revisit_has_no_license_tag(report):
    html = HtmlReporter().render(report)
    revisit_line = [line for line in html.splitlines() if "(*)" in line and "visited" in line][0]
    assert "license-tag" not in revisit_line


def test_values_are_escaped(report):
    report.variant = "<script>alert(1)</script>"
    report.dependency_tree[0].children[0].coordinate = "evil:<b>x</b>:1"

    html = HtmlReporter().render(report)

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
    assert "<b>x</b>" not in html


def test_empty_report(report):
    report.entries = []
    report.dependency_tree = []
    report.extra_in_catalog = []
    html = HtmlReporter().render(report)

    assert "Missing in Catalog (0)" in html
    assert "None." in html
    assert "Extra in Catalog" not in html


def test_write_creates_directories(report, tmp_path: Path):
    path = tmp_path / "reports" / "release" / DEFAULT_REPORT_NAME
    reporter = HtmlReporter()
    reporter.write(report, path)

    assert path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
    assert reporter.format_name == "html"
    assert reporter.default_extension == ".html"


def test_custom_template(report, tmp_path: Path):
    template = tmp_path / "custom.html.j2"
    template.write_text("{{ report.summary.missing_count }} missing {{ report.variant }}")
    report.variant = "<b>"
    assert HtmlReporter(template_path=template).render(report) == "1 missing &lt;b&gt;"
