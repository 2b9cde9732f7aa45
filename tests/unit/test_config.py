"""Unit tests for project configuration."""

import logging

import pytest

from license_catalog.config import ProjectConfig, load_config
from license_catalog.errors import ConfigurationError
from license_catalog.resolvers.http import MAVEN_CENTRAL


def test_defaults_without_pyproject(tmp_path):
    config = load_config(tmp_path)

    assert config.base_dir == tmp_path
    assert config.licenses_path == tmp_path / "licenses.yml"
    assert config.ignore_path == tmp_path / ".licenseignore"
    assert config.repositories == [MAVEN_CENTRAL]
    assert config.max_parent_depth == 5


def test_reads_tool_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        """
[project]
name = "demo"

[tool.license-catalog]
licenses-file = "third_party.yml"
generated-package = "demo.legal"
max-workers = 2
repositories = ["https://maven.google.com", "https://repo.example.org/maven"]
"""
    )
    config = load_config(tmp_path)

    assert config.licenses_file == "third_party.yml"
    assert config.generated_package == "demo.legal"
    assert config.max_workers == 2
    assert config.repositories[1] == "https://repo.example.org/maven"


def test_unknown_setting_warns(tmp_path, caplog):
    (tmp_path / "pyproject.toml").write_text('[tool.license-catalog]\nflavour = "vanilla"\n')
    with caplog.at_level(logging.WARNING):
        config = load_config(tmp_path)
    assert "flavour" in caplog.text
    assert config == ProjectConfig(base_dir=tmp_path)


@pytest.mark.parametrize(
    "line",
    ['max-workers = "eight"', "licenses-file = 3", "max-parent-depth = true"],
)
def test_wrong_type_raises(tmp_path, line):
    (tmp_path / "pyproject.toml").write_text(f"[tool.license-catalog]\n{line}\n")
    with pytest.raises(ConfigurationError):
        load_config(tmp_path)


def test_invalid_toml_raises(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[tool.license-catalog\n")
    with pytest.raises(ConfigurationError):
        load_config(tmp_path)


def test_variant_paths(tmp_path):
    config = ProjectConfig(base_dir=tmp_path).with_overrides(variant="release", ignore_file=None)
    assert config.licenses_path == tmp_path / "release" / "licenses.yml"
    assert config.ignore_path == tmp_path / "release" / ".licenseignore"


class TestValidateGeneration:
    def test_valid(self):
        ProjectConfig(generated_package="myapp.legal", generated_class="Licenses").validate_generation()

    @pytest.mark.parametrize(
        "package,class_name",
        [
            ("", "Licenses"),
            ("   ", "Licenses"),
            ("my-app.legal", "Licenses"),
            ("myapp..legal", "Licenses"),
            ("myapp.class", "Licenses"),
            ("myapp", ""),
            ("myapp", "1Licenses"),
            ("myapp", "None"),
        ],
    )
    def test_invalid(self, package, class_name):
        config = ProjectConfig(generated_package=package, generated_class=class_name)
        with pytest.raises(ConfigurationError):
            config.validate_generation()
