"""Project configuration.

Settings are read from the ``[tool.license-catalog]`` table of the project's
``pyproject.toml`` and may be overridden from the command line::

    [tool.license-catalog]
    licenses-file = "licenses.yml"
    ignore-file = ".licenseignore"
    generated-package = "myapp.licenses"
    generated-class = "Licenses"
    repositories = ["https://repo.maven.apache.org/maven2"]
"""

import keyword
import logging
import re
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

from license_catalog.errors import ConfigurationError
from license_catalog.resolvers.http import MAVEN_CENTRAL

logger = logging.getLogger(__name__)

TOOL_TABLE = "license-catalog"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class ProjectConfig:
    """Settings for one project (and optionally one variant of it).

    Attributes:
        base_dir: Directory holding the catalog and ignore files.
        licenses_file: Catalog file name.
        ignore_file: Ignore rules file name.
        variant: Optional variant name; its files live in ``base_dir/variant``.
        generated_package: Dotted package of the generated license module.
        generated_class: Class name of the generated license provider.
        max_parent_depth: Maximum number of POMs read per dependency.
        max_workers: Maximum concurrent metadata resolutions.
        repositories: Maven repository base URLs, in lookup order.
        cache_ttl_days: Lifetime of cached metadata.
    """

    base_dir: Path = field(default_factory=Path.cwd)
    licenses_file: str = "licenses.yml"
    ignore_file: str = ".licenseignore"
    variant: str = ""
    generated_package: str = ""
    generated_class: str = "Licenses"
    max_parent_depth: int = 5
    max_workers: int = 8
    repositories: list[str] = field(default_factory=lambda: [MAVEN_CENTRAL])
    cache_ttl_days: int = 30

    @property
    def variant_dir(self) -> Path:
        return self.base_dir / self.variant if self.variant else self.base_dir

    @property
    def licenses_path(self) -> Path:
        return self.variant_dir / self.licenses_file

    @property
    def ignore_path(self) -> Path:
        return self.variant_dir / self.ignore_file

    def with_overrides(self, **overrides: Any) -> "ProjectConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def validate_generation(self) -> None:
        """Check the identifiers used for code generation.

        Raises:
            ConfigurationError: If the package or class name is blank or not
                a valid Python identifier.
        """
        if not self.generated_package.strip():
            raise ConfigurationError(
                "generated_package is required for code generation "
                "(e.g., generated-package = \"myapp.licenses\")"
            )
        for part in self.generated_package.split("."):
            if not _IDENTIFIER.match(part) or keyword.iskeyword(part):
                raise ConfigurationError(
                    f"Invalid generated_package '{self.generated_package}'"
                )
        if not self.generated_class.strip():
            raise ConfigurationError("generated_class must not be blank")
        if not _IDENTIFIER.match(self.generated_class) or keyword.iskeyword(self.generated_class):
            raise ConfigurationError(f"Invalid generated_class '{self.generated_class}'")


def load_config(base_dir: Optional[Path] = None) -> ProjectConfig:
    """Load configuration from ``pyproject.toml`` in ``base_dir``.

    Unknown keys are ignored with a warning. Missing files or tables yield
    the defaults.

    Args:
        base_dir: Project directory (defaults to the current directory).

    Returns:
        The ProjectConfig.

    Raises:
        ConfigurationError: If pyproject.toml is not valid TOML or a value
            has the wrong type.
    """
    base_dir = base_dir or Path.cwd()
    config = ProjectConfig(base_dir=base_dir)
    pyproject = base_dir / "pyproject.toml"
    if not pyproject.is_file():
        return config

    try:
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid {pyproject}: {e}") from e

    table = data.get("tool", {}).get(TOOL_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"[tool.{TOOL_TABLE}] must be a table")

    known = {f.name: f for f in fields(ProjectConfig) if f.name != "base_dir"}
    overrides: dict[str, Any] = {}
    for raw_key, value in table.items():
        key = raw_key.replace("-", "_")
        if key not in known:
            logger.warning("Ignoring unknown setting '%s' in %s", raw_key, pyproject)
            continue
        expected = type(getattr(config, key))
        if not isinstance(value, expected) or isinstance(value, bool) != (expected is bool):
            raise ConfigurationError(
                f"Setting '{raw_key}' must be of type {expected.__name__}"
            )
        overrides[key] = value

    return replace(config, **overrides)
