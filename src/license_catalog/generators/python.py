"""Generator for Python license modules.

Renders the flattened license list into a module defining a
:class:`~license_catalog.runtime.LicenseProvider` subclass, written to
``<output>/<package path>/<module>.py``.
"""

import logging
from importlib.resources import files
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment

from license_catalog.config import ProjectConfig
from license_catalog.errors import ConfigurationError
from license_catalog.models import ResolvedLicense

logger = logging.getLogger(__name__)

DEFAULT_MODULE_NAME = "licenses"


def _pytuple(values: Optional[list[Any]]) -> str:
    items = [repr(value) for value in values or []]
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"


class PythonModuleGenerator:
    """Generates a Python module exposing the license list.

    Attributes:
        package: Dotted package the module belongs to.
        class_name: Name of the generated provider class.
        module_name: File name (without extension) of the module.
    """

    def __init__(
        self, package: str, class_name: str = "Licenses", module_name: str = DEFAULT_MODULE_NAME
    ) -> None:
        """Initialize the generator.

        Raises:
            ConfigurationError: If any identifier is blank or invalid.
        """
        ProjectConfig(generated_package=package, generated_class=class_name).validate_generation()
        if not module_name.isidentifier():
            raise ConfigurationError(f"Invalid module name '{module_name}'")

        self.package = package
        self.class_name = class_name
        self.module_name = module_name

        env = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True)
        env.filters["pyrepr"] = repr
        env.filters["pytuple"] = _pytuple
        self.template = env.from_string(
            files("license_catalog.templates")
            .joinpath("licenses.py.j2")
            .read_text(encoding="utf-8")
        )

    @classmethod
    def from_config(cls, config: ProjectConfig) -> "PythonModuleGenerator":
        return cls(config.generated_package, config.generated_class)

    def render(self, licenses: list[ResolvedLicense]) -> str:
        return self.template.render(class_name=self.class_name, licenses=licenses)

    def output_path(self, output_dir: Path) -> Path:
        return output_dir.joinpath(*self.package.split(".")) / f"{self.module_name}.py"

    def write(self, licenses: list[ResolvedLicense], output_dir: Path) -> Path:
        """Render and write the module.

        Args:
            licenses: Flattened license list.
            output_dir: Source root the package path is resolved against.

        Returns:
            Path of the written module.
        """
        path = self.output_path(output_dir)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(licenses), encoding="utf-8")
        logger.debug("Wrote %d license entries to %s", len(licenses), path)
        return path
