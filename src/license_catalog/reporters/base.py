"""Base interface for output reporters.

Reporters generate formatted output (Markdown, HTML, JSON) from the
flattened license list or from a diff report.
"""

from abc import ABC, abstractmethod
from importlib.resources import files
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, Template


def load_template(
    name: str, template_path: Optional[Path] = None, autoescape: bool = False
) -> Template:
    """Load a bundled template, or a custom one from disk.

    Args:
        name: File name of the bundled template.
        template_path: Optional path to a custom Jinja2 template.
        autoescape: Whether to HTML-escape substituted values.

    Returns:
        The loaded template.
    """
    if template_path:
        env = Environment(
            loader=FileSystemLoader(template_path.parent),
            autoescape=autoescape,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        return env.get_template(template_path.name)

    template_content = (
        files("license_catalog.templates").joinpath(name).read_text(encoding="utf-8")
    )
    env = Environment(autoescape=autoescape, trim_blocks=True, lstrip_blocks=True)
    return env.from_string(template_content)


class BaseReporter(ABC):
    """Abstract base class for output reporters."""

    @abstractmethod
    def render(self, data: Any) -> str:
        """Render data to formatted output.

        Args:
            data: What the reporter documents.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, data: Any, output_path: Path) -> None:
        """Render and write output to a file, creating parent directories.

        Args:
            data: What the reporter documents.
            output_path: Path to write the output file.
        """
        content = self.render(data)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format name, like "markdown" or "html"."""
        ...

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Return the default file extension, like ".md" or ".html"."""
        ...
