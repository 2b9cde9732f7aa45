"""JSON reporter for license diff reports."""

import json
from dataclasses import asdict
from enum import Enum
from typing import Any

from license_catalog.models import DiffReport
from license_catalog.reporters.base import BaseReporter


def _default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonReporter(BaseReporter):
    """Reporter that dumps the diff report as indented JSON."""

    def render(self, report: DiffReport) -> str:
        return json.dumps(asdict(report), indent=2, default=_default) + "\n"

    @property
    def format_name(self) -> str:
        return "json"

    @property
    def default_extension(self) -> str:
        return ".json"
