"""Output reporters for license documentation and diff reports."""

from license_catalog.reporters.base import BaseReporter
from license_catalog.reporters.html import HtmlReporter
from license_catalog.reporters.json import JsonReporter
from license_catalog.reporters.markdown import MarkdownReporter

__all__ = ["BaseReporter", "HtmlReporter", "JsonReporter", "MarkdownReporter"]
