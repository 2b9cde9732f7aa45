"""Code generators for the compiled license list."""

from license_catalog.generators.python import PythonModuleGenerator

__all__ = ["PythonModuleGenerator"]
