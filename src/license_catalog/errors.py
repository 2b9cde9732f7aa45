"""Exception hierarchy for license_catalog.

Only configuration problems and explicit check failures are raised; metadata
resolution problems are absorbed and logged by the resolvers.
"""


class LicenseCatalogError(Exception):
    """Base class for errors surfaced to the command line."""


class ConfigurationError(LicenseCatalogError):
    """A required setting is missing or invalid (e.g., generated class name)."""


class CatalogFormatError(LicenseCatalogError):
    """The catalog document is not a safe, structurally valid mapping."""


class LicenseCheckError(LicenseCatalogError):
    """The license check found problems.

    Attributes:
        issues: Every problem found, in discovery order.
    """

    def __init__(self, issues: list[str]) -> None:
        self.issues = list(issues)
        super().__init__(f"License check failed with {len(self.issues)} issue(s).")
