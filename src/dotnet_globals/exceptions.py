"""Package acquisition exceptions.

Every failure of an acquisition is fatal to that call and carries enough
context (package, version, target framework, paths) for a one-line message.
"""


class GlobalsError(Exception):
    """Base exception for package acquisition operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (package name, paths, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(GlobalsError):
    """A required option is missing or unusable (e.g. no registry URL)."""


class ResolutionError(GlobalsError):
    """No matching package was found in the registry."""


class RegistryRequestError(ResolutionError):
    """The registry could not be queried."""


class CompatibilityError(GlobalsError):
    """Package was found but does not support the required target framework."""


class MalformedDescriptorError(GlobalsError):
    """Local project descriptor is missing, unreadable or has no name."""


class RestoreFailedError(GlobalsError):
    """External restore step failed or produced no usable output."""


class BuildFailedError(GlobalsError):
    """External build step failed."""


class EntryPointNotFoundError(GlobalsError):
    """No artifact exposing a program entry point was found."""


class PackageAlreadyExistsError(GlobalsError):
    """A valid install with the same name already exists."""


class PackageNotInstalledError(GlobalsError):
    """Package is not present in the packages folder."""
