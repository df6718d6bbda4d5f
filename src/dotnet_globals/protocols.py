"""Protocols for the capabilities injected into resolvers.

Apps can provide any implementation (real subprocesses, containers, fakes).
The library only requires these interfaces.
"""

from typing import Protocol
from typing import runtime_checkable

from .frameworks import TargetFramework
from .models import PackageIdentity


@runtime_checkable
class ProcessInvokerProtocol(Protocol):
    """Runs an external command and reports whether it succeeded."""

    def run(self, command: str, *args: str) -> bool:
        """Run command with arguments and wait for it to exit.

        Args:
            command: Executable name or path (e.g. "dotnet")
            *args: Arguments passed verbatim

        Returns:
            True on zero exit status, False on non-zero exit or spawn failure
        """
        ...


@runtime_checkable
class RegistryProtocol(Protocol):
    """Resolves a package reference to a concrete identity."""

    @property
    def registry_url(self) -> str: ...

    def lookup_identity(
        self,
        reference: str,
        version_constraint: str | None,
        framework: TargetFramework,
    ) -> PackageIdentity:
        """Resolve reference (and optional exact version) for framework.

        Raises:
            ConfigurationError: If no registry URL is configured
            ResolutionError: If the registry has no entries for reference
            CompatibilityError: If the selected version does not target framework
        """
        ...
