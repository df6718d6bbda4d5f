"""Package installation API.

Apps inject policy: where the packages folder lives, which registry to use,
how processes are spawned. This module wires those into a resolver and
manages the packages folder afterwards (list, inspect, uninstall).
"""

import logging
import shutil
from pathlib import Path

from .exceptions import GlobalsError
from .exceptions import PackageNotInstalledError
from .frameworks import NETCOREAPP10
from .frameworks import TargetFramework
from .manifest import PackageManifest
from .manifest import read_manifest
from .models import InstalledPackage
from .models import Options
from .protocols import ProcessInvokerProtocol
from .protocols import RegistryProtocol
from .resolvers import create_resolver
from .resolvers import package_lock
from .resolvers import validate_package_name

logger = logging.getLogger(__name__)


def acquire_package(
    source: str,
    packages_folder: Path,
    options: Options | None = None,
    runner: ProcessInvokerProtocol | None = None,
    registry: RegistryProtocol | None = None,
    staging_root: Path | None = None,
    framework: TargetFramework = NETCOREAPP10,
) -> InstalledPackage:
    """
    Install a package from a registry name or a local project folder.

    Args:
        source: Registry package name, or path to a folder containing project.json
        packages_folder: Shared packages directory (must exist, app policy)
        options: Registry URL, exact version and timeout
        runner: Process invoker for dotnet restore/build (defaults to subprocess)
        registry: Registry implementation (defaults to RegistryClient)
        staging_root: Parent for staging directories (defaults to the temp dir)
        framework: Target framework packages must support

    Returns:
        InstalledPackage with the package folder and entry assembly name

    Raises:
        GlobalsError: Subclass describing which step failed

    Example:
        >>> installed = acquire_package(
        ...     "dotnet-hello",
        ...     packages_folder=Path.home() / ".dotnet" / "globals" / "packages",
        ...     options=Options(RegistrySourceUrl="https://api.nuget.org/v3/index.json"),
        ... )
        >>> print(installed.entry_assembly_path)
    """
    if not packages_folder.is_dir():
        raise GlobalsError(
            f"Packages folder does not exist: {packages_folder}",
            context={"packages_folder": str(packages_folder)},
        )

    resolver = create_resolver(
        source,
        packages_folder,
        options=options,
        runner=runner,
        registry=registry,
        staging_root=staging_root,
        framework=framework,
    )
    return resolver.acquire()


def uninstall_package(name: str, packages_folder: Path) -> None:
    """
    Remove an installed (or incomplete) package folder.

    Raises:
        ConfigurationError: If name is not a single folder name
        PackageNotInstalledError: If no folder exists for name
        GlobalsError: If removal failed
    """
    validate_package_name(name)
    package_folder = packages_folder / name

    with package_lock(packages_folder, name):
        if not package_folder.is_dir():
            raise PackageNotInstalledError(
                f"Package '{name}' not found at {package_folder}",
                context={"package": name, "packages_folder": str(packages_folder)},
            )

        try:
            logger.info(f"Uninstalling package: {name}")
            shutil.rmtree(package_folder)
        except OSError as e:
            raise GlobalsError(f"Failed to uninstall package '{name}': {e}", context={"package": name}) from e

    logger.info(f"Successfully uninstalled: {name}")


def get_package(name: str, packages_folder: Path) -> PackageManifest | None:
    """Return the manifest of an installed package, or None if not installed."""
    validate_package_name(name)
    package_folder = packages_folder / name
    if not package_folder.is_dir():
        return None
    return read_manifest(package_folder)


def list_packages(packages_folder: Path) -> list[PackageManifest]:
    """
    List completed installs, sorted by name.

    Folders without a readable manifest (incomplete installs) are skipped.
    """
    if not packages_folder.is_dir():
        return []

    manifests = []
    for package_folder in packages_folder.iterdir():
        if not package_folder.is_dir() or package_folder.name.startswith("."):
            continue
        manifest = read_manifest(package_folder)
        if manifest is None:
            logger.debug(f"Skipping incomplete install: {package_folder.name}")
            continue
        manifests.append(manifest)

    return sorted(manifests, key=lambda m: m.name)
