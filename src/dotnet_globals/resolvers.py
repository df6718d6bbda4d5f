"""Package resolvers - Turn a source reference into an installed package.

Two strategies share one acquisition contract:
- RegistryPackageResolver: package name -> registry lookup -> restore into a
  staging directory -> copy the restored assemblies
- FolderPackageResolver: local project folder -> restore -> build straight into
  the package folder

Both claim their package folder under a per-name lock and write the manifest
marker last, so a folder without a manifest is always an incomplete install.
"""

import logging
import shutil
import threading
from abc import ABC
from abc import abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

from .descriptor import ProjectDescriptor
from .descriptor import find_project_descriptor
from .entrypoint import find_entry_artifact
from .exceptions import BuildFailedError
from .exceptions import ConfigurationError
from .exceptions import GlobalsError
from .exceptions import PackageAlreadyExistsError
from .exceptions import RestoreFailedError
from .frameworks import NETCOREAPP10
from .frameworks import TargetFramework
from .manifest import has_manifest
from .manifest import write_manifest
from .models import InstalledPackage
from .models import Options
from .models import PackageIdentity
from .process import ProcessRunner
from .protocols import ProcessInvokerProtocol
from .protocols import RegistryProtocol
from .registry import RegistryClient
from .staging import locate_package_assemblies
from .staging import staging_directory
from .staging import write_descriptor

logger = logging.getLogger(__name__)

DOTNET = "dotnet"


class AcquireState(Enum):
    """Lifecycle of one acquire() call. DONE and FAILED are terminal."""

    START = "start"
    RESOLVING = "resolving"
    COLLISION_CHECKED = "collision-checked"
    INSTALLING = "installing"
    DONE = "done"
    FAILED = "failed"


_locks_guard = threading.Lock()
_package_locks: dict[tuple[str, str], threading.Lock] = {}


@contextmanager
def package_lock(packages_folder: Path, name: str) -> Iterator[None]:
    """Serialize installs of the same package name into the same folder."""
    key = (str(packages_folder.resolve()), name)
    with _locks_guard:
        lock = _package_locks.setdefault(key, threading.Lock())
    with lock:
        yield


def validate_package_name(name: str) -> None:
    """Reject names that are not a single child of the packages folder."""
    if not name or name in (".", "..") or Path(name).name != name or "\\" in name:
        raise ConfigurationError(f"Invalid package name: {name!r}", context={"package": name})


class PackageResolver(ABC):
    """
    Shared acquisition contract.

    Subclasses implement _acquire(); acquire() tracks state and normalizes
    unexpected failures into GlobalsError.
    """

    def __init__(
        self,
        packages_folder: Path,
        source: str,
        options: Options | None = None,
        runner: ProcessInvokerProtocol | None = None,
        framework: TargetFramework = NETCOREAPP10,
    ):
        self.packages_folder = packages_folder
        self.source = source
        self.options = options or Options()
        self.runner = runner or ProcessRunner(timeout=self.options.timeout)
        self.framework = framework
        self.state = AcquireState.START

    def acquire(self) -> InstalledPackage:
        """
        Resolve, build or restore, and install the package.

        Returns:
            InstalledPackage describing the package folder and entry assembly

        Raises:
            GlobalsError: Subclass describing the failed step
        """
        if self.state is not AcquireState.START:
            raise GlobalsError(f"Resolver for {self.source} was already used", context={"state": self.state.value})

        try:
            return self._acquire()
        except Exception as e:
            self._transition(AcquireState.FAILED)
            if isinstance(e, GlobalsError):
                raise
            raise GlobalsError(f"Failed to install {self.source}: {e}", context={"source": self.source}) from e

    @abstractmethod
    def _acquire(self) -> InstalledPackage:
        """Variant-specific acquisition."""

    def _transition(self, state: AcquireState) -> None:
        logger.debug(f"{self.source}: {self.state.value} -> {state.value}")
        self.state = state

    @contextmanager
    def _claim_package_folder(self, name: str) -> Iterator[Path]:
        """
        Claim packages_folder/name for this acquisition.

        Holds the per-name lock until the caller has populated the folder and
        written the manifest.

        Raises:
            PackageAlreadyExistsError: If a completed install already uses name
        """
        validate_package_name(name)

        with package_lock(self.packages_folder, name):
            package_folder = self.packages_folder / name

            if package_folder.exists():
                if has_manifest(package_folder):
                    raise PackageAlreadyExistsError(
                        f"A package with the same name already exists: {name}",
                        context={"package": name, "folder": str(package_folder)},
                    )
                logger.info(f"Removing incomplete install of {name}")
                if package_folder.is_dir() and not package_folder.is_symlink():
                    shutil.rmtree(package_folder)
                else:
                    package_folder.unlink()

            self._transition(AcquireState.COLLISION_CHECKED)
            package_folder.mkdir()
            self._transition(AcquireState.INSTALLING)
            yield package_folder

    def _complete(self, package_folder: Path, version: str | None, entry_assembly: str) -> InstalledPackage:
        write_manifest(
            package_folder,
            name=package_folder.name,
            version=version,
            source=self.source,
            entry_assembly=entry_assembly,
        )
        self._transition(AcquireState.DONE)
        logger.info(f"Installed {package_folder.name} to {package_folder}")
        return InstalledPackage(
            name=package_folder.name,
            folder=package_folder,
            entry_assembly=entry_assembly,
            version=version,
        )


class RegistryPackageResolver(PackageResolver):
    """Install a package by name from a NuGet registry."""

    def __init__(
        self,
        packages_folder: Path,
        source: str,
        options: Options | None = None,
        runner: ProcessInvokerProtocol | None = None,
        registry: RegistryProtocol | None = None,
        staging_root: Path | None = None,
        framework: TargetFramework = NETCOREAPP10,
    ):
        super().__init__(packages_folder, source, options, runner, framework)
        self.registry = registry or RegistryClient(self.options.registry_source_url, timeout=self.options.timeout)
        self.staging_root = staging_root

    def _acquire(self) -> InstalledPackage:
        self._transition(AcquireState.RESOLVING)
        identity = self.registry.lookup_identity(self.source, self.options.version, self.framework)

        with staging_directory(self.staging_root) as staging:
            assemblies = self._restore(staging, identity)
            entry_assembly = find_entry_artifact(assemblies)

            with self._claim_package_folder(self.source) as package_folder:
                for assembly_file in assemblies.iterdir():
                    if assembly_file.is_file():
                        shutil.copy2(assembly_file, package_folder / assembly_file.name)
                return self._complete(package_folder, identity.version, entry_assembly)

    def _restore(self, staging: Path, identity: PackageIdentity) -> Path:
        descriptor = write_descriptor(staging, identity, self.framework)

        logger.info(f"Installing {identity.name}")
        restored = self.runner.run(DOTNET, "restore", str(descriptor), "-s", self.registry.registry_url)
        if not restored:
            raise RestoreFailedError(
                f"Package restore for {identity} failed",
                context={"package": identity.name, "version": identity.version},
            )

        return locate_package_assemblies(staging, identity, self.framework)


class FolderPackageResolver(PackageResolver):
    """Build and install a package from a local project folder."""

    def _acquire(self) -> InstalledPackage:
        self._transition(AcquireState.RESOLVING)
        source_folder = Path(self.source).resolve()
        descriptor_path = find_project_descriptor(source_folder)
        descriptor = ProjectDescriptor.from_project_json(descriptor_path)

        logger.info(f"Restoring {descriptor.name} from {source_folder}")
        if not self.runner.run(DOTNET, "restore", str(descriptor_path)):
            raise RestoreFailedError(
                "Package restore for project failed",
                context={"package": descriptor.name, "descriptor": str(descriptor_path)},
            )

        with self._claim_package_folder(descriptor.name) as package_folder:
            built = self.runner.run(
                DOTNET,
                "build",
                str(descriptor_path),
                "-c",
                "Release",
                "-f",
                self.framework.short_folder_name,
                "-o",
                str(package_folder),
            )
            if not built:
                raise BuildFailedError(
                    "Project compilation failed",
                    context={"package": descriptor.name, "descriptor": str(descriptor_path)},
                )

            entry_assembly = find_entry_artifact(package_folder)
            return self._complete(package_folder, descriptor.version, entry_assembly)


def create_resolver(
    source: str,
    packages_folder: Path,
    options: Options | None = None,
    runner: ProcessInvokerProtocol | None = None,
    registry: RegistryProtocol | None = None,
    staging_root: Path | None = None,
    framework: TargetFramework = NETCOREAPP10,
) -> PackageResolver:
    """
    Select a resolver by the shape of source.

    An existing directory is built as a local project; anything else is looked
    up in the registry by name.
    """
    if Path(source).expanduser().is_dir():
        logger.debug(f"Treating {source} as a project folder")
        return FolderPackageResolver(packages_folder, str(Path(source).expanduser()), options, runner, framework)

    logger.debug(f"Treating {source} as a registry package")
    return RegistryPackageResolver(packages_folder, source, options, runner, registry, staging_root, framework)
