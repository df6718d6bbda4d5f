"""dotnet-globals - Acquire and install global .NET packages.

Public API exports. Apps inject policy (packages folder, registry URL,
process runner); this library provides the acquisition mechanism.
"""

from .descriptor import ProjectDescriptor
from .descriptor import read_package_name
from .entrypoint import find_entry_artifact
from .entrypoint import has_entry_point
from .exceptions import BuildFailedError
from .exceptions import CompatibilityError
from .exceptions import ConfigurationError
from .exceptions import EntryPointNotFoundError
from .exceptions import GlobalsError
from .exceptions import MalformedDescriptorError
from .exceptions import PackageAlreadyExistsError
from .exceptions import PackageNotInstalledError
from .exceptions import RegistryRequestError
from .exceptions import ResolutionError
from .exceptions import RestoreFailedError
from .frameworks import NETCOREAPP10
from .frameworks import TargetFramework
from .installer import acquire_package
from .installer import get_package
from .installer import list_packages
from .installer import uninstall_package
from .manifest import MANIFEST_FILE
from .manifest import PackageManifest
from .models import InstalledPackage
from .models import Options
from .models import PackageIdentity
from .process import ProcessRunner
from .protocols import ProcessInvokerProtocol
from .protocols import RegistryProtocol
from .registry import RegistryClient
from .resolvers import FolderPackageResolver
from .resolvers import PackageResolver
from .resolvers import RegistryPackageResolver
from .resolvers import create_resolver

__all__ = [
    # Installation
    "acquire_package",
    "uninstall_package",
    "list_packages",
    "get_package",
    # Resolution
    "PackageResolver",
    "RegistryPackageResolver",
    "FolderPackageResolver",
    "create_resolver",
    "RegistryClient",
    # Collaborators
    "ProcessRunner",
    "ProcessInvokerProtocol",
    "RegistryProtocol",
    "ProjectDescriptor",
    "read_package_name",
    "find_entry_artifact",
    "has_entry_point",
    # Models
    "Options",
    "PackageIdentity",
    "InstalledPackage",
    "PackageManifest",
    "MANIFEST_FILE",
    "TargetFramework",
    "NETCOREAPP10",
    # Exceptions
    "GlobalsError",
    "ConfigurationError",
    "ResolutionError",
    "RegistryRequestError",
    "CompatibilityError",
    "MalformedDescriptorError",
    "RestoreFailedError",
    "BuildFailedError",
    "EntryPointNotFoundError",
    "PackageAlreadyExistsError",
    "PackageNotInstalledError",
]

__version__ = "0.1.0"
