"""Staging area management for registry installs.

A staging directory holds the throwaway project.json that asks the external
restore for exactly one package, plus the lock file the restore writes back.
"""

import json
import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .descriptor import PROJECT_DESCRIPTOR
from .exceptions import RestoreFailedError
from .frameworks import TargetFramework
from .models import PackageIdentity

logger = logging.getLogger(__name__)

STAGING_PREFIX = "dotnet-globals-"
RESTORE_LOCK_FILE = "project.lock.json"


def create_staging_directory(root: Path | None = None) -> Path:
    """Create a uniquely named staging directory.

    Args:
        root: Parent directory (defaults to the platform temp directory)

    Returns:
        Path to the new, empty directory
    """
    path = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=root))
    logger.debug(f"Created staging directory {path}")
    return path


def write_descriptor(staging_dir: Path, identity: PackageIdentity, framework: TargetFramework) -> Path:
    """Write a restore descriptor requesting exactly identity for framework.

    Returns:
        Path to the written project.json
    """
    descriptor = {
        "dependencies": {identity.name: identity.version},
        "frameworks": {framework.short_folder_name: {}},
    }
    path = staging_dir / PROJECT_DESCRIPTOR
    with open(path, "w", encoding="utf-8") as f:
        json.dump(descriptor, f, indent=2)
    return path


def cleanup(staging_dir: Path) -> None:
    """Remove a staging directory, logging (never raising) on failure."""
    try:
        shutil.rmtree(staging_dir)
        logger.debug(f"Removed staging directory {staging_dir}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove staging directory {staging_dir}: {e}")


@contextmanager
def staging_directory(root: Path | None = None) -> Iterator[Path]:
    """Create a staging directory and clean it up on exit, success or failure."""
    path = create_staging_directory(root)
    try:
        yield path
    finally:
        cleanup(path)


def locate_package_assemblies(staging_dir: Path, identity: PackageIdentity, framework: TargetFramework) -> Path:
    """
    Find the restored assemblies folder for identity.

    Reads the first packageFolders key from the restore lock file and returns
    <packages root>/<lower id>/<lower version>/lib/<framework short name>.

    Raises:
        RestoreFailedError: If the lock file is missing or unreadable, or the
            assemblies folder does not exist
    """
    lock_path = staging_dir / RESTORE_LOCK_FILE
    context = {"package": identity.name, "version": identity.version, "lock_file": str(lock_path)}

    try:
        with open(lock_path, encoding="utf-8-sig") as f:
            lock = json.load(f)
    except FileNotFoundError as e:
        raise RestoreFailedError(f"Restore produced no {RESTORE_LOCK_FILE} for {identity}", context) from e
    except (OSError, json.JSONDecodeError) as e:
        raise RestoreFailedError(f"Could not read {lock_path}: {e}", context) from e

    package_folders = lock.get("packageFolders") if isinstance(lock, dict) else None
    if not isinstance(package_folders, dict) or not package_folders:
        raise RestoreFailedError(f"No packageFolders recorded in {lock_path}", context)

    packages_root = Path(next(iter(package_folders)))
    assemblies = packages_root / identity.name.lower() / identity.version.lower() / "lib" / framework.short_folder_name

    if not assemblies.is_dir():
        context["assemblies"] = str(assemblies)
        raise RestoreFailedError(f"Package assemblies not found at {assemblies}", context)

    return assemblies
