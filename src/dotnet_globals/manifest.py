"""Installed package manifest (globals.json).

The manifest is written last during an acquisition, so its presence marks a
package folder as fully installed. It also records which assembly to run.

Manifest format (JSON):
{
  "version": "1.0",
  "package": {
    "name": "dotnet-hello",
    "version": "1.2.0",
    "source": "dotnet-hello",
    "entry_assembly": "dotnet-hello.dll",
    "installed_at": "2026-10-19T12:00:00+00:00"
  }
}
"""

import json
import logging
from dataclasses import asdict
from dataclasses import dataclass
from datetime import UTC
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

MANIFEST_FILE = "globals.json"
MANIFEST_VERSION = "1.0"


@dataclass
class PackageManifest:
    """Record of one installed package."""

    name: str
    version: str | None
    source: str
    entry_assembly: str
    installed_at: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PackageManifest":
        """Create from dictionary."""
        return cls(**data)


def has_manifest(package_folder: Path) -> bool:
    """Check whether package_folder holds a completed install."""
    return (package_folder / MANIFEST_FILE).is_file()


def write_manifest(
    package_folder: Path,
    name: str,
    version: str | None,
    source: str,
    entry_assembly: str,
) -> PackageManifest:
    """
    Write the manifest marker into package_folder.

    Args:
        package_folder: Installed package directory (must exist)
        name: Package name (the folder name)
        version: Resolved version, None for local builds without one
        source: Original source reference (registry name or folder path)
        entry_assembly: File name of the runnable assembly

    Returns:
        The written manifest
    """
    manifest = PackageManifest(
        name=name,
        version=version,
        source=source,
        entry_assembly=entry_assembly,
        installed_at=datetime.now(UTC).isoformat(),
    )
    data = {"version": MANIFEST_VERSION, "package": manifest.to_dict()}

    # Marker appears atomically via rename
    tmp_path = package_folder / f".{MANIFEST_FILE}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    tmp_path.replace(package_folder / MANIFEST_FILE)

    logger.debug(f"Wrote manifest for {name} in {package_folder}")
    return manifest


def read_manifest(package_folder: Path) -> PackageManifest | None:
    """
    Load the manifest from package_folder.

    Returns:
        Manifest, or None if absent or unreadable
    """
    path = package_folder / MANIFEST_FILE
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if data.get("version") != MANIFEST_VERSION:
            logger.warning(f"Manifest version mismatch in {path}: expected {MANIFEST_VERSION}, got {data.get('version')}")

        return PackageManifest.from_dict(data["package"])

    except Exception as e:
        logger.warning(f"Failed to read manifest {path}: {e}")
        return None
