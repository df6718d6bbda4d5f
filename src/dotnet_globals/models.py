"""Data models shared by the registry client, resolvers and installer.

All models are immutable once created.
"""

from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class Options(BaseModel):
    """Caller-supplied options for one acquisition.

    Accepts both the Python field names and the command-line style aliases:

        >>> Options(RegistrySourceUrl="https://api.nuget.org/v3/index.json", Version="1.2.0")
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    registry_source_url: str | None = Field(default=None, alias="RegistrySourceUrl")
    version: str | None = Field(default=None, alias="Version")
    # Deadline in seconds for registry requests and each external process
    timeout: float | None = None


class PackageIdentity(BaseModel):
    """Resolved package name and exact version."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


class DependencySet(BaseModel):
    """Dependencies a package version declares for one target framework."""

    model_config = ConfigDict(frozen=True)

    target_framework: str
    dependencies: list[str] = Field(default_factory=list)


class PackageMetadata(BaseModel):
    """One registry entry (a single version of a package)."""

    model_config = ConfigDict(frozen=True)

    identity: PackageIdentity
    listed: bool = True
    dependency_sets: list[DependencySet] = Field(default_factory=list)


class InstalledPackage(BaseModel):
    """Result of a successful acquisition."""

    model_config = ConfigDict(frozen=True)

    name: str
    folder: Path
    entry_assembly: str
    version: str | None = None

    @property
    def entry_assembly_path(self) -> Path:
        return self.folder / self.entry_assembly
