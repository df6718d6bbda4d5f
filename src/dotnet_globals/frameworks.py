"""Target framework monikers.

Registries report frameworks either as short folder names (``netcoreapp1.0``)
or as full names (``.NETCoreApp,Version=v1.0``). Both are normalized to a
``TargetFramework`` so they can be compared.
"""

import re

from pydantic import BaseModel
from pydantic import ConfigDict

_SHORT_IDENTIFIERS = {
    "netcoreapp": ".NETCoreApp",
    "netstandard": ".NETStandard",
    "net": ".NETFramework",
}
_FULL_IDENTIFIERS = {full.lower(): full for full in _SHORT_IDENTIFIERS.values()}
_SHORT_NAMES = {full: short for short, full in _SHORT_IDENTIFIERS.items()}

_SHORT_PATTERN = re.compile(r"^(netcoreapp|netstandard|net)(\d+(?:\.\d+)*)$", re.IGNORECASE)
_FULL_PATTERN = re.compile(r"^(\.?[A-Za-z]+)(?:,Version=v|,Version=)?(\d+(?:\.\d+)*)$")


def _normalize_version(version: str, dotted: bool) -> str:
    # "45" -> "4.5" for undotted short names like net45
    parts = version.split(".") if dotted else list(version)
    while len(parts) > 2 and parts[-1] == "0":
        parts.pop()
    if len(parts) == 1:
        parts.append("0")
    return ".".join(str(int(p)) for p in parts)


class TargetFramework(BaseModel):
    """A runtime identifier plus version, e.g. (.NETCoreApp, 1.0)."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    version: str

    @property
    def full_name(self) -> str:
        return f"{self.identifier},Version=v{self.version}"

    @property
    def short_folder_name(self) -> str:
        short = _SHORT_NAMES.get(self.identifier)
        if short is None:
            return self.full_name
        if short == "net":
            return f"net{self.version.replace('.', '')}"
        return f"{short}{self.version}"

    def __str__(self) -> str:
        return self.full_name

    @classmethod
    def parse(cls, moniker: str) -> "TargetFramework | None":
        """Parse a short or full framework moniker.

        Returns:
            TargetFramework, or None if the moniker is not recognized
        """
        moniker = moniker.strip()

        short = _SHORT_PATTERN.match(moniker)
        if short:
            identifier = _SHORT_IDENTIFIERS[short.group(1).lower()]
            version = short.group(2)
            dotted = "." in version or identifier != ".NETFramework"
            return cls(identifier=identifier, version=_normalize_version(version, dotted))

        full = _FULL_PATTERN.match(moniker)
        if full:
            name = full.group(1)
            if not name.startswith("."):
                name = "." + name
            identifier = _FULL_IDENTIFIERS.get(name.lower(), name)
            version = full.group(2)
            return cls(identifier=identifier, version=_normalize_version(version, "." in version))

        return None


def frameworks_match(moniker: str, framework: TargetFramework) -> bool:
    """Check whether a registry-reported moniker denotes framework."""
    parsed = TargetFramework.parse(moniker)
    if parsed is None:
        return moniker.strip() == framework.full_name
    return parsed == framework


NETCOREAPP10 = TargetFramework(identifier=".NETCoreApp", version="1.0")
