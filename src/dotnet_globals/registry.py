"""Registry client for NuGet V3 feeds.

Resolves a package name (and optional exact version) to a PackageIdentity,
checking that the selected version supports the required target framework.
"""

import json
import logging
from typing import Any

import requests
from requests import Response

from .exceptions import CompatibilityError
from .exceptions import ConfigurationError
from .exceptions import RegistryRequestError
from .exceptions import ResolutionError
from .frameworks import NETCOREAPP10
from .frameworks import TargetFramework
from .frameworks import frameworks_match
from .models import DependencySet
from .models import PackageIdentity
from .models import PackageMetadata

logger = logging.getLogger(__name__)

REGISTRATIONS_RESOURCE_TYPE = "RegistrationsBaseUrl"


def select_identity(entries: list[PackageMetadata], version_constraint: str | None) -> PackageMetadata:
    """Pick the entry matching version_constraint exactly, else the last one.

    "Last" is registry response order, not the highest semantic version.

    Args:
        entries: Registry entries in response order (must be non-empty)
        version_constraint: Exact version string, or None

    Returns:
        Selected entry
    """
    if version_constraint:
        for entry in entries:
            if entry.identity.version == version_constraint:
                return entry
        logger.debug(f"Version {version_constraint} not found, falling back to last registry entry")
    return entries[-1]


class RegistryClient:
    """
    Query a NuGet V3 registry for package metadata.

    The HTTP session is injectable so apps can share connection pools, add
    authentication, or substitute a fake in tests.
    """

    def __init__(
        self,
        registry_url: str | None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self._registry_url = registry_url or ""
        self._session = session or requests.Session()
        self._timeout = timeout
        self._registrations_base: str | None = None

    @property
    def registry_url(self) -> str:
        return self._registry_url

    def lookup_identity(
        self,
        reference: str,
        version_constraint: str | None,
        framework: TargetFramework = NETCOREAPP10,
    ) -> PackageIdentity:
        """
        Resolve reference to a concrete identity compatible with framework.

        Args:
            reference: Package name (matched case-insensitively)
            version_constraint: Exact version to select, or None for the last entry
            framework: Target framework the selected version must declare

        Returns:
            PackageIdentity of the selected version

        Raises:
            ConfigurationError: If no registry URL is configured
            ResolutionError: If the registry has no entries for reference
            CompatibilityError: If the selected version does not support framework
        """
        if not self._registry_url:
            raise ConfigurationError("No NuGet package source specified")

        entries = self.get_metadata(reference)
        if not entries:
            raise ResolutionError(f"Unable to resolve {reference}", context={"package": reference})

        selected = select_identity(entries, version_constraint)
        identity = selected.identity

        supported = [d.target_framework for d in selected.dependency_sets]
        if not any(frameworks_match(moniker, framework) for moniker in supported):
            raise CompatibilityError(
                f"Unable to resolve '{reference} (>= {identity.version})' for '{framework.full_name}'",
                context={
                    "package": reference,
                    "version": identity.version,
                    "framework": framework.full_name,
                    "supported": supported,
                },
            )

        logger.debug(f"Resolved {reference} to {identity}")
        return identity

    def get_metadata(self, reference: str) -> list[PackageMetadata]:
        """
        Fetch all listed versions of reference, prerelease included.

        Args:
            reference: Package name (exact, case-insensitive)

        Returns:
            Entries in registry order; empty if the package is unknown
        """
        base = self._get_registrations_base()
        index_url = f"{base.rstrip('/')}/{reference.lower()}/index.json"

        index = self._get_json(index_url, allow_missing=True)
        if index is None:
            return []

        entries: list[PackageMetadata] = []
        for page in index.get("items", []):
            leaves = page.get("items")
            if leaves is None:
                page_url = page.get("@id")
                if not page_url:
                    raise RegistryRequestError(
                        f"Registration page for {reference} has neither items nor @id",
                        context={"url": index_url, "package": reference},
                    )
                page_data = self._get_json(page_url)
                leaves = page_data.get("items", []) if page_data else []

            for leaf in leaves:
                metadata = self._parse_catalog_entry(leaf.get("catalogEntry", {}))
                if metadata is None:
                    continue
                if metadata.identity.name.lower() != reference.lower():
                    continue
                if not metadata.listed:
                    logger.debug(f"Skipping unlisted {metadata.identity}")
                    continue
                entries.append(metadata)

        logger.debug(f"Registry returned {len(entries)} entries for {reference}")
        return entries

    def _get_registrations_base(self) -> str:
        if self._registrations_base is not None:
            return self._registrations_base

        service_index = self._get_json(self._registry_url)
        for resource in (service_index or {}).get("resources", []):
            if str(resource.get("@type", "")).startswith(REGISTRATIONS_RESOURCE_TYPE):
                self._registrations_base = resource["@id"]
                return self._registrations_base

        raise ConfigurationError(
            f"Registry {self._registry_url} does not expose a {REGISTRATIONS_RESOURCE_TYPE} resource",
            context={"registry_url": self._registry_url},
        )

    @staticmethod
    def _parse_catalog_entry(entry: dict[str, Any]) -> PackageMetadata | None:
        if "id" not in entry or "version" not in entry:
            return None

        dependency_sets = [
            DependencySet(
                target_framework=group.get("targetFramework", ""),
                dependencies=[d["id"] for d in group.get("dependencies", []) if "id" in d],
            )
            for group in entry.get("dependencyGroups", [])
        ]
        return PackageMetadata(
            identity=PackageIdentity(name=entry["id"], version=entry["version"]),
            listed=entry.get("listed", True),
            dependency_sets=dependency_sets,
        )

    def _get_json(self, url: str, allow_missing: bool = False) -> dict[str, Any] | None:
        try:
            response: Response = self._session.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise RegistryRequestError(f"Registry request failed: {e}", context={"url": url}) from e

        if response.status_code == 404 and allow_missing:
            return None
        if response.status_code >= 400:
            raise RegistryRequestError(
                f"Registry request to {url} failed with status {response.status_code}",
                context={"url": url, "status": response.status_code},
            )

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise RegistryRequestError(f"Registry returned invalid JSON from {url}", context={"url": url}) from e
