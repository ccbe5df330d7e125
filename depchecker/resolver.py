"""Version resolution and status classification."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import structlog

from depchecker.exceptions import RegistryError
from depchecker.models import (
    LookupOutcome,
    PackageMetadata,
    PackageStatus,
    ResolvedMetadata,
)
from depchecker.versioning import SemanticVersion

log = structlog.get_logger("depchecker.resolver")


@runtime_checkable
class PackageRegistry(Protocol):
    """Anything that can list the published versions of a package."""

    url: str

    async def get_metadata(
        self, package_id: str, include_prerelease: bool = False
    ) -> list[PackageMetadata]: ...


class MetadataCache:
    """Per-run cache of resolved metadata, keyed by package id.

    Misses are cached too. Failed lookups are not, so a later request for the
    same id retries the registries.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ResolvedMetadata] = {}

    def get(self, package_id: str) -> ResolvedMetadata | None:
        return self._entries.get(package_id)

    def put(self, resolved: ResolvedMetadata) -> None:
        if resolved.outcome is LookupOutcome.FAILED:
            return
        self._entries[resolved.id] = resolved

    def __contains__(self, package_id: object) -> bool:
        return package_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class VersionResolver:
    """Resolve latest versions against registries in priority order."""

    def __init__(
        self,
        registries: list[PackageRegistry],
        *,
        include_prerelease: bool = False,
        cache: MetadataCache | None = None,
    ) -> None:
        self._registries = list(registries)
        self._include_prerelease = include_prerelease
        self.cache = cache if cache is not None else MetadataCache()

    async def resolve(self, package_id: str) -> ResolvedMetadata:
        cached = self.cache.get(package_id)
        if cached is not None:
            return cached

        errors: list[str] = []
        resolved: ResolvedMetadata | None = None
        for registry in self._registries:
            try:
                results = await registry.get_metadata(package_id, self._include_prerelease)
            except RegistryError as exc:
                log.error("resolver.registry_failed", package=package_id, error=str(exc))
                errors.append(str(exc))
                continue
            if results:
                # Registries list versions oldest first.
                latest = results[-1]
                resolved = ResolvedMetadata(
                    id=package_id,
                    outcome=LookupOutcome.FOUND,
                    latest_version=latest.version,
                    project_url=latest.project_url,
                )
                break

        if resolved is None:
            if errors:
                resolved = ResolvedMetadata.failed(package_id, "; ".join(errors))
            else:
                resolved = ResolvedMetadata.absent(package_id)

        self.cache.put(resolved)
        return resolved

    async def status(self, package_id: str, declared_version: str) -> PackageStatus:
        resolved = await self.resolve(package_id)
        return classify(package_id, declared_version, resolved)


def classify(package_id: str, declared_version: str, resolved: ResolvedMetadata) -> PackageStatus:
    """Compare a declared version against the resolved latest version.

    An unparsable declared version is reported as ``no_local_version`` and
    never as outdated.
    """
    installed = SemanticVersion.try_parse(declared_version)
    status = PackageStatus(
        id=package_id,
        installed_version=declared_version,
        no_local_version=installed is None,
    )

    if not resolved.found:
        status.not_found = True
        status.lookup_error = resolved.error
        if resolved.outcome is LookupOutcome.FAILED:
            log.error("resolver.lookup_failed", package=package_id, error=resolved.error)
        else:
            log.error("resolver.not_found", package=package_id)
        return status

    status.current_version = resolved.latest_version
    status.project_url = resolved.project_url

    if installed is None:
        log.warning(
            "resolver.no_local_version", package=package_id, declared=declared_version
        )
        return status

    current = SemanticVersion.try_parse(resolved.latest_version)
    if current is None:
        log.warning(
            "resolver.unparsable_registry_version",
            package=package_id,
            version=resolved.latest_version,
        )
        return status

    if current > installed:
        status.outdated = True
        log.warning(
            "resolver.outdated",
            package=package_id,
            current=str(current),
            installed=str(installed),
        )
    else:
        log.info("resolver.up_to_date", package=package_id, version=declared_version)
    return status
