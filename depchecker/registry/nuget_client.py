"""Async NuGet V3 client: package registration metadata only."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from depchecker.exceptions import RegistryError
from depchecker.models import PackageMetadata
from depchecker.registry.sources import PackageSource
from depchecker.versioning import SemanticVersion

log = structlog.get_logger("depchecker.registry")

# Preferred first; 3.6.0 includes SemVer 2.0.0 packages.
_REGISTRATION_TYPES = (
    "RegistrationsBaseUrl/3.6.0",
    "RegistrationsBaseUrl/3.4.0",
    "RegistrationsBaseUrl/3.0.0-rc",
    "RegistrationsBaseUrl/3.0.0-beta",
    "RegistrationsBaseUrl",
)

# Older feeds mark unlisted packages with this publish date.
_UNLISTED_PUBLISHED = "1900-01-01"


class NuGetRegistry:
    """Thin async wrapper around one NuGet V3 feed.

    The ``httpx.AsyncClient`` is owned by the caller so a run can share one
    connection pool (and tests can inject a ``MockTransport``).
    """

    def __init__(self, source: PackageSource, client: httpx.AsyncClient) -> None:
        self.source = source
        self._client = client
        self._auth: httpx.BasicAuth | None = None
        if source.credentials is not None:
            self._auth = httpx.BasicAuth(source.credentials.username, source.credentials.token)
        self._registrations_base: str | None = None

    @property
    def url(self) -> str:
        return self.source.url

    def __repr__(self) -> str:
        return f"NuGetRegistry({self.source.name!r}, {self.source.url!r})"

    # ── public ─────────────────────────────────────────────────────────────

    async def get_metadata(
        self, package_id: str, include_prerelease: bool = False
    ) -> list[PackageMetadata]:
        """Return every listed version of *package_id*, oldest first.

        An unknown package yields an empty list. Transport and HTTP failures,
        and registration documents of the wrong shape, raise
        :class:`RegistryError`.
        """
        base = await self._registrations_base_url()
        index = await self._get_json(f"{base}{package_id.lower()}/index.json", allow_missing=True)
        if index is None:
            return []

        results: list[PackageMetadata] = []
        for page in self._list(index, "items", package_id):
            if not isinstance(page, dict):
                raise RegistryError(self.url, f"malformed registration page for {package_id}")
            if page.get("items") is None:
                # Large registrations only link their pages.
                page_id = page.get("@id")
                if not isinstance(page_id, str) or not page_id:
                    raise RegistryError(
                        self.url, f"registration page for {package_id} has neither items nor @id"
                    )
                page = await self._get_json(page_id)
            for leaf in self._list(page, "items", package_id):
                meta = _leaf_to_metadata(leaf, package_id)
                if meta is None or not meta.listed:
                    continue
                if not include_prerelease and _is_prerelease(meta.version):
                    continue
                results.append(meta)
        return results

    # ── internal ───────────────────────────────────────────────────────────

    async def _registrations_base_url(self) -> str:
        """Resolve (once) the registration base URL from the service index."""
        if self._registrations_base is not None:
            return self._registrations_base

        index = await self._get_json(self.url)
        resources = (index or {}).get("resources", [])
        if not isinstance(resources, list):
            raise RegistryError(self.url, "service index resources is not a list")
        by_type: dict[str, str] = {}
        for resource in resources:
            if not isinstance(resource, dict):
                continue
            types = resource.get("@type", [])
            if isinstance(types, str):
                types = [types]
            for rtype in types:
                by_type.setdefault(rtype, resource.get("@id", ""))

        for rtype in _REGISTRATION_TYPES:
            base = by_type.get(rtype)
            if base:
                self._registrations_base = base if base.endswith("/") else base + "/"
                log.debug("registry.registrations_base", source=self.url, base=base, type=rtype)
                return self._registrations_base

        raise RegistryError(self.url, "service index has no RegistrationsBaseUrl resource")

    async def _get_json(self, url: str, *, allow_missing: bool = False) -> dict[str, Any] | None:
        try:
            resp = await self._client.get(url, auth=self._auth)
        except httpx.HTTPError as exc:
            raise RegistryError(self.url, f"request to {url} failed: {exc!r}") from exc

        if resp.status_code == 404 and allow_missing:
            return None
        if resp.status_code >= 400:
            raise RegistryError(self.url, f"GET {url} returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise RegistryError(self.url, f"GET {url} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise RegistryError(
                self.url, f"GET {url} returned malformed JSON (expected an object)"
            )
        return data

    def _list(self, data: dict[str, Any] | None, key: str, package_id: str) -> list[Any]:
        value = (data or {}).get(key, [])
        if not isinstance(value, list):
            raise RegistryError(self.url, f"malformed registration data for {package_id}: {key!r}")
        return value


def _leaf_to_metadata(leaf: Any, package_id: str) -> PackageMetadata | None:
    if not isinstance(leaf, dict):
        return None
    entry = leaf.get("catalogEntry")
    if not isinstance(entry, dict) or not entry.get("version"):
        return None
    listed = entry.get("listed", True)
    if str(entry.get("published", "")).startswith(_UNLISTED_PUBLISHED):
        listed = False
    return PackageMetadata(
        id=entry.get("id") or package_id,
        version=entry["version"],
        project_url=entry.get("projectUrl") or None,
        listed=bool(listed),
    )


def _is_prerelease(version: str) -> bool:
    parsed = SemanticVersion.try_parse(version)
    if parsed is not None:
        return parsed.is_prerelease
    return "-" in version.split("+", 1)[0]
