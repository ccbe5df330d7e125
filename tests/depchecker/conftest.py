"""Shared fixtures for depchecker tests. No network access is needed."""

from __future__ import annotations

import pytest

from depchecker.models import PackageMetadata


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


class FakeRegistry:
    """In-memory registry: package id -> versions, oldest first."""

    def __init__(self, url: str, packages: dict[str, list[str]] | None = None, error=None):
        self.url = url
        self.packages = packages or {}
        self.error = error
        self.calls: list[str] = []

    async def get_metadata(self, package_id, include_prerelease=False):
        self.calls.append(package_id)
        if self.error is not None:
            raise self.error
        return [
            PackageMetadata(id=package_id, version=v, project_url=f"https://example.org/{package_id}")
            for v in self.packages.get(package_id, [])
        ]


@pytest.fixture
def fake_registry():
    return FakeRegistry
