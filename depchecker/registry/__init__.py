"""Package registries: NuGet V3 feeds and where to find them."""

from depchecker.registry.nuget_client import NuGetRegistry
from depchecker.registry.sources import PackageSource, load_sources

__all__ = ["NuGetRegistry", "PackageSource", "load_sources"]
