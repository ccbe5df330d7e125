"""Manifest parsers, one per supported file shape."""

from depchecker.manifests.parsers.legacy_project import LegacyProjectParser
from depchecker.manifests.parsers.packages_config import PackagesConfigParser
from depchecker.manifests.parsers.sdk_project import SdkProjectParser
from depchecker.manifests.parsers.uwp_project import UwpProjectParser

__all__ = [
    "LegacyProjectParser",
    "PackagesConfigParser",
    "SdkProjectParser",
    "UwpProjectParser",
]
