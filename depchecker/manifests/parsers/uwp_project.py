"""Parser for legacy namespaced .csproj files that use PackageReference (UWP)."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from depchecker.manifests.base import MSBUILD_NS, ParseOutcome, package_references


class UwpProjectParser:
    detection_method = "uwp-project"

    def parse(self, file_path: Path, root: ET.Element) -> ParseOutcome:
        if root.tag != f"{MSBUILD_NS}Project":
            return ParseOutcome.not_matched("not an MSBuild 2003 project")
        refs = package_references(file_path, root, MSBUILD_NS)
        if not refs:
            return ParseOutcome.not_matched("no PackageReference items")
        return ParseOutcome.parsed(refs)
