"""Parser for SDK-style (modern) .csproj files."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from depchecker.manifests.base import ParseOutcome, package_references


class SdkProjectParser:
    detection_method = "sdk-project"

    def parse(self, file_path: Path, root: ET.Element) -> ParseOutcome:
        # SDK-style projects carry no MSBuild namespace.
        if root.tag != "Project":
            return ParseOutcome.not_matched(f"not an SDK-style project: <{root.tag}>")
        return ParseOutcome.parsed(package_references(file_path, root, ""))
