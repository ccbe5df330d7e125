"""Recogniser for old-style .csproj files that expect a packages.config."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from depchecker.manifests.base import MSBUILD_NS, ParseOutcome, ParseStatus


class LegacyProjectParser:
    detection_method = "legacy-project"

    def parse(self, file_path: Path, root: ET.Element) -> ParseOutcome:
        if root.tag != f"{MSBUILD_NS}Project":
            return ParseOutcome.not_matched("not an MSBuild 2003 project")
        return ParseOutcome(
            ParseStatus.INFORMATIONAL,
            message=(
                "This project type should have referenced NuGet packages with a "
                "packages.config. This file wasn't found and therefore no information "
                "could be collected."
            ),
        )
