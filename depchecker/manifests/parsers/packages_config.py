"""Parser for standalone packages.config files."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from depchecker.manifests.base import ParseOutcome, local_name
from depchecker.models import PackageReference


class PackagesConfigParser:
    detection_method = "packages-config"

    def parse(self, file_path: Path, root: ET.Element) -> ParseOutcome:
        if local_name(root.tag) != "packages":
            return ParseOutcome.not_matched(f"root element is <{local_name(root.tag)}>")

        refs: list[PackageReference] = []
        for package_el in root.iter():
            if local_name(package_el.tag) != "package":
                continue
            package_id = (package_el.get("id") or "").strip()
            if not package_id:
                continue
            refs.append(
                PackageReference(
                    id=package_id,
                    declared_version=(package_el.get("version") or "").strip(),
                    declaring_file=str(file_path),
                )
            )
        return ParseOutcome.parsed(refs)
