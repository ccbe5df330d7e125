"""Parser interface and result type shared by every manifest parser."""

from __future__ import annotations

import enum
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from depchecker.models import PackageReference

MSBUILD_NS = "{http://schemas.microsoft.com/developer/msbuild/2003}"


class ParseStatus(str, enum.Enum):
    PARSED = "parsed"
    NOT_MATCHED = "not_matched"
    # Recognised, but the packages live in a file that is not there.
    INFORMATIONAL = "informational"


@dataclass
class ParseOutcome:
    status: ParseStatus
    references: list[PackageReference] = field(default_factory=list)
    message: str | None = None

    @classmethod
    def parsed(cls, references: list[PackageReference]) -> ParseOutcome:
        return cls(ParseStatus.PARSED, references)

    @classmethod
    def not_matched(cls, message: str) -> ParseOutcome:
        return cls(ParseStatus.NOT_MATCHED, message=message)

    @property
    def matched(self) -> bool:
        return self.status is not ParseStatus.NOT_MATCHED


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest parser must satisfy."""

    detection_method: str

    def parse(self, file_path: Path, root: ET.Element) -> ParseOutcome: ...


def local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.split("}", 1)[1] if tag.startswith("{") else tag


def package_references(file_path: Path, root: ET.Element, ns: str) -> list[PackageReference]:
    """Collect ``ItemGroup/PackageReference`` items of an MSBuild project.

    ``Version`` may be an attribute or a child element; items without one
    (central package management) get an empty declared version. ``Update``
    items only modify other references and are skipped.
    """
    refs: list[PackageReference] = []
    for item_group in root.findall(f"{ns}ItemGroup"):
        for ref_el in item_group.findall(f"{ns}PackageReference"):
            package_id = (ref_el.get("Include") or "").strip()
            if not package_id:
                continue
            version = ref_el.get("Version")
            if version is None:
                version_el = ref_el.find(f"{ns}Version")
                if version_el is not None and version_el.text:
                    version = version_el.text
            refs.append(
                PackageReference(
                    id=package_id,
                    declared_version=(version or "").strip(),
                    declaring_file=str(file_path),
                )
            )
    return refs
