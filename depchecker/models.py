"""Data models shared by the collector, resolver, aggregator and emitters."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PackageReference:
    """A single package declared in a manifest file."""

    id: str
    declared_version: str
    declaring_file: str


class LookupOutcome(str, enum.Enum):
    FOUND = "found"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(frozen=True)
class PackageMetadata:
    """One published version of a package as reported by a registry."""

    id: str
    version: str
    project_url: str | None = None
    listed: bool = True


@dataclass(frozen=True)
class ResolvedMetadata:
    """Latest published version of a package id, or why there is none."""

    id: str
    outcome: LookupOutcome
    latest_version: str | None = None
    project_url: str | None = None
    error: str | None = None

    @classmethod
    def absent(cls, package_id: str) -> ResolvedMetadata:
        return cls(id=package_id, outcome=LookupOutcome.ABSENT)

    @classmethod
    def failed(cls, package_id: str, error: str) -> ResolvedMetadata:
        return cls(id=package_id, outcome=LookupOutcome.FAILED, error=error)

    @property
    def found(self) -> bool:
        return self.outcome is LookupOutcome.FOUND


@dataclass
class PackageStatus:
    """Classification of one declared dependency."""

    id: str
    installed_version: str
    current_version: str | None = None
    not_found: bool = False
    no_local_version: bool = False
    outdated: bool = False
    project_url: str | None = None
    defined_in_file: str | None = None
    lookup_error: str | None = None

    @property
    def label(self) -> str:
        if self.not_found:
            return "Not found"
        if self.no_local_version:
            return "Local version not set"
        if self.outdated:
            return "Outdated"
        return "Up to date"


@dataclass
class CodeProject:
    """One scanned manifest, or a synthetic bucket in combined mode."""

    name: str
    nuget_file: str | None = None
    package_statuses: list[PackageStatus] = field(default_factory=list)
    parsing_error: bool = False
    # References collected for combined mode; not part of any emitted output.
    references: list[PackageReference] = field(default_factory=list, repr=False)
