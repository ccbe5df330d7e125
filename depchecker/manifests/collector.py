"""Manifest collector: find project files and read their package references."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import structlog

from depchecker.exceptions import ManifestError
from depchecker.manifests.base import ManifestParser, ParseOutcome, ParseStatus
from depchecker.manifests.parsers import (
    LegacyProjectParser,
    PackagesConfigParser,
    SdkProjectParser,
    UwpProjectParser,
)
from depchecker.models import CodeProject, PackageReference

log = structlog.get_logger("depchecker.manifests")

PROJECT_PATTERN = "*.csproj"
PACKAGES_CONFIG = "packages.config"

# Tried in order against a project file when no packages.config sits beside it.
PROJECT_PARSERS: list[ManifestParser] = [
    SdkProjectParser(),
    UwpProjectParser(),
    LegacyProjectParser(),
]

PACKAGES_CONFIG_PARSER: ManifestParser = PackagesConfigParser()


def discover_projects(search_path: Path, recursive: bool = False) -> list[Path]:
    """Return the project files under *search_path*, sorted."""
    hits = search_path.rglob(PROJECT_PATTERN) if recursive else search_path.glob(PROJECT_PATTERN)
    return sorted(p for p in hits if p.is_file())


def read_project(project_file: Path) -> CodeProject:
    """Read the package references of one project.

    Never raises: a file that cannot be understood produces a project with
    ``parsing_error`` set and no references.
    """
    name = project_file.stem
    packages_config = project_file.parent / PACKAGES_CONFIG

    if packages_config.is_file():
        manifest, parsers = packages_config, [PACKAGES_CONFIG_PARSER]
    else:
        manifest, parsers = project_file, PROJECT_PARSERS

    project = CodeProject(name=name, nuget_file=str(manifest))
    try:
        outcome = _first_match(manifest, parsers)
    except ManifestError as exc:
        log.error("manifests.parse_failed", file=str(manifest), error=exc.reason)
        project.parsing_error = True
        return project

    if outcome.status is ParseStatus.INFORMATIONAL:
        log.info("manifests.no_package_information", file=str(manifest), detail=outcome.message)
    project.references = outcome.references
    log.debug("manifests.parsed", file=str(manifest), packages=len(outcome.references))
    return project


def collect_projects(search_path: Path, recursive: bool = False) -> list[CodeProject]:
    projects = discover_projects(search_path, recursive)
    log.info("manifests.found_projects", count=len(projects), files=[str(p) for p in projects])
    return [read_project(p) for p in projects]


def collect(search_path: Path, recursive: bool = False) -> list[PackageReference]:
    """Flatten the references of every project under *search_path*."""
    refs: list[PackageReference] = []
    for project in collect_projects(search_path, recursive):
        refs.extend(project.references)
    return refs


def _first_match(manifest: Path, parsers: list[ManifestParser]) -> ParseOutcome:
    """Run *parsers* in order and return the first outcome that matched.

    Raises ManifestError when the file is unreadable, not XML, or matched by
    none of the parsers.
    """
    try:
        root = ET.fromstring(manifest.read_bytes())
    except OSError as exc:
        raise ManifestError(str(manifest), str(exc)) from exc
    except ET.ParseError as exc:
        raise ManifestError(str(manifest), f"invalid XML: {exc}") from exc

    reasons: list[str] = []
    for parser in parsers:
        outcome = parser.parse(manifest, root)
        if outcome.matched:
            log.debug("manifests.matched", file=str(manifest), parser=parser.detection_method)
            return outcome
        reasons.append(f"{parser.detection_method}: {outcome.message}")
    raise ManifestError(str(manifest), "; ".join(reasons))
