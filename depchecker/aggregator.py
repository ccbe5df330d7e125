"""Combined mode: merge dependencies across every scanned project."""

from __future__ import annotations

import structlog

from depchecker.models import CodeProject, PackageReference
from depchecker.resolver import VersionResolver

log = structlog.get_logger("depchecker.aggregator")

COMBINED_PROJECT_NAME = "Dependency Report"


def group_references(projects: list[CodeProject]) -> dict[str, list[PackageReference]]:
    """Group references by package id, dropping repeated (id, version) pairs.

    Groups keep first-seen order, and so do the references inside them.
    """
    groups: dict[str, list[PackageReference]] = {}
    seen: set[tuple[str, str]] = set()
    for project in projects:
        for ref in project.references:
            key = (ref.id, ref.declared_version)
            if key in seen:
                continue
            seen.add(key)
            groups.setdefault(ref.id, []).append(ref)
    return groups


async def aggregate(projects: list[CodeProject], resolver: VersionResolver) -> list[CodeProject]:
    """Resolve every distinct dependency once and bucket the results.

    Packages declared with a single version land in the shared
    ``Dependency Report`` project. A package declared with diverging versions
    gets a project of its own, one status per version, each labelled with the
    file that declares it.
    """
    groups = group_references(projects)
    log.info("aggregator.package_ids", count=len(groups))

    combined = CodeProject(name=COMBINED_PROJECT_NAME)
    result = [combined]

    for package_id, refs in groups.items():
        log.info("aggregator.checking", package=package_id, versions=len(refs))
        if len(refs) == 1:
            combined.package_statuses.append(
                await resolver.status(package_id, refs[0].declared_version)
            )
            continue

        diverging = CodeProject(name=package_id)
        for ref in refs:
            status = await resolver.status(ref.id, ref.declared_version)
            status.id = ref.declaring_file
            status.defined_in_file = ref.declaring_file
            diverging.package_statuses.append(status)
        result.append(diverging)

    return result
