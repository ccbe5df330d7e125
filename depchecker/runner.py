"""Runner: scan, resolve, classify and emit for one invocation."""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import structlog

from depchecker.aggregator import aggregate
from depchecker.config import Options
from depchecker.emitters import write_badges, write_devops_result, write_report
from depchecker.manifests import collect_projects
from depchecker.models import CodeProject
from depchecker.registry import NuGetRegistry, PackageSource, load_sources
from depchecker.resolver import PackageRegistry, VersionResolver

log = structlog.get_logger("depchecker.runner")


class Runner:
    """One dependency check run.

    Sources are resolved on construction so missing credentials fail before
    any scanning starts. Pass *registries* to bypass source discovery.
    """

    def __init__(
        self,
        options: Options,
        registries: list[PackageRegistry] | None = None,
    ) -> None:
        self.options = options
        self.code_projects: list[CodeProject] = []
        self._registries = registries
        self.sources: list[PackageSource] = []
        if registries is None:
            self.sources = load_sources(options.custom_nuget_config, options.azure_feed_uri)
            log.info("runner.sources", sources=[f"{s.name} - {s.url}" for s in self.sources])

    @property
    def source_urls(self) -> list[str]:
        if self._registries is not None:
            return [r.url for r in self._registries]
        return [s.url for s in self.sources]

    def run(self) -> list[CodeProject]:
        """Check every project and write the requested outputs."""
        asyncio.run(self.run_async())
        self.emit()
        return self.code_projects

    async def run_async(self) -> list[CodeProject]:
        if self._registries is not None:
            return await self._check(self._registries)

        async with httpx.AsyncClient(timeout=self.options.timeout) as client:
            registries = [NuGetRegistry(source, client) for source in self.sources]
            return await self._check(registries)

    async def _check(self, registries: list[PackageRegistry]) -> list[CodeProject]:
        resolver = VersionResolver(registries, include_prerelease=self.options.include_prereleases)
        projects = collect_projects(Path(self.options.search_path), self.options.recursive)

        if self.options.combine_projects:
            self.code_projects = await aggregate(projects, resolver)
            return self.code_projects

        for project in projects:
            for ref in project.references:
                log.info("runner.checking", project=project.name, package=ref.id)
                project.package_statuses.append(
                    await resolver.status(ref.id, ref.declared_version)
                )
        self.code_projects = projects
        return self.code_projects

    def emit(self) -> None:
        opts = self.options
        if opts.create_report:
            write_report(self.code_projects, opts.report_path, self.source_urls)
        if opts.create_badge:
            write_badges(
                self.code_projects,
                opts.badge_path,
                per_project=opts.badge_per_project,
                style=opts.badge_style,
            )
        if opts.create_devops_result:
            write_devops_result(self.code_projects)


def summarize(projects: list[CodeProject]) -> str:
    statuses = [s for p in projects for s in p.package_statuses]
    outdated = sum(1 for s in statuses if s.outdated)
    not_found = sum(1 for s in statuses if s.not_found)
    no_local = sum(1 for s in statuses if s.no_local_version)
    failed = sum(1 for p in projects if p.parsing_error)
    text = (
        f"{len(projects)} projects, {len(statuses)} packages: "
        f"{outdated} outdated, {not_found} not found, {no_local} without local version"
    )
    if failed:
        text += f" ({failed} projects could not be parsed)"
    return text
