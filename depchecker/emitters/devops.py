"""Azure DevOps result attachment."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

import click
import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from depchecker.config import DEVOPS_RESULT_FILE
from depchecker.models import CodeProject

log = structlog.get_logger("depchecker.emitters")

ATTACHMENT_TYPE = "dependcies_check_result"


class _PascalModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class PackageStatusOut(_PascalModel):
    id: str
    installed_version: str
    current_version: str | None = None
    not_found: bool = False
    no_local_version: bool = False
    outdated: bool = False
    project_url: str | None = None
    defined_in_file: str | None = None


class CodeProjectOut(_PascalModel):
    name: str
    nuget_file: str | None = Field(default=None, alias="NuGetFile")
    package_statuses: list[PackageStatusOut] = []
    parsing_error: bool = False


class DevOpsResult(_PascalModel):
    projects: list[CodeProjectOut]


def build_result(projects: list[CodeProject]) -> DevOpsResult:
    return DevOpsResult(
        projects=[
            CodeProjectOut(
                name=p.name,
                nuget_file=p.nuget_file,
                package_statuses=[
                    PackageStatusOut.model_validate(asdict(s)) for s in p.package_statuses
                ],
                parsing_error=p.parsing_error,
            )
            for p in projects
        ]
    )


def attachment_marker(path: Path) -> str:
    return f"##vso[task.addattachment type={ATTACHMENT_TYPE};name={ATTACHMENT_TYPE};]{path}"


def write_devops_result(projects: list[CodeProject], directory: str = ".") -> Path:
    """Write the JSON result file and announce it to the pipeline on stdout."""
    target = (Path(directory) / DEVOPS_RESULT_FILE).resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(build_result(projects).model_dump_json(by_alias=True), encoding="utf-8")
    log.info("emitters.devops_result_written", path=str(target))
    click.echo(attachment_marker(target))
    return target
