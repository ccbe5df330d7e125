"""Run options and environment-provided credentials."""

from __future__ import annotations

import os
from dataclasses import dataclass

from depchecker.exceptions import ConfigurationError

BADGE_STYLES = ("flat", "flat-square", "plastic")

DEVOPS_RESULT_FILE = "dependcies_check_result.json"

_DEVOPS_TOKEN_HELP = (
    "This feature needs access to the OAuth token to query DevOps Artifacts. "
    "Please activate OAuth access for this stage. See "
    "https://docs.microsoft.com/en-us/azure/devops/pipelines/build/variables"
    "?view=azure-devops#system-variables"
)


@dataclass(frozen=True)
class Options:
    """Everything a run needs to know, collected from the command line."""

    search_path: str = "."
    recursive: bool = False
    create_report: bool = True
    report_path: str = "dependency-report.html"
    create_badge: bool = False
    badge_path: str = "badges/dependencies.svg"
    badge_per_project: bool = False
    badge_style: str = "flat"
    create_devops_result: bool = False
    combine_projects: bool = False
    include_prereleases: bool = False
    custom_nuget_config: str | None = None
    azure_feed_uri: str | None = None
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.badge_style not in BADGE_STYLES:
            raise ConfigurationError(
                f"unknown badge style {self.badge_style!r}, expected one of {BADGE_STYLES}"
            )
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")


@dataclass(frozen=True)
class FeedCredentials:
    username: str
    token: str


def azure_feed_credentials() -> FeedCredentials:
    """Read Azure Artifacts credentials from the pipeline environment.

    Raises ConfigurationError if either value is missing.
    """
    username = os.environ.get("BUILD_REQUESTEDFOREMAIL")
    token = os.environ.get("SYSTEM_ACCESSTOKEN")
    if not username:
        raise ConfigurationError("Username not provided (BUILD_REQUESTEDFOREMAIL is not set)")
    if not token:
        raise ConfigurationError(_DEVOPS_TOKEN_HELP)
    return FeedCredentials(username=username, token=token)
