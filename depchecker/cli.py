"""CLI entry point: depchecker.

Usage:
    depchecker .                                   # scan current directory
    depchecker src -r --badge --badge-per-project  # recursive, one badge per project
    depchecker . --combine-projects --devops-result
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from depchecker.config import BADGE_STYLES, Options
from depchecker.core.logging import setup_logging
from depchecker.exceptions import ConfigurationError
from depchecker.runner import Runner, summarize


@click.command()
@click.argument("search_path", default=".", type=click.Path(file_okay=False))
@click.option("-r", "--recursive", is_flag=True, help="Search sub directories too")
@click.option("--report/--no-report", "create_report", default=True, help="Write the HTML report")
@click.option("--report-path", default="dependency-report.html", show_default=True)
@click.option("--badge/--no-badge", "create_badge", default=False, help="Write an SVG badge")
@click.option("--badge-path", default="badges/dependencies.svg", show_default=True)
@click.option(
    "--badge-per-project",
    is_flag=True,
    help="One badge per project; --badge-path is then a directory",
)
@click.option("--badge-style", type=click.Choice(BADGE_STYLES), default="flat", show_default=True)
@click.option("--devops-result", "create_devops_result", is_flag=True,
              help="Write the Azure DevOps result attachment")
@click.option("--combine-projects", is_flag=True, help="Merge packages across all projects")
@click.option("--prerelease", "include_prereleases", is_flag=True,
              help="Consider pre-release versions as latest")
@click.option("--nuget-config", "custom_nuget_config", default=None,
              help="Additional NuGet.Config with package sources")
@click.option("--azure-feed", "azure_feed_uri", default=None,
              help="Azure Artifacts feed URL (credentials from the pipeline environment)")
@click.option("--timeout", default=30.0, show_default=True, help="HTTP timeout in seconds")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(search_path: str, verbose: bool, **kwargs) -> None:
    """Check the NuGet dependencies of .NET projects for updates."""
    setup_logging(verbose)

    if not Path(search_path).is_dir():
        click.echo(f"Error: {search_path} is not a directory", err=True)
        sys.exit(1)

    try:
        options = Options(search_path=search_path, **kwargs)
        runner = Runner(options)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    projects = runner.run()
    click.echo(summarize(projects))


if __name__ == "__main__":
    main()
