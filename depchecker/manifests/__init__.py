"""Manifest collector: read package references from .NET project files."""

from depchecker.manifests.collector import (
    collect,
    collect_projects,
    discover_projects,
    read_project,
)

__all__ = ["collect", "collect_projects", "discover_projects", "read_project"]
