"""HTML report rendering."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import structlog

from depchecker.models import CodeProject, PackageStatus

log = structlog.get_logger("depchecker.emitters")

_STATUS_COLORS: dict[str, str] = {
    "Not found": "#d32f2f",
    "Local version not set": "#d32f2f",
    "Outdated": "#f57c00",
    "Up to date": "#388e3c",
}

_STYLE = """\
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
       color: #212121; max-width: 960px; margin: 0 auto; padding: 16px; }
table { border-collapse: collapse; width: 100%; margin-bottom: 24px; }
th, td { padding: 6px 12px; border-bottom: 1px solid #e0e0e0; text-align: left; }
th { font-weight: bold; }
.file { color: #757575; font-size: 12px; }
.error { color: #d32f2f; font-weight: bold; }
"""


def esc(text: str) -> str:
    """Minimal HTML escaping."""
    return (
        text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")
    )


def render_report(projects: list[CodeProject], sources: list[str] | None = None) -> str:
    """Return a self-contained HTML document for *projects*."""
    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    sections = "\n".join(_render_project(p) for p in projects)
    if not projects:
        sections = "<p>No projects found.</p>"
    source_list = ""
    if sources:
        items = "".join(f"<li><code>{esc(s)}</code></li>" for s in sources)
        source_list = f"<h3>Sources</h3>\n<ul>{items}</ul>"

    return f"""\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Dependency Report</title>
<style>
{_STYLE}</style>
</head>
<body>
<h1>Dependency Report</h1>
<p class="file">Generated {generated}</p>
{sections}
{source_list}
</body>
</html>
"""


def _render_project(project: CodeProject) -> str:
    parts = [f"<h2>{esc(project.name)}</h2>"]
    if project.nuget_file:
        parts.append(f'<p class="file">{esc(project.nuget_file)}</p>')
    if project.parsing_error:
        parts.append('<p class="error">The project file could not be parsed.</p>')
        return "\n".join(parts)
    if not project.package_statuses:
        parts.append("<p>No packages referenced.</p>")
        return "\n".join(parts)

    rows = "\n".join(_render_status(s) for s in project.package_statuses)
    parts.append(
        "<table>\n"
        "<tr><th>Package</th><th>Installed</th><th>Latest</th><th>Status</th></tr>\n"
        f"{rows}\n"
        "</table>"
    )
    return "\n".join(parts)


def _render_status(status: PackageStatus) -> str:
    label = status.label
    color = _STATUS_COLORS.get(label, "#757575")
    name = esc(status.id)
    if status.project_url:
        name = f'<a href="{esc(status.project_url)}">{name}</a>'
    detail = ""
    if status.lookup_error:
        detail = f'<br><span class="file">{esc(status.lookup_error)}</span>'
    return (
        f"<tr><td>{name}</td>"
        f"<td>{esc(status.installed_version or '-')}</td>"
        f"<td>{esc(status.current_version or '-')}</td>"
        f'<td><span style="color: {color};">{label}</span>{detail}</td></tr>'
    )


def write_report(
    projects: list[CodeProject], report_path: str, sources: list[str] | None = None
) -> Path:
    target = Path(report_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_report(projects, sources), encoding="utf-8")
    log.info("emitters.report_written", path=str(target))
    return target
