"""SVG status badges in the shields.io look."""

from __future__ import annotations

import enum
from pathlib import Path

import structlog

from depchecker.emitters.report import esc
from depchecker.models import CodeProject

log = structlog.get_logger("depchecker.emitters")

_LABEL_COLOR = "#555"

# Approximate Verdana 11px advance widths.
_NARROW = set("fijlrtI.,:;|!'()[] ")
_WIDE = set("mwMW@%")


class BadgeState(enum.Enum):
    """Badge states, highest priority first."""

    NOT_FOUND = ("Some not found", "#e05d44")
    NO_LOCAL_VERSION = ("Local version not set", "#e05d44")
    OUTDATED = ("Outdated", "#dfb317")
    UP_TO_DATE = ("Up to date", "#4c1")

    @property
    def text(self) -> str:
        return self.value[0]

    @property
    def color(self) -> str:
        return self.value[1]


def badge_state(projects: list[CodeProject]) -> BadgeState:
    statuses = [s for p in projects for s in p.package_statuses]
    if any(s.not_found for s in statuses):
        return BadgeState.NOT_FOUND
    if any(s.no_local_version for s in statuses):
        return BadgeState.NO_LOCAL_VERSION
    if any(s.outdated for s in statuses):
        return BadgeState.OUTDATED
    return BadgeState.UP_TO_DATE


def text_width(text: str) -> int:
    width = 0.0
    for ch in text:
        if ch in _NARROW:
            width += 3.5
        elif ch in _WIDE:
            width += 9.5
        elif ch.isupper() or ch.isdigit():
            width += 7.5
        else:
            width += 6.5
    return int(round(width))


def draw_svg(label: str, message: str, color: str, style: str = "flat") -> str:
    """Render a two-part badge; *style* is flat, flat-square or plastic."""
    left = text_width(label) + 10
    right = text_width(message) + 10
    total = left + right
    height = 18 if style == "plastic" else 20
    radius = {"flat": 3, "flat-square": 0, "plastic": 4}.get(style, 3)
    text_y = 13 if style == "plastic" else 14

    if style == "plastic":
        gradient = (
            '<linearGradient id="b" x2="0" y2="100%">'
            '<stop offset="0" stop-color="#fff" stop-opacity=".7"/>'
            '<stop offset=".1" stop-color="#aaa" stop-opacity=".1"/>'
            '<stop offset=".9" stop-opacity=".3"/>'
            '<stop offset="1" stop-opacity=".5"/>'
            "</linearGradient>"
        )
    elif style == "flat":
        gradient = (
            '<linearGradient id="b" x2="0" y2="100%">'
            '<stop offset="0" stop-color="#bbb" stop-opacity=".1"/>'
            '<stop offset="1" stop-opacity=".1"/>'
            "</linearGradient>"
        )
    else:
        gradient = ""
    overlay = f'<rect width="{total}" height="{height}" fill="url(#b)"/>' if gradient else ""

    return f"""\
<svg xmlns="http://www.w3.org/2000/svg" width="{total}" height="{height}" role="img" \
aria-label="{esc(label)}: {esc(message)}">
<title>{esc(label)}: {esc(message)}</title>
{gradient}
<clipPath id="r"><rect width="{total}" height="{height}" rx="{radius}" fill="#fff"/></clipPath>
<g clip-path="url(#r)">
<rect width="{left}" height="{height}" fill="{_LABEL_COLOR}"/>
<rect x="{left}" width="{right}" height="{height}" fill="{color}"/>
{overlay}
</g>
<g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" \
font-size="11">
<text x="{left / 2:.1f}" y="{text_y + 1}" fill="#010101" fill-opacity=".3">{esc(label)}</text>
<text x="{left / 2:.1f}" y="{text_y}">{esc(label)}</text>
<text x="{left + right / 2:.1f}" y="{text_y + 1}" fill="#010101" \
fill-opacity=".3">{esc(message)}</text>
<text x="{left + right / 2:.1f}" y="{text_y}">{esc(message)}</text>
</g>
</svg>
"""


def write_badges(
    projects: list[CodeProject],
    badge_path: str,
    *,
    per_project: bool = False,
    style: str = "flat",
) -> list[Path]:
    """Write the badge file(s) and return their paths.

    In per-project mode *badge_path* is a directory holding
    ``Dependencies_<project>.svg`` files; otherwise it is the badge file.
    Projects sharing a name share a badge file: the last one wins and a
    warning is logged.
    """
    written: list[Path] = []
    if per_project:
        directory = Path(badge_path)
        directory.mkdir(parents=True, exist_ok=True)
        for project in projects:
            state = badge_state([project])
            target = directory / f"Dependencies_{project.name}.svg"
            if target in written:
                log.warning(
                    "emitters.badge_overwritten", path=str(target), project=project.name
                )
            target.write_text(
                draw_svg(f"Dependencies: {project.name}", state.text, state.color, style),
                encoding="utf-8",
            )
            if target not in written:
                written.append(target)
    else:
        target = Path(badge_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        state = badge_state(projects)
        target.write_text(
            draw_svg("Dependencies", state.text, state.color, style), encoding="utf-8"
        )
        written.append(target)

    for path in written:
        log.info("emitters.badge_written", path=str(path))
    return written
