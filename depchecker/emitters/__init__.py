"""Output writers: HTML report, SVG badges and the DevOps attachment."""

from depchecker.emitters.badge import BadgeState, badge_state, write_badges
from depchecker.emitters.devops import write_devops_result
from depchecker.emitters.report import render_report, write_report

__all__ = [
    "BadgeState",
    "badge_state",
    "render_report",
    "write_badges",
    "write_devops_result",
    "write_report",
]
