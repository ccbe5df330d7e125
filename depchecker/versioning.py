"""NuGet flavoured semantic versions.

Accepts 1 to 4 numeric parts (``major.minor.patch[.revision]``), an optional
``-prerelease`` label and optional ``+metadata``. Precedence follows SemVer 2.0:
numeric parts compare numerically, a pre-release sorts below its release, and
pre-release identifiers compare numerically when both are numbers.
Floating versions (``1.*``) and ranges (``[1.0,2.0)``) are rejected.
"""

from __future__ import annotations

import functools
import re

_VERSION_RE = re.compile(
    r"^(?P<numbers>\d+(?:\.\d+){0,3})"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<meta>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@functools.total_ordering
class SemanticVersion:
    """Parsed version; compare instances, never their strings."""

    __slots__ = ("release", "prerelease", "metadata", "original")

    def __init__(
        self,
        release: tuple[int, int, int, int],
        prerelease: tuple[str, ...] = (),
        metadata: str | None = None,
        original: str | None = None,
    ) -> None:
        self.release = release
        self.prerelease = prerelease
        self.metadata = metadata
        self.original = original

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse *text*, raising ``ValueError`` when it is not a version."""
        stripped = (text or "").strip()
        m = _VERSION_RE.match(stripped)
        if not m:
            raise ValueError(f"invalid version: {text!r}")
        numbers = [int(part) for part in m.group("numbers").split(".")]
        numbers.extend([0] * (4 - len(numbers)))
        pre = tuple(m.group("pre").split(".")) if m.group("pre") else ()
        return cls(
            release=(numbers[0], numbers[1], numbers[2], numbers[3]),
            prerelease=pre,
            metadata=m.group("meta"),
            original=stripped,
        )

    @classmethod
    def try_parse(cls, text: str | None) -> SemanticVersion | None:
        if text is None:
            return None
        try:
            return cls.parse(text)
        except ValueError:
            return None

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def _key(self) -> tuple:
        # A release sorts above every pre-release of the same numbers.
        if not self.prerelease:
            return (self.release, 1, ())
        return (self.release, 0, tuple(_identifier_key(p) for p in self.prerelease))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        major, minor, patch, revision = self.release
        text = f"{major}.{minor}.{patch}"
        if revision:
            text += f".{revision}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        return text

    def __repr__(self) -> str:
        return f"SemanticVersion({str(self)!r})"


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    # Numeric identifiers sort below alphanumeric ones.
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier.lower())
