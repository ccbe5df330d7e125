"""Package source discovery: nuget.org, NuGet.Config files and Azure feeds."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

import structlog

from depchecker.config import FeedCredentials, azure_feed_credentials

log = structlog.get_logger("depchecker.registry")

NUGET_ORG_NAME = "nuget.org"
NUGET_ORG_URL = "https://api.nuget.org/v3/index.json"


@dataclass(frozen=True)
class PackageSource:
    name: str
    url: str
    credentials: FeedCredentials | None = None

    @property
    def is_http(self) -> bool:
        return self.url.lower().startswith(("http://", "https://"))

    @property
    def is_v3(self) -> bool:
        """HTTP(S) source whose URL points at a V3 service index."""
        return self.is_http and urlparse(self.url).path.lower().endswith("/index.json")


@dataclass
class _SourceEntry:
    name: str
    url: str
    credentials: FeedCredentials | None = None
    disabled: bool = False


def user_config_path() -> Path:
    """Location of the user-level NuGet.Config for this platform."""
    appdata = os.environ.get("APPDATA")
    if os.name == "nt" and appdata:
        return Path(appdata) / "NuGet" / "NuGet.Config"
    return Path.home() / ".nuget" / "NuGet" / "NuGet.Config"


def load_sources(
    custom_config: str | None = None,
    azure_feed_uri: str | None = None,
    user_config: Path | None = None,
) -> list[PackageSource]:
    """Build the ordered list of sources to query.

    Order: nuget.org, then the user-level config, then *custom_config*
    (add/update only), then the Azure Artifacts feed. Disabled sources and
    anything that is not an HTTP(S) V3 service index are dropped. Raises
    ConfigurationError when an Azure feed is requested without pipeline
    credentials.
    """
    entries: dict[str, _SourceEntry] = {
        NUGET_ORG_NAME.lower(): _SourceEntry(NUGET_ORG_NAME, NUGET_ORG_URL)
    }

    user_config = user_config if user_config is not None else user_config_path()
    if user_config.is_file():
        _apply_config(entries, user_config, full=True)

    if custom_config:
        path = Path(custom_config)
        if path.is_file():
            _apply_config(entries, path, full=False)
        else:
            log.warning("sources.custom_config_missing", path=custom_config)

    if azure_feed_uri:
        log.info("sources.azure_feed", url=azure_feed_uri)
        credentials = azure_feed_credentials()
        entries[azure_feed_uri.lower()] = _SourceEntry(
            azure_feed_uri, azure_feed_uri, credentials=credentials
        )

    sources: list[PackageSource] = []
    for entry in entries.values():
        if entry.disabled:
            log.debug("sources.disabled", name=entry.name)
            continue
        source = PackageSource(entry.name, entry.url, entry.credentials)
        if not source.is_v3:
            log.warning("sources.unsupported", name=entry.name, url=entry.url)
            continue
        sources.append(source)
    return sources


def _apply_config(entries: dict[str, _SourceEntry], path: Path, *, full: bool) -> None:
    """Merge the sources of one NuGet.Config into *entries*.

    With *full* the file may also clear, remove, disable and authenticate
    sources; otherwise only its ``add`` items are taken.
    """
    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError) as exc:
        log.warning("sources.config_unreadable", path=str(path), error=str(exc))
        return

    section = root.find("packageSources")
    if section is not None:
        for item in section:
            key = item.get("key", "")
            if item.tag == "clear" and full:
                entries.clear()
            elif item.tag == "remove" and full:
                entries.pop(key.lower(), None)
            elif item.tag == "add" and key and item.get("value"):
                existing = entries.get(key.lower())
                credentials = existing.credentials if existing else None
                entries[key.lower()] = _SourceEntry(key, item.get("value", ""), credentials)

    if not full:
        return

    disabled = root.find("disabledPackageSources")
    if disabled is not None:
        for item in disabled.iter("add"):
            entry = entries.get(item.get("key", "").lower())
            if entry is not None and item.get("value", "").lower() == "true":
                entry.disabled = True

    creds_section = root.find("packageSourceCredentials")
    if creds_section is not None:
        for source_el in creds_section:
            entry = entries.get(_decode_key(source_el.tag).lower())
            if entry is None:
                continue
            values = {add.get("key", ""): add.get("value", "") for add in source_el.iter("add")}
            username = values.get("Username")
            password = values.get("ClearTextPassword")
            if username and password:
                entry.credentials = FeedCredentials(username=username, token=password)


def _decode_key(tag: str) -> str:
    # NuGet encodes spaces in element names as _x0020_.
    return tag.replace("_x0020_", " ")
