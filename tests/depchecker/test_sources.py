"""Tests for package source discovery and pipeline credentials."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from depchecker.config import Options, azure_feed_credentials
from depchecker.exceptions import ConfigurationError
from depchecker.registry.sources import NUGET_ORG_URL, load_sources

_NO_CREDS = {"BUILD_REQUESTEDFOREMAIL": "", "SYSTEM_ACCESSTOKEN": ""}
_CREDS = {"BUILD_REQUESTEDFOREMAIL": "dev@example.org", "SYSTEM_ACCESSTOKEN": "secret"}


def _config(path, body: str):
    path.write_text(f'<?xml version="1.0" encoding="utf-8"?>\n<configuration>{body}</configuration>')
    return path


class TestLoadSources:
    def test_defaults_to_nuget_org(self, tmp_path):
        sources = load_sources(user_config=tmp_path / "missing.config")
        assert [s.url for s in sources] == [NUGET_ORG_URL]

    def test_custom_config_adds_sources(self, tmp_path):
        custom = _config(
            tmp_path / "NuGet.Config",
            '<packageSources><add key="corp" value="https://corp.test/v3/index.json" />'
            "</packageSources>",
        )
        sources = load_sources(str(custom), user_config=tmp_path / "none")
        assert [s.name for s in sources] == ["nuget.org", "corp"]

    def test_custom_config_updates_existing_key(self, tmp_path):
        custom = _config(
            tmp_path / "NuGet.Config",
            '<packageSources><add key="NuGet.org" value="https://mirror.test/v3/index.json" />'
            "</packageSources>",
        )
        sources = load_sources(str(custom), user_config=tmp_path / "none")
        assert [s.url for s in sources] == ["https://mirror.test/v3/index.json"]

    def test_custom_config_cannot_clear(self, tmp_path):
        custom = _config(tmp_path / "c.config", "<packageSources><clear /></packageSources>")
        sources = load_sources(str(custom), user_config=tmp_path / "none")
        assert [s.url for s in sources] == [NUGET_ORG_URL]

    def test_missing_custom_config_is_not_fatal(self, tmp_path):
        sources = load_sources(str(tmp_path / "nope.config"), user_config=tmp_path / "none")
        assert len(sources) == 1

    def test_user_config_clear_remove_disable(self, tmp_path):
        user = _config(
            tmp_path / "user.config",
            "<packageSources>"
            "<clear />"
            '<add key="a" value="https://a.test/v3/index.json" />'
            '<add key="b" value="https://b.test/v3/index.json" />'
            '<add key="c" value="https://c.test/v3/index.json" />'
            '<remove key="b" />'
            "</packageSources>"
            '<disabledPackageSources><add key="c" value="true" /></disabledPackageSources>',
        )
        sources = load_sources(user_config=user)
        assert [s.name for s in sources] == ["a"]

    def test_user_config_credentials(self, tmp_path):
        user = _config(
            tmp_path / "user.config",
            '<packageSources><add key="My Feed" value="https://feed.test/v3/index.json" />'
            "</packageSources>"
            "<packageSourceCredentials><My_x0020_Feed>"
            '<add key="Username" value="bob" />'
            '<add key="ClearTextPassword" value="pw" />'
            "</My_x0020_Feed></packageSourceCredentials>",
        )
        feed = [s for s in load_sources(user_config=user) if s.name == "My Feed"][0]
        assert feed.credentials.username == "bob"
        assert feed.credentials.token == "pw"

    def test_local_folder_sources_skipped(self, tmp_path):
        custom = _config(
            tmp_path / "c.config",
            f'<packageSources><add key="local" value="{tmp_path}" /></packageSources>',
        )
        sources = load_sources(str(custom), user_config=tmp_path / "none")
        assert [s.name for s in sources] == ["nuget.org"]

    def test_v2_feed_skipped(self, tmp_path):
        custom = _config(
            tmp_path / "c.config",
            '<packageSources>'
            '<add key="v2" value="https://www.nuget.org/api/v2/" />'
            '<add key="private" value="https://feed.test/v3/index.json" />'
            "</packageSources>",
        )
        sources = load_sources(str(custom), user_config=tmp_path / "none")
        assert [s.name for s in sources] == ["nuget.org", "private"]

    def test_unreadable_config_is_ignored(self, tmp_path):
        bad = tmp_path / "bad.config"
        bad.write_text("<configuration>")
        assert len(load_sources(str(bad), user_config=tmp_path / "none")) == 1

    def test_azure_feed_appended_last_with_credentials(self, tmp_path):
        with patch.dict(os.environ, _CREDS):
            sources = load_sources(
                azure_feed_uri="https://pkgs.dev.azure.com/org/_packaging/feed/nuget/v3/index.json",
                user_config=tmp_path / "none",
            )
        assert len(sources) == 2
        assert sources[-1].credentials.username == "dev@example.org"

    def test_azure_feed_without_credentials_fails(self, tmp_path):
        with patch.dict(os.environ, _NO_CREDS):
            with pytest.raises(ConfigurationError):
                load_sources(azure_feed_uri="https://x.test/index.json", user_config=tmp_path / "n")


class TestAzureCredentials:
    def test_missing_username(self):
        with patch.dict(os.environ, {**_NO_CREDS, "SYSTEM_ACCESSTOKEN": "t"}):
            with pytest.raises(ConfigurationError, match="Username"):
                azure_feed_credentials()

    def test_missing_token(self):
        with patch.dict(os.environ, {**_NO_CREDS, "BUILD_REQUESTEDFOREMAIL": "u"}):
            with pytest.raises(ConfigurationError, match="OAuth"):
                azure_feed_credentials()

    def test_present(self):
        with patch.dict(os.environ, _CREDS):
            creds = azure_feed_credentials()
        assert (creds.username, creds.token) == ("dev@example.org", "secret")


class TestOptions:
    def test_defaults(self):
        opts = Options()
        assert opts.search_path == "."
        assert opts.create_report and not opts.create_badge

    def test_unknown_badge_style(self):
        with pytest.raises(ConfigurationError):
            Options(badge_style="3d")

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigurationError):
            Options(timeout=0)
