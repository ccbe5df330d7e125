"""End-to-end tests for Runner and the CLI: registries are faked."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from depchecker.cli import main
from depchecker.config import Options
from depchecker.runner import Runner, summarize

SDK_PROJECT = """\
<Project Sdk="Microsoft.NET.Sdk">
  <ItemGroup>
    <PackageReference Include="PackageA" Version="{a}" />
    <PackageReference Include="PackageB" Version="bogus" />
    <PackageReference Include="PackageC" Version="1.0.0" />
  </ItemGroup>
</Project>
"""


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    for name, version in (("One", "1.0.0"), ("Two", "1.2.0")):
        proj = tmp_path / "src" / name / f"{name}.csproj"
        proj.parent.mkdir(parents=True)
        proj.write_text(SDK_PROJECT.format(a=version))
    (tmp_path / "src" / "Broken").mkdir()
    (tmp_path / "src" / "Broken" / "Broken.csproj").write_text("<Project>")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def registry(fake_registry):
    return fake_registry("fake", {"PackageA": ["1.0.0", "1.2.0"], "PackageB": ["2.0.0"]})


class TestRunner:
    def test_per_project(self, workspace, registry):
        opts = Options(search_path="src", recursive=True, create_report=False)
        projects = Runner(opts, registries=[registry]).run()

        assert [p.name for p in projects] == ["Broken", "One", "Two"]
        assert projects[0].parsing_error
        one = {s.id: s for s in projects[1].package_statuses}
        assert one["PackageA"].outdated and one["PackageA"].current_version == "1.2.0"
        assert one["PackageB"].no_local_version and not one["PackageB"].outdated
        assert one["PackageC"].not_found
        two = {s.id: s for s in projects[2].package_statuses}
        assert not two["PackageA"].outdated
        # Each id hits the registry once across both projects.
        assert sorted(registry.calls) == ["PackageA", "PackageB", "PackageC"]

    def test_not_recursive_finds_nothing_above(self, workspace, registry):
        projects = Runner(Options(search_path="src", create_report=False), [registry]).run()
        assert projects == []

    def test_combined(self, workspace, registry):
        opts = Options(search_path="src", recursive=True, create_report=False, combine_projects=True)
        projects = Runner(opts, registries=[registry]).run()

        assert [p.name for p in projects] == ["Dependency Report", "PackageA"]
        assert [s.id for s in projects[0].package_statuses] == ["PackageB", "PackageC"]
        files = [Path(s.id).name for s in projects[1].package_statuses]
        assert files == ["One.csproj", "Two.csproj"]

    def test_emits_all_outputs(self, workspace, registry):
        opts = Options(
            search_path="src",
            recursive=True,
            report_path="out/report.html",
            create_badge=True,
            badge_path="out/badge.svg",
            create_devops_result=True,
        )
        Runner(opts, registries=[registry]).run()

        assert "PackageA" in (workspace / "out" / "report.html").read_text()
        assert "Some not found" in (workspace / "out" / "badge.svg").read_text()
        data = json.loads((workspace / "dependcies_check_result.json").read_text())
        assert [p["Name"] for p in data["Projects"]] == ["Broken", "One", "Two"]

    def test_summary(self, workspace, registry):
        opts = Options(search_path="src", recursive=True, create_report=False)
        text = summarize(Runner(opts, registries=[registry]).run())
        assert text == (
            "3 projects, 6 packages: 1 outdated, 2 not found, 2 without local version "
            "(1 projects could not be parsed)"
        )


class TestCli:
    def test_missing_directory(self, tmp_path):
        with patch("depchecker.cli.setup_logging"):
            result = CliRunner().invoke(main, [str(tmp_path / "nope")])
        assert result.exit_code == 1

    def test_azure_feed_without_credentials(self, workspace):
        env = {"BUILD_REQUESTEDFOREMAIL": "", "SYSTEM_ACCESSTOKEN": ""}
        with patch("depchecker.cli.setup_logging"), patch(
            "depchecker.registry.sources.user_config_path", return_value=workspace / "none"
        ):
            result = CliRunner().invoke(
                main, ["src", "--azure-feed", "https://feed.test/index.json"], env=env
            )
        assert result.exit_code == 2
        assert "Username" in result.output

    def test_full_run(self, workspace, registry):
        with patch("depchecker.cli.setup_logging"), patch(
            "depchecker.runner.load_sources", return_value=[]
        ), patch("depchecker.runner.NuGetRegistry", side_effect=AssertionError):
            result = CliRunner().invoke(
                main,
                ["src", "-r", "--badge", "--badge-per-project", "--badge-path", "badges",
                 "--devops-result", "--badge-style", "plastic"],
            )
        assert result.exit_code == 0, result.output
        assert "##vso[task.addattachment type=dependcies_check_result" in result.output
        assert "3 projects, 6 packages" in result.output
        assert (workspace / "badges" / "Dependencies_One.svg").is_file()
        assert (workspace / "dependency-report.html").is_file()

    def test_invalid_badge_style(self, workspace):
        with patch("depchecker.cli.setup_logging"):
            result = CliRunner().invoke(main, ["src", "--badge-style", "3d"])
        assert result.exit_code != 0
