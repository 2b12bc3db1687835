"""Tests for manifest discovery and the actiondeps CLI."""

from __future__ import annotations

import json

import pytest

from actiondeps.cli import main
from actiondeps.engines.workflow_parser.registry import discover_workflow_files

CI_WORKFLOW = (
    "on: push\n"
    "jobs:\n"
    "  test:\n"
    "    runs-on: ubuntu-latest\n"
    "    steps:\n"
    "      - uses: actions/checkout@v4.1.1\n"
    "      - uses: ./.github/actions/setup\n"
    "      - uses: actions/setup-node@main\n"
)

SETUP_ACTION = (
    "name: setup\n"
    "runs:\n"
    "  using: composite\n"
    "  steps:\n"
    "    - uses: actions/cache@v4\n"
)


@pytest.fixture
def repo(tmp_path):
    workflows = tmp_path / ".github" / "workflows"
    workflows.mkdir(parents=True)
    (workflows / "ci.yml").write_text(CI_WORKFLOW)
    (workflows / "release.yaml").write_text("jobs:\n  r:\n    uses: org/shared/.github/workflows/release.yml@v2\n")
    (workflows / "README.md").write_text("not a workflow\n")
    setup = tmp_path / ".github" / "actions" / "setup"
    setup.mkdir(parents=True)
    (setup / "action.yml").write_text(SETUP_ACTION)
    return tmp_path


# ── discovery ────────────────────────────────────────────────────────────


class TestDiscovery:
    def test_finds_workflows_and_actions(self, repo):
        files = discover_workflow_files(repo)
        assert [f.name for f in files] == [
            ".github/workflows/ci.yml",
            ".github/workflows/release.yaml",
            ".github/actions/setup/action.yml",
        ]
        assert files[0].content == CI_WORKFLOW
        assert files[0].path == "/.github/workflows/ci.yml"

    def test_root_action_file(self, tmp_path):
        (tmp_path / "action.yaml").write_text(SETUP_ACTION)
        assert [f.name for f in discover_workflow_files(tmp_path)] == ["action.yaml"]

    def test_empty_repo(self, tmp_path):
        assert discover_workflow_files(tmp_path) == []


# ── CLI ──────────────────────────────────────────────────────────────────


class TestCli:
    def test_offline_json(self, repo, capsys):
        assert main([str(repo), "--offline", "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)

        names = [d["name"] for d in payload["dependencies"]]
        assert names == ["actions/checkout", "actions/setup-node", "org/shared", "actions/cache"]

        checkout = payload["dependencies"][0]
        assert checkout["version"] == "4.1.1"
        assert checkout["package_manager"] == "github_actions"
        assert checkout["requirements"][0]["source"] == {
            "type": "git",
            "url": "https://github.com/actions/checkout",
            "ref": "v4.1.1",
            "branch": None,
        }
        # Offline nothing is reachable, so floating refs are kept as-is.
        assert payload["dependencies"][1]["version"] is None

        pm = payload["ecosystem"]["package_manager"]
        assert payload["ecosystem"]["name"] == "github_actions"
        assert (pm["use_name"], pm["version"]) == ("actions/checkout", "v4.1.1")

    def test_offline_text(self, repo, capsys):
        assert main([str(repo), "--offline"]) == 0
        out = capsys.readouterr().out
        assert "Found 4 actions in 3 manifest(s)" in out
        assert "Representative version: actions/checkout@v4.1.1" in out
        assert "actions/cache@v4 (4)" in out

    def test_enterprise_hostname_offline_falls_back(self, repo, capsys):
        assert main([str(repo), "--offline", "--json", "--hostname", "ghe.example.com"]) == 0
        payload = json.loads(capsys.readouterr().out)
        urls = {d["requirements"][0]["source"]["url"] for d in payload["dependencies"]}
        assert all(u.startswith("https://github.com/") for u in urls)

    def test_malformed_workflow_fails(self, repo, capsys):
        (repo / ".github" / "workflows" / "broken.yml").write_text("jobs: [oops\n")
        assert main([str(repo), "--offline"]) == 1
        assert "broken.yml" in capsys.readouterr().err

    def test_no_workflows(self, tmp_path, capsys):
        assert main([str(tmp_path), "--offline"]) == 1
        assert "No workflow files found." in capsys.readouterr().err

    def test_not_a_directory(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 1
        assert "is not a directory" in capsys.readouterr().err
