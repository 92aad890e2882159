"""Tests for hookci.cli."""

import json

import pytest
from click.testing import CliRunner

from hookci import cli as cli_mod
from hookci.cli import cli

from conftest import TOKEN


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("HOOKCI_REPO", "org/repo")
    monkeypatch.setenv("HOOKCI_GITHUB_TOKEN", TOKEN)


@pytest.fixture
def runner():
    return CliRunner()


class TestFire:
    def test_push_dry_run(self, runner, env):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["fire", "push", "--commit", "abc123", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "JOB STARTED: unit-test (golang:1.9)" in result.output
        assert "[unit-test] ▶ make ci" in result.output
        assert "JOB STARTED: set-github-build-status" in result.output
        assert "push: SUCCESS" in result.output
        assert TOKEN not in result.output

    def test_exec_dumps_event(self, runner, env):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["fire", "exec", "--commit", "abc123", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "-----------------Event-----------------" in result.output
        assert "Build finished with success state" in result.output
        assert "set-github-build-status" not in result.output

    def test_event_file(self, runner, env):
        with runner.isolated_filesystem():
            with open("event.json", "w") as f:
                json.dump({"commit": "fromfile", "buildID": "01abc"}, f)
            result = runner.invoke(cli, ["fire", "exec", "--event-file", "event.json", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert '"commit": "fromfile"' in result.output
        assert '"buildID": "01abc"' in result.output

    def test_invalid_event_file(self, runner, env):
        with runner.isolated_filesystem():
            with open("event.json", "w") as f:
                json.dump({"cause": {"trigger": "success"}}, f)
            result = runner.invoke(cli, ["fire", "after", "--event-file", "event.json", "--commit", "x"])

        assert result.exit_code == 2
        assert "Invalid event" in result.output

    def test_missing_token(self, runner, monkeypatch):
        monkeypatch.setenv("HOOKCI_REPO", "org/repo")
        monkeypatch.delenv("HOOKCI_GITHUB_TOKEN", raising=False)
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["fire", "push", "--commit", "abc123", "--dry-run"])

        assert result.exit_code == 2
        assert "HOOKCI_GITHUB_TOKEN" in result.output

    def test_repo_from_git_remote(self, runner, monkeypatch):
        monkeypatch.delenv("HOOKCI_REPO", raising=False)
        monkeypatch.setenv("HOOKCI_GITHUB_TOKEN", TOKEN)
        monkeypatch.setattr(cli_mod, "get_remote_url", lambda remote: "git@github.com:spotahome/kooper.git")
        monkeypatch.setattr(cli_mod, "head_sha", lambda: "deadbeef")
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["--debug", "fire", "push", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "GH_REPO=spotahome/kooper" in result.output
        assert "GH_COMMIT=deadbeef" in result.output
        assert "GH_TOKEN=***" in result.output
        assert TOKEN not in result.output

    def test_failing_pipeline(self, runner, env):
        with runner.isolated_filesystem():
            with open("hookci_pipeline.py", "w") as f:
                f.write("def boom(e, p):\n    raise RuntimeError('boom')\n\nHANDLERS = {'push': boom}\n")
            result = runner.invoke(cli, ["fire", "push", "--commit", "abc123", "--dry-run"])

        assert result.exit_code == 1
        assert "push: UNHANDLEDREJECTION" in result.output

    def test_missing_pipeline_file(self, runner, env):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["fire", "push", "--commit", "abc", "--pipeline", "nope.py"])

        assert result.exit_code == 1
        assert "Pipeline file not found" in result.output


class TestEvents:
    def test_lists_subscriptions(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["events"])

        assert result.exit_code == 0, result.output
        assert "push -> full_build" in result.output
        assert "exec -> debug_full_build" in result.output
        assert "error -> build_status_to_github" in result.output
