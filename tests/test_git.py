"""Tests for hookci.git_facts.git."""

import subprocess

import pytest

from hookci.git_facts import git


@pytest.mark.parametrize(
    "url,slug",
    [
        ("git@github.com:spotahome/kooper.git", "spotahome/kooper"),
        ("https://github.com/spotahome/kooper", "spotahome/kooper"),
        ("https://github.com/spotahome/kooper.git/", "spotahome/kooper"),
        ("ssh://git@gitlab.example.com:2222/team/svc.git", "team/svc"),
    ],
)
def test_repo_slug(url, slug):
    assert git.repo_slug(url) == slug


def test_repo_slug_invalid():
    with pytest.raises(ValueError):
        git.repo_slug("kooper")


def test_head_sha(monkeypatch):
    calls = []

    def fake(cmd, **kwargs):
        calls.append(cmd)
        return "abc123\n"

    monkeypatch.setattr(git.subprocess, "check_output", fake)
    assert git.head_sha() == "abc123"
    assert calls == [["git", "rev-parse", "HEAD"]]


def test_git_errors_propagate(monkeypatch):
    def fake(cmd, **kwargs):
        raise subprocess.CalledProcessError(128, cmd)

    monkeypatch.setattr(git.subprocess, "check_output", fake)
    with pytest.raises(subprocess.CalledProcessError):
        git.get_remote_url()
