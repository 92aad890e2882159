# git.py
# Small wrapper around the Git CLI, used to fill in event defaults
# (commit, repository name) when firing events locally.

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Optional


def _git(args: list[str], cwd: Optional[str] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Raises subprocess.CalledProcessError when git exits non-zero and
    FileNotFoundError when git is not installed.
    """
    out = subprocess.check_output(
        ["git", *args],
        cwd=cwd,
        text=True,
        stderr=subprocess.DEVNULL,
    )
    return out.strip()


def repo_root(cwd: Optional[str] = None) -> Path:
    """Absolute path to the root of the current Git repository."""
    return Path(_git(["rev-parse", "--show-toplevel"], cwd=cwd))


def head_sha(cwd: Optional[str] = None) -> str:
    """Full SHA of the current HEAD commit."""
    return _git(["rev-parse", "HEAD"], cwd=cwd)


def get_remote_url(remote: str = "origin", cwd: Optional[str] = None) -> str:
    """URL of `remote` as configured in the repository."""
    return _git(["remote", "get-url", remote], cwd=cwd)


_SLUG_RE = re.compile(r"[:/](?P<owner>[^/:]+)/(?P<name>[^/]+?)(?:\.git)?/?$")


def repo_slug(url: str) -> str:
    """
    Turn a remote URL into an `owner/name` slug.

        git@github.com:spotahome/kooper.git     -> spotahome/kooper
        https://github.com/spotahome/kooper     -> spotahome/kooper
    """
    m = _SLUG_RE.search(url.strip())
    if not m:
        raise ValueError(f"Cannot parse repository slug from remote URL: {url!r}")
    return f"{m.group('owner')}/{m.group('name')}"
