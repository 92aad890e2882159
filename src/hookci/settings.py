from __future__ import annotations
import os

DOCKER_BIN = os.environ.get("HOOKCI_DOCKER_BIN", "docker")
SOURCE_DIR = os.environ.get("HOOKCI_SOURCE_DIR", ".")
CONTAINER_SOURCE_DIR = "/src"

REPO_ENV = "HOOKCI_REPO"
TOKEN_ENV = "HOOKCI_GITHUB_TOKEN"

# keep the tail of container output on failures
OUTPUT_TAIL = 4000


def project_from_env(repo: str | None = None):
    """Build the Project from HOOKCI_REPO / HOOKCI_GITHUB_TOKEN."""
    from .events import Project, Repo
    from .runner import CIError

    name = repo or os.environ.get(REPO_ENV, "")
    token = os.environ.get(TOKEN_ENV, "")
    if not name:
        raise CIError(
            kind="config",
            job="",
            message="repository name is not configured",
            details={"hint": f"set {REPO_ENV} or pass --repo"},
        )
    if not token:
        raise CIError(
            kind="config",
            job="",
            message="repository token is not configured",
            details={"hint": f"set {TOKEN_ENV}"},
        )
    return Project(repo=Repo(name=name, token=token))
