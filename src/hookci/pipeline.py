"""
CI pipeline for the operator repository.

Pushes, pull requests and manual runs execute the unit tests inside the Go
toolchain image. When the run ends (cleanly or with an error) the commit
status is set on GitHub for pushes and pull requests.
"""
from __future__ import annotations

from .dsl import build
from .events import (
    EVENT_TYPE_AFTER,
    EVENT_TYPE_ERROR,
    EVENT_TYPE_EXEC,
    EVENT_TYPE_PULL_REQUEST,
    EVENT_TYPE_PUSH,
    Event,
    EventRegistry,
    Project,
)
from .model import Job
from .runner import CIError
from .ui.console import get_console

GITHUB_STATE_PENDING = "pending"
GITHUB_STATE_FAILURE = "failure"
GITHUB_STATE_ERROR = "error"
GITHUB_STATE_SUCCESS = "success"

BUILD_STATUS_SUCCESS = "success"
BUILD_STATUS_FAILURE = "failure"
BUILD_STATUS_UNHANDLED_REJECTION = "unhandledRejection"

REPORTED_EVENT_TYPES = (EVENT_TYPE_PUSH, EVENT_TYPE_PULL_REQUEST)

GOPATH = "/go"
LOCAL_PATH = f"{GOPATH}/src/github.com/spotahome/kooper"
UNIT_TEST_IMAGE = "golang:1.9"

STATUS_JOB_NAME = "set-github-build-status"
STATUS_IMAGE = "technosophos/github-notify:latest"
STATUS_CONTEXT = "brigade"


def unit_tests() -> Job:
    """unit_tests is the job that runs the Go project's unit tests."""
    return (
        build("unit-test", UNIT_TEST_IMAGE)
        .with_env(DEST_PATH=LOCAL_PATH, GOPATH=GOPATH)
        .define_tasks(
            f"mkdir -p {LOCAL_PATH}",
            f"mv /src/* {LOCAL_PATH}",
            f"cd {LOCAL_PATH}",
            "make ci",
        )
        .build()
    )


def full_build(e: Event, project: Project) -> None:
    """full_build is the most complete build of the pipeline: it runs the unit tests."""
    unit_tests().run()


def debug_full_build(e: Event, project: Project) -> None:
    """
    Like full_build but dumps the received event first.

    The project is never dumped, it holds the repository token.
    """
    get_console().print_event(e)
    full_build(e, project)


def set_github_commit_status(e: Event, project: Project, state: str) -> Job:
    """Return the job that sets `state` as the commit status on GitHub."""
    cause = _require_cause(e)
    return (
        build(STATUS_JOB_NAME, STATUS_IMAGE)
        .with_env(
            GH_REPO=project.repo.name,
            GH_STATE=state,
            GH_DESCRIPTION=f"Brigade build finished with {cause.trigger} state",
            GH_CONTEXT=STATUS_CONTEXT,
        )
        .with_secret("GH_TOKEN", project.repo.token.get_secret_value())
        .with_env(GH_COMMIT=e.commit)
        .build()
    )


def github_state(trigger: str) -> str:
    # every non-success trigger (failure, unhandledRejection...) reports failure
    if trigger == BUILD_STATUS_SUCCESS:
        return GITHUB_STATE_SUCCESS
    return GITHUB_STATE_FAILURE


def build_status_to_github(e: Event, project: Project) -> None:
    """Set the final build status on GitHub, only for pushes and pull requests."""
    cause = _require_cause(e)
    if cause.event.type not in REPORTED_EVENT_TYPES:
        get_console().print_build_finished(cause.trigger)
        return

    state = github_state(cause.trigger)
    set_github_commit_status(e, project, state).run()


def _require_cause(e: Event):
    if e.cause is None:
        raise CIError(
            kind="malformed_event",
            job="",
            message=f"'{e.type}' event has no cause",
            details={"event_type": e.type},
        )
    return e.cause


def default_registry() -> EventRegistry:
    registry = EventRegistry()
    registry.on(EVENT_TYPE_PUSH, full_build)
    registry.on(EVENT_TYPE_EXEC, debug_full_build)
    registry.on(EVENT_TYPE_PULL_REQUEST, full_build)

    # final events after the build (failure or success)
    registry.on(EVENT_TYPE_AFTER, build_status_to_github)
    registry.on(EVENT_TYPE_ERROR, build_status_to_github)
    return registry
