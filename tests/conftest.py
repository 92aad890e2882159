"""Shared pytest fixtures for hookci tests."""

import pytest

from hookci.events import Event, Project, Repo
from hookci.runner import DryRunRunner, set_runner
from hookci.ui.console import Console, set_console

TOKEN = "s3cr3t-T0KEN"


@pytest.fixture(autouse=True)
def _fresh_console():
    set_console(Console())
    yield
    set_console(Console())


@pytest.fixture
def runner():
    """Process-wide runner that records jobs instead of starting containers."""
    r = DryRunRunner()
    set_runner(r)
    yield r
    set_runner(None)


@pytest.fixture
def project():
    return Project(repo=Repo(name="org/repo", token=TOKEN))


def make_event(event_type, trigger=None, cause_type=None, commit="abc123"):
    data = {"type": event_type, "commit": commit}
    if trigger is not None:
        data["cause"] = {"trigger": trigger, "event": {"type": cause_type}}
    return Event.model_validate(data)
