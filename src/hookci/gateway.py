from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from .events import Event, EventRegistry, Project
from .pipeline import BUILD_STATUS_FAILURE, default_registry
from .runner import CIError, JobFailure
from .runtime import fire
from .settings import project_from_env
from .ui.console import get_console

app = FastAPI(title="hookci event gateway")

_registry = default_registry()

# -------------------- Schemas --------------------

class FireResponse(BaseModel):
    event_type: str
    handled: bool
    trigger: str

class SubscriptionsResponse(BaseModel):
    event_types: list[str]

# -------------------- Dependencies --------------------

def get_registry() -> EventRegistry:
    return _registry

def get_project() -> Project:
    # the project (and its token) comes from server config, never from the request
    try:
        return project_from_env()
    except CIError as e:
        raise HTTPException(status_code=503, detail=e.message)

# -------------------- Endpoints --------------------

@app.get("/events", response_model=SubscriptionsResponse)
def list_events(registry: EventRegistry = Depends(get_registry)):
    return SubscriptionsResponse(event_types=registry.event_types)

@app.post("/events", response_model=FireResponse)
def post_event(
    event: Event,
    registry: EventRegistry = Depends(get_registry),
    project: Project = Depends(get_project),
):
    # sync endpoint: FastAPI runs it in the threadpool, jobs block until done
    handled = event.type in registry
    try:
        trigger = fire(registry, event, project)
    except CIError as e:
        if e.kind == "malformed_event":
            raise HTTPException(status_code=422, detail=e.message)
        get_console().print_failure(e.job or event.type, str(e), hint=e.details.get("hint"))
        trigger = BUILD_STATUS_FAILURE
    except JobFailure as e:
        # the terminal handler (status report) failed
        get_console().print_failure(e.job, str(e), exit_code=e.exit_code)
        trigger = BUILD_STATUS_FAILURE
    return FireResponse(event_type=event.type, handled=handled, trigger=trigger)
