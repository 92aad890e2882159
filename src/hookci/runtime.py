# runtime.py
from __future__ import annotations

import runpy
from pathlib import Path

from .events import (
    EVENT_TYPE_AFTER,
    EVENT_TYPE_ERROR,
    Cause,
    CauseEvent,
    Event,
    EventRegistry,
    Project,
)
from .pipeline import (
    BUILD_STATUS_FAILURE,
    BUILD_STATUS_SUCCESS,
    BUILD_STATUS_UNHANDLED_REJECTION,
)
from .runner import CIError, JobFailure
from .ui.console import get_console


def terminal_event(event: Event, trigger: str) -> Event:
    """The event fired once `event` has been handled with outcome `trigger`."""
    event_type = EVENT_TYPE_AFTER if trigger == BUILD_STATUS_SUCCESS else EVENT_TYPE_ERROR
    return Event(
        type=event_type,
        cause=Cause(trigger=trigger, event=CauseEvent(type=event.type)),
        commit=event.commit,
    )


def fire(registry: EventRegistry, event: Event, project: Project) -> str:
    """
    Handle `event` the way the CI runtime does, then fire the terminal event.

    Returns the trigger: "success", "failure" (a job failed) or
    "unhandledRejection" (anything else raised). Terminal events are
    dispatched as-is and their failures propagate.
    """
    console = get_console()
    console.print_fire(event.type, event.commit)

    if event.is_terminal:
        registry.dispatch(event, project)
        return event.cause.trigger if event.cause else BUILD_STATUS_SUCCESS

    try:
        registry.dispatch(event, project)
        trigger = BUILD_STATUS_SUCCESS
    except JobFailure as e:
        console.print_failure(e.job, str(e), exit_code=e.exit_code)
        if e.stderr:
            console.print_debug(e.stderr)
        trigger = BUILD_STATUS_FAILURE
    except CIError as e:
        console.print_failure(e.job or event.type, str(e), hint=e.details.get("hint"))
        trigger = BUILD_STATUS_FAILURE
    except Exception as e:
        console.print_exception(e)
        trigger = BUILD_STATUS_UNHANDLED_REJECTION

    registry.dispatch(terminal_event(event, trigger), project)
    return trigger


# ----------------------------------------------------------------------
# Pipeline loading (local file)
# ----------------------------------------------------------------------

def load_pipeline(path: str | Path) -> EventRegistry:
    """
    Load a pipeline from a python file path.

    The file must define either:
      - pipeline() -> EventRegistry
      - HANDLERS = {event_type: handler, ...}
    """
    pl_path = Path(path).expanduser().resolve()
    if not pl_path.exists():
        raise FileNotFoundError(f"Pipeline file not found: {pl_path}")
    if pl_path.suffix != ".py":
        raise ValueError(f"Pipeline must be a .py file, got: {pl_path.name}")

    module_name = f"hookci_pipeline_{pl_path.stem}"
    globals_dict = runpy.run_path(str(pl_path), run_name=module_name)

    if "pipeline" in globals_dict and callable(globals_dict["pipeline"]):
        registry = globals_dict["pipeline"]()
    elif "HANDLERS" in globals_dict:
        registry = EventRegistry(globals_dict["HANDLERS"])
    else:
        registry = None

    if not isinstance(registry, EventRegistry):
        raise TypeError(
            "Pipeline must return/define handlers. "
            "Define pipeline() -> EventRegistry or HANDLERS = {event_type: handler}."
        )

    return registry
