# events.py
from __future__ import annotations

from typing import Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .ui.console import get_console

EVENT_TYPE_PUSH = "push"
EVENT_TYPE_PULL_REQUEST = "pull_request"
EVENT_TYPE_EXEC = "exec"
EVENT_TYPE_AFTER = "after"
EVENT_TYPE_ERROR = "error"

TERMINAL_EVENT_TYPES = (EVENT_TYPE_AFTER, EVENT_TYPE_ERROR)


# -------------------- Schemas --------------------

class CauseEvent(BaseModel):
    """The event that started the pipeline, as echoed back in `cause`."""
    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = Field(min_length=1)


class Cause(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    trigger: str = Field(min_length=1)
    event: CauseEvent


class Event(BaseModel):
    # extra fields are kept so debug dumps show the whole payload
    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = Field(min_length=1)
    cause: Optional[Cause] = None
    commit: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENT_TYPES


class Repo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    token: SecretStr


class Project(BaseModel):
    model_config = ConfigDict(frozen=True)

    repo: Repo


# -------------------- Registry --------------------

Handler = Callable[[Event, Project], None]


class EventRegistry:
    """
    Explicit event type -> handler mapping.

    Exactly one handler per event type; the runtime calls it to completion
    before firing the next event.
    """

    def __init__(self, handlers: Optional[Dict[str, Handler]] = None):
        self._handlers: Dict[str, Handler] = {}
        for event_type, handler in (handlers or {}).items():
            self.on(event_type, handler)

    def on(self, event_type: str, handler: Optional[Handler] = None):
        """Subscribe `handler` to `event_type`. Works as a decorator too."""
        if handler is None:
            def decorator(fn: Handler) -> Handler:
                self.on(event_type, fn)
                return fn
            return decorator

        if not event_type:
            raise ValueError("event type must not be empty")
        if event_type in self._handlers:
            raise ValueError(
                f"Event type '{event_type}' already handled by "
                f"{self._handlers[event_type].__name__}"
            )
        self._handlers[event_type] = handler
        return handler

    def handler_for(self, event_type: str) -> Optional[Handler]:
        return self._handlers.get(event_type)

    @property
    def event_types(self) -> list[str]:
        return list(self._handlers)

    def describe(self) -> Dict[str, str]:
        return {t: getattr(h, "__name__", repr(h)) for t, h in self._handlers.items()}

    def dispatch(self, event: Event, project: Project) -> bool:
        """Run the handler for `event.type`. Returns False when nothing is subscribed."""
        handler = self._handlers.get(event.type)
        if handler is None:
            get_console().print_debug(f"no handler subscribed to '{event.type}' events")
            return False
        handler(event, project)
        return True

    def __contains__(self, event_type: str) -> bool:
        return event_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
