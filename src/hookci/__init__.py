from .dsl import job, build, JobBuilder
from .events import Event, Cause, CauseEvent, Project, Repo, EventRegistry
from .model import Job, JobResult
from .pipeline import default_registry
from .runner import CIError, JobFailure, DockerRunner, DryRunRunner, get_runner, set_runner
from .runtime import fire, load_pipeline

__all__ = [
    "job", "build", "JobBuilder",
    "Event", "Cause", "CauseEvent", "Project", "Repo", "EventRegistry",
    "Job", "JobResult", "default_registry",
    "CIError", "JobFailure", "DockerRunner", "DryRunRunner", "get_runner", "set_runner",
    "fire", "load_pipeline",
]
