# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .runner import JobRunner


@dataclass
class Job:
    """
    A containerized unit of work: image + environment + ordered shell tasks.

    An empty `tasks` list means the image's own entrypoint does the work.
    Keys listed in `secrets` hold values that must never be printed.
    """
    name: str
    image: str
    env: Dict[str, str] = field(default_factory=dict)
    tasks: List[str] = field(default_factory=list)
    secrets: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def script(self) -> str | None:
        """Shell script executed inside the container, None for entrypoint jobs."""
        if not self.tasks:
            return None
        return "\n".join(["set -e", *self.tasks])

    def public_env(self, mask: str = "***") -> Dict[str, str]:
        return {k: (mask if k in self.secrets else v) for k, v in self.env.items()}

    def mask(self, text: str, mask: str = "***") -> str:
        """Replace secret env values appearing in `text`, e.g. container output."""
        for key in self.secrets:
            value = self.env.get(key)
            if value:
                text = text.replace(value, mask)
        return text

    def run(self, runner: Optional["JobRunner"] = None) -> "JobResult":
        """Run the job to completion. Raises JobFailure when the container fails."""
        from .runner import get_runner

        return (runner or get_runner()).run(self)


@dataclass(frozen=True)
class JobResult:
    job: str
    exit_code: int
    stdout: str = ""
