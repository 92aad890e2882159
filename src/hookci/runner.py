# runner.py
from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol

from . import settings
from .model import Job, JobResult
from .ui.console import get_console


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class CIError(Exception):
    """
    Structured CI error with enough context for:
      - clean CLI output
      - gateway responses
      - debugging without full tracebacks
    """
    kind: str
    job: str
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        if self.job:
            lines.append(f"job={self.job}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


@dataclass
class JobFailure(Exception):
    job: str
    image: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    def __str__(self) -> str:
        return f"[{self.job}] container {self.image} failed (exit={self.exit_code})"


TOOL_HINTS = {
    "docker": "Install Docker and ensure the daemon is running.",
    "podman": "Install Podman or set HOOKCI_DOCKER_BIN.",
}


# ----------------------------------------------------------------------
# Runners
# ----------------------------------------------------------------------

class JobRunner(Protocol):
    def run(self, job: Job) -> JobResult: ...


class DockerRunner:
    """Run each job in a fresh container with a copy of the checkout mounted at /src."""

    def __init__(
        self,
        docker_bin: str | None = None,
        source_dir: str | Path | None = None,
    ):
        self.docker_bin = docker_bin or settings.DOCKER_BIN
        self.source_dir = Path(source_dir or settings.SOURCE_DIR)

    def _check_available(self) -> None:
        try:
            subprocess.run(
                [self.docker_bin, "--version"],
                capture_output=True,
                check=True,
            )
        except (subprocess.CalledProcessError, FileNotFoundError):
            tool = Path(self.docker_bin).name
            hint = TOOL_HINTS.get(tool, f"Install {tool} or fix PATH.")
            raise CIError(
                kind="docker_unavailable",
                job="",
                message=f"{self.docker_bin} is not available",
                details={"hint": hint},
            )

    def command(self, job: Job, source_dir: Path | None = None) -> List[str]:
        """
        Build the container command line.

        `source_dir` is the host directory mounted at /src, the runner's
        own source_dir when not given.
        Env keys are forwarded by name only (`-e KEY`), values travel in the
        child process environment so secrets never show up in argv.
        """
        mount = Path(source_dir or self.source_dir).resolve()
        cmd = [self.docker_bin, "run", "--rm"]
        cmd.extend(["-v", f"{mount}:{settings.CONTAINER_SOURCE_DIR}"])
        for key in job.env:
            cmd.extend(["-e", key])
        cmd.append(job.image)
        script = job.script
        if script is not None:
            cmd.extend(["sh", "-c", script])
        return cmd

    def run(self, job: Job) -> JobResult:
        console = get_console()
        self._check_available()

        console.print_job_start(job)
        for task in job.tasks:
            console.print_task(job.name, task)

        env = os.environ.copy()
        env.update(job.env)

        # tasks move files out of /src, so the container only ever sees a copy
        with tempfile.TemporaryDirectory(prefix="hookci-", ignore_cleanup_errors=True) as tmp:
            staged = Path(tmp) / "src"
            shutil.copytree(self.source_dir, staged, symlinks=True)
            console.print_debug(f"[{job.name}] staged {self.source_dir} at {staged}")

            proc = subprocess.run(
                self.command(job, staged),
                shell=False,
                env=env,
                text=True,
                capture_output=True,
            )

        stdout = job.mask(proc.stdout or "")
        stderr = job.mask(proc.stderr or "")
        if proc.returncode != 0:
            raise JobFailure(
                job=job.name,
                image=job.image,
                exit_code=proc.returncode,
                stdout=stdout[-settings.OUTPUT_TAIL:],
                stderr=stderr[-settings.OUTPUT_TAIL:],
            )

        console.print_debug(f"[{job.name}] output:\n{stdout}")
        console.print_success(job.name)
        return JobResult(job=job.name, exit_code=0, stdout=stdout)


class DryRunRunner:
    """Record and print jobs without starting containers."""

    def __init__(self, fail: Optional[set[str]] = None):
        self.jobs: List[Job] = []
        # job names that should fail, handy for exercising the error path
        self.fail = set(fail or ())

    def run(self, job: Job) -> JobResult:
        console = get_console()
        self.jobs.append(job)

        console.print_job_start(job)
        for task in job.tasks:
            console.print_task(job.name, task)
        if not job.tasks:
            console.print_task(job.name, "<image entrypoint>")

        if job.name in self.fail:
            raise JobFailure(job=job.name, image=job.image, exit_code=1)

        console.print_success(job.name)
        return JobResult(job=job.name, exit_code=0)


# Global runner instance (will be initialized by CLI / gateway)
_runner: Optional[JobRunner] = None


def get_runner() -> JobRunner:
    """Get the global job runner, DockerRunner unless replaced."""
    global _runner
    if _runner is None:
        _runner = DockerRunner()
    return _runner


def set_runner(runner: Optional[JobRunner]) -> None:
    """Set the global job runner (None resets to the default)."""
    global _runner
    _runner = runner
