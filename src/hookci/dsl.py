# dsl.py
from __future__ import annotations

from typing import Dict, Iterable, Optional

from .model import Job


# ---------------------------------------------------------------------
# Functional Job helper
# ---------------------------------------------------------------------

def job(
    name: str,
    image: str,
    *tasks: str,  # allow: job("x", "img", "make", "make test")
    env: Optional[Dict[str, str]] = None,
    secrets: Optional[Iterable[str]] = None,
) -> Job:
    if not name:
        raise ValueError("job name must not be empty")
    if not image:
        raise ValueError(f"job({name!r}) must have an image")

    env_final = {k: str(v) for k, v in (env or {}).items()}
    secrets_final = frozenset(secrets or ())
    missing = sorted(secrets_final - env_final.keys())
    if missing:
        raise ValueError(f"job({name!r}) marks unknown env keys as secret: {missing}")

    return Job(
        name=name,
        image=image,
        env=env_final,
        tasks=list(tasks),
        secrets=secrets_final,
    )


# ---------------------------------------------------------------------
# Builder API
# ---------------------------------------------------------------------

class JobBuilder:
    def __init__(self, name: str, image: str):
        self.name = name
        self.image = image
        self._env: dict[str, str] = {}
        self._tasks: list[str] = []
        self._secrets: set[str] = set()

    def with_env(self, **env):
        # force values to str, containers only see strings
        self._env.update({k: str(v) for k, v in env.items()})
        return self

    def with_secret(self, key: str, value: str):
        self._env[key] = value
        self._secrets.add(key)
        return self

    def define_task(self, cmd: str):
        self._tasks.append(cmd)
        return self

    def define_tasks(self, *cmds: str):
        self._tasks.extend(cmds)
        return self

    def build(self) -> Job:
        return job(self.name, self.image, *self._tasks, env=self._env, secrets=self._secrets)


def build(name: str, image: str) -> JobBuilder:
    """Convenience: build('unit-test', 'golang:1.9').define_task(...).build()"""
    return JobBuilder(name, image)
