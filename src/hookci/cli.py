# cli.py
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from hookci.events import Event, EventRegistry
from hookci.git_facts.git import get_remote_url, head_sha, repo_slug
from hookci.pipeline import BUILD_STATUS_SUCCESS, default_registry
from hookci.runner import CIError, DryRunRunner, set_runner
from hookci.runtime import fire as fire_event
from hookci.runtime import load_pipeline
from hookci.settings import REPO_ENV, project_from_env
from hookci.ui.console import Console, get_console, set_console

DEFAULT_PIPELINE = "hookci_pipeline.py"


def discover_pipeline(pipeline_arg: str | None) -> EventRegistry:
    """
    Resolve the pipeline to run.

    Explicit --pipeline wins, then ./hookci_pipeline.py, then the
    built-in pipeline.
    """
    console = get_console()

    if pipeline_arg:
        pipeline_path = Path(pipeline_arg)
        if not pipeline_path.exists() and pipeline_path.suffix != ".py":
            pipeline_path = Path(str(pipeline_path) + ".py")
        if not pipeline_path.exists():
            console.print_error(
                "Pipeline file not found",
                f"Could not find pipeline file: {pipeline_arg}",
                suggestion=f"Create a pipeline file or specify a different path:\n  hookci fire push --pipeline {DEFAULT_PIPELINE}",
            )
            sys.exit(1)
        console.print_debug(f"Using pipeline file: {pipeline_path}")
        return load_pipeline(pipeline_path)

    default_path = Path(DEFAULT_PIPELINE)
    if default_path.exists():
        console.print_debug(f"Using pipeline file: {default_path}")
        return load_pipeline(default_path)

    console.print_debug("Using built-in pipeline")
    return default_registry()


def _default_repo() -> str:
    console = get_console()
    try:
        repo = repo_slug(get_remote_url("origin"))
        console.print_debug(f"Using repository from git remote: {repo}")
        return repo
    except (subprocess.CalledProcessError, FileNotFoundError, ValueError):
        return ""


def _default_commit() -> str:
    console = get_console()
    try:
        commit = head_sha()
        console.print_debug(f"Using commit: {commit}")
        return commit
    except (subprocess.CalledProcessError, FileNotFoundError):
        return ""


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """hookci: event-driven container CI pipeline."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("event_type")
@click.option("--commit", default=None, help="Commit SHA (defaults to git HEAD)")
@click.option("--repo", default=None, help="Repository owner/name (defaults to HOOKCI_REPO or the origin remote)")
@click.option(
    "--event-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with extra event fields",
)
@click.option("--pipeline", default=None, help=f"Pipeline file path (defaults to {DEFAULT_PIPELINE} if present)")
@click.option("--dry-run/--no-dry-run", default=False, help="Print jobs instead of running containers")
def fire(event_type, commit, repo, event_file, pipeline, dry_run):
    """Fire EVENT_TYPE through the pipeline and report the outcome."""
    console = get_console()

    try:
        data = {}
        if event_file is not None:
            data = json.loads(event_file.read_text())
        data["type"] = event_type
        if commit is not None:
            data["commit"] = commit
        elif not data.get("commit"):
            data["commit"] = _default_commit()
        event = Event.model_validate(data)
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        console.print_error("Invalid event", f"Could not build a '{event_type}' event", details=[str(e)])
        sys.exit(2)

    if repo is None and not os.environ.get(REPO_ENV):
        repo = _default_repo() or None
    try:
        project = project_from_env(repo)
    except CIError as e:
        console.print_error("Project not configured", e.message, suggestion=e.details.get("hint"))
        sys.exit(2)

    if dry_run:
        set_runner(DryRunRunner())

    try:
        registry = discover_pipeline(pipeline)
        trigger = fire_event(registry, event, project)
        console.print_outcome(event.type, trigger)
        if trigger != BUILD_STATUS_SUCCESS:
            sys.exit(1)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)
    finally:
        if dry_run:
            set_runner(None)


@cli.command()
@click.option("--pipeline", default=None, help=f"Pipeline file path (defaults to {DEFAULT_PIPELINE} if present)")
def events(pipeline):
    """List the event types the pipeline subscribes to."""
    console = get_console()
    try:
        registry = discover_pipeline(pipeline)
    except Exception as e:
        console.print_error("Failed to load pipeline", str(e))
        sys.exit(1)
    console.print_header("SUBSCRIPTIONS")
    console.print_subscriptions(registry.describe())


if __name__ == "__main__":
    cli()
