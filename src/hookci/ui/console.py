"""Console output formatting utilities for hookci."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from hookci.events import Event
    from hookci.model import Job

EVENT_BANNER = "-----------------Event-----------------"
EVENT_FOOTER = "---------------------------------------"


class Console:
    """Centralized console output formatting."""
    
    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.
        
        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug
    
    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))
    
    def print_event(self, event: "Event") -> None:
        """
        Dump a received event.

        Only the event is ever dumped. The project carries the repository
        token and must not reach this method.
        """
        print(EVENT_BANNER)
        print(event.model_dump_json(indent=2))
        print(EVENT_FOOTER)
    
    def print_fire(self, event_type: str, commit: str) -> None:
        """Print event fire information."""
        print("\nEVENT FIRED")
        print(f"Type: {event_type}")
        if commit:
            print(f"Commit: {commit}")
    
    def print_job_start(self, job: "Job") -> None:
        """Print job start message."""
        print(f"\nJOB STARTED: {job.name} ({job.image})")
        if self.debug:
            for key, value in sorted(job.public_env().items()):
                print(f"[DEBUG] env {key}={value}", file=sys.stderr)
    
    def print_task(self, job: str, task: str) -> None:
        """Print a task line."""
        print(f"[{job}] ▶ {task}")
    
    def print_success(self, name: str) -> None:
        """Print success message."""
        print(f"STATUS: success ({name})")
    
    def print_failure(
        self,
        name: str,
        reason: str,
        exit_code: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        """
        Print failure message.
        
        Args:
            name: Job name
            reason: Failure reason/error message
            exit_code: Optional exit code
            hint: Optional hint for user
        """
        print(f"JOB FAILED: {name}")
        if exit_code is not None:
            print(f"Exit code: {exit_code}")
        if hint:
            print(f"Hint: {hint}")
        if self.debug:
            print(f"Error details: {reason}")
        else:
            # first line only outside debug mode
            error_line = reason.split('\n')[0] if reason else "Unknown error"
            print(f"Error: {error_line}")
    
    def print_build_finished(self, trigger: str) -> None:
        """Print the outcome of a build that is not reported upstream."""
        print(f"Build finished with {trigger} state")
    
    def print_outcome(self, event_type: str, trigger: str) -> None:
        """Print final outcome summary."""
        print("\n" + "=" * 40)
        print("RESULT")
        print("=" * 40)
        print(f"  {event_type}: {trigger.upper()}")
    
    def print_subscriptions(self, handlers: dict[str, str]) -> None:
        """Print the event type -> handler table."""
        for event_type, handler in handlers.items():
            print(f"  {event_type} -> {handler}")
    
    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.
        
        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)
    
    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)
    
    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)
    
    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
