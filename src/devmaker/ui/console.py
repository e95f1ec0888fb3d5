"""Console output formatting utilities for devmaker."""

from __future__ import annotations

import sys
from typing import Optional

import click

from devmaker.model import ResolvedJob


def format_job_report(position: int, job: ResolvedJob, color: bool = True) -> str:
    """
    Render the dry-run block for one scheduled job.

    Args:
        position: 1-based position of the job in the queue
        job: The resolved job
        color: If False, emit plain text (no ANSI styling)
    """
    def job_style(text: str) -> str:
        return click.style(text, fg="blue", bold=True) if color else text

    def info_style(text: str) -> str:
        return click.style(text, dim=True) if color else text

    lines = [f"Would run job {position:03}: {job_style(job.name)}"]
    for dep in job.depends:
        lines.append(info_style(f"  Depends on: {dep}"))
    if job.has_deps_script:
        lines.append(info_style("  Deps.sh: yes"))
    for key, value in job.env.items():
        lines.append(info_style(f"  Env: {key} -> {value}"))
    return "\n".join(lines)


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False, color: bool | None = None):
        """
        Initialize console formatter.

        Args:
            debug: If True, show debug lines and stack traces
            color: Force styling on/off; None styles only when stdout is a tty
        """
        self.debug = debug
        self.color = sys.stdout.isatty() if color is None else color

    def print_run_started(self, root: str, job_count: int, dry_run: bool = False) -> None:
        """Print run start information."""
        print("\nRUN STARTED" if not dry_run else "\nDRY RUN")
        print(f"Root: {root}")
        print(f"Jobs: {job_count}")
        print()

    def print_job_start(self, name: str, position: int, total: int) -> None:
        """Print job start message."""
        print(f"JOB STARTED [{position}/{total}]: {name}")

    def print_step(self, name: str) -> None:
        """Print the runnable about to be executed."""
        print(f"STEP: {name}")

    def print_success(self, name: str) -> None:
        print(f"STATUS: success ({name})")

    def print_job_report(self, position: int, job: ResolvedJob) -> None:
        """Print the dry-run report for one job."""
        print(format_job_report(position, job, color=self.color))

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
