# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


class DevmakerError(Exception):
    """Base for every error that should end a run with a one-line message."""
    pass


class ConfigError(DevmakerError):
    """Malformed NAME=value input, unreadable askfile or bad info.json."""
    pass


@dataclass
class UnresolvableVariableError(DevmakerError):
    name: str

    def __str__(self) -> str:
        return f"Could not resolve var: {self.name}"


@dataclass
class UnschedulableJobsError(DevmakerError):
    """
    Raised when the fixed-point expansion stops before every job is placed.

    `jobs` lists every job never reached, which includes jobs blocked
    transitively by a cycle or a missing dependency elsewhere.
    """
    jobs: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Unschedulable jobs: {', '.join(self.jobs)}"


@dataclass
class RunnerNotFoundError(DevmakerError):
    job: str

    def __str__(self) -> str:
        return f"No runner found for job '{self.job}'"


@dataclass
class JobFailedError(DevmakerError):
    job: str
    exit_code: int
    runnable: str | None = None

    def __str__(self) -> str:
        return f"Job '{self.job}' failed with exit code {self.exit_code}"


class JobEnvironmentError(DevmakerError):
    """Home dir, username, permissions, temp dir or process launch failures."""
    pass


@dataclass
class JobNotFoundError(DevmakerError):
    job: str

    def __str__(self) -> str:
        return f"Cannot locate job: {self.job}"
