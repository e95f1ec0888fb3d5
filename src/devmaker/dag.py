# dag.py
from __future__ import annotations

from typing import List, Sequence, Set

from .errors import ConfigError, UnschedulableJobsError
from .model import ResolvedJob


def _check_unique(jobs: Sequence[ResolvedJob]) -> None:
    names = [j.name for j in jobs]
    if len(set(names)) != len(names):
        dupes = sorted({n for n in names if names.count(n) > 1})
        raise ConfigError(f"Duplicate job names found: {dupes}")


def schedule_jobs(jobs: Sequence[ResolvedJob]) -> List[ResolvedJob]:
    """
    Order jobs so every job comes after all of its dependencies.

    Fixed-point expansion: seed with the jobs that depend on nothing, then
    keep scanning the rest in input order, appending any job whose
    dependencies are all scheduled. Ties keep input order.

    A scan that adds nothing means the remainder can never run (a cycle,
    a job blocked behind one, or a dependency on a job that does not
    exist); all of them are reported.

    O(n^2) in the number of jobs.
    """
    _check_unique(jobs)

    scheduled: List[ResolvedJob] = []
    scheduled_names: Set[str] = set()

    def schedule(job: ResolvedJob) -> None:
        scheduled.append(job)
        scheduled_names.add(job.name)

    for job in jobs:
        if not job.depends:
            schedule(job)

    while len(scheduled) < len(jobs):
        count_before = len(scheduled)

        for job in jobs:
            if job.name in scheduled_names:
                continue
            if all(dep in scheduled_names for dep in job.depends):
                schedule(job)

        if len(scheduled) == count_before:
            raise UnschedulableJobsError(
                [j.name for j in jobs if j.name not in scheduled_names]
            )

    return scheduled
