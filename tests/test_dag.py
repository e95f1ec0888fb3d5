from __future__ import annotations

import pytest

from devmaker.dag import schedule_jobs
from devmaker.errors import ConfigError, UnschedulableJobsError
from devmaker.model import ResolvedJob


def J(name, *depends):
    return ResolvedJob(name=name, depends=list(depends))


def names(queue):
    return [j.name for j in queue]


def assert_respects_dependencies(queue):
    seen = set()
    for job in queue:
        assert set(job.depends) <= seen, f"{job.name} ran before {set(job.depends) - seen}"
        seen.add(job.name)


def test_linear_chain():
    # input order deliberately reversed
    queue = schedule_jobs([J("top", "mid"), J("mid", "base"), J("base")])
    assert names(queue) == ["base", "mid", "top"]


def test_independent_jobs_keep_input_order():
    assert names(schedule_jobs([J("c"), J("a"), J("b")])) == ["c", "a", "b"]


def test_diamond():
    jobs = [J("app", "lib", "tools"), J("lib", "base"), J("tools", "base"), J("base")]
    queue = schedule_jobs(jobs)
    assert names(queue) == ["base", "lib", "tools", "app"]
    assert_respects_dependencies(queue)


def test_ready_jobs_scheduled_within_same_scan():
    # "b" becomes ready as soon as "a" is placed earlier in the same scan
    queue = schedule_jobs([J("root"), J("a", "root"), J("b", "a"), J("c", "root")])
    assert names(queue) == ["root", "a", "b", "c"]


def test_deterministic():
    jobs = [J("x", "base"), J("base"), J("y", "base"), J("z", "x", "y")]
    assert names(schedule_jobs(jobs)) == names(schedule_jobs(list(jobs)))


def test_empty():
    assert schedule_jobs([]) == []


def test_two_job_cycle_reports_exactly_both():
    with pytest.raises(UnschedulableJobsError) as exc:
        schedule_jobs([J("A", "B"), J("B", "A")])
    assert set(exc.value.jobs) == {"A", "B"}
    assert str(exc.value) == "Unschedulable jobs: A, B"


def test_cycle_reports_transitively_blocked_jobs():
    jobs = [J("base"), J("a", "b"), J("b", "a"), J("c", "a"), J("d", "base")]
    with pytest.raises(UnschedulableJobsError) as exc:
        schedule_jobs(jobs)
    assert exc.value.jobs == ["a", "b", "c"]


def test_unknown_dependency_is_unschedulable():
    with pytest.raises(UnschedulableJobsError) as exc:
        schedule_jobs([J("base"), J("editor", "does-not-exist")])
    assert exc.value.jobs == ["editor"]


def test_self_dependency_is_unschedulable():
    with pytest.raises(UnschedulableJobsError) as exc:
        schedule_jobs([J("loop", "loop")])
    assert exc.value.jobs == ["loop"]


def test_duplicate_names_rejected():
    with pytest.raises(ConfigError):
        schedule_jobs([J("a"), J("a")])
