# runner.py
from __future__ import annotations

import getpass
import os
import stat
import subprocess
import tempfile
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .config import RunConfig
from .dag import schedule_jobs
from .discovery import discover_jobs
from .errors import JobEnvironmentError, JobFailedError, JobNotFoundError, RunnerNotFoundError
from .model import DEFAULT_RUNNER, DEPS_SCRIPT, RUNNER_GLOB, EnvMap, ResolvedJob
from .ui.console import get_console
from .vars import VariableResolver, resolve_jobs


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def ensure_executable(path: str | Path) -> None:
    """
    Add the owner execute bit when `path` is not executable.

    Other permission bits are left alone; an executable file is untouched.
    """
    path = Path(path)
    if os.access(path, os.X_OK):
        return
    try:
        mode = path.stat().st_mode
        path.chmod(stat.S_IMODE(mode) | stat.S_IXUSR)
    except OSError as e:
        raise JobEnvironmentError(f"Cannot make {path} executable: {e}") from e


class JobRunner:
    """Runs resolved jobs whose scripts live under `root/<job name>/`."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def create_proc_env(self, job: ResolvedJob) -> EnvMap:
        """
        The job's env plus HOME, USER, USERNAME and SCRIPT_DIR.

        The four injected keys win over anything the job declared.
        """
        env: EnvMap = dict(job.env)
        try:
            home = str(Path.home())
        except RuntimeError as e:
            raise JobEnvironmentError(f"Cannot find home dir: {e}") from e
        try:
            user = getpass.getuser()
        except (OSError, KeyError) as e:
            raise JobEnvironmentError(f"Cannot determine username: {e}") from e

        env["HOME"] = home
        env["USER"] = user
        env["USERNAME"] = user
        env["SCRIPT_DIR"] = str(job.script_dir(self.root))
        return env

    def iter_runner_candidates(self, job: ResolvedJob) -> Iterator[Path]:
        """
        Yield possible main runnables: `run.sh`, then any `run.*`.

        The `run.*` matches come in filesystem enumeration order, which is
        not sorted; with several `run.*` files the pick is not stable.
        """
        job_dir = job.script_dir(self.root)
        default = job_dir / DEFAULT_RUNNER
        if default.is_file():
            yield default
        for candidate in job_dir.glob(RUNNER_GLOB):
            if candidate.is_file():
                yield candidate

    def find_runner(self, job: ResolvedJob) -> Path:
        runner = next(self.iter_runner_candidates(job), None)
        if runner is None:
            raise RunnerNotFoundError(job.name)
        return runner

    def run_process(self, job: ResolvedJob, env: EnvMap, runnable: Path) -> None:
        """
        Run one script with `env`, in a temp dir scoped to this call.

        Raises:
            JobFailedError: nonzero exit; -1 when killed by a signal
            JobEnvironmentError: the script could not be prepared or launched
        """
        console = get_console()
        console.print_debug(f"Executing runnable: {runnable}")
        ensure_executable(runnable)

        proc_env = os.environ.copy()
        proc_env.update(env)

        try:
            with tempfile.TemporaryDirectory(prefix=f"{job.name}-") as tmp_dir:
                proc_env["TMP_DIR"] = tmp_dir
                proc_env["TEMP_DIR"] = tmp_dir
                proc = subprocess.run([str(runnable)], env=proc_env)
        except OSError as e:
            raise JobEnvironmentError(f"Job '{job.name}' could not run {runnable}: {e}") from e

        if proc.returncode != 0:
            code = proc.returncode if proc.returncode > 0 else -1
            raise JobFailedError(job=job.name, exit_code=code, runnable=str(runnable))

    def run(self, job: ResolvedJob) -> None:
        env = self.create_proc_env(job)
        console = get_console()
        if job.has_deps_script:
            deps_runnable = job.script_dir(self.root) / DEPS_SCRIPT
            console.print_step(DEPS_SCRIPT)
            self.run_process(job, env, deps_runnable)

        runner = self.find_runner(job)
        console.print_step(runner.name)
        self.run_process(job, env, runner)


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def execute_queue(queue: Sequence[ResolvedJob], root: str | Path) -> None:
    """Run jobs in order; the first failure propagates and ends the queue."""
    console = get_console()
    runner = JobRunner(root)
    for position, job in enumerate(queue, start=1):
        console.print_job_start(job.name, position, len(queue))
        runner.run(job)
        console.print_success(job.name)


def select_single_job(queue: Sequence[ResolvedJob], name: str) -> ResolvedJob:
    for job in queue:
        if job.name == name:
            return job
    raise JobNotFoundError(name)


def report_jobs(queue: Sequence[ResolvedJob]) -> None:
    console = get_console()
    for position, job in enumerate(queue, start=1):
        console.print_job_report(position, job)


def run_all_jobs(
    config: RunConfig,
    resolver: Optional[VariableResolver] = None,
) -> List[ResolvedJob]:
    """
    Discover, resolve, schedule and run (or report) every job under
    `config.root_dir`.

    Returns:
        The scheduled queue.
    """
    console = get_console()
    root = config.root_dir
    resolver = resolver or VariableResolver(config)

    console.print_debug(f"Retrieving job specs from root: {root}")
    specs = discover_jobs(root)

    console.print_debug("Resolving ask variables")
    jobs = resolve_jobs(specs, resolver)

    console.print_debug("Scheduling jobs")
    queue = schedule_jobs(jobs)

    console.print_run_started(str(root), len(queue), dry_run=config.dry_run)

    if config.dry_run:
        report_jobs(queue)
    elif config.single_job is not None:
        execute_queue([select_single_job(queue, config.single_job)], root)
    else:
        execute_queue(queue, root)

    return queue
