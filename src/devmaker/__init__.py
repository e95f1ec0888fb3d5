from .config import RunConfig
from .dag import schedule_jobs
from .model import JobSpec, ResolvedJob
from .runner import JobRunner, run_all_jobs
from .vars import VariableResolver, fill_asked

__all__ = [
    "RunConfig",
    "schedule_jobs",
    "JobSpec",
    "ResolvedJob",
    "JobRunner",
    "run_all_jobs",
    "VariableResolver",
    "fill_asked",
]
