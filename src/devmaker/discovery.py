# discovery.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from .errors import ConfigError
from .model import DEPS_SCRIPT, INFO_FILE, RUNNER_GLOB, EnvMap, JobSpec
from .ui.console import get_console


# -------------------- Schemas --------------------

class InfoSpec(BaseModel):
    """Contents of a job's optional info.json."""
    depends: Optional[List[str]] = None
    env: Optional[EnvMap] = None
    ask: Optional[List[str]] = None


# -------------------- Discovery --------------------

def get_job_names(root: str | Path) -> List[str]:
    """
    Return the names of every directory under `root` holding a `run.*` file.

    Names are sorted so the same tree always yields the same input order
    for the scheduler.
    """
    root = Path(root)
    if not root.is_dir():
        raise ConfigError(f"Script root is not a directory: {root}")

    names = {
        runfile.parent.name
        for runfile in root.glob(f"*/{RUNNER_GLOB}")
        if runfile.is_file()
    }
    return sorted(names)


def parse_info_file(script_dir: str | Path) -> InfoSpec:
    info_path = Path(script_dir) / INFO_FILE
    if not info_path.exists():
        # no file, fall back to default settings
        return InfoSpec()

    get_console().print_debug(f"Parsing info file: {info_path}")
    try:
        return InfoSpec.model_validate_json(info_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {info_path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(
            f"Invalid {INFO_FILE} at {info_path}: {e.error_count()} error(s), "
            f"first: {e.errors()[0]['msg']}"
        ) from e


def parse_job_files(name: str, root: str | Path) -> JobSpec:
    get_console().print_debug(f"Parsing job files: {name}")
    script_dir = Path(root) / name
    info = parse_info_file(script_dir)
    return JobSpec(
        name=name,
        provided_env=dict(info.env or {}),
        depends=list(info.depends or []),
        ask_for_vars=list(info.ask or []),
        has_deps_script=(script_dir / DEPS_SCRIPT).is_file(),
    )


def discover_jobs(root: str | Path) -> List[JobSpec]:
    """Discover and parse every job under `root`, in scheduler input order."""
    return [parse_job_files(name, root) for name in get_job_names(root)]
