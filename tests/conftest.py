from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from devmaker.ui.console import Console, set_console


@pytest.fixture(autouse=True)
def plain_console():
    """Every test starts with an uncolored, non-debug console."""
    console = Console(debug=False, color=False)
    set_console(console)
    return console


def write_script(path: Path, body: str, mode: int = 0o755) -> Path:
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(mode)
    return path


def make_job(
    root: Path,
    name: str,
    run: Optional[str] = "exit 0",
    *,
    runner_name: str = "run.sh",
    deps: Optional[str] = None,
    depends: Optional[List[str]] = None,
    env: Optional[Dict[str, str]] = None,
    ask: Optional[List[str]] = None,
) -> Path:
    """Create a job directory under `root` and return it."""
    job_dir = root / name
    job_dir.mkdir(parents=True)
    if run is not None:
        write_script(job_dir / runner_name, run)
    if deps is not None:
        write_script(job_dir / "deps.sh", deps)
    info = {}
    if depends is not None:
        info["depends"] = depends
    if env is not None:
        info["env"] = env
    if ask is not None:
        info["ask"] = ask
    if info:
        (job_dir / "info.json").write_text(json.dumps(info))
    return job_dir
