# model.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

DEPS_SCRIPT = "deps.sh"
INFO_FILE = "info.json"
DEFAULT_RUNNER = "run.sh"
RUNNER_GLOB = "run.*"
SECURE_SUFFIX = "_SECURE"

EnvMap = Dict[str, str]

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def secure_name_check(name: str) -> Tuple[str, bool]:
    """Strip a trailing secure marker: ("TOKEN_SECURE") -> ("TOKEN", True)."""
    if name.endswith(SECURE_SUFFIX):
        return name[: -len(SECURE_SUFFIX)], True
    return name, False


def encode_key(key: str) -> str:
    """Normalize a declared env key: "my-key" -> "MY_KEY"."""
    return _NON_ALNUM.sub("_", key.upper())


@dataclass(frozen=True)
class JobSpec:
    """A discovered job before its ask variables are resolved."""
    name: str
    provided_env: EnvMap = field(default_factory=dict)
    depends: List[str] = field(default_factory=list)
    ask_for_vars: List[str] = field(default_factory=list)
    has_deps_script: bool = False


@dataclass(frozen=True)
class ResolvedJob:
    """
    A job ready to be scheduled and run.

    `env` holds the resolved ask variables merged with the job's own
    declared environment (keys already encoded).
    """
    name: str
    env: EnvMap = field(default_factory=dict)
    depends: List[str] = field(default_factory=list)
    has_deps_script: bool = False

    def script_dir(self, root: str | Path) -> Path:
        return Path(root) / self.name
