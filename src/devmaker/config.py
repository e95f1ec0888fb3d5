# config.py
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .errors import ConfigError
from .model import EnvMap, secure_name_check
from .ui.console import get_console

VAR_LINE = re.compile(r"^\s*([A-Z0-9][A-Z0-9_]+)\s*=\s*(.+?)\s*$")


@dataclass(frozen=True)
class RunConfig:
    """
    Run-wide settings, built once from the command line and passed
    explicitly to the resolver, the runner and the pipeline.
    """
    root_dir: Path
    interactive: bool = False
    dry_run: bool = False
    allow_env: bool = True
    empty_vars: bool = False
    cmd_vars: Optional[EnvMap] = None
    ask_file_vars: Optional[EnvMap] = None
    single_job: Optional[str] = None

    @classmethod
    def from_options(
        cls,
        root_dir: str | Path,
        *,
        interactive: bool = False,
        dry_run: bool = False,
        no_allow_env: bool = False,
        ask_file: str | Path | None = None,
        ask_vars: Iterable[str] | None = None,
        single_job: str | None = None,
        force_empty_vars: bool = False,
    ) -> RunConfig:
        ask_file_vars = parse_askfile(ask_file) if ask_file is not None else None
        # click hands over an empty tuple when -w is never given
        ask_vars = list(ask_vars or [])
        cmd_vars = parse_cmd_vars(ask_vars) if ask_vars else None

        return cls(
            root_dir=Path(root_dir),
            interactive=interactive,
            dry_run=dry_run,
            allow_env=not no_allow_env,
            empty_vars=force_empty_vars,
            cmd_vars=cmd_vars,
            ask_file_vars=ask_file_vars,
            single_job=single_job,
        )

    def get_cmd_var(self, name: str) -> Optional[str]:
        return _lookup(self.cmd_vars, name)

    def get_file_var(self, name: str) -> Optional[str]:
        return _lookup(self.ask_file_vars, name)


def _lookup(mapping: Optional[EnvMap], name: str) -> Optional[str]:
    if mapping is None:
        return None
    return mapping.get(secure_name_check(name)[0])


# ----------------------------------------------------------------------
# NAME=value parsing
# ----------------------------------------------------------------------

def parse_var_string(line: str, source: str) -> Tuple[str, str]:
    """
    Parse one `NAME=value` entry.

    Raises:
        ConfigError: if the entry does not match the NAME=value grammar
    """
    match = VAR_LINE.match(line)
    if match is None:
        raise ConfigError(f"Unparseable line found in {source}: {line}")
    return match.group(1), match.group(2)


def parse_var_strings(lines: Iterable[str], source: str) -> EnvMap:
    env: EnvMap = {}
    for line in lines:
        key, value = parse_var_string(line, source)
        # later lines win
        env[key] = value
    return env


def parse_askfile(path: str | Path) -> EnvMap:
    path = Path(path)
    get_console().print_debug(f"Parsing askfile: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read askfile {path}: {e}") from e
    return parse_var_strings(text.splitlines(), f"askfile {path}")


def parse_cmd_vars(pairs: Iterable[str]) -> EnvMap:
    return parse_var_strings(pairs, "command line")
