# vars.py
from __future__ import annotations

import os
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import click

from .config import RunConfig
from .errors import UnresolvableVariableError
from .model import EnvMap, JobSpec, ResolvedJob, encode_key, secure_name_check
from .ui.console import get_console

PROMPT_MESSAGE = "Please enter the value for the variable"

# prompt(name, secure) -> answer
PromptFn = Callable[[str, bool], str]


def click_prompt(name: str, secure: bool) -> str:
    """Ask the operator for a value; empty answers are accepted."""
    if secure:
        text = f"<Secure> {PROMPT_MESSAGE} [{name}]"
    else:
        text = f"{PROMPT_MESSAGE}, [{name}]"
    return click.prompt(text, default="", show_default=False, hide_input=secure)


class VariableResolver:
    """
    Resolves ask variables through a fixed source chain:

      1. force-empty mode
      2. process environment (when allowed)
      3. command line NAME=value pairs
      4. askfile NAME=value pairs
      5. interactive prompt (when enabled)

    The first source that supplies a value wins, including "".
    Every distinct name is resolved once per resolver.
    """

    def __init__(
        self,
        config: RunConfig,
        environ: Optional[Mapping[str, str]] = None,
        prompt: Optional[PromptFn] = None,
    ):
        self.config = config
        self.environ = os.environ if environ is None else environ
        self.prompt = prompt or click_prompt
        self.resolved: Dict[str, str] = {}

    # ---- sources ----

    def _from_empty(self, name: str, secure: bool) -> Optional[str]:
        if self.config.empty_vars:
            get_console().print_debug(f"No-fill: {name}")
            return ""
        return None

    def _from_env(self, name: str, secure: bool) -> Optional[str]:
        if not self.config.allow_env:
            return None
        get_console().print_debug(f"Trying environment for var: {name}")
        return self.environ.get(name)

    def _from_cmd(self, name: str, secure: bool) -> Optional[str]:
        get_console().print_debug(f"Trying cmd line for var: {name}")
        return self.config.get_cmd_var(name)

    def _from_askfile(self, name: str, secure: bool) -> Optional[str]:
        get_console().print_debug(f"Trying askfile for var: {name}")
        return self.config.get_file_var(name)

    def _from_prompt(self, name: str, secure: bool) -> Optional[str]:
        if not self.config.interactive:
            return None
        get_console().print_debug(f"Interactive query: {name}")
        try:
            return self.prompt(name, secure)
        except click.Abort as e:
            raise UnresolvableVariableError(name) from e

    # ---- public ----

    def resolve(self, raw_name: str) -> Tuple[str, str]:
        """
        Resolve a single variable, returning (key, value).

        The secure suffix is stripped from the key; it only decides
        whether the prompt masks input.
        """
        name, secure = secure_name_check(raw_name)
        get_console().print_debug(f"Querying var: {name}")

        sources = (
            self._from_empty,
            self._from_env,
            self._from_cmd,
            self._from_askfile,
            self._from_prompt,
        )
        for source in sources:
            value = source(name, secure)
            if value is not None:
                return name, value

        raise UnresolvableVariableError(name)

    def resolve_all(self, specs: Iterable[JobSpec]) -> EnvMap:
        """Resolve every ask variable of every spec, first-ask order."""
        for spec in specs:
            for raw_name in spec.ask_for_vars:
                name, _ = secure_name_check(raw_name)
                if name in self.resolved:
                    continue
                key, value = self.resolve(raw_name)
                self.resolved[key] = value
        return dict(self.resolved)


def fill_asked(spec: JobSpec, answers: Mapping[str, str]) -> ResolvedJob:
    """
    Build the ResolvedJob for `spec` from the run-wide answers.

    The job's declared env is applied after the asked values, so a
    declared key overrides an asked one of the same name.
    """
    env: EnvMap = {}
    for raw_name in spec.ask_for_vars:
        name, _ = secure_name_check(raw_name)
        if name not in answers:
            raise UnresolvableVariableError(name)
        env[name] = answers[name]

    for key, value in spec.provided_env.items():
        env[encode_key(key)] = value

    return ResolvedJob(
        name=spec.name,
        env=env,
        depends=list(spec.depends),
        has_deps_script=spec.has_deps_script,
    )


def resolve_jobs(specs: List[JobSpec], resolver: VariableResolver) -> List[ResolvedJob]:
    answers = resolver.resolve_all(specs)
    return [fill_asked(spec, answers) for spec in specs]
