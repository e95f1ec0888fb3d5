from __future__ import annotations

from pathlib import Path

import pytest

from devmaker.discovery import discover_jobs, get_job_names, parse_info_file, parse_job_files
from devmaker.errors import ConfigError

from conftest import make_job


def test_get_job_names_sorted_and_deduplicated(tmp_path: Path):
    job_dir = make_job(tmp_path, "zsh")
    (job_dir / "run.py").write_text("")
    make_job(tmp_path, "base", runner_name="run.bash")
    make_job(tmp_path, "notes", run=None)
    (tmp_path / "stray.sh").write_text("")

    assert get_job_names(tmp_path) == ["base", "zsh"]


def test_get_job_names_missing_root(tmp_path: Path):
    with pytest.raises(ConfigError):
        get_job_names(tmp_path / "missing")


def test_parse_info_file_defaults(tmp_path: Path):
    info = parse_info_file(tmp_path)
    assert info.depends is None and info.env is None and info.ask is None


def test_parse_info_file_nulls_are_empty(tmp_path: Path):
    job_dir = make_job(tmp_path, "base")
    (job_dir / "info.json").write_text('{"depends": null, "env": {"a": "1"}}')
    spec = parse_job_files("base", tmp_path)
    assert spec.depends == []
    assert spec.provided_env == {"a": "1"}
    assert spec.ask_for_vars == []


@pytest.mark.parametrize("content", ["{not json", '{"depends": "base"}', '{"env": {"A": 1}}'])
def test_parse_info_file_invalid(tmp_path: Path, content):
    job_dir = make_job(tmp_path, "base")
    (job_dir / "info.json").write_text(content)
    with pytest.raises(ConfigError) as exc:
        parse_info_file(job_dir)
    assert "info.json" in str(exc.value)


def test_parse_job_files(tmp_path: Path):
    make_job(
        tmp_path,
        "editor",
        deps="exit 0",
        depends=["base"],
        env={"editor-theme": "dark"},
        ask=["GIT_EMAIL", "TOKEN_SECURE"],
    )
    spec = parse_job_files("editor", tmp_path)

    assert spec.name == "editor"
    assert spec.depends == ["base"]
    assert spec.provided_env == {"editor-theme": "dark"}
    assert spec.ask_for_vars == ["GIT_EMAIL", "TOKEN_SECURE"]
    assert spec.has_deps_script is True


def test_discover_jobs(tmp_path: Path):
    make_job(tmp_path, "mid", depends=["base"])
    make_job(tmp_path, "base")
    specs = discover_jobs(tmp_path)
    assert [s.name for s in specs] == ["base", "mid"]
    assert specs[0].has_deps_script is False


def test_parse_info_file_invalid_utf8(tmp_path: Path):
    job_dir = make_job(tmp_path, "base")
    (job_dir / "info.json").write_bytes(b'{"env": {"K": "\xff"}}')
    with pytest.raises(ConfigError) as exc:
        parse_info_file(job_dir)
    assert "info.json" in str(exc.value)


def test_run_directory_is_not_a_job(tmp_path: Path):
    (tmp_path / "notes" / "run.d").mkdir(parents=True)
    make_job(tmp_path, "base")
    assert get_job_names(tmp_path) == ["base"]
