"""CLI tests for the config commands."""

import os
from pathlib import Path

from click.testing import CliRunner

from imgsel.cli import cli
from imgsel.config import ConfigManager


def _env(tmp_path: Path, **extra: str) -> dict[str, str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("IMGSEL__")}
    env["HOME"] = str(tmp_path)
    env.update(extra)
    return env


def _stored(tmp_path: Path):
    return ConfigManager(config_path=tmp_path / ".imgsel" / "config.yaml", env={}).load()


def test_view_creates_file_and_prints_yaml(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["config", "view"], env=_env(tmp_path))

    assert result.exit_code == 0
    assert "library:" in result.output
    assert "max_output: 5" in result.output
    assert (tmp_path / ".imgsel" / "config.yaml").exists()


def test_view_reports_environment_overrides(tmp_path: Path) -> None:
    env = _env(tmp_path, IMGSEL__LIBRARY__MAX_OUTPUT="2")
    runner = CliRunner()

    effective = runner.invoke(cli, ["config", "view"], env=env)
    file_only = runner.invoke(cli, ["config", "view", "--no-env"], env=env)

    assert "environment overrides: IMGSEL__LIBRARY__MAX_OUTPUT" in effective.output
    assert "max_output: 2" in effective.output
    assert "environment overrides" not in file_only.output
    assert "max_output: 5" in file_only.output


def test_set_updates_value_and_prints_diff(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["config", "set", "library.max_output", "9"], env=_env(tmp_path))

    assert result.exit_code == 0
    assert "+  max_output: 9" in result.output
    assert "Updated library.max_output" in result.output
    assert _stored(tmp_path).library.max_output == 9


def test_set_same_value_reports_no_change(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env(tmp_path)

    runner.invoke(cli, ["config", "set", "save.fallback_on_miss", "false"], env=env)
    result = runner.invoke(cli, ["config", "set", "save.fallback_on_miss", "false"], env=env)

    assert result.exit_code == 0
    assert "already has that value" in result.output


def test_set_limit_table_changes_quota(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env(tmp_path)

    result = runner.invoke(
        cli,
        ["config", "set", "limits.users", "[{user_id: default, size_limit_mb: 2}]"],
        env=env,
    )
    quota = runner.invoke(cli, ["quota", "--user", "anyone"], env=env)

    assert result.exit_code == 0
    assert "anyone: 2MB per file (user:default)." in quota.output


def test_set_rejects_invalid_value(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli, ["config", "set", "library.max_output", "many"], env=_env(tmp_path)
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output
    assert _stored(tmp_path).library.max_output == 5


def test_set_rejects_key_without_section(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["config", "set", "max_output", "3"], env=_env(tmp_path))

    assert result.exit_code != 0
    assert "must name a section and a field" in result.output
