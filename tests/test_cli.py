"""CLI tests for listing, sending, saving, and quota commands."""

import json
import os
from pathlib import Path
from typing import Any

import yaml
from click.testing import CliRunner
from conftest import make_library

from imgsel.cli import cli


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path / "home")
    env["IMGSEL__LIBRARY__IMAGE_PATH"] = str(tmp_path / "library")
    env["IMGSEL__LIBRARY__TEMP_PATH"] = str(tmp_path / "inbox")
    return env


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "keyword-named" in result.output
    for command in ("list", "send", "save", "quota", "config"):
        assert command in result.output


def test_list_shows_aliases(tmp_path: Path) -> None:
    make_library(tmp_path / "library", {"cat-mt": [], "dog": []})
    runner = CliRunner()

    result = runner.invoke(cli, ["list"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "cat aliases: mt" in result.output
    assert "dog" in result.output


def test_list_empty_library(tmp_path: Path) -> None:
    (tmp_path / "library").mkdir()
    runner = CliRunner()

    result = runner.invoke(cli, ["list"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "empty" in result.output


def test_list_missing_library_fails(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["list"], env=_env_with_home(tmp_path))

    assert result.exit_code != 0
    assert "Failed to list the library" in result.output


def test_send_json(tmp_path: Path) -> None:
    make_library(tmp_path / "library", {"cat-mt": ["1.jpg", "2.jpg", "3.jpg"]})
    runner = CliRunner()

    result = runner.invoke(cli, ["send", "mt2", "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["status"] == "matched"
    assert payload["collection"] == "cat-mt"
    assert len(payload["items"]) == 2
    assert {item["kind"] for item in payload["items"]} == {"image"}


def test_send_unmatched_is_silent(tmp_path: Path) -> None:
    make_library(tmp_path / "library", {"cat": ["1.jpg"]})
    runner = CliRunner()

    result = runner.invoke(cli, ["send", "hello"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert result.output == ""


def test_save_files_into_collection(tmp_path: Path) -> None:
    make_library(tmp_path / "library", {"cat-mt": []})
    source = tmp_path / "photo.png"
    source.write_bytes(b"png-bytes")
    env = _env_with_home(tmp_path)
    env["IMGSEL__LIMITS__USERS"] = "[{user_id: default, size_limit_mb: 1}]"
    runner = CliRunner()

    result = runner.invoke(
        cli, ["save", "mt", str(source), "--user", "u1", "--json"], env=env
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["status"] == "completed"
    assert payload["target_name"] == "cat-mt"
    saved = list((tmp_path / "library" / "cat-mt").iterdir())
    assert len(saved) == 1
    assert saved[0].name.endswith("-1-private-u1.png")
    assert saved[0].read_bytes() == b"png-bytes"


def test_save_denied_by_default_limits(tmp_path: Path) -> None:
    make_library(tmp_path / "library", {"cat": []})
    source = tmp_path / "photo.jpg"
    source.write_bytes(b"jpg")
    runner = CliRunner()

    result = runner.invoke(cli, ["save", "cat", str(source), "--user", "u1"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "permission" in result.output
    assert list((tmp_path / "library" / "cat").iterdir()) == []


def test_quota_command(tmp_path: Path) -> None:
    env = _env_with_home(tmp_path)
    config_path = Path(env["HOME"]) / ".imgsel" / "config.yaml"
    config_path.parent.mkdir(parents=True)
    config_path.write_text(
        yaml.safe_dump(
            {
                "limits": {
                    "users": [{"user_id": "u1", "size_limit_mb": 5}],
                    "groups": [{"group_id": "default", "size_limit_mb": 2}],
                }
            }
        ),
        encoding="utf-8",
    )
    runner = CliRunner()

    allowed = runner.invoke(cli, ["quota", "--user", "u2", "--group", "g1"], env=env)
    denied = runner.invoke(cli, ["quota", "--user", "u2"], env=env)

    assert allowed.exit_code == 0
    assert "2MB" in allowed.output
    assert "group:default" in allowed.output
    assert "denied" in denied.output
