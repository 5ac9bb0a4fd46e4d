"""Command line interface for imgsel."""

from __future__ import annotations

import asyncio
import difflib
import getpass
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from imgsel.config import ConfigError, ConfigManager, ImgselConfig
from imgsel.console import (
    ConsoleNotifier,
    ConsolePrompter,
    LocalFileFetcher,
    looks_like_media,
    media_element_for,
)
from imgsel.engine import Engine
from imgsel.logging_setup import configure_logging
from imgsel.saving.models import SaveRequest, SaveStatus
from imgsel.saving.quota import QuotaResolver
from imgsel.session import Identity

console = Console()


def _load_config() -> ImgselConfig:
    """Load the effective configuration and configure logging from it.

    Raises:
        click.ClickException: If the configuration cannot be loaded.
    """
    try:
        loaded = ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(loaded.logging)
    return loaded


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="imgsel")
def cli() -> None:
    """imgsel picks random media from keyword-named collections and saves new media into them."""


@cli.command("list")
def list_collections_command() -> None:
    """List every collection keyword together with its aliases."""
    engine = Engine(_load_config())
    try:
        entries = engine.catalog()
    except OSError as exc:
        raise click.ClickException(f"Failed to list the library: {exc}") from exc

    if not entries:
        console.print("[yellow]The library is empty.[/yellow]")
        return

    console.print(
        "Send a keyword or alias to get a random item, or use `imgsel send KEYWORD COUNT`."
    )
    for entry in entries:
        console.print(entry.render(), markup=False, highlight=False)


@cli.command()
@click.argument("text", nargs=-1)
@click.option("--json", "json_output", is_flag=True, help="Emit the selection as JSON.")
@click.pass_context
def send(ctx: click.Context, text: tuple[str, ...], json_output: bool) -> None:
    """Pick random items for TEXT, e.g. `imgsel send cat 3`.

    Input that matches no keyword produces no output.
    """
    if not text:
        click.echo(ctx.get_help())
        return

    engine = Engine(_load_config())
    notifier = ConsoleNotifier(console, quiet=json_output)
    retrieval = asyncio.run(engine.handle_message(" ".join(text), notifier))

    if json_output:
        console.print_json(data=retrieval.json_payload)


@cli.command()
@click.argument("keyword", required=False)
@click.argument("files", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--user", "user_id", type=str, help="User id to save as (defaults to the login name).")
@click.option("--group", "group_id", type=str, help="Group id used for quota lookups.")
@click.option("--channel", "channel_id", type=str, help="Channel id for filename templates.")
@click.option("--name", "username", type=str, help="Display name for filename templates.")
@click.option("--json", "json_output", is_flag=True, help="Emit the save result as JSON.")
def save(
    keyword: str | None,
    files: tuple[Path, ...],
    user_id: str | None,
    group_id: str | None,
    channel_id: str | None,
    username: str | None,
    json_output: bool,
) -> None:
    """Save FILES into the collection named by KEYWORD.

    Missing files or a missing keyword are asked for interactively.
    """
    media_paths = list(files)
    if keyword and looks_like_media(keyword):
        media_paths.insert(0, Path(keyword).expanduser())
        keyword = None

    login = user_id or getpass.getuser()
    request = SaveRequest(
        identity=Identity(
            user_id=login,
            group_id=group_id,
            channel_id=channel_id,
            username=username or login,
        ),
        keyword=keyword,
        media=[media_element_for(path) for path in media_paths],
    )

    engine = Engine(_load_config())
    result = asyncio.run(
        engine.saver().save(
            request,
            notifier=ConsoleNotifier(console, quiet=json_output),
            prompter=ConsolePrompter(),
            fetcher=LocalFileFetcher(),
        )
    )

    if json_output:
        console.print_json(data=result.json_payload)
        return

    if result.outcomes:
        table = Table(title="Save outcomes")
        table.add_column("#", justify="right")
        table.add_column("Status")
        table.add_column("Detail")
        for outcome in result.outcomes:
            detail = str(outcome.path) if outcome.path else (outcome.detail or "")
            table.add_row(str(outcome.index), outcome.status.value, detail)
        console.print(table)

    if result.status not in (SaveStatus.COMPLETED, SaveStatus.CANCELLED):
        raise SystemExit(1)


@cli.command()
@click.option("--user", "user_id", required=True, type=str, help="User id to check.")
@click.option("--group", "group_id", type=str, help="Group id the upload would come from.")
def quota(user_id: str, group_id: str | None) -> None:
    """Show the upload limit that applies to a user."""
    settings = _load_config()
    decision = QuotaResolver.from_settings(settings.limits).resolve(
        Identity(user_id=user_id, group_id=group_id)
    )
    if decision.allowed:
        console.print(
            f"[green]{user_id}: {decision.limit_mb:g}MB per file ({decision.source}).[/green]"
        )
    else:
        console.print(f"[yellow]{user_id}: uploads denied ({decision.source}).[/yellow]")


@cli.group()
def config() -> None:
    """Inspect and change the imgsel configuration file."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Show file values without IMGSEL__ overrides.")
def config_view(no_env: bool) -> None:
    """Print the effective configuration as YAML."""
    manager = ConfigManager()
    try:
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print(f"# {manager.config_path}", style="dim", markup=False)
    env_keys = manager.env_keys()
    if env_keys and not no_env:
        console.print(f"# environment overrides: {', '.join(env_keys)}", style="dim", markup=False)
    yaml_text = yaml.safe_dump(loaded.model_dump(mode="json"), sort_keys=False, allow_unicode=True)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Store VALUE under KEY, e.g. `imgsel config set library.max_output 8`.

    VALUE is read as YAML, so limit tables can be given inline:
    `imgsel config set limits.users "[{user_id: default, size_limit_mb: 2}]"`.
    """
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    manager = ConfigManager()
    try:
        manager.ensure_exists()
        before = manager.read_text()
        manager.set_value(key, parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    after = manager.read_text()

    if after == before:
        console.print(f"[yellow]{key} already has that value.[/yellow]")
        return

    diff = difflib.unified_diff(
        before.splitlines(), after.splitlines(), fromfile="before", tofile="after", lineterm=""
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
