"""Terminal implementations of the host capabilities used by the CLI."""

from __future__ import annotations

import asyncio
import mimetypes
import threading
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote, urlparse

import click
from rich.console import Console

from imgsel.library.models import MediaKind
from imgsel.session import FetchedFile, MediaElement, Reply


def media_element_for(path: Path) -> MediaElement:
    """Describe a local file as a media element, guessing its declared type."""
    kind = MediaKind.from_suffix(path.suffix) or MediaKind.IMAGE
    content_type, _ = mimetypes.guess_type(path.name)
    return MediaElement(kind=kind, url=str(path), content_type=content_type)


def looks_like_media(value: str) -> bool:
    """Return True when ``value`` names an existing file with a media extension."""
    path = Path(value).expanduser()
    return MediaKind.from_suffix(path.suffix) is not None and path.is_file()


class ConsoleNotifier:
    """Print text lines and media paths to a Rich console."""

    def __init__(self, console: Console, *, quiet: bool = False) -> None:
        self.console = console
        self.quiet = quiet
        self.lines: list[str] = []

    async def send_text(self, text: str) -> None:
        self.lines.append(text)
        if not self.quiet:
            self.console.print(text, markup=False, highlight=False)

    async def send_media(self, path: Path, kind: MediaKind) -> None:
        self.lines.append(str(path))
        if not self.quiet:
            self.console.print(f"[cyan]{kind.value}[/cyan] {path}", highlight=False)


def _read_line(prompt: str) -> str:
    return click.prompt(prompt, default="", show_default=False, prompt_suffix="\n> ")


class ConsolePrompter:
    """Ask on the terminal, giving up after the requested timeout.

    The read happens on a daemon thread so an abandoned prompt never keeps
    the process alive.
    """

    def __init__(self, reader: Callable[[str], str] = _read_line) -> None:
        self._reader = reader

    async def ask(self, text: str, timeout: float) -> Reply | None:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Optional[str]] = loop.create_future()

        def _deliver(line: Optional[str]) -> None:
            if not future.done():
                future.set_result(line)

        def _read() -> None:
            try:
                line: Optional[str] = self._reader(text)
            except (EOFError, click.Abort):
                line = None
            if not loop.is_closed():
                loop.call_soon_threadsafe(_deliver, line)

        threading.Thread(target=_read, name="imgsel-prompt", daemon=True).start()
        try:
            line = await asyncio.wait_for(future, timeout)
        except asyncio.TimeoutError:
            return None
        if line is None:
            return None
        return parse_reply(line)


def parse_reply(line: str) -> Reply:
    """Split a typed reply into text and any media file paths it names."""
    media = [
        media_element_for(Path(token).expanduser())
        for token in line.split()
        if looks_like_media(token)
    ]
    return Reply(text=line, media=media)


class LocalFileFetcher:
    """Read media from local paths or ``file://`` URLs."""

    async def fetch(self, url: str) -> FetchedFile | None:
        parsed = urlparse(url)
        path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(url).expanduser()
        data = await asyncio.to_thread(path.read_bytes)
        content_type, _ = mimetypes.guess_type(path.name)
        return FetchedFile(data=data, content_type=content_type)


__all__ = [
    "ConsoleNotifier",
    "ConsolePrompter",
    "LocalFileFetcher",
    "looks_like_media",
    "media_element_for",
    "parse_reply",
]
