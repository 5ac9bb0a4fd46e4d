"""Host capabilities injected into the engine.

The engine never talks to a chat runtime directly. Hosts provide a
``Notifier`` for output, a ``Prompter`` for timed interactive replies, and a
``Fetcher`` that turns a media URL into bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol

from imgsel.library.models import MediaKind


@dataclass(frozen=True)
class Identity:
    """Who issued a request and where."""

    user_id: str
    group_id: Optional[str] = None
    channel_id: Optional[str] = None
    username: Optional[str] = None


@dataclass(frozen=True)
class MediaElement:
    """A media reference attached to an inbound message.

    Attributes:
        kind: Media kind declared by the message element.
        url: Location the fetcher can retrieve the bytes from.
        content_type: Declared MIME type, when the host knows it.
    """

    kind: MediaKind
    url: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class Reply:
    """A reply captured by a prompter."""

    text: str = ""
    media: List[MediaElement] = field(default_factory=list)


@dataclass(frozen=True)
class FetchedFile:
    """Bytes returned by a fetcher plus any declared content type."""

    data: bytes
    content_type: Optional[str] = None


class Notifier(Protocol):
    """Deliver user-visible output."""

    async def send_text(self, text: str) -> None: ...

    async def send_media(self, path: Path, kind: MediaKind) -> None: ...


class Prompter(Protocol):
    """Ask a question and wait for the next reply from the same identity."""

    async def ask(self, text: str, timeout: float) -> Reply | None:
        """Return the reply, or None when ``timeout`` seconds pass without one."""
        ...


class Fetcher(Protocol):
    """Retrieve the bytes behind a media URL."""

    async def fetch(self, url: str) -> FetchedFile | None: ...


__all__ = [
    "FetchedFile",
    "Fetcher",
    "Identity",
    "MediaElement",
    "Notifier",
    "Prompter",
    "Reply",
]
