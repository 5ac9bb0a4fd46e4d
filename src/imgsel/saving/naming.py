"""Filename rendering for saved media."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional

from imgsel.library.models import MediaKind
from imgsel.session import Identity

LOGGER = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$\{(\w+)\}")
_RESERVED = re.compile(r'[\u0000-\u001f\u007f-\u009f/\\:*?"<>|]')

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
    "video/x-msvideo": ".avi",
}


@dataclass(frozen=True)
class NamingContext:
    """Values available to filename templates for one saved item."""

    user_id: str
    username: str
    timestamp: str
    date: str
    time: str
    index: str
    ext: str
    group_id: str
    channel_id: str

    def placeholders(self) -> dict[str, str]:
        """Return the template placeholder names mapped to their values."""
        return {
            "userId": self.user_id,
            "username": self.username,
            "timestamp": self.timestamp,
            "date": self.date,
            "time": self.time,
            "index": self.index,
            "ext": self.ext,
            "guildId": self.group_id,
            "channelId": self.channel_id,
        }


def detect_extension(content_type: Optional[str], kind: MediaKind) -> str:
    """Map a declared MIME type to a file extension.

    Unknown or missing types fall back on the declared media kind: ``.mp4``
    for videos and ``.jpg`` for everything else.
    """
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    extension = MIME_EXTENSIONS.get(mime)
    if extension is None:
        extension = ".mp4" if kind is MediaKind.VIDEO else ".jpg"
        if mime:
            LOGGER.debug("Unrecognized content type %r; using %s", content_type, extension)
        else:
            LOGGER.debug("No content type declared; using %s", extension)
    return extension


def sanitize_filename(name: str) -> str:
    """Replace control characters and path-reserved characters with ``_``."""
    return _RESERVED.sub("_", name)


def render_filename(template: str, context: NamingContext | Mapping[str, str]) -> str:
    """Substitute ``${placeholder}`` tokens and sanitize the result.

    Unknown placeholders are left as written.
    """
    values = context.placeholders() if isinstance(context, NamingContext) else dict(context)

    def _replace(match: re.Match[str]) -> str:
        return values.get(match.group(1), match.group(0))

    return sanitize_filename(_PLACEHOLDER.sub(_replace, template))


def build_context(
    identity: Identity,
    *,
    index: int,
    ext: str,
    timestamp_ms: int,
) -> NamingContext:
    """Assemble the naming values for the ``index``-th (1-based) item of a batch."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return NamingContext(
        user_id=identity.user_id or "unknown",
        username=identity.username or "unknown",
        timestamp=str(timestamp_ms),
        date=moment.date().isoformat(),
        time=moment.astimezone().strftime("%H-%M-%S"),
        index=str(index),
        ext=ext,
        group_id=identity.group_id or "private",
        channel_id=identity.channel_id or "unknown",
    )


__all__ = [
    "MIME_EXTENSIONS",
    "NamingContext",
    "build_context",
    "detect_extension",
    "render_filename",
    "sanitize_filename",
]
