"""Data models describing collections and their media items."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

ALIAS_DELIMITER = "-"

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tif", ".tiff"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".avi"})


class MediaKind(str, Enum):
    """Closed set of media kinds handled by the engine."""

    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def from_suffix(cls, suffix: str) -> MediaKind | None:
        """Classify a file suffix, returning None for unsupported types."""
        lowered = suffix.lower()
        if lowered in VIDEO_EXTENSIONS:
            return cls.VIDEO
        if lowered in IMAGE_EXTENSIONS:
            return cls.IMAGE
        return None


@dataclass(frozen=True)
class Collection:
    """A directory-backed group of media items.

    Attributes:
        name: Directory name, encoding the primary name and aliases.
        path: Absolute or root-relative path to the directory.
    """

    name: str
    path: Path

    @property
    def segments(self) -> list[str]:
        """Return every lookup token encoded in the directory name."""
        return self.name.split(ALIAS_DELIMITER)

    @property
    def primary(self) -> str:
        """Return the display name (first segment)."""
        return self.segments[0]

    @property
    def aliases(self) -> list[str]:
        """Return the secondary aliases (remaining segments)."""
        return self.segments[1:]


@dataclass(frozen=True)
class Item:
    """A single media file inside a collection."""

    path: Path
    kind: MediaKind

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class AliasMatch:
    """A candidate produced while resolving input against aliases."""

    collection: Collection
    alias: str
    suffix: str

    @property
    def alias_length(self) -> int:
        return len(self.alias)


@dataclass(frozen=True)
class Resolution:
    """Outcome of a successful prefix-mode resolution.

    Attributes:
        collection: Collection selected to serve the request.
        alias: Alias that matched the input.
        suffix: Trimmed remainder of the input after the alias.
        count: Number of items requested, already clamped.
        collisions: Every collection sharing the winning alias.
    """

    collection: Collection
    alias: str
    suffix: str
    count: int
    collisions: tuple[Collection, ...] = ()


__all__ = [
    "ALIAS_DELIMITER",
    "IMAGE_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "MediaKind",
    "Collection",
    "Item",
    "AliasMatch",
    "Resolution",
]
