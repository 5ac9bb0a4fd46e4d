"""Collection discovery over a library root."""

from __future__ import annotations

from pathlib import Path

from .models import Collection, Item, MediaKind


def list_collections(root: Path) -> list[Collection]:
    """Return the immediate subdirectories of ``root`` as collections.

    Entries are returned in name order so that "first match" lookups are
    stable across platforms. Non-directory entries are skipped.

    Args:
        root: Library root directory.

    Returns:
        list[Collection]: Collections found under the root.

    Raises:
        OSError: If the root cannot be read.
    """
    root = Path(root).expanduser()
    collections: list[Collection] = []
    for entry in sorted(root.iterdir(), key=lambda path: path.name):
        if not entry.is_dir():
            continue
        collections.append(Collection(name=entry.name, path=entry))
    return collections


def list_items(collection: Collection) -> list[Item]:
    """Return media files inside ``collection`` that pass the extension allow-list.

    Args:
        collection: Collection to enumerate.

    Returns:
        list[Item]: Eligible items tagged with their media kind.

    Raises:
        OSError: If the collection directory cannot be read.
    """
    items: list[Item] = []
    for entry in sorted(collection.path.iterdir(), key=lambda path: path.name):
        if not entry.is_file():
            continue
        kind = MediaKind.from_suffix(entry.suffix)
        if kind is None:
            continue
        items.append(Item(path=entry, kind=kind))
    return items


__all__ = ["list_collections", "list_items"]
