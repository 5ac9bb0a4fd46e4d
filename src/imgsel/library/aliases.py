"""Alias index derived from collection names."""

from __future__ import annotations

from typing import Iterable, Iterator

from .models import Collection


class AliasIndex:
    """Map every alias to the collections that expose it.

    The index keeps every collection for a shared alias; choosing between
    them is left to the resolver.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[Collection]] = {}

    def add(self, collection: Collection) -> None:
        for alias in collection.segments:
            bucket = self._entries.setdefault(alias, [])
            if collection not in bucket:
                bucket.append(collection)

    def lookup(self, alias: str) -> tuple[Collection, ...]:
        """Return the collections registered under ``alias`` in listing order."""
        return tuple(self._entries.get(alias, ()))

    def __iter__(self) -> Iterator[tuple[str, tuple[Collection, ...]]]:
        for alias, collections in self._entries.items():
            yield alias, tuple(collections)


def build_index(collections: Iterable[Collection]) -> AliasIndex:
    """Build a fresh alias index for ``collections``."""
    index = AliasIndex()
    for collection in collections:
        index.add(collection)
    return index


__all__ = ["AliasIndex", "build_index"]
