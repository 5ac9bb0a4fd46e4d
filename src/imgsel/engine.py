"""Read-side orchestration: resolve a message, pick items, deliver them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from imgsel.config.models import ImgselConfig
from imgsel.errors import EmptyCollection
from imgsel.library.directory import list_collections
from imgsel.library.models import Collection, Item
from imgsel.library.picker import MediaPicker
from imgsel.library.resolver import RandomSource, TokenResolver
from imgsel.saving.service import SaveService
from imgsel.session import Notifier

LOGGER = logging.getLogger(__name__)

EMPTY_COLLECTION_MESSAGE = "This collection has no images or videos yet."


class RetrievalStatus(str, Enum):
    """Outcome of a read request."""

    MATCHED = "matched"
    EMPTY = "empty"
    NO_MATCH = "no_match"


@dataclass
class Retrieval:
    """Descriptor returned for every read request.

    Attributes:
        status: Whether items were found.
        collection: Collection that served the request, if any.
        count: Number of items requested after clamping.
        items: Drawn items in delivery order.
    """

    status: RetrievalStatus
    collection: Optional[Collection] = None
    count: int = 0
    items: List[Item] = field(default_factory=list)

    @property
    def json_payload(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "collection": self.collection.name if self.collection else None,
            "count": self.count,
            "items": [{"path": str(item.path), "kind": item.kind.value} for item in self.items],
        }


@dataclass(frozen=True)
class CatalogEntry:
    """One collection as shown in the catalog listing."""

    primary: str
    aliases: tuple[str, ...]

    def render(self) -> str:
        if self.aliases:
            return f"{self.primary} aliases: {', '.join(self.aliases)}"
        return self.primary


class Engine:
    """Serve read requests and catalog listings against the configured library."""

    def __init__(
        self,
        config: ImgselConfig,
        *,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        self.config = config
        self.resolver = TokenResolver(random_source, max_output=config.library.max_output)
        self.picker = MediaPicker(random_source)

    @property
    def library_root(self) -> Path:
        return self.config.library.image_path.expanduser()

    def retrieve(self, text: str) -> Retrieval:
        """Resolve ``text`` and draw the requested number of items.

        An unreadable library behaves like a miss so that free-text messages
        never surface errors.
        """
        text = text.strip()
        if not text:
            return Retrieval(RetrievalStatus.NO_MATCH)

        try:
            collections = list_collections(self.library_root)
        except OSError as exc:
            LOGGER.debug("Unable to list library %s: %s", self.library_root, exc)
            return Retrieval(RetrievalStatus.NO_MATCH)

        resolution = self.resolver.resolve_prefix(text, collections)
        if resolution is None:
            return Retrieval(RetrievalStatus.NO_MATCH)

        try:
            items = self.picker.pick(resolution.collection, resolution.count)
        except EmptyCollection:
            return Retrieval(
                RetrievalStatus.EMPTY, collection=resolution.collection, count=resolution.count
            )
        except OSError as exc:
            LOGGER.debug("Unable to read collection %s: %s", resolution.collection.name, exc)
            return Retrieval(RetrievalStatus.NO_MATCH)

        return Retrieval(
            RetrievalStatus.MATCHED,
            collection=resolution.collection,
            count=resolution.count,
            items=items,
        )

    async def handle_message(self, text: str, notifier: Notifier) -> Retrieval:
        """Resolve ``text`` and deliver the result through ``notifier``."""
        retrieval = self.retrieve(text)
        if retrieval.status is RetrievalStatus.EMPTY:
            await notifier.send_text(EMPTY_COLLECTION_MESSAGE)
        elif retrieval.status is RetrievalStatus.MATCHED:
            for item in retrieval.items:
                await notifier.send_media(item.path, item.kind)
        return retrieval

    def catalog(self) -> list[CatalogEntry]:
        """Return every collection with its aliases, in listing order.

        Raises:
            OSError: If the library cannot be read.
        """
        return [
            CatalogEntry(primary=collection.primary, aliases=tuple(collection.aliases))
            for collection in list_collections(self.library_root)
        ]

    def saver(self) -> SaveService:
        """Return a save service sharing this engine's configuration and resolver."""
        return SaveService(self.config, resolver=self.resolver)


__all__ = [
    "CatalogEntry",
    "EMPTY_COLLECTION_MESSAGE",
    "Engine",
    "Retrieval",
    "RetrievalStatus",
]
