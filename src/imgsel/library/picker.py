"""Random media selection from a collection."""

from __future__ import annotations

import logging
import random
from typing import Optional

from imgsel.errors import EmptyCollection

from .directory import list_items
from .models import Collection, Item
from .resolver import RandomSource

LOGGER = logging.getLogger(__name__)


class MediaPicker:
    """Draw items uniformly at random, with replacement."""

    def __init__(self, random_source: Optional[RandomSource] = None) -> None:
        self._random = random_source if random_source is not None else random

    def pick(self, collection: Collection, count: int) -> list[Item]:
        """Return ``count`` independently drawn items from ``collection``.

        The same item may appear more than once in a single result.

        Args:
            collection: Collection to draw from.
            count: Number of draws to perform.

        Returns:
            list[Item]: Drawn items in draw order.

        Raises:
            EmptyCollection: If the collection has no eligible items.
            OSError: If the collection cannot be read.
        """
        items = list_items(collection)
        if not items:
            raise EmptyCollection(collection.name)

        picked = [self._random.choice(items) for _ in range(count)]
        for position, item in enumerate(picked, start=1):
            LOGGER.debug("Picked %d/%d from %s: %s", position, count, collection.name, item.name)
        return picked


__all__ = ["MediaPicker"]
