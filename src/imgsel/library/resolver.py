"""Resolve user-typed tokens to collections and repeat counts."""

from __future__ import annotations

import logging
import random
import re
from typing import Iterable, Optional, Protocol, Sequence, TypeVar

from .aliases import AliasIndex, build_index
from .models import AliasMatch, Collection, Resolution

LOGGER = logging.getLogger(__name__)

_COUNT_PATTERN = re.compile(r"^[0-9]+$")

T = TypeVar("T")


class RandomSource(Protocol):
    """Minimal interface for the random draws made by the engine."""

    def choice(self, seq: Sequence[T]) -> T: ...


def parse_count(suffix: str, max_output: int) -> int:
    """Interpret the text following an alias as a repeat count.

    Args:
        suffix: Trimmed remainder of the input after the alias.
        max_output: Upper bound on the number of items per request.

    Returns:
        int: Requested count clamped to ``[1, max_output]``. Suffixes that are
        not purely digits count as a request for a single item.
    """
    ceiling = max(1, max_output)
    count = 1
    if suffix and _COUNT_PATTERN.match(suffix):
        count = min(int(suffix), ceiling)
    return max(1, min(count, ceiling))


class TokenResolver:
    """Match input text against collection aliases.

    Attributes:
        max_output: Upper bound applied to parsed repeat counts.
    """

    def __init__(self, random_source: Optional[RandomSource] = None, *, max_output: int = 5) -> None:
        self._random = random_source if random_source is not None else random
        self.max_output = max_output

    def resolve_exact(self, text: str, collections: Iterable[Collection]) -> Collection | None:
        """Return the first collection exposing ``text`` as a whole alias.

        Args:
            text: Keyword to look up; surrounding whitespace is ignored.
            collections: Collections in listing order.

        Returns:
            Collection | None: First match in listing order, or None.
        """
        keyword = text.strip()
        if not keyword:
            return None
        matches = build_index(collections).lookup(keyword)
        if not matches:
            LOGGER.debug("No collection matches keyword %r exactly.", keyword)
            return None
        LOGGER.debug("Keyword %r matched collection %s.", keyword, matches[0].name)
        return matches[0]

    def resolve_prefix(self, text: str, collections: Iterable[Collection]) -> Resolution | None:
        """Resolve ``text`` using longest-alias-prefix semantics.

        Args:
            text: Raw input, compared case-sensitively without normalization.
            collections: Collections in listing order.

        Returns:
            Resolution | None: Selected collection and parsed count, or None
            when no alias prefixes the input.
        """
        matches = self.find_matches(text, build_index(collections))
        if not matches:
            LOGGER.debug("No alias is a prefix of %r.", text)
            return None

        finalists = self.narrow(matches)
        selected = self._random.choice(finalists)
        collisions = tuple(match.collection for match in finalists)
        if len(finalists) > 1:
            LOGGER.warning(
                "Alias %r is shared by %d collections: %s",
                selected.alias,
                len(finalists),
                ", ".join(collection.name for collection in collisions),
            )

        count = parse_count(selected.suffix, self.max_output)
        LOGGER.debug(
            "Resolved %r to collection %s via alias %r (suffix=%r, count=%d, max=%d).",
            text,
            selected.collection.name,
            selected.alias,
            selected.suffix,
            count,
            self.max_output,
        )
        return Resolution(
            collection=selected.collection,
            alias=selected.alias,
            suffix=selected.suffix,
            count=count,
            collisions=collisions if len(collisions) > 1 else (),
        )

    def narrow(self, matches: list[AliasMatch]) -> list[AliasMatch]:
        """Keep the longest matches, reduced to a single alias string.

        When several different aliases share the maximum length, one match is
        drawn at random and only matches carrying its alias survive.
        """
        longest = max(match.alias_length for match in matches)
        finalists = [match for match in matches if match.alias_length == longest]
        if len({match.alias for match in finalists}) > 1:
            representative = self._random.choice(finalists)
            finalists = [match for match in finalists if match.alias == representative.alias]
        return finalists

    def find_matches(self, text: str, index: AliasIndex) -> list[AliasMatch]:
        """Return every alias match whose alias prefixes ``text``."""
        matches: list[AliasMatch] = []
        for alias, collections in index:
            if not alias or not text.startswith(alias):
                continue
            suffix = text[len(alias) :].strip()
            for collection in collections:
                matches.append(AliasMatch(collection=collection, alias=alias, suffix=suffix))
        return matches


__all__ = ["RandomSource", "TokenResolver", "parse_count"]
