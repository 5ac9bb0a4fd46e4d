"""Collection lookup, alias resolution, and media selection."""

from .aliases import AliasIndex, build_index
from .directory import list_collections, list_items
from .models import (
    ALIAS_DELIMITER,
    AliasMatch,
    Collection,
    Item,
    MediaKind,
    Resolution,
)
from .picker import MediaPicker
from .resolver import RandomSource, TokenResolver, parse_count

__all__ = [
    "ALIAS_DELIMITER",
    "AliasIndex",
    "AliasMatch",
    "Collection",
    "Item",
    "MediaKind",
    "MediaPicker",
    "RandomSource",
    "Resolution",
    "TokenResolver",
    "build_index",
    "list_collections",
    "list_items",
    "parse_count",
]
