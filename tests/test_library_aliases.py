"""Tests for collection listing and the alias index."""

from pathlib import Path

import pytest
from conftest import make_library

from imgsel.library import Collection, MediaKind, build_index, list_collections, list_items


def test_list_collections_skips_files(library: Path) -> None:
    make_library(library, {"cat-mt": [], "dog": []})
    (library / "notes.txt").write_text("ignore", encoding="utf-8")

    names = [collection.name for collection in list_collections(library)]

    assert names == ["cat-mt", "dog"]


def test_list_collections_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        list_collections(tmp_path / "missing")


def test_list_items_filters_by_extension(library: Path) -> None:
    make_library(library, {"cat": ["a.JPG", "b.png", "c.mov", "d.txt", "e.tiff"]})
    (library / "cat" / "nested").mkdir()

    items = list_items(list_collections(library)[0])

    assert [item.name for item in items] == ["a.JPG", "b.png", "c.mov", "e.tiff"]
    assert [item.kind for item in items] == [
        MediaKind.IMAGE,
        MediaKind.IMAGE,
        MediaKind.VIDEO,
        MediaKind.IMAGE,
    ]


def test_collection_segments() -> None:
    collection = Collection(name="cat-mt-kitty", path=Path("/lib/cat-mt-kitty"))

    assert collection.primary == "cat"
    assert collection.aliases == ["mt", "kitty"]


def test_every_segment_is_an_alias() -> None:
    collection = Collection(name="p-a1-a2", path=Path("/lib/p-a1-a2"))
    index = build_index([collection])

    for alias in ("p", "a1", "a2"):
        assert index.lookup(alias) == (collection,)
    assert index.lookup("p-a1") == ()


def test_name_without_delimiter_is_its_own_alias() -> None:
    collection = Collection(name="dog", path=Path("/lib/dog"))

    index = build_index([collection])

    assert [alias for alias, _ in index] == ["dog"]
    assert collection.aliases == []


def test_index_keeps_every_collection_for_shared_alias() -> None:
    first = Collection(name="X-a", path=Path("/lib/X-a"))
    second = Collection(name="Y-a", path=Path("/lib/Y-a"))

    index = build_index([first, second])

    assert index.lookup("a") == (first, second)
    assert [alias for alias, _ in index] == ["X", "a", "Y"]


def test_repeated_segment_registers_collection_once() -> None:
    collection = Collection(name="a-a", path=Path("/lib/a-a"))

    assert build_index([collection]).lookup("a") == (collection,)
