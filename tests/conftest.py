"""Shared fakes for engine and save-workflow tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import pytest

from imgsel.config import ImgselConfig
from imgsel.library.models import MediaKind
from imgsel.session import FetchedFile, Reply


class ScriptedRandom:
    """Random source returning pre-selected indices, then the first element."""

    def __init__(self, *indices: int) -> None:
        self.indices = list(indices)
        self.calls: list[int] = []

    def choice(self, seq: Sequence[Any]) -> Any:
        self.calls.append(len(seq))
        index = self.indices.pop(0) if self.indices else 0
        return seq[index]


class RecordingNotifier:
    def __init__(self) -> None:
        self.texts: list[str] = []
        self.media: list[tuple[Path, MediaKind]] = []

    async def send_text(self, text: str) -> None:
        self.texts.append(text)

    async def send_media(self, path: Path, kind: MediaKind) -> None:
        self.media.append((path, kind))


class ScriptedPrompter:
    """Answer prompts from a queue; ``None`` entries simulate timeouts."""

    def __init__(self, *replies: Reply | None) -> None:
        self.replies = list(replies)
        self.questions: list[tuple[str, float]] = []

    async def ask(self, text: str, timeout: float) -> Reply | None:
        self.questions.append((text, timeout))
        if not self.replies:
            return None
        return self.replies.pop(0)


class DictFetcher:
    def __init__(self, files: dict[str, FetchedFile]) -> None:
        self.files = files
        self.requested: list[str] = []

    async def fetch(self, url: str) -> FetchedFile | None:
        self.requested.append(url)
        if url.startswith("boom"):
            raise ConnectionError("connection reset")
        return self.files.get(url)


def make_library(root: Path, layout: dict[str, list[str]]) -> Path:
    """Create collection directories under ``root`` with empty placeholder files."""
    root.mkdir(parents=True, exist_ok=True)
    for collection, files in layout.items():
        directory = root / collection
        directory.mkdir()
        for name in files:
            (directory / name).write_bytes(b"x")
    return root


@pytest.fixture
def library(tmp_path: Path) -> Path:
    return tmp_path / "library"


@pytest.fixture
def make_config(tmp_path: Path):
    def _factory(**sections: dict[str, Any]) -> ImgselConfig:
        data: dict[str, Any] = {
            "library": {
                "image_path": str(tmp_path / "library"),
                "temp_path": str(tmp_path / "inbox"),
                "max_output": 5,
            },
        }
        for name, values in sections.items():
            data.setdefault(name, {}).update(values)
        return ImgselConfig.model_validate(data)

    return _factory
