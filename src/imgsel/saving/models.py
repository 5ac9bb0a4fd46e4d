"""Request and result models for the save workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from imgsel.session import Identity, MediaElement


class SaveStatus(str, Enum):
    """Overall outcome of one save request."""

    COMPLETED = "completed"
    DENIED = "denied"
    TIMED_OUT = "timed_out"
    NO_MEDIA = "no_media"
    CANCELLED = "cancelled"
    IO_ERROR = "io_error"


class ItemStatus(str, Enum):
    """Outcome of one media element inside a save batch."""

    SAVED = "saved"
    SKIPPED_OVERSIZE = "skipped_oversize"
    SKIPPED_NO_URL = "skipped_no_url"
    FAILED = "failed"


@dataclass
class SaveRequest:
    """An inbound save command.

    Attributes:
        identity: Requesting identity.
        keyword: Collection keyword, when given inline.
        media: Media attached to the command itself.
        quoted: Media found in a quoted message; replaces ``media`` when present.
    """

    identity: Identity
    keyword: Optional[str] = None
    media: List[MediaElement] = field(default_factory=list)
    quoted: List[MediaElement] = field(default_factory=list)


@dataclass
class ItemOutcome:
    """Per-item result within a batch.

    Attributes:
        index: 1-based position in the batch.
        status: What happened to the item.
        path: Written file, for saved items.
        size_bytes: Payload size, when it was fetched.
        detail: Human-readable explanation for skipped or failed items.
    """

    index: int
    status: ItemStatus
    path: Optional[Path] = None
    size_bytes: Optional[int] = None
    detail: Optional[str] = None


@dataclass
class SaveResult:
    """Descriptor returned for every save request."""

    status: SaveStatus
    message: str
    saved_count: int = 0
    target_name: Optional[str] = None
    target_path: Optional[Path] = None
    fallback_used: bool = False
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @property
    def json_payload(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "message": self.message,
            "saved_count": self.saved_count,
            "target_name": self.target_name,
            "target_path": str(self.target_path) if self.target_path else None,
            "fallback_used": self.fallback_used,
            "outcomes": [
                {
                    "index": outcome.index,
                    "status": outcome.status.value,
                    "path": str(outcome.path) if outcome.path else None,
                    "size_bytes": outcome.size_bytes,
                    "detail": outcome.detail,
                }
                for outcome in self.outcomes
            ],
        }


__all__ = ["ItemOutcome", "ItemStatus", "SaveRequest", "SaveResult", "SaveStatus"]
