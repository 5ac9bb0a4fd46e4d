"""Configuration models describing imgsel settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_FILENAME_TEMPLATE = "${date}-${time}-${index}-${guildId}-${userId}${ext}"


class ImgselBaseModel(BaseModel):
    """Shared configuration for imgsel Pydantic models."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class LibrarySettings(ImgselBaseModel):
    """Locations and limits for the media library.

    Attributes:
        image_path: Root directory holding one subdirectory per collection.
        temp_path: Holding directory for saves whose keyword matched nothing.
        max_output: Maximum number of items returned for one request.
    """

    image_path: Path = Path("~/.imgsel/library")
    temp_path: Path = Path("~/.imgsel/inbox")
    max_output: int = 5

    @field_validator("image_path", "temp_path", mode="before")
    @classmethod
    def _require_path(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("a directory path is required")
        return value


class SaveSettings(ImgselBaseModel):
    """Options governing the save workflow.

    Attributes:
        filename_template: Template used to name saved files.
        prompt_timeout: Seconds to wait for media when none were supplied.
        keyword_timeout: Seconds to wait for a keyword when none was supplied.
        fallback_on_miss: Whether unmatched keywords save into the holding directory.
    """

    filename_template: str = Field(default=DEFAULT_FILENAME_TEMPLATE, min_length=1)
    prompt_timeout: float = Field(default=30, gt=0)
    keyword_timeout: float = Field(default=30, gt=0)
    fallback_on_miss: bool = True


class UserLimit(ImgselBaseModel):
    """Upload size ceiling for one user (``default`` applies to everyone else)."""

    user_id: str = Field(min_length=1)
    size_limit_mb: float = Field(ge=0)


class GroupLimit(ImgselBaseModel):
    """Upload size ceiling for one group (``default`` applies to other groups)."""

    group_id: str = Field(min_length=1)
    size_limit_mb: float = Field(ge=0)


class LimitSettings(ImgselBaseModel):
    """Per-identity upload limits in megabytes.

    Attributes:
        users: User rows; a ``default`` row acts as the global fallback.
        groups: Group rows; a ``default`` row applies inside any group.
    """

    users: List[UserLimit] = Field(
        default_factory=lambda: [UserLimit(user_id="default", size_limit_mb=0)]
    )
    groups: List[GroupLimit] = Field(
        default_factory=lambda: [GroupLimit(group_id="default", size_limit_mb=0)]
    )


class LoggingSettings(ImgselBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level name.
        debug: Whether every resolution decision is traced at DEBUG level.
    """

    level: str = "WARNING"
    debug: bool = False

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        name = value.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown logging level '{value}'")
        return name


class ImgselConfig(ImgselBaseModel):
    """Top-level configuration struct for imgsel.

    Attributes:
        library: Library locations and output bounds.
        save: Save workflow options.
        limits: Upload quota tables.
        logging: Logging configuration.
    """

    library: LibrarySettings = Field(default_factory=LibrarySettings)
    save: SaveSettings = Field(default_factory=SaveSettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = [
    "DEFAULT_FILENAME_TEMPLATE",
    "ImgselBaseModel",
    "LibrarySettings",
    "SaveSettings",
    "UserLimit",
    "GroupLimit",
    "LimitSettings",
    "LoggingSettings",
    "ImgselConfig",
]
