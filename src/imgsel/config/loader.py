"""Layering of configuration sources onto the imgsel defaults."""

from __future__ import annotations

import logging
from collections.abc import Mapping as MappingABC
from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import ImgselConfig

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "IMGSEL__"
SECTIONS = tuple(ImgselConfig.model_fields)


def env_overrides(env: Mapping[str, str]) -> dict[str, dict[str, Any]]:
    """Collect ``IMGSEL__SECTION__FIELD`` variables into section overrides.

    Values are read as YAML, so numbers, booleans and whole limit tables
    (``[{user_id: u1, size_limit_mb: 5}]``) can be given. Variables that do
    not name exactly one section and one field are ignored with a warning.
    """
    overrides: dict[str, dict[str, Any]] = {}
    for key, raw in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parts = key[len(ENV_PREFIX) :].lower().split("__")
        if len(parts) != 2 or not all(parts):
            LOGGER.warning("Ignoring %s; expected %sSECTION__FIELD.", key, ENV_PREFIX)
            continue
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        section, field = parts
        overrides.setdefault(section, {})[field] = value
    return overrides


def layer(*sources: Optional[Mapping[str, Any]]) -> ImgselConfig:
    """Validate the defaults overlaid with ``sources``, later sources winning.

    Each source maps a section name to field values. Fields override the
    defaults one at a time, so a file that sets ``library.max_output`` keeps
    the default paths. A limit table is a single field and is replaced whole.

    Raises:
        ConfigError: If a section is unknown or a value fails validation.
    """
    merged: dict[str, dict[str, Any]] = {}
    for source in sources:
        if not source:
            continue
        for section, fields in source.items():
            if section not in SECTIONS:
                raise ConfigError(
                    f"Unknown configuration section '{section}'; expected one of {', '.join(SECTIONS)}."
                )
            if fields is None:
                continue
            if not isinstance(fields, MappingABC):
                raise ConfigError(f"Configuration section '{section}' must be a mapping.")
            merged.setdefault(section, {}).update(fields)

    try:
        return ImgselConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(describe_errors(exc)) from exc


def describe_errors(exc: ValidationError) -> str:
    """Render validation errors as ``section.field: message`` pairs."""
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    ]
    return "Invalid configuration values: " + "; ".join(problems)


__all__ = ["ENV_PREFIX", "SECTIONS", "describe_errors", "env_overrides", "layer"]
