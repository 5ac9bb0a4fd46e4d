"""Custom exceptions for configuration management."""

from imgsel.errors import ImgselError


class ConfigError(ImgselError):
    """Raised when configuration data cannot be processed."""
