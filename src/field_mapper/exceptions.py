"""Field mapper error hierarchy."""

from __future__ import annotations


class FieldMapperError(Exception):
    """Base class for field-mapper exceptions."""


class ConfigError(FieldMapperError):
    """Raised when the field configuration is missing or invalid."""


class InputError(FieldMapperError):
    """Raised when a source file cannot be turned into a table."""


class UnsupportedFormatError(InputError):
    """Raised when the source extension is neither CSV nor a spreadsheet."""


class ReadError(InputError):
    """Raised when opening or parsing the source fails."""


class NoDataError(InputError):
    """Raised when the source parsed to zero rows."""


class RenderError(FieldMapperError):
    """Raised when an output artifact cannot be created or written."""


__all__ = [
    "FieldMapperError",
    "ConfigError",
    "InputError",
    "UnsupportedFormatError",
    "ReadError",
    "NoDataError",
    "RenderError",
]
