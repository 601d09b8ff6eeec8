"""Canonical field configuration."""

from field_mapper.config.field_config import (
    DEFAULT_CONFIG_RESOURCE,
    FieldConfig,
    FieldDefinition,
    load_field_config,
    parse_field_config,
)

__all__ = [
    "DEFAULT_CONFIG_RESOURCE",
    "FieldConfig",
    "FieldDefinition",
    "load_field_config",
    "parse_field_config",
]
