"""Canonical field configuration.

The configuration is a JSON document listing canonical fields in output order::

    {
        "fields": [
            {"name": "Client_Code", "displayName": "Client Code", "isMandatory": true},
            ...
        ],
        "mandatoryFields": ["Client_Code"]
    }

``mandatoryFields`` is accepted for compatibility with older documents but is
derived from the per-field flag; the flag wins.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from field_mapper.exceptions import ConfigError

DEFAULT_CONFIG_RESOURCE = "field_config.json"


class FieldDefinition(BaseModel):
    """One canonical output column."""

    name: str = Field(min_length=1)
    display_name: str = Field(alias="displayName")
    mandatory: bool = Field(default=False, alias="isMandatory")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class FieldConfig(BaseModel):
    """Ordered, read-only collection of :class:`FieldDefinition`."""

    fields: tuple[FieldDefinition, ...] = ()
    mandatory_field_names: tuple[str, ...] = Field(default=(), alias="mandatoryFields", exclude=True)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    @field_validator("fields")
    @classmethod
    def _unique_names(cls, value: tuple[FieldDefinition, ...]) -> tuple[FieldDefinition, ...]:
        seen: set[str] = set()
        duplicates: list[str] = []
        for definition in value:
            if definition.name in seen:
                duplicates.append(definition.name)
            seen.add(definition.name)
        if duplicates:
            raise ValueError(f"duplicate field name(s): {', '.join(duplicates)}")
        return value

    def ordered_fields(self) -> list[str]:
        return [definition.name for definition in self.fields]

    def display_names(self) -> dict[str, str]:
        return {definition.name: definition.display_name for definition in self.fields}

    def mandatory_fields(self) -> list[str]:
        """Display names of the mandatory fields, in declaration order."""
        return [definition.display_name for definition in self.fields if definition.mandatory]

    def index(self) -> dict[str, FieldDefinition]:
        return {definition.name: definition for definition in self.fields}

    def get(self, name: str) -> FieldDefinition | None:
        return self.index().get(name)

    def is_mandatory(self, name: str) -> bool:
        definition = self.get(name)
        return bool(definition and definition.mandatory)

    def describe(self) -> dict[str, Any]:
        """JSON-ready view: fields, ordered names and mandatory display names."""
        return {
            "fields": [definition.model_dump(by_alias=True) for definition in self.fields],
            "mandatoryFields": self.mandatory_fields(),
            "orderedFields": self.ordered_fields(),
        }


def parse_field_config(data: Any, *, source: str = "<memory>") -> FieldConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Field configuration in {source} must be a JSON object")
    try:
        return FieldConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid field configuration in {source}: {exc}") from exc


def load_field_config(path: Path | str | None = None) -> FieldConfig:
    """Load a field configuration file, or the bundled default when ``path`` is None."""

    if path is None:
        resource = resources.files("field_mapper.config") / DEFAULT_CONFIG_RESOURCE
        text = resource.read_text(encoding="utf-8")
        source = f"bundled {DEFAULT_CONFIG_RESOURCE}"
    else:
        config_path = Path(path).expanduser()
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Error reading config file {config_path}: {exc}") from exc
        source = str(config_path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Error parsing config file {source}: {exc}") from exc

    return parse_field_config(data, source=source)


__all__ = [
    "DEFAULT_CONFIG_RESOURCE",
    "FieldConfig",
    "FieldDefinition",
    "load_field_config",
    "parse_field_config",
]
