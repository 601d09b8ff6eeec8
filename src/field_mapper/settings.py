"""Runtime settings, loaded with ``pydantic-settings``.

Sources, lowest precedence first:

1. ``settings.toml`` in the working directory (flat keys, one per field)
2. ``.env`` in the working directory
3. ``FIELD_MAPPER_*`` environment variables
4. explicit keyword arguments (``Settings(...)``, ``Settings.load(...)``, CLI flags)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, TomlConfigSettingsSource

ENV_PREFIX = "FIELD_MAPPER_"
SETTINGS_TOML = "settings.toml"
DEFAULT_EXTENSIONS = (".xlsx", ".xlsm", ".csv")


def parse_log_level(value: Any) -> int:
    """Accept an int, a numeric string or a level name such as ``"warning"``."""

    if isinstance(value, bool):
        raise ValueError("log_level must be a number or a level name")
    if isinstance(value, int):
        return value

    text = str(value).strip()
    if not text:
        return logging.INFO
    if text.isdigit():
        return int(text)

    level = logging.getLevelNamesMapping().get(text.upper())
    if level is None:
        raise ValueError(f"Invalid log_level: {value!r}")
    return level


def normalize_extension(value: str) -> str:
    """``"CSV"``, ``"*.csv"`` and ``".csv"`` all become ``".csv"``."""
    return "." + value.strip().lstrip("*").lstrip(".").lower()


class Settings(BaseSettings):
    """Mapper settings shared by the engine and the CLI."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_file=".env", extra="ignore")

    field_config: Path | None = Field(
        default=None,
        description="Field configuration JSON; the bundled field_config.json when unset.",
    )
    output_dir: Path = Field(default=Path("uploads"), description="Where artifacts are written.")
    output_format: str = Field(default="xlsx", description="xlsx (alias excel), csv or markdown.")

    log_format: Literal["text", "ndjson"] = "text"
    log_level: int = logging.INFO

    supported_file_extensions: tuple[str, ...] = Field(
        default=DEFAULT_EXTENSIONS,
        description="Input extensions the engine accepts (list or comma-separated string).",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _log_level(cls, value: Any) -> int:
        return parse_log_level(value)

    @field_validator("output_format", mode="before")
    @classmethod
    def _output_format(cls, value: Any) -> str:
        return str(value or "").strip().lower() or "xlsx"

    @field_validator("supported_file_extensions", mode="before")
    @classmethod
    def _extensions(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        items = value.split(",") if isinstance(value, str) else list(value)
        return tuple(normalize_extension(str(item)) for item in items if str(item).strip())

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Settings.load passes the toml location through the init kwargs.
        init_kwargs = getattr(init_settings, "init_kwargs", {})
        toml_files = init_kwargs.get("_toml_files") or [Path.cwd() / SETTINGS_TOML]
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_files),
            file_secret_settings,
        )

    @classmethod
    def load(cls, *, cwd: Path | None = None, **overrides: Any) -> "Settings":
        """Resolve ``settings.toml`` and ``.env`` against ``cwd``; ``None`` overrides are ignored."""

        base = (cwd or Path.cwd()).expanduser().resolve()
        explicit = {key: value for key, value in overrides.items() if value is not None}
        return cls(_toml_files=[base / SETTINGS_TOML], _env_file=base / ".env", **explicit)


__all__ = ["DEFAULT_EXTENSIONS", "ENV_PREFIX", "SETTINGS_TOML", "Settings", "normalize_extension", "parse_log_level"]
