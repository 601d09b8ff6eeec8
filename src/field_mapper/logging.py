"""
field_mapper/logging.py

Run-scoped structured logging (stdlib ``logging`` plus pydantic payload models).

Every record written during a run carries the run id, a per-record event id and
an event name. Rendered as NDJSON one record looks like::

    {"event_id": "...", "run_id": "1718...", "timestamp": "2024-06-01T10:00:00.000Z",
     "level": "info", "event": "mapper.rows.classified", "message": "Rows classified",
     "data": {"total_rows": 2, "successful_rows": 2, "missing_rows": 0, "field_count": 5}}

Events in the ``mapper`` namespace must be listed in :data:`EVENT_SCHEMAS`; when
the entry is a model, the payload is validated strictly before it is logged.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

MAPPER_NAMESPACE = "mapper"
DEFAULT_EVENT = "log"
LOG_FORMATS = ("text", "ndjson")


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")


class RunStartedPayload(_Payload):
    input_file: str
    output_format: str
    output_dir: str
    mapped_fields: list[str]


class TableReadPayload(_Payload):
    input_file: str
    row_count: int
    column_count: int


class MappingIncompletePayload(_Payload):
    unmapped_mandatory_fields: list[str]


class RowsClassifiedPayload(_Payload):
    total_rows: int
    successful_rows: int
    missing_rows: int
    field_count: int


class OutputWrittenPayload(_Payload):
    output_format: str
    output_path: str
    missing_path: str | None = None


class RunCompletedPayload(_Payload):
    status: str
    started_at: str
    completed_at: str
    output_path: str | None = None
    error: dict[str, Any] | None = None


# Short event name -> payload model (None: known event, free-form payload).
EVENT_SCHEMAS: dict[str, type[BaseModel] | None] = {
    DEFAULT_EVENT: None,
    "settings.effective": None,
    "output.format_fallback": None,
    "run.started": RunStartedPayload,
    "table.read": TableReadPayload,
    "mapping.incomplete": MappingIncompletePayload,
    "rows.classified": RowsClassifiedPayload,
    "output.written": OutputWrittenPayload,
    "run.completed": RunCompletedPayload,
}


def qualify_event_name(name: str, namespace: str = MAPPER_NAMESPACE) -> str:
    """Prefix ``name`` with ``namespace`` unless it already lives there."""

    short = (name or "").strip(" .")
    ns = (namespace or "").strip(" .")
    if not ns:
        return short or "invalid_event"
    if not short:
        return f"{ns}.invalid_event"
    if short == ns or short.startswith(ns + "."):
        return short
    return f"{ns}.{short}"


def validate_event_payload(event: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Check a fully qualified event against :data:`EVENT_SCHEMAS`."""

    prefix = MAPPER_NAMESPACE + "."
    if not event.startswith(prefix):
        return payload

    short = event[len(prefix):]
    if short not in EVENT_SCHEMAS:
        raise ValueError(f"Unknown mapper event '{event}'")

    model = EVENT_SCHEMAS[short]
    if model is None:
        return payload
    try:
        return model.model_validate(payload, strict=True).model_dump(exclude_none=True)
    except ValidationError as exc:
        raise ValueError(f"Invalid payload for event '{event}': {exc}") from exc


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def record_to_event(record: logging.LogRecord, formatter: logging.Formatter) -> dict[str, Any]:
    """Flatten a record (stamped by :class:`RunLogger` or not) into the event shape."""

    timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
    event: dict[str, Any] = {
        "event_id": str(getattr(record, "event_id", "") or uuid.uuid4().hex),
        "run_id": str(getattr(record, "run_id", "") or ""),
        "timestamp": timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "level": record.levelname.lower(),
        "event": str(getattr(record, "event", "") or DEFAULT_EVENT),
        "message": record.getMessage(),
    }

    data = getattr(record, "data", None)
    if isinstance(data, Mapping) and data:
        event["data"] = dict(data)

    if record.exc_info:
        exc_type, exc, _ = record.exc_info
        event["error"] = {
            "type": exc_type.__name__ if exc_type else "",
            "message": str(exc) if exc is not None else "",
            "stack_trace": formatter.formatException(record.exc_info),
        }
    return event


class NdjsonFormatter(logging.Formatter):
    """One compact JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        return json.dumps(record_to_event(record, self), ensure_ascii=False, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """``[timestamp] LEVEL event: message (k=v, ...)`` plus any traceback."""

    max_items = 8
    max_value_len = 120

    def _short(self, value: Any) -> str:
        text = str(value)
        if len(text) > self.max_value_len:
            return text[: self.max_value_len - 1] + "…"
        return text

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        event = record_to_event(record, self)
        line = f"[{event['timestamp']}] {event['level'].upper()} {event['event']}"
        if event["message"] and event["message"] != event["event"]:
            line += f": {event['message']}"

        data = event.get("data") or {}
        if data:
            keys = sorted(data, key=str)
            parts = [f"{key}={self._short(data[key])}" for key in keys[: self.max_items]]
            if len(keys) > self.max_items:
                parts.append("…")
            line += " (" + ", ".join(parts) + ")"

        error = event.get("error")
        if error and error.get("stack_trace"):
            line += "\n" + error["stack_trace"].rstrip("\n")
        return line


# ---------------------------------------------------------------------------
# Loggers
# ---------------------------------------------------------------------------


class RunLogger(logging.LoggerAdapter):
    """Adapter that stamps run and event ids and emits validated domain events."""

    def __init__(self, logger: logging.Logger, *, namespace: str = MAPPER_NAMESPACE, run_id: str | None = None) -> None:
        self.namespace = (namespace or "").strip(" .")
        self.run_id = run_id or uuid.uuid4().hex
        super().__init__(logger, {"run_id": self.run_id})

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        extra = dict(kwargs.pop("extra", None) or {})
        extra["run_id"] = self.run_id
        extra.setdefault("event_id", uuid.uuid4().hex)
        extra.setdefault("event", qualify_event_name(DEFAULT_EVENT, self.namespace))
        kwargs["extra"] = extra
        return msg, kwargs

    def event(
        self,
        name: str,
        *,
        message: str | None = None,
        level: int = logging.INFO,
        data: Mapping[str, Any] | None = None,
        exc: BaseException | None = None,
    ) -> None:
        """Log the event ``name`` (qualified under the namespace) with a payload."""

        if not self.isEnabledFor(level):
            return

        full_name = qualify_event_name(name, self.namespace)
        payload = validate_event_payload(full_name, dict(data or {}))

        extra: dict[str, Any] = {"event": full_name}
        if payload:
            extra["data"] = payload
        exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
        self.log(level, message or full_name, extra=extra, exc_info=exc_info)


class NullLogger(RunLogger):
    """Discards everything; for library callers and tests."""

    def __init__(self, *, run_id: str = "null") -> None:
        sink = logging.Logger("field_mapper.null")
        sink.addHandler(logging.NullHandler())
        sink.propagate = False
        sink.disabled = True
        super().__init__(sink, run_id=run_id)

    def __bool__(self) -> bool:
        return False


@dataclass
class RunLogContext:
    """A run logger plus the handlers to detach when the run ends."""

    logger: RunLogger
    base_logger: logging.Logger
    handlers: list[logging.Handler] = field(default_factory=list)

    def close(self) -> None:
        for handler in self.handlers:
            self.base_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()

    def __enter__(self) -> "RunLogContext":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


def create_run_logger_context(
    *,
    run_id: str | None = None,
    namespace: str = MAPPER_NAMESPACE,
    log_format: str = "text",
    log_level: int = logging.INFO,
    enable_console_logging: bool = True,
    log_file: Path | None = None,
) -> RunLogContext:
    """Build a run logger writing to stderr and/or ``log_file``.

    ``log_format`` is ``text`` or ``ndjson`` (``json`` is accepted as an alias).
    """

    fmt = (log_format or "text").strip().lower()
    fmt = "ndjson" if fmt == "json" else fmt
    if fmt not in LOG_FORMATS:
        raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}; got {log_format!r}")
    formatter: logging.Formatter = NdjsonFormatter() if fmt == "ndjson" else TextFormatter()

    handlers: list[logging.Handler] = []
    if enable_console_logging:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    run_id = run_id or uuid.uuid4().hex
    base_logger = logging.getLogger(f"field_mapper.run.{run_id}")
    base_logger.setLevel(log_level)
    base_logger.propagate = False
    for existing in list(base_logger.handlers):
        base_logger.removeHandler(existing)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        base_logger.addHandler(handler)

    return RunLogContext(
        logger=RunLogger(base_logger, namespace=namespace, run_id=run_id),
        base_logger=base_logger,
        handlers=handlers,
    )


__all__ = [
    "DEFAULT_EVENT",
    "EVENT_SCHEMAS",
    "LOG_FORMATS",
    "MAPPER_NAMESPACE",
    "NdjsonFormatter",
    "NullLogger",
    "RunLogContext",
    "RunLogger",
    "TextFormatter",
    "create_run_logger_context",
    "qualify_event_name",
    "record_to_event",
    "validate_event_payload",
]
