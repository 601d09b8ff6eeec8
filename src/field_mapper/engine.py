"""Pipeline orchestration: read → normalize → classify → summarize → render."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from field_mapper.config.field_config import FieldConfig, load_field_config
from field_mapper.exceptions import (
    FieldMapperError,
    InputError,
    NoDataError,
    RenderError,
    UnsupportedFormatError,
)
from field_mapper.io.reader import read_table
from field_mapper.logging import RunLogger, create_run_logger_context
from field_mapper.mapping.batch import classify_rows, unmapped_mandatory_fields
from field_mapper.mapping.summary import Summary
from field_mapper.models import (
    ProcessError,
    ProcessErrorKind,
    ProcessRequest,
    ProcessResult,
    ProcessStatus,
    generate_run_id,
)
from field_mapper.render import ArtifactTarget, OutputFormat, RenderedArtifact, render
from field_mapper.settings import Settings


def _error_kind(exc: FieldMapperError) -> ProcessErrorKind:
    if isinstance(exc, UnsupportedFormatError):
        return ProcessErrorKind.UNSUPPORTED_FORMAT
    if isinstance(exc, NoDataError):
        return ProcessErrorKind.NO_DATA
    if isinstance(exc, RenderError):
        return ProcessErrorKind.RENDER_ERROR
    return ProcessErrorKind.READ_ERROR


def _error_message(kind: ProcessErrorKind, exc: FieldMapperError) -> str:
    if kind in (ProcessErrorKind.READ_ERROR, ProcessErrorKind.UNSUPPORTED_FORMAT):
        return f"Error opening file: {exc}"
    return str(exc)


class Engine:
    """Process one source file per call against an injected field configuration.

    The engine holds no per-request state, so one instance can serve
    concurrent requests; artifact names are kept apart by ``run_id``.
    """

    def __init__(self, *, field_config: FieldConfig | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.field_config = field_config or load_field_config(self.settings.field_config)

    def _settings_snapshot(self) -> dict[str, Any]:
        raw = self.settings.model_dump(mode="json", exclude_none=True)
        return dict(raw)

    def _resolve_format(self, request: ProcessRequest, logger: RunLogger) -> OutputFormat:
        requested = request.output_format if request.output_format is not None else self.settings.output_format
        fmt = OutputFormat.lookup(requested)
        if fmt is None:
            logger.event(
                "output.format_fallback",
                message=f"Unknown output format {requested!r}; writing xlsx",
                level=logging.WARNING,
                data={"requested": str(requested), "used": OutputFormat.XLSX.value},
            )
            fmt = OutputFormat.XLSX
        return fmt

    def _check_extension(self, input_file: Path) -> None:
        allowed = self.settings.supported_file_extensions
        suffix = input_file.suffix.lower()
        if allowed and suffix not in allowed:
            raise UnsupportedFormatError(
                f"Unsupported file format `{suffix or input_file.name}`: expected one of {', '.join(allowed)}"
            )

    # ------------------------------------------------------------------
    def process(self, request: ProcessRequest, *, logger: RunLogger | None = None) -> ProcessResult:
        run_id = request.run_id or generate_run_id()
        if logger is not None:
            return self._execute(request, run_id=run_id, logger=logger)

        with create_run_logger_context(
            run_id=run_id,
            log_format=self.settings.log_format,
            log_level=self.settings.log_level,
        ) as log_ctx:
            return self._execute(request, run_id=run_id, logger=log_ctx.logger)

    def _execute(self, request: ProcessRequest, *, run_id: str, logger: RunLogger) -> ProcessResult:
        started_at = datetime.now(timezone.utc)
        input_file = Path(request.input_file).expanduser()
        output_dir = Path(request.output_dir or self.settings.output_dir).expanduser()
        mapping = dict(request.mapping or {})

        logger.event(
            "settings.effective",
            message="Effective mapper settings",
            level=logging.DEBUG,
            data={"settings": self._settings_snapshot()},
        )

        fmt = self._resolve_format(request, logger)
        logger.event(
            "run.started",
            message=f"Processing {input_file.name}",
            data={
                "input_file": str(input_file),
                "output_format": fmt.value,
                "output_dir": str(output_dir),
                "mapped_fields": sorted(name for name, column in mapping.items() if (column or "").strip()),
            },
        )

        summary: Summary | None = None
        artifact: RenderedArtifact | None = None
        error: ProcessError | None = None

        try:
            self._check_extension(input_file)
            table = read_table(input_file)
            logger.event(
                "table.read",
                message="Source table loaded",
                data={
                    "input_file": str(input_file),
                    "row_count": len(table),
                    "column_count": len(table[0]) if table else 0,
                },
            )

            unmapped = unmapped_mandatory_fields(self.field_config, mapping)
            if unmapped:
                logger.event(
                    "mapping.incomplete",
                    message="Mandatory fields have no mapped column; affected rows will be reported as missing",
                    level=logging.WARNING,
                    data={"unmapped_mandatory_fields": unmapped},
                )

            batch = classify_rows(table, mapping, self.field_config)
            summary = batch.summary
            logger.event(
                "rows.classified",
                message="Rows classified",
                data={
                    "total_rows": summary.total_rows,
                    "successful_rows": summary.successful_rows,
                    "missing_rows": summary.missing_rows,
                    "field_count": len(batch.field_order),
                },
            )

            artifact = render(batch.to_output(), fmt, ArtifactTarget(output_dir=output_dir, run_id=run_id))
            logger.event(
                "output.written",
                message="Output written",
                data={
                    "output_format": artifact.format.value,
                    "output_path": str(artifact.path),
                    "missing_path": str(artifact.missing_path) if artifact.missing_path else None,
                },
            )
        except (InputError, RenderError) as exc:
            kind = _error_kind(exc)
            error = ProcessError(kind=kind, message=_error_message(kind, exc))
            logger.event(
                "log",
                message=error.message,
                level=logging.ERROR,
                data={"kind": kind.value},
                exc=exc if logger.isEnabledFor(logging.DEBUG) else None,
            )

        completed_at = datetime.now(timezone.utc)
        status = ProcessStatus.SUCCEEDED if error is None else ProcessStatus.FAILED
        logger.event(
            "run.completed",
            message=f"Run {status.value}",
            level=logging.INFO if error is None else logging.ERROR,
            data={
                "status": status.value,
                "started_at": started_at.isoformat(),
                "completed_at": completed_at.isoformat(),
                "output_path": str(artifact.path) if artifact else None,
                "error": {"kind": error.kind.value, "message": error.message} if error else None,
            },
        )

        return ProcessResult(
            status=status,
            run_id=run_id,
            summary=summary,
            artifact=artifact,
            error=error,
            started_at=started_at,
            completed_at=completed_at,
        )


__all__ = ["Engine"]
