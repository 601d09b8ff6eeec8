"""Request/result types for a single processing run.

- ``ProcessRequest`` is caller-provided input (paths may be relative).
- ``ProcessResult`` is a tagged outcome: check ``status`` (or ``ok``) rather
  than inspecting which fields are empty.
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Mapping

from field_mapper.mapping.summary import Summary
from field_mapper.render.base import OutputFormat, RenderedArtifact


def generate_run_id() -> str:
    """Unique artifact prefix: nanosecond timestamp plus 8 random hex characters."""
    return f"{time.time_ns()}_{secrets.token_hex(4)}"


class ProcessStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ProcessErrorKind(str, Enum):
    """Categorization for failures surfaced to callers."""

    UNSUPPORTED_FORMAT = "unsupported_format"
    READ_ERROR = "read_error"
    NO_DATA = "no_data"
    RENDER_ERROR = "render_error"


@dataclass
class ProcessRequest:
    """Inputs and options for one file."""

    input_file: Path
    mapping: Mapping[str, str | None] = field(default_factory=dict)
    output_format: OutputFormat | str | None = None  # None -> Settings.output_format
    output_dir: Path | None = None  # None -> Settings.output_dir
    run_id: str | None = None  # None -> generate_run_id()


@dataclass(frozen=True)
class ProcessError:
    kind: ProcessErrorKind
    message: str


@dataclass(frozen=True)
class ProcessResult:
    status: ProcessStatus
    run_id: str
    summary: Summary | None = None
    artifact: RenderedArtifact | None = None
    error: ProcessError | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def ok(self) -> bool:
        return self.status == ProcessStatus.SUCCEEDED

    @property
    def summary_text(self) -> str:
        """Summary when one was computed, else the error message."""
        if self.summary is not None:
            return self.summary.render()
        return self.error.message if self.error else ""

    @property
    def output_path(self) -> Path | None:
        return self.artifact.path if self.artifact else None


__all__ = [
    "ProcessError",
    "ProcessErrorKind",
    "ProcessRequest",
    "ProcessResult",
    "ProcessStatus",
    "generate_run_id",
]
