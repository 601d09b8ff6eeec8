"""Markdown report renderer."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from field_mapper.exceptions import RenderError
from field_mapper.mapping.batch import MappedOutput
from field_mapper.render.base import ArtifactTarget, OutputFormat, RenderedArtifact, atomic_text_writer


def escape_cell(value: str) -> str:
    """Escape the table delimiter; every other character is left as-is."""
    return value.replace("|", "\\|")


def generate_markdown_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    lines = ["| " + "".join(f"{escape_cell(h)} | " for h in headers)]
    lines.append("|" + " --- |" * len(headers))
    for row in rows:
        lines.append("| " + "".join(f"{escape_cell(cell)} | " for cell in row))
    return "\n".join(lines) + "\n"


def processed_report(output: MappedOutput) -> str:
    table = generate_markdown_table(output.field_order, output.processed_rows)
    return (
        "# Data Processing Report\n\n"
        "## Summary\n\n"
        f"```\n{output.summary.render()}\n```\n\n"
        "## Processed Data\n\n"
        f"{table}"
    )


def missing_report(output: MappedOutput) -> str:
    table = generate_markdown_table(output.field_order, output.missing_rows)
    return f"# Missing Data Report\n\n## Missing Records\n\n{table}"


def _write(path: Path, content: str) -> Path:
    try:
        with atomic_text_writer(path) as handle:
            handle.write(content)
    except OSError as exc:
        raise RenderError(f"error writing markdown file {path}: {exc}") from exc
    return path


def render_markdown(output: MappedOutput, target: ArtifactTarget) -> RenderedArtifact:
    processed_path = _write(target.processed_path(OutputFormat.MARKDOWN), processed_report(output))
    missing_path = _write(target.missing_path(OutputFormat.MARKDOWN), missing_report(output))
    return RenderedArtifact(
        format=OutputFormat.MARKDOWN,
        path=processed_path,
        missing_path=missing_path,
        media_type=OutputFormat.MARKDOWN.media_type,
    )


__all__ = ["escape_cell", "generate_markdown_table", "missing_report", "processed_report", "render_markdown"]
