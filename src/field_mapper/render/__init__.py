"""Output renderers for mapped tables."""

from __future__ import annotations

from typing import Callable

from field_mapper.mapping.batch import MappedOutput
from field_mapper.render.base import ArtifactTarget, OutputFormat, RenderedArtifact
from field_mapper.render.delimited import render_delimited
from field_mapper.render.markdown import generate_markdown_table, render_markdown
from field_mapper.render.xlsx import render_xlsx

Renderer = Callable[[MappedOutput, ArtifactTarget], RenderedArtifact]

RENDERERS: dict[OutputFormat, Renderer] = {
    OutputFormat.XLSX: render_xlsx,
    OutputFormat.CSV: render_delimited,
    OutputFormat.MARKDOWN: render_markdown,
}


def render(output: MappedOutput, fmt: OutputFormat | str | None, target: ArtifactTarget) -> RenderedArtifact:
    """Render ``output`` with the renderer registered for ``fmt``."""
    return RENDERERS[OutputFormat.parse(fmt)](output, target)


__all__ = [
    "RENDERERS",
    "ArtifactTarget",
    "OutputFormat",
    "RenderedArtifact",
    "Renderer",
    "generate_markdown_table",
    "render",
]
