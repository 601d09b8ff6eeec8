"""Command line interface for :mod:`field_mapper`."""

from field_mapper.cli.app import app, main

__all__ = ["app", "main"]
