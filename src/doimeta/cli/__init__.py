"""Command-line interface for doimeta."""

from doimeta.cli.main import cli

__all__ = ["cli"]
