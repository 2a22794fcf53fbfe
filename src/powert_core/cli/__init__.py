"""Command-line interface for powert-core."""

from powert_core.cli.main import app

__all__ = ["app"]
