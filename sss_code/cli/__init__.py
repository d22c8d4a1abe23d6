"""Command-line interface for sss-code."""

from sss_code.cli.main import cli

__all__ = ["cli"]
