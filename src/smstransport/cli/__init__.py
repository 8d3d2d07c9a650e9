"""Command-line interface for smstransport."""

from smstransport.cli.main import main

__all__ = ["main"]
