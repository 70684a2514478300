"""Command line interface."""

from gfold.cli.app import app, main

__all__ = ["app", "main"]
