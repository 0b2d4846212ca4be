# src/kubemeter/cli/__init__.py
"""
kubemeter CLI Package

This package exposes the top-level Typer `app` so tests and the console
entrypoint can import `kubemeter.cli.app`.
"""

from ..reporters.console_reporter import ConsoleReporter
from .main import app

__all__ = ["app", "ConsoleReporter"]
