"""Command line tools for designing parachutes and exporting their patterns."""

from __future__ import annotations

from .app import build_cli
from .logging_config import setup_logging

__all__ = ["build_cli", "setup_logging"]
