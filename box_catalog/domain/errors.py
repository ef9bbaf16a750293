"""
Exception types raised while building or serving the box catalog.

A missing box is not an error: stores return ``None`` for unknown names and
the API renders that as a 404 payload.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CatalogError(Exception):
    """Base class for every failure raised by the catalog service."""


class ParseError(CatalogError):
    """A description file could not be read or decoded."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse {path}: {reason}")


class VersionParseError(CatalogError):
    """A ``version`` field is not a well-formed semantic version."""

    def __init__(self, version: str, path: Optional[Path] = None):
        self.version = version
        self.path = path
        location = f" in {path}" if path is not None else ""
        super().__init__(f"Invalid semantic version {version!r}{location}")


class ConfigurationError(CatalogError):
    """Process configuration is missing or invalid."""
