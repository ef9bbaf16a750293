"""
Pydantic models for the box catalog.

This module defines:
- The on-disk description file format (one file per box version)
- The aggregated catalog entry served by the API
- The immutable catalog snapshot held by the store

Description files are decoded through these models so that missing or
malformed required fields fail at load time rather than at access time.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_DESCRIPTION = "N/A"


# ---------------------------------------------------------------------------
# On-disk description files (<root>/*.metadata.json)
# ---------------------------------------------------------------------------


class ProviderRecord(BaseModel):
    """
    A platform/format specific artifact available for one box version.

    Only ``file`` is required. Any other keys (provider name, checksum, ...)
    are kept as-is and echoed back by the detail endpoint.
    """

    model_config = ConfigDict(extra="allow")

    file: str = Field(
        description="Path of the artifact relative to the document root.",
    )


class DescriptionFile(BaseModel):
    """
    One box version as described by a ``*.metadata.json`` file.
    Unknown top-level keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(description="Raw box name, without the server prefix.")
    version: str = Field(description="Semantic version of this release.")
    description: Optional[str] = Field(
        default=DEFAULT_DESCRIPTION,
        description="Human readable description of the box.",
    )
    providers: List[ProviderRecord] = Field(
        description="Artifacts available for this version.",
    )


# ---------------------------------------------------------------------------
# Aggregated catalog
# ---------------------------------------------------------------------------


class BoxVersion(BaseModel):
    """A single release of a box together with its providers."""

    version: str
    providers: List[ProviderRecord] = Field(default_factory=list)


class CatalogEntry(BaseModel):
    """
    The canonical record for one logical box name.

    ``name`` and ``description`` always come from the highest version;
    ``versions`` is ordered ascending by semantic version.
    """

    name: str = Field(description="Prefixed logical name, e.g. 'bento/ubuntu-22.04'.")
    description: Optional[str] = Field(default=DEFAULT_DESCRIPTION)
    versions: List[BoxVersion] = Field(default_factory=list)


# Logical name -> entry. Stores hand out read-only mappings.
Catalog = Mapping[str, CatalogEntry]


class CatalogSnapshot(BaseModel):
    """
    One complete build of the catalog plus the bookkeeping needed to decide
    when it goes stale. Replaced wholesale on every rebuild, never patched.
    """

    model_config = ConfigDict(frozen=True)

    entries: Dict[str, CatalogEntry] = Field(default_factory=dict)
    last_build_source_time: float = Field(
        description="Newest description file mtime seen by this build (or the build time for an empty directory).",
    )
    last_build_time: datetime = Field(
        description="Wall-clock time at which this build completed.",
    )
    source_files: Tuple[str, ...] = Field(
        default=(),
        description="Sorted description file names this build was made from.",
    )
