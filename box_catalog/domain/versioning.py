from __future__ import annotations

from pathlib import Path
from typing import Optional

import semver

from box_catalog.domain.errors import VersionParseError


def parse_version(value: str, path: Optional[Path] = None) -> semver.Version:
    """
    Parse a strict ``MAJOR.MINOR.PATCH[-prerelease][+build]`` version.

    Raises VersionParseError for anything semver rejects, including
    non-string values that slipped through decoding.
    """
    if not isinstance(value, str):
        raise VersionParseError(str(value), path)
    try:
        return semver.Version.parse(value)
    except (ValueError, TypeError) as exc:
        raise VersionParseError(value, path) from exc
