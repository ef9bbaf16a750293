import json
import logging
import stat
import time
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple

import semver
from pydantic import ValidationError

from box_catalog.domain.errors import ParseError
from box_catalog.domain.models import (
    BoxVersion,
    Catalog,
    CatalogEntry,
    CatalogSnapshot,
    DescriptionFile,
)
from box_catalog.domain.versioning import parse_version
from box_catalog.storage.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

DESCRIPTION_FILE_PATTERN = "*.metadata.json"

# Sweeps attempted when description files disappear mid-rebuild.
MAX_SCAN_ATTEMPTS = 3

# (path, st_mtime) pairs from one stat sweep, sorted by file name.
SourceScan = List[Tuple[Path, float]]


class VersionedCatalogStore(CatalogStore):
    """
    Catalog built from a flat directory of ``*.metadata.json`` files.

    Every lookup runs a stat sweep over the directory. The catalog is rebuilt
    when no build exists yet, when the set of description files changed, or
    when the newest mtime is later than the one recorded at the last build.

    Rebuilds assemble a complete CatalogSnapshot and publish it with a single
    attribute assignment, so concurrent readers see either the old or the new
    catalog. Two requests may rebuild at the same time; the work is
    side-effect free so the last one to finish simply wins.
    """

    def __init__(self, root: Path, prefix: str = "bento"):
        self._root = Path(root)
        self._prefix = prefix
        self._snapshot: Optional[CatalogSnapshot] = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def snapshot(self) -> Optional[CatalogSnapshot]:
        """The most recently published build, if any."""
        return self._snapshot

    def get_catalog(self) -> Catalog:
        snapshot = self._snapshot
        for attempt in range(1, MAX_SCAN_ATTEMPTS + 1):
            sources = self._scan_sources()
            if not self._is_stale(snapshot, sources):
                break
            try:
                snapshot = self._build_snapshot(sources)
            except FileNotFoundError as exc:
                # A description file vanished after the sweep; sweep again.
                if attempt == MAX_SCAN_ATTEMPTS:
                    raise ParseError(Path(exc.filename or self._root), str(exc)) from exc
                logger.debug("Description file removed during rebuild, rescanning: %s", exc)
                continue
            self._snapshot = snapshot
            break
        return MappingProxyType(snapshot.entries)

    # ------------------------------------------------------------------
    # Staleness
    # ------------------------------------------------------------------

    def _scan_sources(self) -> SourceScan:
        sources: SourceScan = []
        for path in sorted(self._root.glob(DESCRIPTION_FILE_PATTERN)):
            # Hidden files (AppleDouble "._*", editor swap files) are not boxes.
            if path.name.startswith("."):
                continue
            try:
                st = path.stat()
            except FileNotFoundError:
                # Removed between glob and stat.
                continue
            if stat.S_ISREG(st.st_mode):
                sources.append((path, st.st_mtime))
        return sources

    @staticmethod
    def _is_stale(snapshot: Optional[CatalogSnapshot], sources: SourceScan) -> bool:
        if snapshot is None:
            return True
        if tuple(path.name for path, _ in sources) != snapshot.source_files:
            return True
        if not sources:
            return False
        return max(mtime for _, mtime in sources) > snapshot.last_build_source_time

    # ------------------------------------------------------------------
    # Rebuild
    # ------------------------------------------------------------------

    def _build_snapshot(self, sources: SourceScan) -> CatalogSnapshot:
        logger.info("Loading or refreshing box metadata catalog from %s", self._root)

        descriptions = [(path, self._read_description(path)) for path, _ in sources]
        entries = self._aggregate(descriptions)

        if sources:
            source_time = max(mtime for _, mtime in sources)
        else:
            source_time = time.time()

        logger.debug(
            "Catalog built: %d boxes from %d description files", len(entries), len(sources)
        )
        return CatalogSnapshot(
            entries=entries,
            last_build_source_time=source_time,
            last_build_time=datetime.now(timezone.utc),
            source_files=tuple(path.name for path, _ in sources),
        )

    def _read_description(self, path: Path) -> DescriptionFile:
        """
        Decode one description file. Any failure aborts the whole rebuild.
        """
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            # Handled by get_catalog, which sweeps the directory again.
            raise
        except (OSError, ValueError) as exc:
            # ValueError covers JSONDecodeError and UnicodeDecodeError.
            raise ParseError(path, str(exc)) from exc

        if not isinstance(raw, dict):
            raise ParseError(path, f"expected a JSON object, got {type(raw).__name__}")

        try:
            return DescriptionFile.model_validate(raw)
        except ValidationError as exc:
            raise ParseError(path, str(exc)) from exc

    def _aggregate(self, descriptions: List[Tuple[Path, DescriptionFile]]) -> Dict[str, CatalogEntry]:
        # Groups keep first-seen order; members keep file name order until sorted.
        groups: Dict[str, List[Tuple[semver.Version, DescriptionFile]]] = {}
        for path, description in descriptions:
            name = f"{self._prefix}/{description.name}"
            parsed = parse_version(description.version, path)
            groups.setdefault(name, []).append((parsed, description))

        entries: Dict[str, CatalogEntry] = {}
        for name, members in groups.items():
            # list.sort is stable: equal versions stay in file name order.
            members.sort(key=lambda member: member[0])
            latest = members[-1][1]
            entries[name] = CatalogEntry(
                name=name,
                description=latest.description,
                versions=[
                    BoxVersion(version=d.version, providers=d.providers)
                    for _, d in members
                ],
            )
        return entries
