from abc import ABC, abstractmethod
from typing import Optional

from box_catalog.domain.models import Catalog, CatalogEntry


class CatalogStore(ABC):
    """
    Abstract base class for anything that can hand out the box catalog.
    """

    @abstractmethod
    def get_catalog(self) -> Catalog:
        """Return the current catalog, rebuilding it first if stale."""
        pass

    def get_entry(self, name: str) -> Optional[CatalogEntry]:
        """Return the entry for ``name``, or None when there is no such box."""
        return self.get_catalog().get(name)
