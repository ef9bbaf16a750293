from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status

from box_catalog.api.responses import PrettyJSONResponse
from box_catalog.core.dependencies import get_catalog_store
from box_catalog.domain.box_utils import add_provider_urls, join_url
from box_catalog.domain.models import CatalogEntry
from box_catalog.storage.catalog_store import CatalogStore

logger = logging.getLogger(__name__)
router = APIRouter(default_response_class=PrettyJSONResponse)

# Endpoints are plain ``def`` so FastAPI runs them in its threadpool; the
# store does blocking filesystem reads.


# ---------------------------------------------------------------------------
# 1. GET <mount>
# ---------------------------------------------------------------------------

@router.get("")
def list_boxes(
    request: Request,
    store: CatalogStore = Depends(get_catalog_store),
) -> PrettyJSONResponse:
    """
    Every box with its detail URL and its versions in ascending order.
    """
    catalog = store.get_catalog()
    base_url = str(request.url.replace(query="", fragment=""))

    boxes = {
        name: {
            "url": join_url(base_url, name),
            "versions": [v.version for v in entry.versions],
        }
        for name, entry in catalog.items()
    }
    return PrettyJSONResponse(status_code=status.HTTP_200_OK, content=boxes)


# ---------------------------------------------------------------------------
# 2. GET <mount>/<name>
# ---------------------------------------------------------------------------

@router.get("/{name:path}")
def get_box(
    name: str,
    request: Request,
    store: CatalogStore = Depends(get_catalog_store),
) -> PrettyJSONResponse:
    """
    Full metadata for one box with absolute provider download URLs.

    ``<mount>/`` with an empty name is the list endpoint.
    """
    if not name:
        return list_boxes(request, store)

    entry = store.get_entry(name)
    if entry is None:
        return box_not_found(name)

    web_root = str(request.url.replace(path="/", query="", fragment=""))
    return PrettyJSONResponse(
        status_code=status.HTTP_200_OK,
        content=render_entry(entry, web_root),
    )


def render_entry(entry: CatalogEntry, web_root: str) -> dict:
    """
    Serialise an entry for the detail view. Works on a copy so the cached
    catalog never picks up request-specific URLs.
    """
    return add_provider_urls(entry.model_dump(mode="json"), web_root)


def box_not_found(name: str) -> PrettyJSONResponse:
    logger.debug("Box %s not found", name)
    return PrettyJSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": f"No box {name} found."},
    )
