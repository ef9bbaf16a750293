from fastapi import Request

from box_catalog.storage.catalog_store import CatalogStore


def get_catalog_store(request: Request) -> CatalogStore:
    """
    Return the catalog store created by the application factory.
    """
    return request.app.state.catalog_store
