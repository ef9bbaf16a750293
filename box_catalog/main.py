import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.staticfiles import StaticFiles

from box_catalog import __version__
from box_catalog.api.boxes import router as boxes_router
from box_catalog.api.responses import PrettyJSONResponse
from box_catalog.core.config import ServerSettings, load_settings
from box_catalog.domain.errors import CatalogError, ConfigurationError
from box_catalog.storage.versioned_store import VersionedCatalogStore

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
USAGE = "usage: box-catalog <ROOT_PATH>"

logger = logging.getLogger(__name__)


async def catalog_error_handler(request: Request, exc: CatalogError) -> PrettyJSONResponse:
    """
    A malformed description file fails the whole rebuild; nothing partial
    or stale is served in its place.
    """
    logger.error("Failed to serve %s: %s", request.url.path, exc, exc_info=exc)
    return PrettyJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


def create_app(settings: ServerSettings) -> FastAPI:
    """
    Build the FastAPI application for one box directory.

    The catalog is not loaded here; the store builds it lazily on the
    first request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Serving boxes from %s under %s with prefix %r",
            settings.root,
            settings.mount_path,
            settings.prefix,
        )
        yield
        logger.info("Box catalog server stopped")

    app = FastAPI(
        title="Box Catalog",
        version=__version__,
        description="Versioned box metadata served from a directory of *.metadata.json files.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog_store = VersionedCatalogStore(settings.root, settings.prefix)

    app.add_exception_handler(CatalogError, catalog_error_handler)

    @app.get("/health")
    async def health() -> dict:
        """
        Lightweight health check endpoint.
        """
        return {"status": "ok"}

    app.include_router(boxes_router, prefix=settings.mount_path, tags=["boxes"])

    # Document root for the artifacts referenced by providers[].file. Mounted
    # last so the routes above take precedence.
    app.mount("/", StaticFiles(directory=str(settings.root)), name="root")

    return app


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for ``box-catalog [ROOT_PATH]`` and ``python -m box_catalog``.

    ROOT_PATH falls back to ``BOX_CATALOG_ROOT``. uvicorn installs the
    SIGINT/SIGTERM handlers and drains in-flight requests on shutdown.
    """
    import uvicorn

    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1 or any(arg in ("-h", "--help") for arg in args):
        raise SystemExit(USAGE)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    try:
        settings = load_settings(root=args[0] if args else None)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        raise SystemExit(f"{USAGE}\n{exc}") from exc

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
