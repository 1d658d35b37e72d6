"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import settings
from .api.router import api_router
from .errors import FileManagerError

# Configure logging for our modules
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
logging.getLogger("paneo").setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)


async def file_manager_error_handler(request: Request, exc: FileManagerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def os_error_handler(request: Request, exc: OSError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"detail": exc.strerror or str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="paneo",
        version="0.1.0",
        description="Dual-pane file manager backend",
    )

    app.add_exception_handler(FileManagerError, file_manager_error_handler)
    app.add_exception_handler(OSError, os_error_handler)
    app.include_router(api_router, prefix="/api")

    if settings.frontend_dir.exists():
        app.mount(
            "/",
            StaticFiles(directory=str(settings.frontend_dir), html=True),
            name="frontend",
        )

    return app
