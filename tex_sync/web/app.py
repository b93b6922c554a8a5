"""
FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from tex_sync.__version__ import __version__
from tex_sync.core.config import get_db
from tex_sync.web.api import config, projects, synctex


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = get_db()
    db.init_default_config()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="tex-sync",
        description="SyncTeX forward and backward search service",
        version=__version__,
        lifespan=lifespan,
    )

    api_router = APIRouter(prefix="/api")

    @api_router.get("/health")
    async def health_check():
        return {"status": "ok", "version": __version__}

    api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
    api_router.include_router(synctex.router, prefix="/synctex", tags=["synctex"])
    api_router.include_router(config.router, prefix="/config", tags=["config"])

    app.include_router(api_router)
    return app


app = create_app()
