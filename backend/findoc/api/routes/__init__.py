from fastapi import APIRouter
from findoc.api.routes import files, scraping, connectors, health

api_router = APIRouter()
api_router.include_router(files.router, prefix="/files", tags=["files"])
api_router.include_router(scraping.router, prefix="/scraping", tags=["scraping"])
api_router.include_router(connectors.router, prefix="/connectors", tags=["connectors"])


__all__ = ["api_router", "health"]
