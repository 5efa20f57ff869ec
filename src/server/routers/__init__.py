"""API routers."""

from server.routers.index import router as index_router

__all__ = ["index_router"]
