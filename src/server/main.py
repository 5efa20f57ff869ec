"""FastAPI application for langref."""

from __future__ import annotations

from fastapi import FastAPI

from server.routers import index_router

app = FastAPI(
    title="langref",
    description="Index multi-language reference documents into navigable markdown.",
)
app.include_router(index_router)


@app.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
