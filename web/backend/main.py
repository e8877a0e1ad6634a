"""OverSeek Flow Builder - FastAPI Application."""

from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .routes import conditions_router, flows_router, recipes_router, registry_router


def _cors_origins() -> list[str]:
    raw = os.getenv("OVERSEEKFLOW_CORS_ORIGINS") or "*"
    return [o.strip() for o in raw.split(",") if o.strip()]


app = FastAPI(
    title="OverSeek Flow Builder",
    description="Marketing automation flow definitions for the OverSeek dashboard",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(flows_router, prefix="/api")
app.include_router(registry_router, prefix="/api")
app.include_router(conditions_router, prefix="/api")
app.include_router(recipes_router, prefix="/api")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "overseekflow-builder"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "web.backend.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        reload=True,
    )
