import os
from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timings_api.api.routes import router as timings_router
from timings_api.api.ws import router as ws_router


def cors_origins_from_env() -> list:
    """Comma-separated `TIMINGS_CORS_ORIGINS`; empty means no cross-origin access."""
    raw = os.environ.get("TIMINGS_CORS_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]


def create_app(cors_origins: Optional[Sequence[str]] = None) -> FastAPI:
    app = FastAPI(title="Build Timings Visualizer API")

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(timings_router)
    app.include_router(ws_router)

    @app.get("/")
    def root():
        return {"ok": True, "hint": "Use /health, /docs, or /timings/state"}

    return app


app = create_app(cors_origins_from_env())
