"""
Main application module for the sweep-line intersection service.

This file sets up the FastAPI application, configures CORS so browser
clients can make cross-origin requests, and exposes a simple health
check endpoint.  The intersection router is included under the
``/api`` namespace.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes_intersections import router as intersections_router


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI(title="sweepline")

    # Allow all origins by default.  Restrict this in deployments that
    # expose the service publicly.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint for monitoring and deployment probes.
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(intersections_router, prefix="/api", tags=["intersections"])

    return app


# Uvicorn imports this when running `uvicorn sweepline.main:app`.
app = create_app()
