"""Entrypoint for the FastAPI application."""

import os

import structlog
from dotenv import load_dotenv

# Load .env locally only; deployments inject env vars
env_path = os.path.join(os.path.dirname(__file__), "../.env")
if os.path.exists(env_path):
    load_dotenv(dotenv_path=os.path.abspath(env_path))

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import customers, dashboard, health, invoices
from .core.errors import DataFetchError
from .core.logging import configure_logging

LOGGER = structlog.get_logger(__name__)


async def data_fetch_error_handler(request: Request, exc: DataFetchError) -> JSONResponse:
    """Return the sanitized accessor message as a bad-gateway response."""

    LOGGER.warning("data_fetch_error_response", path=request.url.path, detail=exc.message)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": exc.message},
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Finboard Dashboard Data", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DataFetchError, data_fetch_error_handler)

    app.include_router(health.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")
    app.include_router(invoices.router, prefix="/api")
    app.include_router(customers.router, prefix="/api")

    return app


app = create_app()
