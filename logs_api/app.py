from __future__ import annotations

import asyncio
import json
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings, get_settings
from .logging_config import configure_logging, logger
from .routes import api_router
from .services import EventStore, PersistenceGateway
from .utils import error_response


# Register global exception handlers for consistent error responses across the API
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.debug("validation error", extra={"errors": exc.errors(), "path": str(request.url)})
        return error_response(
            "Invalid request",
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException):
        logger.debug(
            "http error",
            extra={"detail": exc.detail, "status": exc.status_code, "path": str(request.url)},
        )
        detail = exc.detail
        if not isinstance(detail, str):
            detail = json.dumps(detail)
        return JSONResponse({"success": False, "error": detail}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": str(request.url)})
        return error_response("Internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


# Flush the store one last time when the server stops; uvicorn maps SIGINT/SIGTERM to shutdown
def register_lifecycle_hooks(app: FastAPI, settings: Settings) -> None:
    @app.on_event("startup")
    async def _announce() -> None:
        base = f"http://localhost:{settings.server_port}"
        logger.info(f"Logs server running at {base}", extra={"data_dir": str(settings.data_dir)})
        if settings.public_dir.is_dir():
            logger.info(f"Chatbot available at {base}/chatbot.html")
            logger.info(f"Dashboard available at {base}/dashboard.html")

    @app.on_event("shutdown")
    async def _final_flush() -> None:
        store: EventStore = app.state.event_store
        logger.info("Saving data before shutting down")
        try:
            saved = await asyncio.wait_for(
                asyncio.to_thread(store.flush),
                timeout=settings.shutdown_flush_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Final flush timed out after {settings.shutdown_flush_timeout}s")
            return
        if saved:
            logger.info("Data saved. Shutting down.")
        else:
            logger.error("Final flush failed; recent changes may be lost")


def create_app(settings: Optional[Settings] = None, *, store: Optional[EventStore] = None) -> FastAPI:
    """Build the API around a store loaded from ``settings.data_dir``."""
    configure_logging()
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.resolved_docs_url,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.event_store = store or EventStore(
        PersistenceGateway(settings.data_dir),
        timezone_name=settings.timezone,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_lifecycle_hooks(app, settings)
    app.include_router(api_router)

    # Chat widget and dashboard pages; mounted last so /api routes take precedence
    if settings.public_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")

    return app


__all__ = ["create_app"]
