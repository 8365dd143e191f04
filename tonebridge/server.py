"""Main FastAPI server for the ggwave codec bridge."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware

from tonebridge.errors import CodecError
from tonebridge.state.settings import AppSettings
from tonebridge.runtime.logging import configure_logging
from tonebridge.runtime.settings_loader import load_settings
from tonebridge.runtime.dependencies import build_runtime_deps
from tonebridge.handlers import (
    router,
    codec_error_handler,
    request_validation_handler,
    handle_websocket_connection,
)

logger = logging.getLogger(__name__)

configure_logging()


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = build_runtime_deps(settings)
        app.state.runtime_deps = runtime_deps
        logger.info("runtime: ready (ws %s)", settings.websocket.endpoint_path)
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.server.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CodecError, codec_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(router)

    @app.websocket(settings.websocket.endpoint_path)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        runtime_deps = getattr(app.state, "runtime_deps", None)
        if runtime_deps is None:
            raise RuntimeError("Runtime dependencies are not initialized")
        await handle_websocket_connection(websocket, runtime_deps)

    return app


app = create_app()
