import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from starlette.datastructures import Headers

from app_builder.api.routes import router
from app_builder.config import Settings, load_settings
from app_builder.db.repository import RecordStore
from app_builder.db.session import make_engine
from app_builder.inference.base import ModelGateway
from app_builder.inference.config import get_model_gateway
from app_builder.pipeline.requirements import RequirementsPipeline
from app_builder.visual.field_map import EntityFieldMap

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 1024 * 1024
DB_CONNECT_RETRIES = 5
DB_CONNECT_DELAY = 2


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def init_database(store: RecordStore, retries: int = DB_CONNECT_RETRIES, delay: float = DB_CONNECT_DELAY) -> bool:
    for attempt in range(retries):
        try:
            store.create_schema()
            logger.info("Database connected")
            return True
        except OperationalError:
            logger.warning("Waiting for database... (%d/%d)", attempt + 1, retries)
            time.sleep(delay)

    # Saves will raise PersistenceError; extraction keeps working.
    logger.error("Database not ready, running without persistence")
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_database(app.state.store)
    yield


class BodySizeLimitMiddleware:
    """
    Reject request bodies over max_bytes with a 413.

    The declared Content-Length is checked first; chunked bodies are
    buffered and counted as they arrive, so the app never sees one that
    overflows.
    """

    def __init__(self, app, max_bytes: int = MAX_BODY_BYTES):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > self.max_bytes:
            await self._reject(scope, receive, send)
            return

        messages = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_bytes:
                logger.warning("Rejected %s body over %d bytes", scope["path"], self.max_bytes)
                await self._reject(scope, receive, send)
                return
            more_body = message.get("more_body", False)

        async def replay():
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    @staticmethod
    async def _reject(scope, receive, send):
        response = JSONResponse(status_code=413, content={"error": "Request body too large."})
        await response(scope, receive, send)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[ModelGateway] = None,
    store: Optional[RecordStore] = None,
    field_map: Optional[EntityFieldMap] = None,
) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(
        title="Mini AI App Builder",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.pipeline = RequirementsPipeline(gateway or get_model_gateway(settings))
    app.state.store = store or RecordStore(make_engine(settings.database_url))
    app.state.field_map = field_map or EntityFieldMap()

    # Middleware FIRST
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=MAX_BODY_BYTES)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.warning("Rejected malformed request to %s", request.url.path)
        return JSONResponse(
            status_code=400,
            content={"error": "Request body is missing or not valid JSON."},
        )

    # Routes AFTER middleware
    app.include_router(router)

    logger.info("Model backend: %s", app.state.pipeline.mode)
    return app


def run() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server running on port %d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
