"""ssehub FastAPI application entrypoint."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from .api.events import router as events_router
from .api.stream import add_stream_routes
from .core.hub import Ticker, stream
from .util.log import configure_logging
from .util.settings import Settings

logger = structlog.get_logger()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level, json_logs=settings.log_json)
        ticker = Ticker(stream, settings.tick_seconds) if settings.ticker_enabled else None
        if ticker is not None:
            ticker.start()
        app.state.ticker = ticker
        logger.info("ssehub_started", topics=list(settings.topics))
        try:
            yield
        finally:
            if ticker is not None:
                await ticker.stop()
            await stream.shutdown()
            logger.info("ssehub_stopped")

    app = FastAPI(title="ssehub", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(events_router, prefix="/api")
    add_stream_routes(app, stream, settings.topics)

    @app.get("/healthz")
    def healthcheck() -> dict[str, str]:
        """Basic health endpoint for readiness probes."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
