"""
Graticule API server.

Run with ``python main.py`` or ``uvicorn main:app``.
"""
import logging
import sys
import time

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()  # settings read the environment at import time

from api.router import api_router
from config import settings
from services.graticule import get_graticule_service
from services.logging_service import init_logging


class LevelFormatter(logging.Formatter):
    """Console formatter that tags each level with a colour and an emoji."""

    LEVEL_TAGS = {
        logging.DEBUG: ("\033[36m", "🔍"),
        logging.INFO: ("\033[32m", "ℹ️"),
        logging.WARNING: ("\033[33m", "⚠️"),
        logging.ERROR: ("\033[31m", "❌"),
        logging.CRITICAL: ("\033[35m", "🚨"),
    }
    RESET = "\033[0m"

    def format(self, record):
        color, emoji = self.LEVEL_TAGS.get(record.levelno, ("", ""))
        # Other handlers see the same record, so tag a copy
        tagged = logging.makeLogRecord(record.__dict__)
        tagged.levelname = f"{color}{emoji} {record.levelname}{self.RESET}"
        return super().format(tagged)


def configure_logging() -> None:
    """Console handler on the root logger, then the file and ring buffer handlers."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(LevelFormatter("%(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(console)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))

    # Per-request access lines duplicate the timing log below
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    try:
        init_logging()
    except OSError as e:
        logging.getLogger(__name__).warning(f"⚠️ File logging unavailable ({e}), keeping the ring buffer only")
        init_logging(file_logging=False)


configure_logging()
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Graticule API",
        description="Meridian and parallel grid lines for map views in any projection",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.include_router(api_router)

    @app.on_event("startup")
    async def warm_default_engine():
        # Resolving the default CRS is the slow part of a first request
        get_graticule_service().get_engine()
        logger.info(f"🚀 Graticule API ready (default projection {settings.GRATICULE_PROJECTION})")

    @app.middleware("http")
    async def time_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Process-Time"] = f"{elapsed_ms:.1f}ms"
        logger.debug(f"⏱️ {request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms")
        return response

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": "Internal server error", "detail": str(exc)})

    @app.get("/")
    async def root():
        return {"service": "graticule", "docs": "/docs", "lines": "/api/graticule/lines"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT, log_level="info")
