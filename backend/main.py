from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from logging.handlers import RotatingFileHandler
import logging
import sys

from api import accounts, documents, users
from config.settings import LOG_DIR, LOG_LEVEL
from constants import ServerConfig
from init_db import init_database


def configure_logging() -> None:
    """Rotating file log plus console output on the root logger (once per process)."""
    root_logger = logging.getLogger()
    if any(isinstance(handler, RotatingFileHandler) for handler in root_logger.handlers):
        return

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOG_DIR / "backend.log"

    log_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # File handler with rotation (10MB per file, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(log_formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)

    root_logger.setLevel(LOG_LEVEL)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info(f"Logging initialized: {log_file}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_database()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Document Tracker", version="0.1.0", lifespan=lifespan)

    app.include_router(documents.router, prefix="/api/v1", tags=["documents"])
    app.include_router(users.router, prefix="/api/v1", tags=["users"])
    app.include_router(accounts.router, prefix="/api/v1", tags=["accounts"])

    @app.exception_handler(StarletteHTTPException)
    async def http_error_envelope(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail), "details": []}
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": detail})

    @app.get("/up")
    def health():
        """Liveness probe"""
        return {"status": "ok"}

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=ServerConfig.HOST, port=ServerConfig.PORT)
