"""
MealPlanner FastAPI application.

Run with ``python main.py`` or ``uvicorn main:app``.
"""

import logging
from contextlib import asynccontextmanager

import anyio
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import domain.models as db_models
from api.middleware import RequestLoggingMiddleware, register_exception_handlers
from api.routes import health, meals, planner, users
from app.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("mealplanner.main")


async def _init_database_with_retry() -> None:
    """Create the schema, retrying while the database is still starting"""
    attempts = settings.db_init_attempts
    for attempt in range(1, attempts + 1):
        try:
            await anyio.to_thread.run_sync(db_models.init_database)
            return
        except Exception as exc:
            if attempt == attempts:
                _logger.error("database_init_failed attempts=%d", attempts)
                raise
            _logger.warning(
                "database_init_retry attempt=%d/%d error=%s", attempt, attempts, exc
            )
            await anyio.sleep(settings.db_init_delay_sec)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _logger.info(
        "starting app=%s env=%s", settings.app_name, settings.environment.value
    )
    await _init_database_with_retry()
    try:
        yield
    finally:
        _logger.info("shutting down app=%s", settings.app_name)
        db_models.engine.dispose()


_docs_enabled = not settings.is_production()

app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=f"{settings.api_prefix}/openapi.json" if _docs_enabled else None,
    docs_url=f"{settings.api_prefix}/docs" if _docs_enabled else None,
    redoc_url=f"{settings.api_prefix}/redoc" if _docs_enabled else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

for module in (health, users, meals, planner):
    app.include_router(module.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
