"""
Request logging and error envelopes for the MealPlanner API.

Every error response has the same shape::

    {"success": false,
     "error": {"code": ..., "message": ..., "details": ...},
     "request_id": ..., "timestamp": ...}
"""

import time
import logging
from datetime import datetime, timezone
from uuid import uuid4
from decimal import Decimal

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.exceptions import AppError

logger = logging.getLogger("mealplanner.middleware")

REQUEST_ID_HEADER = "X-Request-ID"


def make_serializable(obj):
    """Convert validation error payloads and details to plain JSON values"""
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [make_serializable(item) for item in obj]
    if isinstance(obj, Exception):
        return str(obj)
    return obj


def error_response(request: Request, status_code: int, code: str, message: str, details=None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details:
        error["details"] = make_serializable(details)
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "request_id": getattr(request.state, "request_id", None),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and logs method, path, status and duration"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed request_id=%s method=%s path=%s elapsed=%.4fs",
                request_id,
                request.method,
                request.url.path,
                time.perf_counter() - started,
            )
            raise

        elapsed = time.perf_counter() - started
        logger.info(
            "request_completed request_id=%s method=%s path=%s status=%d elapsed=%.4fs",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body/query did not match the schema"""
    logger.warning("validation_error path=%s errors=%s", request.url.path, exc.errors())
    return error_response(
        request, 422, "VALIDATION_ERROR", "Request validation failed", list(exc.errors())
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning("http_error path=%s status=%d detail=%s", request.url.path, exc.status_code, exc.detail)
    return error_response(request, exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail))


async def app_error_handler(request: Request, exc: AppError):
    """Domain errors carry their own status and code"""
    log = logger.error if exc.http_status >= 500 else logger.warning
    log("app_error path=%s code=%s message=%s", request.url.path, exc.code, exc.message)
    return error_response(request, exc.http_status, exc.code, exc.message, exc.details)


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error path=%s", request.url.path)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
