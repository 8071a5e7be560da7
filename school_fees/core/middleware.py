"""
Core middleware registration for the FastAPI application.

This module provides request tracking, timing, error logging and the
handlers that turn application exceptions into JSON error responses.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from school_fees.core.exceptions import BaseAppException
from school_fees.core.logging import get_logger, request_id as request_id_var

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Adds a unique request ID to each incoming request.

    The ID is stored in request.state.request_id, bound to the logging
    context and echoed back in the X-Request-ID response header.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = req_id
        token = request_id_var.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = req_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Measures request processing time and logs request completion."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        logger.info(
            "Request completed",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "method": request.method,
                "url": str(request.url.path),
                "status_code": response.status_code,
                "process_time": f"{process_time:.4f}s",
            }
        )
        return response


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Logs error responses and unhandled exceptions."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request processing failed: {exc}",
                extra={
                    "request_id": getattr(request.state, "request_id", "unknown"),
                    "method": request.method,
                    "url": str(request.url.path),
                    "error_type": type(exc).__name__,
                },
                exc_info=True
            )
            raise

        if response.status_code >= 400:
            logger.warning(
                f"Request returned error status {response.status_code}",
                extra={
                    "request_id": getattr(request.state, "request_id", "unknown"),
                    "method": request.method,
                    "url": str(request.url.path),
                    "status_code": response.status_code,
                }
            )
        return response


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """Render application exceptions that escape a route as JSON errors."""
    logger.warning(
        f"Application exception: {exc.error_code.value} - {exc.message}",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "path": request.url.path,
            "details": exc.details,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_middlewares(app: FastAPI) -> None:
    """
    Register core middlewares and exception handlers.

    Middlewares run in reverse order of registration, so the request ID
    middleware (added last) runs first.
    """
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    logger.info(
        "Core middlewares registered",
        extra={"middlewares": ["RequestIDMiddleware", "TimingMiddleware", "ErrorLoggingMiddleware"]}
    )


def get_request_id(request: Request) -> Optional[str]:
    """Return the request ID of the current request, if any."""
    return getattr(request.state, "request_id", None)


__all__ = [
    "RequestIDMiddleware",
    "TimingMiddleware",
    "ErrorLoggingMiddleware",
    "app_exception_handler",
    "register_middlewares",
    "get_request_id",
]
