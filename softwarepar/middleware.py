"""
Request logging and catch-all error responder.

API requests are logged as one line with method, path, status, duration and a
preview of the JSON body. Uncaught errors become a `{"message": ...}` JSON
response; server errors are additionally handed to the ErrorReporter.
"""

import logging
import time
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("softwarepar.http")

API_PREFIX = "/api"
MAX_LOG_LINE = 80


def format_request_log(
    method: str,
    path: str,
    status_code: int,
    duration_ms: int,
    body: Optional[str] = None,
) -> str:
    line = f"{method} {path} {status_code} in {duration_ms}ms"
    if body:
        line += f" :: {body}"
    if len(line) > MAX_LOG_LINE:
        line = line[: MAX_LOG_LINE - 1] + "…"
    return line


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every /api request once it has produced a response"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not path.startswith(API_PREFIX):
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration = int((time.perf_counter() - start) * 1000)
            logger.info(format_request_log(request.method, path, 500, duration))
            raise

        captured = None
        if response.headers.get("content-type", "").startswith("application/json"):
            body = b"".join([chunk async for chunk in response.body_iterator])
            captured = body.decode("utf-8", errors="replace")
            response = Response(
                content=body,
                status_code=response.status_code,
                headers=response.headers,
                background=response.background,
            )

        duration = int((time.perf_counter() - start) * 1000)
        logger.info(format_request_log(request.method, path, response.status_code, duration, captured))
        return response


class ErrorReporter:
    """Observability sink for errors raised while handling requests"""

    def __init__(self, logger_name: str = "softwarepar.errors"):
        self.logger = logging.getLogger(logger_name)

    def report(self, exc: BaseException, request: Optional[Request] = None) -> None:
        where = f"{request.method} {request.url.path}" if request is not None else "unknown request"
        self.logger.error(
            f"❌ Unhandled error during {where}: {exc}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )


def error_status(exc: BaseException) -> int:
    for attr in ("status", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and 400 <= value <= 599:
            return value
    return 500


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Answer uncaught errors with JSON and report them, without re-raising"""

    def __init__(self, app, reporter: ErrorReporter):
        super().__init__(app)
        self.reporter = reporter

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            status_code = error_status(exc)
            message = str(exc) or "Internal Server Error"
            if status_code >= 500:
                self.reporter.report(exc, request)
            return JSONResponse(status_code=status_code, content={"message": message})


def install_error_handlers(app: FastAPI, reporter: ErrorReporter) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    if app.middleware_stack is not None:
        raise RuntimeError("Cannot add middleware after an application has started")
    # Innermost user middleware, so request logging sees the final status and body
    app.user_middleware.append(Middleware(ErrorHandlingMiddleware, reporter=reporter))
