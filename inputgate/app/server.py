"""Search endpoint that gates submitted terms through the input validator."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from inputgate.app.config import settings
from inputgate.app.schemas import SearchRequest, SearchResponse
from inputgate.checks.patterns.input_validator import get_validator
from inputgate.checks.security_engine import inspect_search_term

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)
_request_logger = logging.getLogger("inputgate.requests")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline';",
}

MSG_INVALID_BODY = "Invalid request body"
MSG_SEARCH_FAILED = "Search term could not be processed"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach browser hardening headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request: outcome, status, route and latency. Bodies are never logged."""

    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            _request_logger.exception(
                "UNHANDLED_EXCEPTION method=%s path=%s elapsed_ms=%.1f",
                request.method,
                request.url.path,
                (time.monotonic() - start) * 1000,
            )
            raise

        status = response.status_code
        if status >= 500:
            level, outcome = logging.ERROR, "SERVER_ERROR"
        elif status >= 400:
            level, outcome = logging.WARNING, "CLIENT_ERROR"
        else:
            level, outcome = logging.DEBUG, "OK"
        _request_logger.log(
            level,
            "%s status=%d method=%s path=%s elapsed_ms=%.1f",
            outcome,
            status,
            request.method,
            request.url.path,
            (time.monotonic() - start) * 1000,
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_validator()
    logger.info("Input validator ready (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description="Validates search terms for XSS and SQL injection before echoing them",
    lifespan=lifespan,
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # FastAPI's default body echoes the offending input back
    return JSONResponse(status_code=422, content={"success": False, "errors": [MSG_INVALID_BODY]})


@app.get("/health")
async def health() -> dict[str, str]:
    """Lightweight health check for container orchestration."""
    return {"status": "ok"}


@app.post("/search", response_model=SearchResponse, response_model_exclude_none=True)
async def search(payload: SearchRequest) -> dict:
    """Validate a search term; only the sanitized form is ever returned."""
    try:
        return await run_in_threadpool(inspect_search_term, payload.search_term)
    except Exception:
        logger.exception("Search term inspection failed, rejecting")
        return {"success": False, "errors": [MSG_SEARCH_FAILED], "type": "invalid"}


if __name__ == "__main__":
    uvicorn.run("inputgate.app.server:app", host=settings.HOST, port=settings.PORT, workers=1)
