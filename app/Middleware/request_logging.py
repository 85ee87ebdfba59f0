import logging
import time

from fastapi import Request

logger = logging.getLogger("app.requests")

SKIPPED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}


async def request_logging_middleware(request: Request, call_next):
    """Log ``METHOD path status in Nms`` for API requests."""
    path = request.url.path
    if path in SKIPPED_PATHS or not path.startswith("/api"):
        return await call_next(request)

    start_time = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.exception("%s %s failed in %sms", request.method, path, duration_ms)
        raise

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    level = logging.WARNING if response.status_code >= 500 else logging.INFO
    logger.log(
        level, "%s %s %s in %sms", request.method, path, response.status_code, duration_ms
    )
    return response
