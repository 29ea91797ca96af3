"""HTTP request logging middleware."""
import time
from fastapi import Request

from tasksync.utils.logger import StructuredLogger

# Read endpoints the client polls every few seconds
POLLING_PATHS = (
    "/api/tasks",
    "/api/task-sharing/requests",
    "/api/task-sharing/shared-tasks",
)


def is_polling_request(request: Request) -> bool:
    return request.method == "GET" and request.url.path in POLLING_PATHS


def add_request_logging(app, logger: StructuredLogger):
    """Log every request with its status and duration; polling reads only at DEBUG."""
    logger = logger.bind(component="http")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        log = logger.debug if is_polling_request(request) else logger.info
        log(
            f"{request.method} {request.url.path} - {response.status_code}",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        return response
