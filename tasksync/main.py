"""Main FastAPI application for the task sharing API."""
import asyncio

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tasksync.config import CACHE_SWEEP_INTERVAL_SECONDS, CACHE_TTL_SECONDS, ENVIRONMENT, LOG_LEVEL
from tasksync.db.config import engine
from tasksync.db.init import init_db
from tasksync.errors import AppError, UnauthorizedError, ValidationError, create_error_response
from tasksync.middleware.cors import add_cors_middleware
from tasksync.middleware.request_logger import add_request_logging
from tasksync.routers import auth_router, sharing_router, tasks_router
from tasksync.services.cache import ResponseCache, sweep_periodically
from tasksync.utils.dates import utc_now
from tasksync.utils.logger import get_logger

# Create FastAPI application
app = FastAPI(
    title="Task Sharing API",
    description="REST API for personal tasks with subtasks, due dates and task sharing",
    version="1.0.0",
)

# Shared services, injected into request handlers through app.state
logger = get_logger("tasksync", LOG_LEVEL)
app.state.logger = logger
app.state.cache = ResponseCache(ttl_seconds=CACHE_TTL_SECONDS, logger=logger)

add_cors_middleware(app)
add_request_logging(app, logger)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(status_code=exc.status_code, content=create_error_response(exc), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    error = ValidationError("Validation error", details={"errors": errors})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=create_error_response(error))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error", path=request.url.path)
    error = AppError("Internal server error")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=create_error_response(error))


@app.on_event("startup")
async def startup_event():
    """Create tables and start the cache sweeper."""
    try:
        init_db(engine)
        logger.info("Database tables initialized")
    except SQLAlchemyError as e:
        logger.error("Database initialization failed; database operations may fail", error=str(e))

    app.state.cache_sweeper = asyncio.create_task(
        sweep_periodically(app.state.cache, CACHE_SWEEP_INTERVAL_SECONDS)
    )
    logger.info("Application startup complete", environment=ENVIRONMENT)


@app.on_event("shutdown")
async def shutdown_event():
    sweeper = getattr(app.state, "cache_sweeper", None)
    if sweeper is not None:
        sweeper.cancel()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "OK", "timestamp": utc_now().isoformat(), "environment": ENVIRONMENT}


@app.get("/")
async def root():
    """Root endpoint - API description."""
    return {
        "message": "Task Sharing API Server",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "auth": "/api/auth",
            "tasks": "/api/tasks",
            "task_sharing": "/api/task-sharing",
        },
    }


app.include_router(auth_router, prefix="/api/auth")  # /api/auth/register, /api/auth/login
app.include_router(tasks_router, prefix="/api")  # /api/tasks/...
app.include_router(sharing_router, prefix="/api/task-sharing")  # /api/task-sharing/...


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "tasksync.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
