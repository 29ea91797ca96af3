"""Dependencies wiring request-scoped services to the application's shared cache and logger."""
from fastapi import Depends, Path, Request
from sqlmodel import Session
from typing import Annotated

from tasksync.config import MAX_ROW_ID
from tasksync.db.config import get_session
from tasksync.services.cache import ResponseCache
from tasksync.services.share_service import ShareService
from tasksync.services.sync_service import SyncService
from tasksync.services.task_service import TaskService
from tasksync.utils.logger import StructuredLogger

# Path ids outside the database integer range are rejected as bad input
RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]


def get_cache(request: Request) -> ResponseCache:
    return request.app.state.cache


def get_logger(request: Request) -> StructuredLogger:
    return request.app.state.logger


def get_task_service(
    session: Session = Depends(get_session),
    cache: ResponseCache = Depends(get_cache),
    logger: StructuredLogger = Depends(get_logger),
) -> TaskService:
    """Dependency for getting TaskService instance."""
    return TaskService(session, cache, logger)


def get_sync_service(
    session: Session = Depends(get_session),
    cache: ResponseCache = Depends(get_cache),
    logger: StructuredLogger = Depends(get_logger),
) -> SyncService:
    return SyncService(session, cache, logger)


def get_share_service(
    session: Session = Depends(get_session),
    cache: ResponseCache = Depends(get_cache),
    logger: StructuredLogger = Depends(get_logger),
) -> ShareService:
    return ShareService(session, cache, logger)
