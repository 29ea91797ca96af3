"""Task sharing router: share requests, received copies and unlinking."""
from fastapi import APIRouter, Depends, Response, status
from typing import List

from tasksync.middleware.auth import CurrentUser, get_current_user
from tasksync.routers.deps import RowId, get_share_service, get_sync_service, get_task_service
from tasksync.schemas.sharing import (
    PendingShareRequest,
    ShareAccepted,
    ShareDeclined,
    ShareRequestCreate,
    ShareRequestSent,
)
from tasksync.schemas.task import SharedTaskResponse, TaskResponse
from tasksync.services.share_service import ShareService
from tasksync.services.sync_service import SyncService
from tasksync.services.task_service import TaskService, serialize_task

router = APIRouter(tags=["Task Sharing"])


@router.get("/requests", response_model=List[PendingShareRequest])
async def list_pending_requests(
    current_user: CurrentUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    return service.list_pending(current_user.user_id)


@router.post("/send-request", response_model=ShareRequestSent, status_code=status.HTTP_201_CREATED)
async def send_request(
    body: ShareRequestCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    result = service.send_request(current_user.user_id, body.task_id, body.usernames)
    return ShareRequestSent(message=f"Share requests sent to {result.recipients} users", requests=result.created)


@router.post("/accept-request/{request_id}", response_model=ShareAccepted)
async def accept_request(
    request_id: RowId,
    current_user: CurrentUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    copy = service.accept(request_id, current_user.user_id)
    return {"message": "Task shared successfully", "shared_task": serialize_task(copy)}


@router.post("/decline-request/{request_id}", response_model=ShareDeclined)
async def decline_request(
    request_id: RowId,
    current_user: CurrentUser = Depends(get_current_user),
    service: ShareService = Depends(get_share_service),
):
    service.decline(request_id, current_user.user_id)
    return ShareDeclined(message="Share request declined")


@router.get("/shared-tasks", response_model=List[SharedTaskResponse])
async def list_shared_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return service.list_shared_for_user(current_user.user_id)


@router.delete("/unlink-task/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unlink_task(
    task_id: RowId,
    current_user: CurrentUser = Depends(get_current_user),
    sync: SyncService = Depends(get_sync_service),
):
    """Remove a received copy; the original and other copies are untouched."""
    sync.unlink(task_id, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/resync/{task_id}", response_model=TaskResponse)
async def resync_task(
    task_id: RowId,
    current_user: CurrentUser = Depends(get_current_user),
    sync: SyncService = Depends(get_sync_service),
):
    """Refresh a received copy from its original."""
    return serialize_task(sync.resync(task_id, current_user.user_id))
