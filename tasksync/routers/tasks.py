"""Task router: CRUD, subtasks and due dates for the caller's tasks."""
from fastapi import APIRouter, Depends, Response, status
from typing import List

from tasksync.middleware.auth import CurrentUser, get_current_user
from tasksync.routers.deps import RowId, get_sync_service, get_task_service
from tasksync.schemas.task import (
    DueDateUpdate,
    SubtaskCreate,
    SubtaskToggle,
    TaskCompletionUpdate,
    TaskCreate,
    TaskResponse,
)
from tasksync.services.sync_service import SyncResult, SyncService
from tasksync.services.task_service import TaskService, serialize_task

router = APIRouter(tags=["Tasks"])

SYNC_WARNINGS_HEADER = "X-Sync-Warnings"


def _sync_response(response: Response, result: SyncResult):
    """Return the caller's task, flagging linked copies that could not be updated."""
    if result.warnings:
        response.headers[SYNC_WARNINGS_HEADER] = str(len(result.warnings))
    return serialize_task(result.task)


@router.get("/tasks", response_model=List[TaskResponse])
async def list_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """List the caller's tasks, including received copies, newest first."""
    return service.list_for_user(current_user.user_id)


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return serialize_task(service.create(current_user.user_id, task_data.title, task_data.due_date))


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: RowId,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return serialize_task(service.get_by_id(task_id, current_user.user_id))


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def set_completion(
    task_id: RowId,
    body: TaskCompletionUpdate,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    sync: SyncService = Depends(get_sync_service),
):
    """Set completion; every subtask follows the parent."""
    result = sync.set_completion(task_id, current_user.user_id, body.completed)
    return _sync_response(response, result)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: RowId,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Delete a task. Deleting an original also deletes every copy of it."""
    service.delete(task_id, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/tasks/{task_id}/subtasks", response_model=TaskResponse)
async def add_subtask(
    task_id: RowId,
    body: SubtaskCreate,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    sync: SyncService = Depends(get_sync_service),
):
    result = sync.add_subtask(task_id, current_user.user_id, body.title)
    return _sync_response(response, result)


@router.put("/tasks/{task_id}/subtasks/{index}", response_model=TaskResponse)
async def toggle_subtask(
    task_id: RowId,
    index: int,
    body: SubtaskToggle,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    sync: SyncService = Depends(get_sync_service),
):
    """Set one subtask by position; the parent becomes complete only when all are."""
    result = sync.toggle_subtask(task_id, current_user.user_id, index, body.completed)
    return _sync_response(response, result)


@router.delete("/tasks/{task_id}/subtasks/{index}", response_model=TaskResponse)
async def remove_subtask(
    task_id: RowId,
    index: int,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    sync: SyncService = Depends(get_sync_service),
):
    result = sync.remove_subtask(task_id, current_user.user_id, index)
    return _sync_response(response, result)


@router.put("/tasks/{task_id}/due-date", response_model=TaskResponse)
async def set_due_date(
    task_id: RowId,
    body: DueDateUpdate,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    sync: SyncService = Depends(get_sync_service),
):
    result = sync.set_due_date(task_id, current_user.user_id, body.due_date)
    return _sync_response(response, result)
