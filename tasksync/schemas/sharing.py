"""Task sharing schemas."""
from pydantic import BaseModel, Field
from typing import List, Optional

from tasksync.config import MAX_ROW_ID
from tasksync.schemas.auth import UserPublic
from tasksync.schemas.task import TaskResponse, UtcDatetime


class ShareRequestCreate(BaseModel):
    """Share one of the caller's tasks with users by username."""
    task_id: int = Field(..., ge=1, le=MAX_ROW_ID)
    usernames: List[str]


class ShareRequestSent(BaseModel):
    message: str
    requests: int  # number of ledger entries actually created


class TaskSummary(BaseModel):
    id: int
    title: str


class PendingShareRequest(BaseModel):
    """A pending request joined with its sender and task."""
    id: int
    status: str
    sender: UserPublic
    task: TaskSummary
    created_at: UtcDatetime
    responded_at: Optional[UtcDatetime] = None


class ShareAccepted(BaseModel):
    message: str
    shared_task: TaskResponse


class ShareDeclined(BaseModel):
    message: str
