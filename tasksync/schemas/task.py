"""Task schemas for the task sharing API."""
from pydantic import AfterValidator, BaseModel, Field
from datetime import datetime
from typing import Annotated, Optional, List

from tasksync.utils.dates import as_utc

# Stored timestamps are UTC; some backends return them without an offset
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class TaskCreate(BaseModel):
    """Schema for creating a task."""
    title: str  # stripped and length-checked by the service
    due_date: Optional[str] = Field(None)  # ISO date string


class TaskCompletionUpdate(BaseModel):
    """Schema for setting task completion (cascades to subtasks)."""
    completed: bool


class SubtaskCreate(BaseModel):
    title: str  # stripped and length-checked by the service


class SubtaskToggle(BaseModel):
    completed: bool


class DueDateUpdate(BaseModel):
    """null clears the due date."""
    due_date: Optional[str] = None


class SubtaskResponse(BaseModel):
    title: str
    completed: bool = False


class SharedWithResponse(BaseModel):
    user_id: str
    accepted: bool
    accepted_at: Optional[UtcDatetime] = None

    class Config:
        from_attributes = True


class TaskResponse(BaseModel):
    """Schema for task API responses."""
    id: int
    user_id: str
    title: str
    completed: bool
    subtasks: List[SubtaskResponse] = []
    due_date: Optional[UtcDatetime] = None
    is_shared: bool = False
    original_creator_id: Optional[str] = None  # owner of the original, copies only
    shared_task_id: Optional[int] = None  # id of the original, copies only
    shared_with: List[SharedWithResponse] = []  # originals only
    created_at: UtcDatetime
    updated_at: UtcDatetime

    class Config:
        from_attributes = True


class SharedTaskResponse(TaskResponse):
    """A received copy joined with the original creator's username."""
    original_creator_username: Optional[str] = None
