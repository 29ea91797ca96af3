"""Task model for SQLModel."""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime, String, Integer, ForeignKey, JSON
from datetime import datetime
from typing import Any, Dict, List, Optional

from tasksync.utils.dates import utc_now


class Task(SQLModel, table=True):
    """Task entity: either an original or a copy received through sharing.

    An original has is_shared=False and may list recipients in shared_with.
    A copy has is_shared=True, shared_task_id pointing at its original and
    original_creator_id set to that original's owner. Copies are never re-shared.
    """

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    title: str = Field(max_length=200, min_length=1)
    completed: bool = Field(default=False)
    # ordered [{"title": str, "completed": bool}], addressed by position
    subtasks: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    due_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))

    # Sharing
    is_shared: bool = Field(default=False)
    original_creator_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("user.id", ondelete="SET NULL"), index=True, nullable=True)
    )
    shared_task_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("task.id", ondelete="CASCADE"), index=True, nullable=True)
    )

    shared_with: List["SharedWithEntry"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "SharedWithEntry.id"}
    )


class SharedWithEntry(SQLModel, table=True):
    """One recipient who accepted a copy of an original task."""
    __tablename__ = "task_shared_with"

    id: int | None = Field(default=None, primary_key=True)
    task_id: int = Field(
        sa_column=Column(Integer, ForeignKey("task.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    user_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    )
    accepted: bool = Field(default=True)
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    task: Optional[Task] = Relationship(back_populates="shared_with")
