"""Share request model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, String, Integer, ForeignKey
from datetime import datetime
from typing import Optional

from tasksync.utils.dates import utc_now

PENDING = "pending"
ACCEPTED = "accepted"
DECLINED = "declined"


class ShareRequest(SQLModel, table=True):
    """Invitation from one user to another to receive a copy of a task.

    Leaves the pending state exactly once (accepted or declined).
    """
    __tablename__ = "share_request"

    id: Optional[int] = Field(default=None, primary_key=True)
    sender_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    )
    receiver_id: str = Field(
        sa_column=Column(String, ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False)
    )
    # NULL once the task itself is deleted
    task_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("task.id", ondelete="SET NULL"), index=True, nullable=True)
    )
    status: str = Field(default=PENDING, max_length=20, index=True)  # pending, accepted, declined
    responded_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
