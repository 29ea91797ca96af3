"""User model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime
from datetime import datetime
import uuid

from tasksync.utils.dates import utc_now


class User(SQLModel, table=True):
    """User entity for authentication and task ownership.

    Tasks are not exposed as a relationship; the task store queries them by owner.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        index=True
    )
    username: str = Field(unique=True, index=True, max_length=100)
    password_hash: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
