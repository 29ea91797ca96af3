"""Initialize database tables."""
from sqlmodel import SQLModel
from sqlalchemy.engine import Engine

from tasksync.models.user import User  # noqa: F401
from tasksync.models.task import Task, SharedWithEntry  # noqa: F401
from tasksync.models.share_request import ShareRequest  # noqa: F401


def init_db(engine: Engine) -> None:
    """Create all tables in the database."""
    SQLModel.metadata.create_all(engine)


if __name__ == "__main__":
    from tasksync.db.config import engine

    init_db(engine)
    print("Database tables created successfully.")
