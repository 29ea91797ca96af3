"""Task store: owner-scoped CRUD over tasks and their subtasks."""
from sqlmodel import Session, select
from typing import Any, Dict, List, Optional

from tasksync.errors import NotFoundError
from tasksync.models.task import Task
from tasksync.models.user import User
from tasksync.schemas.task import TaskResponse
from tasksync.services.cache import ResponseCache
from tasksync.services.mutations import TaskMutation, parse_due_date, validate_title
from tasksync.utils.dates import utc_now
from tasksync.utils.logger import StructuredLogger

TASK_NOT_FOUND = "Task not found"


def serialize_task(task: Task) -> Dict[str, Any]:
    """Plain JSON-ready record for a task, as returned over HTTP."""
    return TaskResponse.model_validate(task).model_dump(mode="json")


class TaskService:
    """Service class for task CRUD scoped to an owner."""

    def __init__(self, session: Session, cache: ResponseCache, logger: StructuredLogger):
        self.session = session
        self.cache = cache
        self.logger = logger

    def create(self, user_id: str, title: str, due_date: Optional[str] = None) -> Task:
        """Create a new, unshared task."""
        title = validate_title(title)
        due_datetime = parse_due_date(due_date)

        task = Task(
            user_id=user_id,
            title=title,
            completed=False,
            subtasks=[],
            due_date=due_datetime,
            created_at=utc_now(),
            updated_at=utc_now()
        )

        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        self.cache.invalidate(user_id)
        self.logger.info("Task created", task_id=task.id, user_id=user_id)
        return task

    def get_by_id(self, task_id: int, user_id: str) -> Task:
        """Get a specific task by ID, ensuring user ownership."""
        statement = (
            select(Task)
            .where(Task.id == task_id)
            .where(Task.user_id == user_id)
        )
        task = self.session.exec(statement).first()
        if not task:
            raise NotFoundError(TASK_NOT_FOUND, details={"task_id": task_id})
        return task

    def get_by_user(self, user_id: str) -> List[Task]:
        """All tasks owned by a user, originals and received copies, newest first."""
        statement = (
            select(Task)
            .where(Task.user_id == user_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        return list(self.session.exec(statement).all())

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """Serialized task list, served from the response cache when fresh."""
        cached = self.cache.get(user_id)
        if cached is not None:
            return cached

        tasks = [serialize_task(task) for task in self.get_by_user(user_id)]
        self.cache.set(user_id, tasks)
        return tasks

    def list_shared_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """Received copies joined with the original creator's username."""
        shared = [dict(task) for task in self.list_for_user(user_id) if task["is_shared"]]

        creator_ids = {task["original_creator_id"] for task in shared if task["original_creator_id"]}
        usernames = {}
        if creator_ids:
            users = self.session.exec(select(User).where(User.id.in_(sorted(creator_ids)))).all()
            usernames = {user.id: user.username for user in users}

        for task in shared:
            task["original_creator_username"] = usernames.get(task["original_creator_id"])
        return shared

    def find_copies(self, original_id: int, exclude_id: Optional[int] = None) -> List[Task]:
        """Every copy forked from the given original."""
        statement = select(Task).where(Task.shared_task_id == original_id)
        if exclude_id is not None:
            statement = statement.where(Task.id != exclude_id)
        return list(self.session.exec(statement.order_by(Task.id)).all())

    def apply_mutation(self, task_id: int, user_id: str, mutation: TaskMutation) -> Task:
        """Apply a mutation to the caller's own task and commit it."""
        task = self.get_by_id(task_id, user_id)
        mutation.apply(task)

        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        self.cache.invalidate(user_id)
        return task

    def delete(self, task_id: int, user_id: str) -> None:
        """Delete a task; deleting an original also deletes all of its copies."""
        task = self.get_by_id(task_id, user_id)

        copies = [] if task.is_shared else self.find_copies(task.id)
        affected_users = {copy.user_id for copy in copies}
        for copy in copies:
            self.session.delete(copy)
        # copies reference the original; remove them first
        self.session.flush()

        self.session.delete(task)
        self.session.commit()

        self.cache.invalidate(user_id)
        for affected in affected_users:
            self.cache.invalidate(affected)
        self.logger.info("Task deleted", task_id=task_id, user_id=user_id, cascaded_copies=len(copies))
