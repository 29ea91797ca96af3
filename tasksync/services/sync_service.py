"""
Sharing Orchestrator

Forks an original task into a recipient-owned copy when a share request is
accepted, and afterwards replays every completion, subtask and due-date
mutation across the original and all of its copies.

Fan-out is a sequence of independent per-task commits. The caller's own
change is committed first and is never rolled back; a target that cannot take
the replayed change is skipped, logged and reported back as a warning.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from tasksync.errors import ConsistencyError, NotFoundError, ValidationError
from tasksync.models.subtasks import SubtaskList
from tasksync.models.task import SharedWithEntry, Task
from tasksync.services.cache import ResponseCache
from tasksync.services.mutations import (
    AddSubtask,
    RemoveSubtask,
    SetCompletion,
    SetDueDate,
    TaskMutation,
    ToggleSubtask,
    parse_due_date,
    validate_title,
)
from tasksync.services.task_service import TaskService
from tasksync.utils.dates import utc_now
from tasksync.utils.logger import StructuredLogger

SHARED_TASK_NOT_FOUND = "Shared task not found"


@dataclass
class SyncResult:
    """Outcome of a mutation on the caller's task plus its fan-out."""
    task: Task
    synced_task_ids: List[int] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)


class SyncService:
    """Keeps an original task and its shared copies in step."""

    def __init__(self, session: Session, cache: ResponseCache, logger: StructuredLogger):
        self.session = session
        self.cache = cache
        self.logger = logger.bind(component="sync")
        self.tasks = TaskService(session, cache, logger)

    # -- mutations -----------------------------------------------------

    def set_completion(self, task_id: int, user_id: str, completed: bool) -> SyncResult:
        return self.mutate(task_id, user_id, SetCompletion(completed=completed))

    def add_subtask(self, task_id: int, user_id: str, title: str) -> SyncResult:
        title = validate_title(title, label="Subtask title")
        return self.mutate(task_id, user_id, AddSubtask(title=title))

    def remove_subtask(self, task_id: int, user_id: str, index: int) -> SyncResult:
        return self.mutate(task_id, user_id, RemoveSubtask(index=index))

    def toggle_subtask(self, task_id: int, user_id: str, index: int, completed: bool) -> SyncResult:
        return self.mutate(task_id, user_id, ToggleSubtask(index=index, completed=completed))

    def set_due_date(self, task_id: int, user_id: str, due_date: Optional[str]) -> SyncResult:
        return self.mutate(task_id, user_id, SetDueDate(due_date=parse_due_date(due_date)))

    def mutate(self, task_id: int, user_id: str, mutation: TaskMutation) -> SyncResult:
        """Apply a mutation to the caller's task, then replay it on linked tasks."""
        task = self.tasks.apply_mutation(task_id, user_id, mutation)
        result = self.propagate(task, mutation)
        # a skipped target rolls the session back, which expires the caller's task
        self.session.refresh(task)
        return result

    # -- propagation ---------------------------------------------------

    def propagation_targets(self, task: Task) -> List[int]:
        """Ids of every task that must receive a change made to `task`."""
        if task.is_shared and task.shared_task_id is not None:
            siblings = self.tasks.find_copies(task.shared_task_id, exclude_id=task.id)
            return [task.shared_task_id] + [sibling.id for sibling in siblings]
        if not task.is_shared and task.shared_with:
            return [copy.id for copy in self.tasks.find_copies(task.id)]
        return []

    def propagate(self, task: Task, mutation: TaskMutation) -> SyncResult:
        result = SyncResult(task=task)
        target_ids = self.propagation_targets(task)
        if not target_ids:
            return result

        source_id = task.id
        for target_id in target_ids:
            try:
                self._replay(target_id, mutation)
                result.synced_task_ids.append(target_id)
            except (ConsistencyError, SQLAlchemyError) as e:
                self.session.rollback()
                reason = e.message if isinstance(e, ConsistencyError) else str(e)
                self.logger.warning(
                    "Skipped propagation target",
                    source_task_id=source_id,
                    target_task_id=target_id,
                    reason=reason,
                    **mutation.describe()
                )
                result.warnings.append({"task_id": target_id, "reason": reason})

        self.logger.info(
            "Propagated task change",
            source_task_id=source_id,
            synced=len(result.synced_task_ids),
            skipped=len(result.warnings),
            mutation=mutation.name
        )
        return result

    def _replay(self, target_id: int, mutation: TaskMutation) -> None:
        target = self.session.get(Task, target_id)
        if target is None:
            raise ConsistencyError("Linked task no longer exists", details={"task_id": target_id})

        try:
            mutation.apply(target)
        except ValidationError as e:
            raise ConsistencyError(
                f"Linked task has diverged: {e.message}",
                details={"task_id": target_id, **e.details}
            )

        self.session.add(target)
        self.session.commit()
        self.cache.invalidate(target.user_id)

    # -- fork / unlink -------------------------------------------------

    def fork(self, original: Task, recipient_id: str) -> Task:
        """
        Stage a recipient-owned copy of `original` and record the recipient.

        Nothing is committed here: the caller commits the copy, the shared_with
        entry and its own bookkeeping in one transaction.
        """
        now = utc_now()
        copy = Task(
            user_id=recipient_id,
            title=original.title,
            completed=original.completed,
            subtasks=SubtaskList(original.subtasks).to_list(),
            due_date=original.due_date,
            is_shared=True,
            original_creator_id=original.user_id,
            shared_task_id=original.id,
            created_at=now,
            updated_at=now
        )
        self.session.add(copy)

        entry = next((e for e in original.shared_with if e.user_id == recipient_id), None)
        if entry is None:
            original.shared_with.append(SharedWithEntry(user_id=recipient_id, accepted=True, accepted_at=now))
        else:
            entry.accepted = True
            entry.accepted_at = now
        self.session.add(original)
        return copy

    def get_copy(self, task_id: int, user_id: str) -> Task:
        statement = (
            select(Task)
            .where(Task.id == task_id)
            .where(Task.user_id == user_id)
            .where(Task.is_shared == True)  # noqa: E712
        )
        copy = self.session.exec(statement).first()
        if not copy:
            raise NotFoundError(SHARED_TASK_NOT_FOUND, details={"task_id": task_id})
        return copy

    def unlink(self, task_id: int, user_id: str) -> None:
        """Drop a received copy and the original's record of the recipient."""
        copy = self.get_copy(task_id, user_id)
        original_owner = copy.original_creator_id
        original_task_id = copy.shared_task_id

        original = self.session.get(Task, original_task_id) if original_task_id else None
        if original is not None:
            original_owner = original.user_id
            for entry in [e for e in original.shared_with if e.user_id == user_id]:
                original.shared_with.remove(entry)
            self.session.add(original)

        self.session.delete(copy)
        self.session.commit()

        self.cache.invalidate(user_id)
        self.cache.invalidate(original_owner)
        self.logger.info("Shared task unlinked", task_id=task_id, user_id=user_id, original_task_id=original_task_id)

    def resync(self, task_id: int, user_id: str) -> Task:
        """Overwrite a received copy with its original's current content."""
        copy = self.get_copy(task_id, user_id)
        original = self.session.get(Task, copy.shared_task_id) if copy.shared_task_id else None
        if original is None:
            raise ConsistencyError("Original task no longer exists", details={"task_id": task_id})

        copy.title = original.title
        copy.completed = original.completed
        copy.subtasks = SubtaskList(original.subtasks).to_list()
        copy.due_date = original.due_date
        copy.updated_at = utc_now()

        self.session.add(copy)
        self.session.commit()
        self.session.refresh(copy)
        self.cache.invalidate(user_id)
        self.logger.info("Shared task resynced", task_id=task_id, original_task_id=original.id)
        return copy
