"""
Task Mutations

Field-level changes that can be applied to one task and replayed, unchanged,
onto its original and sibling copies. Each apply() re-derives the target's own
completion cascade from that target's subtasks instead of copying the source's
result.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from tasksync.config import TITLE_MAX_LENGTH
from tasksync.errors import ValidationError
from tasksync.models.subtasks import SubtaskList
from tasksync.models.task import Task
from tasksync.utils.dates import as_utc, utc_now


def validate_title(title: Optional[str], label: str = "Task title") -> str:
    """Return the stripped title or raise ValidationError."""
    if title is None or not title.strip():
        raise ValidationError(f"{label} is required", details={"field": "title"})
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"{label} must be less than {TITLE_MAX_LENGTH} characters",
            details={"field": "title", "max_length": TITLE_MAX_LENGTH}
        )
    return title


def parse_due_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into aware UTC; None and "" clear the date.

    A value without an offset is taken to be UTC.
    """
    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (TypeError, ValueError):
        raise ValidationError("Invalid due date format", details={"field": "due_date", "value": value})
    return as_utc(parsed)


class TaskMutation:
    """A replayable change to a single task."""

    name = "mutation"

    def apply(self, task: Task) -> None:
        """Validate against this task, then change it in place."""
        raise NotImplementedError

    def describe(self) -> Dict[str, Any]:
        return {"mutation": self.name, **self.__dict__}


@dataclass
class SetCompletion(TaskMutation):
    """Set the task flag and force every subtask to the same value."""
    completed: bool
    name = "set_completion"

    def apply(self, task: Task) -> None:
        task.completed = self.completed
        if task.subtasks:
            subtasks = SubtaskList(task.subtasks)
            subtasks.set_all(self.completed)
            task.subtasks = subtasks.to_list()
        task.updated_at = utc_now()


@dataclass
class AddSubtask(TaskMutation):
    title: str
    name = "add_subtask"

    def apply(self, task: Task) -> None:
        subtasks = SubtaskList(task.subtasks)
        subtasks.append(self.title)
        task.subtasks = subtasks.to_list()
        task.updated_at = utc_now()


@dataclass
class RemoveSubtask(TaskMutation):
    index: int
    name = "remove_subtask"

    def apply(self, task: Task) -> None:
        subtasks = SubtaskList(task.subtasks)
        subtasks.remove(self.index)
        task.subtasks = subtasks.to_list()
        task.updated_at = utc_now()


@dataclass
class ToggleSubtask(TaskMutation):
    """Set one subtask, then make the parent the AND of all subtasks."""
    index: int
    completed: bool
    name = "toggle_subtask"

    def apply(self, task: Task) -> None:
        subtasks = SubtaskList(task.subtasks)
        subtasks.set_completed(self.index, self.completed)
        task.subtasks = subtasks.to_list()

        all_completed = subtasks.all_completed()
        if task.completed != all_completed:
            task.completed = all_completed
        task.updated_at = utc_now()


@dataclass
class SetDueDate(TaskMutation):
    due_date: Optional[datetime]
    name = "set_due_date"

    def apply(self, task: Task) -> None:
        task.due_date = self.due_date
        task.updated_at = utc_now()
