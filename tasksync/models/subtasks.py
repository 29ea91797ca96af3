"""Ordered, position-addressed subtask container."""
from typing import Any, Dict, Iterator, List, Optional

from tasksync.errors import ValidationError

INVALID_SUBTASK_INDEX = "Invalid subtask index"


class SubtaskList:
    """
    Subtasks of a single task, kept in insertion order.

    Subtasks have no identity of their own: every operation addresses the
    current position. Removing index i shifts every later subtask down by one,
    so a client holding an older index may address a different subtask.
    Shared copies replay the same positional change, which keeps them aligned
    only while no two removals race on different copies.
    """

    def __init__(self, items: Optional[List[Dict[str, Any]]] = None):
        self._items = [
            {"title": item["title"], "completed": bool(item.get("completed", False))}
            for item in (items or [])
        ]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Dict[str, Any]:
        self.check_index(index)
        return self._items[index]

    def check_index(self, index: int) -> None:
        # bool is an int subclass; negative indexes are never positions
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._items):
            raise ValidationError(
                INVALID_SUBTASK_INDEX,
                details={"index": index, "subtask_count": len(self._items)}
            )

    def append(self, title: str) -> None:
        self._items.append({"title": title, "completed": False})

    def remove(self, index: int) -> Dict[str, Any]:
        self.check_index(index)
        return self._items.pop(index)

    def set_completed(self, index: int, completed: bool) -> None:
        self.check_index(index)
        self._items[index]["completed"] = completed

    def set_all(self, completed: bool) -> None:
        for item in self._items:
            item["completed"] = completed

    def all_completed(self) -> bool:
        return all(item["completed"] for item in self._items)

    def to_list(self) -> List[Dict[str, Any]]:
        """Fresh list of fresh dicts, safe to assign back to a JSON column."""
        return [dict(item) for item in self._items]
