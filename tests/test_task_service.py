# tests/test_task_service.py

from datetime import datetime, timezone

import pytest

from tasksync.errors import NotFoundError, ValidationError
from tasksync.models.task import Task
from tasksync.utils.dates import as_utc


def test_create_returns_unshared_original(tasks, alice):
    task = tasks.create(alice.id, "  Buy milk ")

    assert task.id is not None
    assert task.title == "Buy milk"
    assert task.completed is False
    assert task.subtasks == []
    assert task.due_date is None
    assert task.is_shared is False
    assert task.shared_task_id is None
    assert task.shared_with == []


def test_create_parses_due_date(tasks, alice):
    task = tasks.create(alice.id, "Pay rent", due_date="2026-11-01T09:00:00Z")

    assert as_utc(task.due_date) == datetime(2026, 11, 1, 9, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("title", ["", "   ", "x" * 201])
def test_create_rejects_bad_titles(tasks, alice, title):
    with pytest.raises(ValidationError):
        tasks.create(alice.id, title)


def test_create_rejects_unparsable_due_date(tasks, alice):
    with pytest.raises(ValidationError):
        tasks.create(alice.id, "Pay rent", due_date="soon")


def test_get_by_id_is_owner_scoped(tasks, alice, bob):
    task = tasks.create(alice.id, "Private")

    assert tasks.get_by_id(task.id, alice.id).id == task.id
    with pytest.raises(NotFoundError):
        tasks.get_by_id(task.id, bob.id)


def test_list_for_user_is_newest_first_and_owner_only(tasks, alice, bob):
    first = tasks.create(alice.id, "First")
    second = tasks.create(alice.id, "Second")
    tasks.create(bob.id, "Bob's")

    listed = tasks.list_for_user(alice.id)

    assert [t["id"] for t in listed] == [second.id, first.id]


def test_list_for_user_is_served_from_cache_until_invalidated(tasks, session, alice, clock):
    task = tasks.create(alice.id, "Original title")
    assert tasks.list_for_user(alice.id)[0]["title"] == "Original title"

    # change behind the store's back: no invalidation
    stored = session.get(Task, task.id)
    stored.title = "Changed directly"
    session.add(stored)
    session.commit()

    assert tasks.list_for_user(alice.id)[0]["title"] == "Original title"

    clock.advance(61)
    assert tasks.list_for_user(alice.id)[0]["title"] == "Changed directly"


def test_create_invalidates_owner_cache(tasks, cache, alice):
    tasks.list_for_user(alice.id)
    assert cache.get(alice.id) == []

    tasks.create(alice.id, "New")

    assert cache.get(alice.id) is None
    assert len(tasks.list_for_user(alice.id)) == 1


def test_delete_removes_task(tasks, session, alice):
    task = tasks.create(alice.id, "Temporary")

    tasks.delete(task.id, alice.id)

    assert session.get(Task, task.id) is None


def test_delete_requires_ownership(tasks, alice, bob):
    task = tasks.create(alice.id, "Mine")

    with pytest.raises(NotFoundError):
        tasks.delete(task.id, bob.id)
    with pytest.raises(NotFoundError):
        tasks.delete(9999, alice.id)


def test_subtask_operations_on_unshared_task(sync, alice):
    task_id = sync.tasks.create(alice.id, "Groceries").id

    sync.add_subtask(task_id, alice.id, "eggs")
    sync.add_subtask(task_id, alice.id, "bread")
    result = sync.toggle_subtask(task_id, alice.id, 1, True)

    assert result.warnings == []
    assert result.synced_task_ids == []
    assert result.task.subtasks == [
        {"title": "eggs", "completed": False},
        {"title": "bread", "completed": True},
    ]
    assert result.task.completed is False

    result = sync.remove_subtask(task_id, alice.id, 0)
    assert result.task.subtasks == [{"title": "bread", "completed": True}]

    with pytest.raises(ValidationError):
        sync.remove_subtask(task_id, alice.id, 1)
    with pytest.raises(ValidationError):
        sync.add_subtask(task_id, alice.id, "  ")


def test_due_date_set_and_clear(sync, alice):
    task_id = sync.tasks.create(alice.id, "Dentist").id

    due = sync.set_due_date(task_id, alice.id, "2026-12-01T08:00:00").task.due_date
    assert as_utc(due) == datetime(2026, 12, 1, 8, 0, tzinfo=timezone.utc)
    assert sync.set_due_date(task_id, alice.id, None).task.due_date is None


def test_mutation_on_someone_elses_task_is_not_found(sync, alice, bob):
    task_id = sync.tasks.create(alice.id, "Mine").id

    with pytest.raises(NotFoundError):
        sync.set_completion(task_id, bob.id, True)
