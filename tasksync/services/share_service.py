"""Share-request ledger: invitations to receive a copy of a task."""
from dataclasses import dataclass
from sqlmodel import Session, select
from typing import Any, Dict, List

from tasksync.errors import NotFoundError, ValidationError
from tasksync.models.share_request import ACCEPTED, DECLINED, PENDING, ShareRequest
from tasksync.models.task import Task
from tasksync.models.user import User
from tasksync.services.cache import ResponseCache
from tasksync.services.sync_service import SyncService
from tasksync.utils.dates import utc_now
from tasksync.utils.logger import StructuredLogger

SHARE_REQUEST_NOT_FOUND = "Share request not found"


@dataclass
class SendResult:
    created: int  # new pending requests
    recipients: int  # distinct users the task was offered to


class ShareService:
    """Creates, lists and resolves share requests."""

    def __init__(self, session: Session, cache: ResponseCache, logger: StructuredLogger):
        self.session = session
        self.cache = cache
        self.logger = logger
        self.sync = SyncService(session, cache, logger)

    def list_pending(self, receiver_id: str) -> List[Dict[str, Any]]:
        """Pending requests for a receiver, joined with sender and task, newest first."""
        statement = (
            select(ShareRequest, User, Task)
            .join(User, User.id == ShareRequest.sender_id)
            .join(Task, Task.id == ShareRequest.task_id)
            .where(ShareRequest.receiver_id == receiver_id)
            .where(ShareRequest.status == PENDING)
            .order_by(ShareRequest.created_at.desc(), ShareRequest.id.desc())
        )
        return [
            {
                "id": request.id,
                "status": request.status,
                "sender": {"id": sender.id, "username": sender.username},
                "task": {"id": task.id, "title": task.title},
                "created_at": request.created_at,
                "responded_at": request.responded_at,
            }
            for request, sender, task in self.session.exec(statement).all()
        ]

    def send_request(self, sender_id: str, task_id: int, usernames: List[str]) -> SendResult:
        """
        Invite users to receive a copy of one of the sender's tasks.

        All usernames must resolve or nothing is created. An identical pending
        request is skipped silently.

        Returns:
            Requests actually created and distinct recipients resolved
        """
        usernames = list(dict.fromkeys(name.strip() for name in usernames or [] if name and name.strip()))
        if not task_id or not usernames:
            raise ValidationError("Task ID and usernames array are required")

        task = self.session.exec(
            select(Task).where(Task.id == task_id).where(Task.user_id == sender_id)
        ).first()
        if not task:
            raise ValidationError(
                "Task not found or you don't have permission to share it",
                details={"task_id": task_id}
            )
        if task.is_shared:
            raise ValidationError("Shared copies cannot be shared again", details={"task_id": task_id})

        users = self.session.exec(select(User).where(User.username.in_(usernames))).all()
        found = {user.username for user in users}
        missing = [name for name in usernames if name not in found]
        if missing:
            raise ValidationError(f"Users not found: {', '.join(missing)}", details={"usernames": missing})
        if any(user.id == sender_id for user in users):
            raise ValidationError("You cannot share a task with yourself")

        created = 0
        for user in users:
            existing = self.session.exec(
                select(ShareRequest)
                .where(ShareRequest.sender_id == sender_id)
                .where(ShareRequest.receiver_id == user.id)
                .where(ShareRequest.task_id == task_id)
                .where(ShareRequest.status == PENDING)
            ).first()
            if existing:
                continue

            self.session.add(ShareRequest(sender_id=sender_id, receiver_id=user.id, task_id=task_id))
            created += 1

        self.session.commit()
        self.logger.info("Share requests sent", task_id=task_id, sender_id=sender_id, created=created, recipients=len(users))
        return SendResult(created=created, recipients=len(users))

    def _get_pending(self, request_id: int, receiver_id: str) -> ShareRequest:
        request = self.session.exec(
            select(ShareRequest)
            .where(ShareRequest.id == request_id)
            .where(ShareRequest.receiver_id == receiver_id)
            .where(ShareRequest.status == PENDING)
        ).first()
        if not request:
            raise NotFoundError(SHARE_REQUEST_NOT_FOUND, details={"request_id": request_id})
        return request

    def accept(self, request_id: int, receiver_id: str) -> Task:
        """
        Accept a pending request and fork the task for the receiver.

        The status change, the new copy and the original's shared_with entry
        commit together or not at all.
        """
        request = self._get_pending(request_id, receiver_id)
        original = self.session.get(Task, request.task_id) if request.task_id else None
        if original is None:
            raise NotFoundError("Shared task no longer exists", details={"request_id": request_id})

        try:
            request.status = ACCEPTED
            request.responded_at = utc_now()
            self.session.add(request)
            copy = self.sync.fork(original, receiver_id)
            self.session.commit()
        except Exception:
            self.session.rollback()
            self.logger.exception("Failed to accept share request", request_id=request_id, receiver_id=receiver_id)
            raise

        self.session.refresh(copy)
        self.cache.invalidate(receiver_id)
        self.cache.invalidate(original.user_id)
        self.logger.info("Share request accepted", request_id=request_id, task_id=original.id, copy_id=copy.id)
        return copy

    def decline(self, request_id: int, receiver_id: str) -> ShareRequest:
        request = self._get_pending(request_id, receiver_id)
        request.status = DECLINED
        request.responded_at = utc_now()
        self.session.add(request)
        self.session.commit()
        self.session.refresh(request)
        self.logger.info("Share request declined", request_id=request_id)
        return request
