from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(self, *, user_id: int, start_date: date, end_date: date, reason: Optional[str]) -> int:
        raise NotImplementedError

    def get(self, *, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def get_for_update(self, *, leave_id: int) -> Optional[LeaveRequest]:
        """Like `get`, but locks the row for the current transaction."""

        raise NotImplementedError

    def decide(self, *, leave_id: int, status: LeaveStatus) -> bool:
        """Move a pending request to `status`. Returns False when it is no longer pending."""

        raise NotImplementedError

    def list_for_user(self, *, user_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_all(self) -> Sequence[dict]:
        """Admin listing joined with user names."""

        raise NotImplementedError

    def list_approved_overlapping(self, *, user_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def count_approved_covering(self, *, day: date) -> int:
        raise NotImplementedError
