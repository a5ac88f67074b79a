from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import MessStatus, PackageId
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def list_students(self) -> Sequence[User]:
        raise NotImplementedError

    def update_profile(
        self,
        *,
        user_id: int,
        email: str,
        full_name: str,
        mobile_number: Optional[str],
        mess_status: MessStatus,
        total_amount: float,
    ) -> bool:
        raise NotImplementedError

    def set_package(self, *, user_id: int, package: PackageId, package_amount: float, total_amount: float) -> bool:
        raise NotImplementedError

    def delete_cascade(self, user_id: int) -> bool:
        """Delete the user together with attendance, billing, leave and payment rows."""

        raise NotImplementedError
