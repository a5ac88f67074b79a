from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ..common.validators import parse_enum, require_non_empty
from ..core.constants import PACKAGE_PRICES
from ..core.enums import MessStatus, PackageId, Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageSelection:
    user_id: int
    selected_package: Optional[PackageId]
    package_amount: float
    monthly_bill: float


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self):
        return self._users.list_all()

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_user(
        self,
        *,
        user_id: int,
        email: str,
        full_name: str,
        mobile_number: Optional[str] = None,
        mess_status: str = MessStatus.ACTIVE.value,
        total_amount=0,
    ) -> None:
        email = require_non_empty(email, "Email")
        full_name = require_non_empty(full_name, "Full name")
        status = parse_enum(MessStatus, mess_status, "mess status")
        try:
            amount = float(total_amount or 0)
        except (TypeError, ValueError):
            raise ValidationError("Total amount must be a number")

        ok = self._users.update_profile(
            user_id=int(user_id),
            email=email,
            full_name=full_name,
            mobile_number=(mobile_number or "").strip() or None,
            mess_status=status,
            total_amount=amount,
        )
        if not ok:
            raise NotFoundError("User not found")

    def delete_user(self, user_id: int) -> None:
        user = self.get_user(user_id)
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._users.delete_cascade(user.user_id):
            raise NotFoundError("User not found")
        logger.info("Deleted user %s with related records", user.user_id)


class PackageService:
    """Use case: a student picks a monthly meal package."""

    def __init__(self, users: UserRepository, *, prices: Optional[Mapping[PackageId, float]] = None):
        self._users = users
        self._prices = {PackageId(k): float(v) for k, v in (prices or PACKAGE_PRICES).items()}

    def select_package(self, *, user_id: int, package_id: str) -> PackageSelection:
        package = parse_enum(PackageId, package_id, "package")
        price = float(self._prices[package])

        if not self._users.set_package(user_id=int(user_id), package=package, package_amount=price, total_amount=price):
            raise NotFoundError("User not found")

        logger.info("User %s selected package %s (%.2f)", user_id, package.value, price)
        return PackageSelection(
            user_id=int(user_id),
            selected_package=package,
            package_amount=price,
            monthly_bill=price,
        )

    def get_selection(self, *, user_id: int) -> PackageSelection:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return PackageSelection(
            user_id=user.user_id,
            selected_package=user.selected_package,
            package_amount=user.package_amount,
            monthly_bill=user.total_amount,
        )
