from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import MessStatus, PackageId, Role


@dataclass(frozen=True)
class User:
    """Domain entity: a mess member (student) or administrator.

    Note: Plain data object, no DB access. Credentials are owned by the
    external authentication layer and are not modelled here.
    """

    user_id: int
    full_name: str
    email: str
    role: Role
    mobile_number: Optional[str] = None
    mess_status: MessStatus = MessStatus.ACTIVE
    selected_package: Optional[PackageId] = None
    package_amount: float = 0.0
    total_amount: float = 0.0
    created_at: Optional[datetime] = None
