from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .billing.calculator.per_meal_calculator import PerMealCalculator
from .billing.mysql_billing_repository import MySQLBillingRepository
from .billing.repository import BillingRepository
from .billing.service import BillingService
from .common.events import EventBus
from .common.transactions import TransactionFactory
from .core.enums import MealType, PackageId
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.repository import PaymentRepository
from .payments.service import PaymentService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import PackageService, UserService
from .waste.mysql_waste_repository import MySQLWasteRepository
from .waste.repository import WasteRepository
from .waste.service import WasteService


@dataclass(frozen=True)
class Container:
    events: EventBus

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    billing_repo: BillingRepository
    leaves_repo: LeaveRepository
    payments_repo: PaymentRepository
    waste_repo: WasteRepository

    user_service: UserService
    package_service: PackageService
    billing_service: BillingService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payment_service: PaymentService
    waste_service: WasteService
    report_service: ReportService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    billing_repo: BillingRepository,
    leaves_repo: LeaveRepository,
    payments_repo: PaymentRepository,
    waste_repo: WasteRepository,
    transaction: Optional[TransactionFactory] = None,
    meal_prices: Optional[Mapping[MealType, float]] = None,
    package_prices: Optional[Mapping[PackageId, float]] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of the given repositories (MySQL in production, in-memory in tests)."""
    transaction = transaction or nullcontext
    events = EventBus()

    billing_service = BillingService(
        attendance_repo,
        billing_repo,
        users_repo,
        calculator=PerMealCalculator(meal_prices),
        events=events,
        transaction=transaction,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        billing_service,
        leaves_repo,
        transaction=transaction,
    )
    leave_service = LeaveService(leaves_repo, attendance_repo, billing_service, users_repo, transaction=transaction)
    report_service = ReportService(attendance_repo, billing_repo, leaves_repo)

    return Container(
        events=events,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        billing_repo=billing_repo,
        leaves_repo=leaves_repo,
        payments_repo=payments_repo,
        waste_repo=waste_repo,
        user_service=UserService(users_repo),
        package_service=PackageService(users_repo, prices=package_prices),
        billing_service=billing_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payment_service=PaymentService(payments_repo, users_repo),
        waste_service=WasteService(waste_repo),
        report_service=report_service,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    meal_prices: Optional[Mapping[MealType, float]] = None,
    package_prices: Optional[Mapping[PackageId, float]] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        billing_repo=MySQLBillingRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        waste_repo=MySQLWasteRepository(conn),
        transaction=conn.transaction,
        meal_prices=meal_prices,
        package_prices=package_prices,
        conn=conn,
    )
