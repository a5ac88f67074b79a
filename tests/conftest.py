from __future__ import annotations

import copy
from contextlib import contextmanager
from datetime import date, datetime
from typing import Optional

import pytest

from src.mess_system.mess_system.attendance.model import AttendanceRecord
from src.mess_system.mess_system.billing.model import BillingRecord, MealCounts, MonthRollup
from src.mess_system.mess_system.container import assemble
from src.mess_system.mess_system.core.enums import (
    AttendanceStatus,
    LeaveStatus,
    MealType,
    MessStatus,
    PaymentStatus,
    Role,
)
from src.mess_system.mess_system.core.exceptions import ConflictError
from src.mess_system.mess_system.leaves.model import LeaveRequest
from src.mess_system.mess_system.payments.model import Payment, PaymentSettings
from src.mess_system.mess_system.users.model import User
from src.mess_system.mess_system.waste.model import WasteRecord

_MEAL_ORDER = {MealType.BREAKFAST: 0, MealType.LUNCH: 1, MealType.DINNER: 2}
FIXED_NOW = datetime(2024, 6, 15, 9, 0, 0)


class InMemoryUsers:
    def __init__(self, users=()):
        self.users: dict[int, User] = {u.user_id: u for u in users}
        self.cascade_targets: list = []

    def add(self, user: User) -> User:
        self.users[user.user_id] = user
        return user

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def list_all(self):
        return list(self.users.values())

    def list_students(self):
        return sorted((u for u in self.users.values() if u.role == Role.STUDENT), key=lambda u: u.full_name)

    def update_profile(self, *, user_id, email, full_name, mobile_number, mess_status, total_amount):
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = User(
            user_id=user.user_id,
            full_name=full_name,
            email=email,
            role=user.role,
            mobile_number=mobile_number,
            mess_status=mess_status,
            selected_package=user.selected_package,
            package_amount=user.package_amount,
            total_amount=total_amount,
        )
        return True

    def set_package(self, *, user_id, package, package_amount, total_amount):
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = User(
            user_id=user.user_id,
            full_name=user.full_name,
            email=user.email,
            role=user.role,
            mobile_number=user.mobile_number,
            mess_status=user.mess_status,
            selected_package=package,
            package_amount=package_amount,
            total_amount=total_amount,
        )
        return True

    def delete_cascade(self, user_id):
        for repo in self.cascade_targets:
            repo.drop_user(int(user_id))
        return self.users.pop(int(user_id), None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[tuple, AttendanceRecord] = {}
        self.writes = 0

    def get_status(self, *, user_id, meal_date, meal_type):
        r = self.rows.get((int(user_id), meal_date, meal_type))
        return r.status if r else None

    def upsert_status(self, *, user_id, meal_date, meal_type, status):
        self.writes += 1
        self.rows[(int(user_id), meal_date, meal_type)] = AttendanceRecord(
            user_id=int(user_id), meal_date=meal_date, meal_type=meal_type, status=status, updated_at=FIXED_NOW
        )

    def bulk_upsert_status(self, *, user_id, dates, meal_types, status):
        meals = list(meal_types)
        n = 0
        for d in dates:
            for m in meals:
                self.upsert_status(user_id=user_id, meal_date=d, meal_type=m, status=status)
                n += 1
        return n

    def list_for_user(self, *, user_id, start_date, end_date):
        items = [
            r for (uid, d, _), r in self.rows.items() if uid == int(user_id) and start_date <= d <= end_date
        ]
        items.sort(key=lambda r: (r.meal_date, _MEAL_ORDER[r.meal_type]))
        return items

    def count_by_status_for_date(self, *, meal_date):
        out: dict = {}
        for (_, d, m), r in self.rows.items():
            if d == meal_date:
                out[(m, r.status)] = out.get((m, r.status), 0) + 1
        return out

    def drop_user(self, user_id):
        self.rows = {k: v for k, v in self.rows.items() if k[0] != user_id}


class InMemoryBilling:
    def __init__(self, users: InMemoryUsers):
        self.rows: dict[tuple, BillingRecord] = {}
        self._users = users
        self._next_id = 1
        self.fail_on_save = False

    def get(self, *, user_id, billing_month):
        return self.rows.get((int(user_id), billing_month))

    def ensure_exists(self, *, user_id, billing_month):
        key = (int(user_id), billing_month)
        if key not in self.rows:
            self.rows[key] = BillingRecord(
                billing_id=self._next_id,
                user_id=int(user_id),
                billing_month=billing_month,
                breakfast_count=0,
                lunch_count=0,
                dinner_count=0,
                total_meals=0,
                total_amount=0.0,
                is_paid=False,
            )
            self._next_id += 1

    def save_totals(self, *, user_id, billing_month, counts: MealCounts, total_amount):
        if self.fail_on_save:
            raise RuntimeError("disk full")
        self.ensure_exists(user_id=user_id, billing_month=billing_month)
        current = self.rows[(int(user_id), billing_month)]
        self.rows[(int(user_id), billing_month)] = BillingRecord(
            billing_id=current.billing_id,
            user_id=current.user_id,
            billing_month=billing_month,
            breakfast_count=counts.breakfast,
            lunch_count=counts.lunch,
            dinner_count=counts.dinner,
            total_meals=counts.total,
            total_amount=total_amount,
            is_paid=current.is_paid,
        )

    def set_paid(self, *, user_id, billing_month, is_paid):
        current = self.rows.get((int(user_id), billing_month))
        if not current:
            return False
        self.rows[(int(user_id), billing_month)] = BillingRecord(
            billing_id=current.billing_id,
            user_id=current.user_id,
            billing_month=current.billing_month,
            breakfast_count=current.breakfast_count,
            lunch_count=current.lunch_count,
            dinner_count=current.dinner_count,
            total_meals=current.total_meals,
            total_amount=current.total_amount,
            is_paid=bool(is_paid),
        )
        return True

    def list_for_user(self, *, user_id):
        items = [r for (uid, _), r in self.rows.items() if uid == int(user_id)]
        return sorted(items, key=lambda r: r.billing_month, reverse=True)

    def list_all(self):
        return [
            {"user_id": r.user_id, "billing_month": r.billing_month.strftime("%Y-%m"), "total_amount": r.total_amount}
            for r in self.rows.values()
        ]

    def list_month_summary(self, *, billing_month):
        out = []
        for u in self._users.list_students():
            r = self.rows.get((u.user_id, billing_month))
            out.append(
                {
                    "user_id": u.user_id,
                    "full_name": u.full_name,
                    "total_meals": r.total_meals if r else 0,
                    "total_amount": r.total_amount if r else 0.0,
                    "is_paid": r.is_paid if r else False,
                }
            )
        return out

    def month_rollup(self, *, billing_month):
        students = self._users.list_students()
        records = [self.rows[(u.user_id, billing_month)] for u in students if (u.user_id, billing_month) in self.rows]
        return MonthRollup(
            billing_month=billing_month,
            total_students=len(students),
            total_meals=sum(r.total_meals for r in records),
            total_amount=float(sum(r.total_amount for r in records)),
            paid_count=sum(1 for r in records if r.is_paid),
        )

    def drop_user(self, user_id):
        self.rows = {k: v for k, v in self.rows.items() if k[0] != user_id}


class InMemoryLeaves:
    def __init__(self):
        self.rows: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def create(self, *, user_id, start_date, end_date, reason):
        lid = self._next_id
        self._next_id += 1
        self.rows[lid] = LeaveRequest(
            leave_id=lid,
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=FIXED_NOW,
        )
        return lid

    def get(self, *, leave_id):
        return self.rows.get(int(leave_id))

    def get_for_update(self, *, leave_id):
        return self.get(leave_id=leave_id)

    def decide(self, *, leave_id, status):
        req = self.rows.get(int(leave_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.rows[req.leave_id] = LeaveRequest(
            leave_id=req.leave_id,
            user_id=req.user_id,
            start_date=req.start_date,
            end_date=req.end_date,
            reason=req.reason,
            status=status,
            created_at=req.created_at,
            updated_at=FIXED_NOW,
        )
        return True

    def list_for_user(self, *, user_id):
        return [r for r in self.rows.values() if r.user_id == int(user_id)]

    def list_all(self):
        return [{"leave_id": r.leave_id, "user_id": r.user_id, "status": r.status.value} for r in self.rows.values()]

    def list_approved_overlapping(self, *, user_id, start_date, end_date):
        return [
            r
            for r in self.rows.values()
            if r.user_id == int(user_id)
            and r.status == LeaveStatus.APPROVED
            and r.start_date <= end_date
            and r.end_date >= start_date
        ]

    def count_approved_covering(self, *, day):
        return sum(1 for r in self.rows.values() if r.status == LeaveStatus.APPROVED and r.covers(day))

    def drop_user(self, user_id):
        self.rows = {k: v for k, v in self.rows.items() if v.user_id != user_id}


class InMemoryPayments:
    def __init__(self):
        self.rows: dict[int, Payment] = {}
        self.settings = PaymentSettings()
        self._next_id = 1

    def create(self, *, user_id, amount, transaction_id, payment_method, billing_month):
        pid = self._next_id
        self._next_id += 1
        self.rows[pid] = Payment(
            payment_id=pid,
            user_id=int(user_id),
            amount=amount,
            transaction_id=transaction_id,
            payment_method=payment_method,
            billing_month=billing_month,
            status=PaymentStatus.PENDING,
            created_at=FIXED_NOW,
        )
        return pid

    def get(self, *, payment_id):
        return self.rows.get(int(payment_id))

    def list_for_user(self, *, user_id, billing_month=None):
        return [
            p
            for p in self.rows.values()
            if p.user_id == int(user_id) and (billing_month is None or p.billing_month == billing_month)
        ]

    def list_all(self):
        return [{"payment_id": p.payment_id, "status": p.status.value} for p in self.rows.values()]

    def set_status(self, *, payment_id, status):
        p = self.rows.get(int(payment_id))
        if not p:
            return False
        self.rows[p.payment_id] = Payment(
            payment_id=p.payment_id,
            user_id=p.user_id,
            amount=p.amount,
            transaction_id=p.transaction_id,
            payment_method=p.payment_method,
            billing_month=p.billing_month,
            status=status,
            created_at=p.created_at,
        )
        return True

    def get_settings(self):
        return self.settings

    def save_settings(self, settings):
        self.settings = settings

    def drop_user(self, user_id):
        self.rows = {k: v for k, v in self.rows.items() if v.user_id != user_id}


class InMemoryWaste:
    def __init__(self):
        self.rows: dict[int, WasteRecord] = {}
        self._next_id = 1

    def exists(self, *, meal_date, meal_type):
        return any(r.meal_date == meal_date and r.meal_type == meal_type for r in self.rows.values())

    def create(self, *, meal_date, meal_type, total_served, total_consumed, waste_amount, waste_percentage, notes):
        if self.exists(meal_date=meal_date, meal_type=meal_type):
            raise ConflictError("Record already exists for this date and meal type")
        wid = self._next_id
        self._next_id += 1
        self.rows[wid] = WasteRecord(
            waste_id=wid,
            meal_date=meal_date,
            meal_type=meal_type,
            total_served=total_served,
            total_consumed=total_consumed,
            waste_amount=waste_amount,
            waste_percentage=waste_percentage,
            notes=notes,
            created_at=FIXED_NOW,
        )
        return wid

    def get(self, *, waste_id):
        return self.rows.get(int(waste_id))

    def list_records(self, *, start_date=None, end_date=None, meal_type=None):
        items = [
            r
            for r in self.rows.values()
            if (start_date is None or r.meal_date >= start_date)
            and (end_date is None or r.meal_date <= end_date)
            and (meal_type is None or r.meal_type == meal_type)
        ]
        return sorted(items, key=lambda r: (r.meal_date, -_MEAL_ORDER[r.meal_type]), reverse=True)


class SnapshotTransaction:
    """Transaction stand-in: restores every repo's state when the block raises."""

    def __init__(self, *repos):
        self._repos = repos
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def __call__(self):
        saved = [copy.deepcopy(r.rows) for r in self._repos]
        try:
            yield self
        except Exception:
            for repo, state in zip(self._repos, saved):
                repo.rows = state
            self.rollbacks += 1
            raise
        self.commits += 1


def make_user(user_id: int, *, role: Role = Role.STUDENT, full_name: Optional[str] = None) -> User:
    return User(
        user_id=user_id,
        full_name=full_name or f"Student {user_id}",
        email=f"user{user_id}@example.com",
        role=role,
        mess_status=MessStatus.ACTIVE,
    )


class Repos:
    def __init__(self):
        self.users = InMemoryUsers([make_user(1), make_user(2), make_user(99, role=Role.ADMIN, full_name="Admin")])
        self.attendance = InMemoryAttendance()
        self.billing = InMemoryBilling(self.users)
        self.leaves = InMemoryLeaves()
        self.payments = InMemoryPayments()
        self.waste = InMemoryWaste()
        self.users.cascade_targets = [self.attendance, self.billing, self.leaves, self.payments]
        self.transaction = SnapshotTransaction(self.attendance, self.billing, self.leaves)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def repos():
    return Repos()


@pytest.fixture
def container(repos):
    return assemble(
        users_repo=repos.users,
        attendance_repo=repos.attendance,
        billing_repo=repos.billing,
        leaves_repo=repos.leaves,
        payments_repo=repos.payments,
        waste_repo=repos.waste,
        transaction=repos.transaction,
    )


@pytest.fixture
def june():
    return date(2024, 6, 1)
