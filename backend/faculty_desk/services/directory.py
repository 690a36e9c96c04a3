"""Relational access to accounts, weekly schedules and leave applications.

``DirectoryStore`` is the only place that talks to the ORM session on behalf of
the leave workflow and the HTTP routes. Every SQLAlchemy failure is logged and
re-raised as :class:`StoreError`; a missing account is a :class:`NotFoundError`.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, time
import logging
from typing import Iterator

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from faculty_desk.core.exceptions import ConflictError, NotFoundError, StoreError
from faculty_desk.models.account import Account, AccountRole, Department
from faculty_desk.models.leave_application import LeaveApplication, LeaveStatus
from faculty_desk.models.schedule import ScheduleEntry, Weekday

logger = logging.getLogger(__name__)


def _normalize_email(value: str) -> str:
    return (value or "").strip().lower()


class DirectoryStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.exception("Directory store operation %s failed", operation)
            self.db.rollback()
            raise StoreError() from exc

    # accounts

    def find_account_id_by_email(self, email: str) -> int:
        with self._guard("find_account_id_by_email"):
            account_id = self.db.execute(
                select(Account.id).where(Account.email == _normalize_email(email))
            ).scalar_one_or_none()
        if account_id is None:
            raise NotFoundError("User not found")
        return account_id

    def get_account_by_email(self, email: str) -> Account:
        with self._guard("get_account_by_email"):
            account = self.db.execute(
                select(Account).where(Account.email == _normalize_email(email))
            ).scalar_one_or_none()
        if account is None:
            raise NotFoundError("User not found")
        return account

    def find_account_for_login(self, identifier: str) -> Account | None:
        cleaned = (identifier or "").strip()
        with self._guard("find_account_for_login"):
            return self.db.execute(
                select(Account)
                .where(or_(Account.username == cleaned, Account.email == cleaned.lower()))
                .order_by(Account.id)
                .limit(1)
            ).scalar_one_or_none()

    def username_or_email_taken(self, username: str, email: str) -> bool:
        with self._guard("username_or_email_taken"):
            existing = self.db.execute(
                select(Account.id)
                .where(or_(Account.username == username, Account.email == _normalize_email(email)))
                .limit(1)
            ).scalar_one_or_none()
        return existing is not None

    def create_account(
        self,
        *,
        username: str,
        email: str,
        department: Department,
        role: AccountRole,
        hashed_password: str,
        salary: int,
        max_leaves: int,
    ) -> Account:
        account = Account(
            username=username,
            email=_normalize_email(email),
            department=department,
            role=role,
            hashed_password=hashed_password,
            salary=salary,
            max_leaves=max_leaves,
            total_leaves=0,
        )
        self.db.add(account)
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("Username or email already exists") from exc
        except SQLAlchemyError as exc:
            logger.exception("Directory store operation create_account failed")
            self.db.rollback()
            raise StoreError() from exc
        return account

    def update_salary(self, email: str, salary: int) -> bool:
        with self._guard("update_salary"):
            result = self.db.execute(
                update(Account).where(Account.email == _normalize_email(email)).values(salary=salary)
            )
        return result.rowcount > 0

    def increment_total_leaves(self, account_id: int, by_days: int) -> None:
        with self._guard("increment_total_leaves"):
            result = self.db.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(total_leaves=Account.total_leaves + by_days)
            )
        if result.rowcount == 0:
            raise NotFoundError("User not found")

    # weekly schedule

    def list_schedule(self, account_id: int) -> list[ScheduleEntry]:
        with self._guard("list_schedule"):
            return list(
                self.db.execute(
                    select(ScheduleEntry)
                    .where(ScheduleEntry.account_id == account_id)
                    .order_by(ScheduleEntry.schedule_id)
                ).scalars()
            )

    def add_schedule_entry(
        self,
        account_id: int,
        *,
        day_of_week: Weekday,
        start_time: time,
        end_time: time,
        subject: str,
        room_number: str,
    ) -> ScheduleEntry:
        entry = ScheduleEntry(
            account_id=account_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            subject=subject,
            room_number=room_number,
        )
        with self._guard("add_schedule_entry"):
            self.db.add(entry)
            self.db.flush()
        return entry

    def delete_schedule_entry(self, account_id: int, schedule_id: int) -> bool:
        """Delete an entry only when ``account_id`` owns it. Returns False otherwise."""
        with self._guard("delete_schedule_entry"):
            entry = self.db.execute(
                select(ScheduleEntry).where(
                    ScheduleEntry.schedule_id == schedule_id,
                    ScheduleEntry.account_id == account_id,
                )
            ).scalar_one_or_none()
            if entry is None:
                return False
            self.db.delete(entry)
            self.db.flush()
        return True

    def find_covering_schedule_owners(self, weekday: Weekday, start_time: time, end_time: time) -> list[str]:
        """Usernames owning an entry on ``weekday`` that spans [start_time, end_time].

        One username per matching entry, so an owner with two covering entries
        appears twice.
        """
        with self._guard("find_covering_schedule_owners"):
            return list(
                self.db.execute(
                    select(Account.username)
                    .join(ScheduleEntry, ScheduleEntry.account_id == Account.id)
                    .where(
                        ScheduleEntry.day_of_week == weekday,
                        ScheduleEntry.start_time <= start_time,
                        ScheduleEntry.end_time >= end_time,
                    )
                ).scalars()
            )

    # leave applications

    def insert_leave_application(
        self,
        *,
        email: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
        status: LeaveStatus = LeaveStatus.approved,
    ) -> int:
        application = LeaveApplication(
            email=_normalize_email(email),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=status,
        )
        with self._guard("insert_leave_application"):
            self.db.add(application)
            self.db.flush()
        return application.id

    def list_leave_applications(self, email: str) -> list[LeaveApplication]:
        with self._guard("list_leave_applications"):
            return list(
                self.db.execute(
                    select(LeaveApplication)
                    .where(LeaveApplication.email == _normalize_email(email))
                    .order_by(LeaveApplication.start_date.desc(), LeaveApplication.id.desc())
                ).scalars()
            )

    # transactions

    def commit(self) -> None:
        with self._guard("commit"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
