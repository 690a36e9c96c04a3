"""Leave applications with automatic replacement checking.

For every calendar day in the requested range the applicant's classes on that
weekday are looked up, and each class slot is checked for at least one
replacement candidate. The leave is approved, persisted and counted only when
every slot on every day has a candidate; otherwise the caller gets the same
per-day report with a rejection and nothing is written.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, time, timedelta
import logging
from typing import Protocol

from faculty_desk.core.exceptions import AppError, ValidationError
from faculty_desk.models.leave_application import LeaveStatus
from faculty_desk.models.schedule import ScheduleEntry, Weekday
from faculty_desk.services.audit import log_activity
from faculty_desk.services.directory import DirectoryStore

logger = logging.getLogger(__name__)

# Indexed by date.weekday(): Monday == 0.
WEEKDAYS_BY_INDEX = (
    Weekday.Monday,
    Weekday.Tuesday,
    Weekday.Wednesday,
    Weekday.Thursday,
    Weekday.Friday,
    Weekday.Saturday,
    Weekday.Sunday,
)

APPROVED_MESSAGE = "Leave application submitted and approved."
REJECTED_MESSAGE = "Leave cannot be approved. No replacement faculty available for all days."


class ReplacementFinder(Protocol):
    def find_replacements(self, weekday: Weekday, slot_start: time, slot_end: time) -> list[str]: ...


def leave_days(start_date: date, end_date: date) -> list[date]:
    """Every calendar date from ``start_date`` to ``end_date``, both included."""
    span = (end_date - start_date).days
    return [start_date + timedelta(days=offset) for offset in range(span + 1)]


def weekday_name(day: date) -> Weekday:
    return WEEKDAYS_BY_INDEX[day.weekday()]


@dataclass(frozen=True)
class SlotReport:
    start_time: time
    end_time: time
    subject: str
    room_number: str
    replacements: tuple[str, ...]

    @property
    def covered(self) -> bool:
        return len(self.replacements) > 0


@dataclass(frozen=True)
class DayReport:
    date: date
    day: Weekday
    required: bool
    slots: tuple[SlotReport, ...] = ()

    @property
    def satisfied(self) -> bool:
        return all(slot.covered for slot in self.slots)


@dataclass(frozen=True)
class LeaveDecision:
    approved: bool
    days: tuple[DayReport, ...]
    application_id: int | None = None

    @property
    def status(self) -> LeaveStatus:
        return LeaveStatus.approved if self.approved else LeaveStatus.rejected

    @property
    def message(self) -> str:
        return APPROVED_MESSAGE if self.approved else REJECTED_MESSAGE

    @property
    def day_count(self) -> int:
        return len(self.days)


def _require_text(value: str | None, field: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise ValidationError("Missing required fields", details={"field": field})
    return trimmed


class LeaveRecordWriter:
    """Persists an approved leave and bumps the applicant's leave counter atomically."""

    def __init__(self, store: DirectoryStore) -> None:
        self.store = store

    def record(
        self,
        *,
        account_id: int,
        email: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
        day_count: int,
    ) -> int:
        # Insert, counter update and audit row commit together.
        try:
            application_id = self.store.insert_leave_application(
                email=email,
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                status=LeaveStatus.approved,
            )
            self.store.increment_total_leaves(account_id, day_count)
            log_activity(
                self.store.db,
                account_id=account_id,
                action="leave.approved",
                entity_type="leave_application",
                entity_id=application_id,
                details={
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "days": day_count,
                },
            )
            self.store.commit()
        except AppError:
            self.store.rollback()
            raise
        return application_id


class LeaveEvaluator:
    def __init__(
        self,
        store: DirectoryStore,
        resolver: ReplacementFinder,
        writer: LeaveRecordWriter | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.writer = writer or LeaveRecordWriter(store)

    def evaluate(
        self,
        *,
        applicant_email: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveDecision:
        email = _require_text(applicant_email, "email")
        leave_type = _require_text(leave_type, "type")
        reason = _require_text(reason, "reason")
        if start_date is None or end_date is None:
            raise ValidationError("Missing required fields", details={"field": "startDate/endDate"})
        if end_date < start_date:
            raise ValidationError("End date cannot be earlier than start date")

        account_id = self.store.find_account_id_by_email(email)
        schedule = self.store.list_schedule(account_id)
        days = self._build_report(schedule, leave_days(start_date, end_date))
        approved = all(day.satisfied for day in days)

        if not approved:
            logger.info(
                "Leave for %s from %s to %s rejected: %d day(s) without a replacement",
                email,
                start_date,
                end_date,
                sum(1 for day in days if not day.satisfied),
            )
            return LeaveDecision(approved=False, days=days)

        application_id = self.writer.record(
            account_id=account_id,
            email=email,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            day_count=len(days),
        )
        logger.info("Leave %s approved for %s (%d day(s))", application_id, email, len(days))
        return LeaveDecision(approved=True, days=days, application_id=application_id)

    def _build_report(self, schedule: list[ScheduleEntry], dates: list[date]) -> tuple[DayReport, ...]:
        by_weekday: dict[Weekday, list[ScheduleEntry]] = defaultdict(list)
        for entry in schedule:
            by_weekday[Weekday(entry.day_of_week)].append(entry)

        # Keyed by (weekday, start, end); each distinct slot is resolved once.
        lookups: dict[tuple[Weekday, time, time], tuple[str, ...]] = {}
        reports: list[DayReport] = []
        for current in dates:
            weekday = weekday_name(current)
            entries = by_weekday.get(weekday, [])
            if not entries:
                reports.append(DayReport(date=current, day=weekday, required=False))
                continue

            slots: list[SlotReport] = []
            for entry in entries:
                key = (weekday, entry.start_time, entry.end_time)
                if key not in lookups:
                    lookups[key] = tuple(self.resolver.find_replacements(*key))
                slots.append(
                    SlotReport(
                        start_time=entry.start_time,
                        end_time=entry.end_time,
                        subject=entry.subject,
                        room_number=entry.room_number,
                        replacements=lookups[key],
                    )
                )
            reports.append(DayReport(date=current, day=weekday, required=True, slots=tuple(slots)))
        return tuple(reports)
