from datetime import date, time

import pytest

from faculty_desk.core.exceptions import NotFoundError, StoreError, ValidationError
from faculty_desk.models.leave_application import LeaveStatus
from faculty_desk.models.schedule import ScheduleEntry, Weekday
from faculty_desk.services.leave_evaluator import LeaveEvaluator, leave_days, weekday_name

# 2024-01-01 is a Monday.
MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)


class FakeSession:
    def __init__(self):
        self.added = []

    def add(self, item):
        self.added.append(item)


class FakeStore:
    def __init__(self, accounts=None, schedules=None):
        self.accounts = accounts if accounts is not None else {"applicant@example.com": 1}
        self.schedules = schedules if schedules is not None else {}
        self.calls = []
        self.applications = []
        self.increments = []
        self.committed = False
        self.rolled_back = False
        self.fail_increment = False
        self.db = FakeSession()

    def find_account_id_by_email(self, email):
        self.calls.append(("find_account_id_by_email", email))
        if email not in self.accounts:
            raise NotFoundError("User not found")
        return self.accounts[email]

    def list_schedule(self, account_id):
        self.calls.append(("list_schedule", account_id))
        return list(self.schedules.get(account_id, []))

    def insert_leave_application(self, **record):
        self.calls.append(("insert_leave_application", record["email"]))
        self.applications.append(record)
        return 100 + len(self.applications)

    def increment_total_leaves(self, account_id, by_days):
        self.calls.append(("increment_total_leaves", account_id))
        if self.fail_increment:
            raise StoreError()
        self.increments.append((account_id, by_days))

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True


class StubResolver:
    def __init__(self, answers=None, default=("colleague",)):
        self.answers = answers or {}
        self.default = list(default)
        self.calls = []

    def find_replacements(self, weekday, slot_start, slot_end):
        self.calls.append((weekday, slot_start, slot_end))
        return list(self.answers.get((weekday, slot_start, slot_end), self.default))


def entry(day, start, end, subject="Data Structures", room="B-204"):
    return ScheduleEntry(
        account_id=1,
        day_of_week=day,
        start_time=start,
        end_time=end,
        subject=subject,
        room_number=room,
    )


def evaluate(evaluator, start, end, **overrides):
    arguments = {
        "applicant_email": "applicant@example.com",
        "leave_type": "casual",
        "start_date": start,
        "end_date": end,
        "reason": "Family function",
    }
    arguments.update(overrides)
    return evaluator.evaluate(**arguments)


def test_leave_days_includes_both_ends():
    assert leave_days(MONDAY, MONDAY) == [MONDAY]
    assert leave_days(date(2024, 1, 30), date(2024, 2, 2)) == [
        date(2024, 1, 30),
        date(2024, 1, 31),
        date(2024, 2, 1),
        date(2024, 2, 2),
    ]


def test_weekday_name_follows_calendar():
    assert weekday_name(MONDAY) == Weekday.Monday
    assert weekday_name(date(2024, 1, 6)) == Weekday.Saturday
    assert weekday_name(date(2024, 1, 7)) == Weekday.Sunday
    assert weekday_name(date(2024, 2, 29)) == Weekday.Thursday


def test_range_without_classes_is_approved_and_counts_every_day():
    store = FakeStore()
    resolver = StubResolver()
    decision = evaluate(LeaveEvaluator(store, resolver), MONDAY, date(2024, 1, 5))

    assert decision.approved is True
    assert decision.status == LeaveStatus.approved
    assert decision.application_id == 101
    assert [day.required for day in decision.days] == [False] * 5
    assert resolver.calls == []
    assert store.increments == [(1, 5)]
    assert store.applications[0]["status"] == LeaveStatus.approved
    assert store.committed is True


def test_monday_class_with_one_candidate_is_approved():
    store = FakeStore(schedules={1: [entry(Weekday.Monday, time(9), time(10))]})
    resolver = StubResolver(default=["ravi"])
    decision = evaluate(LeaveEvaluator(store, resolver), MONDAY, MONDAY)

    assert decision.approved is True
    assert decision.day_count == 1
    (day,) = decision.days
    assert day.day == Weekday.Monday
    assert day.required is True
    assert day.slots[0].replacements == ("ravi",)
    assert resolver.calls == [(Weekday.Monday, time(9), time(10))]
    assert store.increments == [(1, 1)]


def test_missing_replacement_rejects_without_persisting():
    store = FakeStore(schedules={1: [entry(Weekday.Tuesday, time(9), time(10))]})
    resolver = StubResolver(default=[])
    decision = evaluate(LeaveEvaluator(store, resolver), MONDAY, TUESDAY)

    assert decision.approved is False
    assert decision.status == LeaveStatus.rejected
    assert decision.application_id is None
    monday, tuesday = decision.days
    assert (monday.day, monday.required, monday.slots) == (Weekday.Monday, False, ())
    assert tuesday.day == Weekday.Tuesday
    assert tuesday.required is True
    assert tuesday.slots[0].replacements == ()
    assert store.applications == []
    assert store.increments == []
    assert store.committed is False


def test_one_uncovered_slot_blocks_the_whole_range():
    schedule = [
        entry(Weekday.Monday, time(9), time(10)),
        entry(Weekday.Monday, time(11), time(12), subject="Compilers"),
    ]
    store = FakeStore(schedules={1: schedule})
    resolver = StubResolver(answers={(Weekday.Monday, time(11), time(12)): []}, default=["ravi"])
    decision = evaluate(LeaveEvaluator(store, resolver), MONDAY, MONDAY)

    assert decision.approved is False
    slots = decision.days[0].slots
    assert [slot.subject for slot in slots] == ["Data Structures", "Compilers"]
    assert [slot.covered for slot in slots] == [True, False]


def test_repeated_weekdays_reuse_the_same_lookup():
    store = FakeStore(schedules={1: [entry(Weekday.Monday, time(9), time(10))]})
    resolver = StubResolver(default=["ravi", "meena"])
    # Two full weeks touch Monday twice.
    decision = evaluate(LeaveEvaluator(store, resolver), MONDAY, date(2024, 1, 14))

    assert decision.approved is True
    assert decision.day_count == 14
    assert len(resolver.calls) == 1
    required_days = [day.date for day in decision.days if day.required]
    assert required_days == [MONDAY, date(2024, 1, 8)]
    assert store.increments == [(1, 14)]


def test_end_before_start_fails_before_any_store_access():
    store = FakeStore()
    with pytest.raises(ValidationError, match="End date cannot be earlier than start date"):
        evaluate(LeaveEvaluator(store, StubResolver()), TUESDAY, MONDAY)
    assert store.calls == []


@pytest.mark.parametrize("field", ["leave_type", "reason", "applicant_email"])
def test_blank_fields_are_rejected(field):
    store = FakeStore()
    with pytest.raises(ValidationError, match="Missing required fields"):
        evaluate(LeaveEvaluator(store, StubResolver()), MONDAY, MONDAY, **{field: "   "})
    assert store.calls == []


def test_unknown_applicant_is_not_found():
    store = FakeStore(accounts={})
    with pytest.raises(NotFoundError):
        evaluate(LeaveEvaluator(store, StubResolver()), MONDAY, MONDAY)
    assert store.applications == []


def test_counter_failure_rolls_back_the_application():
    store = FakeStore()
    store.fail_increment = True
    with pytest.raises(StoreError):
        evaluate(LeaveEvaluator(store, StubResolver()), MONDAY, TUESDAY)
    assert store.rolled_back is True
    assert store.committed is False
