from datetime import date, time

import pytest

from faculty_desk.core.exceptions import ConflictError, NotFoundError
from faculty_desk.models.account import Account, AccountRole, Department
from faculty_desk.models.schedule import Weekday
from faculty_desk.services.availability import AvailabilityResolver
from faculty_desk.services.directory import DirectoryStore


def make_account(store, username, **overrides):
    values = {
        "username": username,
        "email": f"{username}@example.com",
        "department": Department.CSE,
        "role": AccountRole.faculty,
        "hashed_password": "not-a-real-hash",
        "salary": 40000,
        "max_leaves": 10,
    }
    values.update(overrides)
    account = store.create_account(**values)
    store.commit()
    return account


def add_class(store, account, day, start, end, subject="Networks"):
    entry = store.add_schedule_entry(
        account.id,
        day_of_week=day,
        start_time=start,
        end_time=end,
        subject=subject,
        room_number="C-101",
    )
    store.commit()
    return entry


def test_account_lookup_by_email_is_case_insensitive(db_session):
    store = DirectoryStore(db_session)
    account = make_account(store, "kiran")

    assert store.find_account_id_by_email("KIRAN@example.com") == account.id
    assert store.find_account_for_login("kiran").id == account.id
    assert store.find_account_for_login("Kiran@Example.com").id == account.id
    assert store.find_account_for_login("nobody") is None
    with pytest.raises(NotFoundError):
        store.find_account_id_by_email("missing@example.com")


def test_duplicate_email_raises_conflict(db_session):
    store = DirectoryStore(db_session)
    make_account(store, "kiran")

    assert store.username_or_email_taken("someone-else", "kiran@example.com") is True
    with pytest.raises(ConflictError):
        make_account(store, "kiran2", email="kiran@example.com")


def test_schedule_listing_is_stable_and_owner_scoped(db_session):
    store = DirectoryStore(db_session)
    owner = make_account(store, "owner")
    other = make_account(store, "other")
    first = add_class(store, owner, Weekday.Friday, time(14), time(15))
    second = add_class(store, owner, Weekday.Monday, time(9), time(10))
    add_class(store, other, Weekday.Monday, time(9), time(10))

    listed = store.list_schedule(owner.id)
    assert [item.schedule_id for item in listed] == [first.schedule_id, second.schedule_id]
    assert [item.schedule_id for item in store.list_schedule(owner.id)] == [
        item.schedule_id for item in listed
    ]


def test_delete_only_removes_own_entries(db_session):
    store = DirectoryStore(db_session)
    owner = make_account(store, "owner")
    intruder = make_account(store, "intruder")
    entry = add_class(store, owner, Weekday.Monday, time(9), time(10))

    assert store.delete_schedule_entry(intruder.id, entry.schedule_id) is False
    assert len(store.list_schedule(owner.id)) == 1

    assert store.delete_schedule_entry(owner.id, entry.schedule_id) is True
    store.commit()
    assert store.list_schedule(owner.id) == []
    assert store.delete_schedule_entry(owner.id, entry.schedule_id) is False


def test_leave_insert_and_counter_increment(db_session):
    store = DirectoryStore(db_session)
    account = make_account(store, "leaver")

    application_id = store.insert_leave_application(
        email=account.email,
        leave_type="sick",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 3),
        reason="Fever",
    )
    store.increment_total_leaves(account.id, 3)
    store.commit()

    assert application_id is not None
    assert db_session.get(Account, account.id).total_leaves == 3
    (application,) = store.list_leave_applications(account.email)
    assert application.status.value == "Approved"
    with pytest.raises(NotFoundError):
        store.increment_total_leaves(9999, 1)


def test_update_salary_reports_missing_account(db_session):
    store = DirectoryStore(db_session)
    account = make_account(store, "payroll")

    assert store.update_salary(account.email, 72000) is True
    store.commit()
    assert db_session.get(Account, account.id).salary == 72000
    assert store.update_salary("ghost@example.com", 1) is False


def test_resolver_matches_entries_that_cover_the_slot(db_session):
    store = DirectoryStore(db_session)
    applicant = make_account(store, "applicant")
    wide = make_account(store, "wide")
    partial = make_account(store, "partial")
    elsewhere = make_account(store, "elsewhere")
    add_class(store, applicant, Weekday.Monday, time(9), time(10))
    add_class(store, wide, Weekday.Monday, time(8), time(11))
    add_class(store, partial, Weekday.Monday, time(9, 30), time(10, 30))
    add_class(store, elsewhere, Weekday.Tuesday, time(8), time(11))

    candidates = AvailabilityResolver(store).find_replacements(Weekday.Monday, time(9), time(10))

    # The applicant's own class covers its slot too; the query does not exclude it.
    assert sorted(candidates) == ["applicant", "wide"]


def test_resolver_keeps_duplicate_owners(db_session):
    store = DirectoryStore(db_session)
    busy = make_account(store, "busy")
    add_class(store, busy, Weekday.Wednesday, time(8), time(12))
    add_class(store, busy, Weekday.Wednesday, time(9), time(11), subject="Labs")

    candidates = AvailabilityResolver(store).find_replacements(Weekday.Wednesday, time(9), time(10))
    assert candidates == ["busy", "busy"]


def test_resolver_returns_nothing_when_no_entry_covers(db_session):
    store = DirectoryStore(db_session)
    make_account(store, "idle")
    assert AvailabilityResolver(store).find_replacements(Weekday.Sunday, time(9), time(10)) == []
