from fastapi import APIRouter, Depends, status

from faculty_desk.api.deps import RequestContext, get_directory_store, get_request_context
from faculty_desk.core.exceptions import NotFoundError
from faculty_desk.schemas.account import MessageOut
from faculty_desk.schemas.schedule import ScheduleEntryCreate, ScheduleEntryCreated, ScheduleEntryOut
from faculty_desk.services.audit import log_activity
from faculty_desk.services.directory import DirectoryStore

router = APIRouter()


@router.get("", response_model=list[ScheduleEntryOut])
def list_timetable(
    context: RequestContext = Depends(get_request_context),
    store: DirectoryStore = Depends(get_directory_store),
) -> list[ScheduleEntryOut]:
    account_id = store.find_account_id_by_email(context.email)
    return store.list_schedule(account_id)


@router.post("", response_model=ScheduleEntryCreated, status_code=status.HTTP_201_CREATED)
def add_timetable_entry(
    payload: ScheduleEntryCreate,
    context: RequestContext = Depends(get_request_context),
    store: DirectoryStore = Depends(get_directory_store),
) -> ScheduleEntryCreated:
    account_id = store.find_account_id_by_email(context.email)
    entry = store.add_schedule_entry(account_id, **payload.model_dump())
    schedule_id = entry.schedule_id
    log_activity(
        store.db,
        account_id=account_id,
        action="timetable.added",
        entity_type="schedule_entry",
        entity_id=schedule_id,
        details={
            "day_of_week": payload.day_of_week.value,
            "start_time": payload.start_time.isoformat(),
            "end_time": payload.end_time.isoformat(),
        },
    )
    store.commit()
    return ScheduleEntryCreated(message="Class added successfully", schedule_id=schedule_id)


@router.delete("/{schedule_id}", response_model=MessageOut)
def delete_timetable_entry(
    schedule_id: int,
    context: RequestContext = Depends(get_request_context),
    store: DirectoryStore = Depends(get_directory_store),
) -> MessageOut:
    account_id = store.find_account_id_by_email(context.email)
    if not store.delete_schedule_entry(account_id, schedule_id):
        raise NotFoundError("Class not found or does not belong to the user")
    log_activity(
        store.db,
        account_id=account_id,
        action="timetable.deleted",
        entity_type="schedule_entry",
        entity_id=schedule_id,
    )
    store.commit()
    return MessageOut(message="Class deleted successfully")
