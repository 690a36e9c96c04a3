from fastapi import APIRouter, Depends

from faculty_desk.api.deps import RequestContext, get_directory_store, get_request_context
from faculty_desk.core.exceptions import NotFoundError
from faculty_desk.schemas.account import MessageOut, ProfileOut, SalaryUpdate
from faculty_desk.services.audit import log_activity
from faculty_desk.services.directory import DirectoryStore

router = APIRouter()


@router.get("/profile", response_model=ProfileOut)
def get_profile(
    context: RequestContext = Depends(get_request_context),
    store: DirectoryStore = Depends(get_directory_store),
) -> ProfileOut:
    return store.get_account_by_email(context.email)


@router.post("/profile/salary", response_model=MessageOut)
def update_salary(
    payload: SalaryUpdate,
    context: RequestContext = Depends(get_request_context),
    store: DirectoryStore = Depends(get_directory_store),
) -> MessageOut:
    if not store.update_salary(context.email, payload.new_salary):
        raise NotFoundError("User not found")
    log_activity(
        store.db,
        account_id=context.account_id,
        action="account.salary_updated",
        entity_type="account",
        entity_id=context.account_id,
        details={"salary": payload.new_salary},
    )
    store.commit()
    return MessageOut(message="Salary updated successfully")
