from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from faculty_desk.api.deps import RequestContext, get_directory_store, get_leave_evaluator, get_request_context
from faculty_desk.schemas.leave import (
    DayReplacementOut,
    LeaveApplicationOut,
    LeaveApplyRequest,
    LeaveDecisionOut,
    SlotReplacementsOut,
)
from faculty_desk.services.directory import DirectoryStore
from faculty_desk.services.leave_evaluator import LeaveDecision, LeaveEvaluator

router = APIRouter()


def _decision_out(decision: LeaveDecision) -> LeaveDecisionOut:
    return LeaveDecisionOut(
        approved=decision.approved,
        status=decision.status,
        message=decision.message,
        application_id=decision.application_id,
        days=decision.day_count,
        replacement_details=[
            DayReplacementOut(
                date=day.date,
                day=day.day,
                required=day.required,
                available_replacements=[
                    SlotReplacementsOut(
                        start_time=slot.start_time,
                        end_time=slot.end_time,
                        subject=slot.subject,
                        room_number=slot.room_number,
                        replacements=list(slot.replacements),
                    )
                    for slot in day.slots
                ],
            )
            for day in decision.days
        ],
    )


@router.post(
    "/leaves",
    response_model=LeaveDecisionOut,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": LeaveDecisionOut}},
)
def apply_for_leave(
    payload: LeaveApplyRequest,
    context: RequestContext = Depends(get_request_context),
    evaluator: LeaveEvaluator = Depends(get_leave_evaluator),
):
    decision = evaluator.evaluate(
        applicant_email=context.email,
        leave_type=payload.leave_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
    )
    body = _decision_out(decision)
    if not decision.approved:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(mode="json", by_alias=True),
        )
    return body


@router.get("/leaves", response_model=list[LeaveApplicationOut])
def list_my_leave_applications(
    context: RequestContext = Depends(get_request_context),
    store: DirectoryStore = Depends(get_directory_store),
) -> list[LeaveApplicationOut]:
    return store.list_leave_applications(context.email)
