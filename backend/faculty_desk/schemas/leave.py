from datetime import date, datetime, time

from pydantic import BaseModel, Field, field_validator

from faculty_desk.models.leave_application import LeaveStatus
from faculty_desk.models.schedule import Weekday


class LeaveApplyRequest(BaseModel):
    leave_type: str = Field(alias="type", min_length=1, max_length=100)
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    reason: str = Field(min_length=1, max_length=1000)

    model_config = {"populate_by_name": True}

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def drop_time_of_day(cls, value):
        # Only the calendar date of a date-time counts.
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and len(value.strip()) > 10:
            try:
                return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
            except ValueError:
                return value
        return value

    @field_validator("leave_type", "reason")
    @classmethod
    def require_text(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Field cannot be blank")
        return trimmed


class SlotReplacementsOut(BaseModel):
    start_time: time = Field(serialization_alias="startTime")
    end_time: time = Field(serialization_alias="endTime")
    subject: str
    room_number: str = Field(serialization_alias="roomNumber")
    replacements: list[str]


class DayReplacementOut(BaseModel):
    date: date
    day: Weekday
    required: bool
    available_replacements: list[SlotReplacementsOut] = Field(
        default_factory=list,
        serialization_alias="availableReplacements",
    )


class LeaveDecisionOut(BaseModel):
    approved: bool
    status: LeaveStatus
    message: str
    application_id: int | None = Field(default=None, serialization_alias="applicationId")
    days: int
    replacement_details: list[DayReplacementOut] = Field(serialization_alias="replacementDetails")


class LeaveApplicationOut(BaseModel):
    id: int
    email: str
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
