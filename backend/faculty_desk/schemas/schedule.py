from datetime import time

from pydantic import BaseModel, Field, field_validator, model_validator

from faculty_desk.models.schedule import Weekday


class ScheduleEntryCreate(BaseModel):
    day_of_week: Weekday
    start_time: time
    end_time: time
    subject: str = Field(min_length=1, max_length=200)
    room_number: str = Field(min_length=1, max_length=50)

    @field_validator("subject", "room_number")
    @classmethod
    def require_text(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Field cannot be blank")
        return trimmed

    @model_validator(mode="after")
    def validate_time_range(self) -> "ScheduleEntryCreate":
        if self.end_time < self.start_time:
            raise ValueError("End time cannot be earlier than start time")
        return self


class ScheduleEntryOut(BaseModel):
    schedule_id: int
    day_of_week: Weekday
    start_time: time
    end_time: time
    subject: str
    room_number: str

    model_config = {"from_attributes": True}


class ScheduleEntryCreated(BaseModel):
    message: str
    schedule_id: int = Field(serialization_alias="scheduleId")
