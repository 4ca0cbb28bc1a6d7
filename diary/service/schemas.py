"""Request, patch and query models.

Create models describe a full payload. Patch models describe partial
updates: every field is optional and only the keys the caller actually
sent are applied (``changes()``), so an explicit ``null`` clears a nullable
column while an absent key leaves it alone.
"""

from datetime import date, datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator
from pydantic import ValidationError as PydanticValidationError

from diary.errors import ValidationError

AnswerType = Literal["morning", "evening"]
PracticeType = Literal["breathing_478", "square_breathing", "calm_breathing"]
Priority = Literal["low", "medium", "high"]
SessionType = Literal["work", "short_break", "long_break"]
Theme = Literal["light", "dark"]

NotificationTime = Annotated[str, StringConstraints(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ListName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
PageSize = Annotated[int, Field(ge=1, le=500)]

DEFAULT_LIST_NAME = "My Tasks"


def validate(model, data):
    """Parse ``data`` with ``model`` or raise a field-level ValidationError."""
    try:
        return model.model_validate(data if data is not None else {})
    except PydanticValidationError as exc:
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"]) or None,
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        raise ValidationError("invalid request", details=details) from exc


def _reject_null(value):
    if value is None:
        raise ValueError("may not be null")
    return value


class Patch(BaseModel):
    def changes(self):
        return self.model_dump(mode="json", exclude_unset=True)


class CreateAnswerRequest(BaseModel):
    type: AnswerType
    question_1: str
    question_2: str
    question_3: str


class UpdateAnswerRequest(Patch):
    question_1: Optional[str] = None
    question_2: Optional[str] = None
    question_3: Optional[str] = None


class AnswerQuery(BaseModel):
    type: Optional[AnswerType] = None
    search: Optional[str] = None
    limit: PageSize = 20
    offset: Annotated[int, Field(ge=0)] = 0


class CreatePracticeRequest(BaseModel):
    type: PracticeType
    duration_seconds: Annotated[int, Field(ge=0)]


class ListQuery(BaseModel):
    limit: PageSize = 50


class UpdateSettingsRequest(Patch):
    morning_notification_time: Optional[NotificationTime] = None
    evening_notification_time: Optional[NotificationTime] = None
    theme: Optional[Theme] = None

    @field_validator("theme", mode="before")
    @classmethod
    def theme_not_null(cls, value):
        return _reject_null(value)


class CreateTodoRequest(BaseModel):
    title: Title
    description: Optional[str] = None
    priority: Priority = "medium"
    due_date: Optional[date] = None
    notes: Optional[str] = None
    list_name: ListName = DEFAULT_LIST_NAME
    reminder_date: Optional[datetime] = None
    estimated_pomodoros: Annotated[int, Field(ge=1)] = 1

    @field_validator("description", "notes")
    @classmethod
    def blank_to_none(cls, value):
        return value or None

    def fields(self):
        return self.model_dump(mode="json")


class UpdateTodoRequest(Patch):
    title: Optional[Title] = None
    description: Optional[str] = None
    is_completed: Optional[bool] = None
    priority: Optional[Priority] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    list_name: Optional[ListName] = None
    reminder_date: Optional[datetime] = None
    estimated_pomodoros: Optional[Annotated[int, Field(ge=1)]] = None
    # Explicit override; the linker is the usual writer of this column.
    completed_pomodoros: Optional[Annotated[int, Field(ge=0)]] = None

    @field_validator(
        "title",
        "is_completed",
        "priority",
        "list_name",
        "estimated_pomodoros",
        "completed_pomodoros",
        mode="before",
    )
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


class TodoQuery(BaseModel):
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    limit: PageSize = 50


class CreatePomodoroSessionRequest(BaseModel):
    type: SessionType = "work"
    duration_minutes: Annotated[int, Field(ge=1)] = 25
    task_id: Optional[int] = None
