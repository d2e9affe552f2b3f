from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class LogEventRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_name: Optional[str] = Field(default=None, alias="eventName")
    student_id: Optional[str] = Field(default=None, alias="studentId")
    app_id: Optional[str] = Field(default=None, alias="appId")
    academic_year: Optional[str] = Field(default=None, alias="academicYear")
    details: Optional[dict[str, Any]] = None


class LogEventResponse(BaseModel):
    success: bool
    message: str
    event_id: Optional[str] = None
