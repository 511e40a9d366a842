from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Meeting(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = "Untitled"
    start_time: str = Field(alias="startTime")  # ISO 8601
    end_time: str = Field(alias="endTime")      # ISO 8601
    attendees: List[str] = []
    description: Optional[str] = None
    location: Optional[str] = None


class ClassifiedMeetings(BaseModel):
    upcoming: List[Meeting] = []
    past: List[Meeting] = []

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True)
