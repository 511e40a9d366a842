from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MeetingPayload(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = None
    title: Optional[str] = None
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    attendees: List[str] = []
    description: Optional[str] = None
    location: Optional[str] = None


class SummarizeRequest(BaseModel):
    meeting: Optional[MeetingPayload] = None


class SummarizeResponse(BaseModel):
    summary: str
