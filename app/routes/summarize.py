from typing import Callable, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import AppConfig
from app.core.dependencies import get_config, get_llm_factory
from app.core.errors import MissingMeetingError
from app.llm.service import LLMClient, resolve_timezone, summarize
from app.observability.logger import log_event
from app.schemas.summarize import SummarizeRequest, SummarizeResponse


router = APIRouter()


@router.post("/summarize")
async def summarize_meeting(
    body: Optional[SummarizeRequest] = None,
    config: AppConfig = Depends(get_config),
    llm_factory: Callable[[], LLMClient] = Depends(get_llm_factory),
) -> JSONResponse:
    if body is None or body.meeting is None:
        raise MissingMeetingError("Request has no meeting")

    meeting = body.meeting.model_dump(by_alias=True)
    client = llm_factory()
    summary = await summarize(meeting, client, resolve_timezone(config.summary_timezone))
    log_event("summarized", "openai", meeting_id=meeting.get("id"), summary_chars=len(summary))

    return JSONResponse(status_code=200, content=SummarizeResponse(summary=summary).model_dump())
