from abc import ABC, abstractmethod
from datetime import datetime, tzinfo
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from app.calendar.normalize import parse_timestamp
from app.core.config import AppConfig
from app.core.errors import MissingMeetingError, NotConfiguredError, SummarizeFailedError
from app.observability.logger import log_event, log_warning, timing


NO_SUMMARY = "No summary available"

SYSTEM_PROMPT = (
    "You are an assistant that provides helpful summaries of calendar events "
    "based on their names and timing."
)


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def complete(self, system_prompt: str, prompt: str) -> str:
        """Return the generated text for a prompt."""
        pass


class OpenAIClient(LLMClient):
    """OpenAI chat-completions client tuned for short meeting summaries."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30,
                 max_tokens: int = 200, temperature: float = 0.3):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.base_url = "https://api.openai.com/v1"

    async def complete(self, system_prompt: str, prompt: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        data = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt}
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature
        }

        try:
            with timing("openai_completion") as t:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        f"{self.base_url}/chat/completions",
                        headers=headers,
                        json=data
                    )
                    if response.status_code != 200:
                        log_warning("OpenAI API error", {
                            "status_code": response.status_code,
                            "body": response.text,
                        })
                        raise SummarizeFailedError(f"OpenAI API error: {response.status_code}")
                    result = response.json()
        except SummarizeFailedError:
            raise
        except httpx.TimeoutException as exc:
            raise SummarizeFailedError(f"OpenAI API timeout after {self.timeout}s") from exc
        except Exception as exc:
            raise SummarizeFailedError(f"OpenAI API error: {exc}") from exc

        log_event("completed", "openai", duration_ms=t.get_duration_ms(), model=self.model)
        return _first_choice_text(result)


def _first_choice_text(result: Any) -> str:
    try:
        content = result["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return NO_SUMMARY
    if not isinstance(content, str) or not content.strip():
        return NO_SUMMARY
    return content.strip()


def select_llm_client(config: AppConfig) -> LLMClient:
    """
    Build the LLM client from configuration.

    Raises:
        NotConfiguredError: if no OpenAI API key is configured
    """
    if not config.openai_api_key:
        raise NotConfiguredError("OPENAI_API_KEY is not set", code="openai_not_configured")
    return OpenAIClient(api_key=config.openai_api_key, model=config.llm_model)


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Configured zone for prompt dates; None means the server's local zone."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise NotConfiguredError(f"Unknown SUMMARY_TIMEZONE: {name}", code="invalid_summary_timezone")


def _format_date(dt: datetime) -> str:
    return f"{dt.month}/{dt.day}/{dt.year}"


def _format_time(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    am_pm = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d}:{dt.second:02d} {am_pm}"


def build_summary_prompt(meeting: Dict[str, Any], tz: Optional[tzinfo] = None) -> str:
    title = meeting.get("title") or "Untitled"
    start = parse_timestamp(meeting.get("startTime"))
    end = parse_timestamp(meeting.get("endTime"))

    start_date = _format_date(start.astimezone(tz)) if start else "an unknown date"
    start_time = _format_time(start.astimezone(tz)) if start else "an unknown time"
    end_time = _format_time(end.astimezone(tz)) if end else "an unknown time"

    return (
        f'This event "{title}" was scheduled on {start_date} from {start_time} to {end_time}. '
        "Based on the event name, write a short note about what this event could be about "
        "and what might have been discussed. Keep it concise and informative."
    )


async def summarize(meeting: Optional[Dict[str, Any]], client: LLMClient, tz: Optional[tzinfo] = None) -> str:
    """
    Generate a short summary for a meeting.

    Args:
        meeting: Meeting fields as sent by the browser (title, startTime, endTime, ...)
        client: LLM client to call
        tz: Timezone for the dates in the prompt

    Returns:
        Summary text, or "No summary available" if the model response is empty
    """
    if not meeting:
        raise MissingMeetingError("No meeting supplied")

    prompt = build_summary_prompt(meeting, tz)
    return await client.complete(SYSTEM_PROMPT, prompt)
