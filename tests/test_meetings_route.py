from datetime import datetime, timedelta, timezone

from app.calendar.types import Meeting
from app.core.dependencies import get_event_sources, get_now
from app.core.errors import FallbackSourceError, PrimarySourceError


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _iso(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


def _meeting(meeting_id: str, hours_from_now: int) -> Meeting:
    start = NOW + timedelta(hours=hours_from_now)
    return Meeting(
        id=meeting_id,
        title=f"Meeting {meeting_id}",
        start_time=_iso(start),
        end_time=_iso(start + timedelta(minutes=30)),
        attendees=["a@x.com"],
    )


class _StaticSource:
    def __init__(self, name, meetings=None, error=None):
        self.name = name
        self.meetings = meetings or []
        self.error = error
        self.tokens = []

    async def fetch(self, access_token):
        self.tokens.append(access_token)
        if self.error:
            raise self.error
        return self.meetings


def _use_sources(app, *sources):
    app.dependency_overrides[get_event_sources] = lambda: list(sources)
    app.dependency_overrides[get_now] = lambda: NOW


class TestMeetingsEndpoint:
    """Test GET /api/meetings."""

    def test_without_session_returns_401(self, client):
        r = client.get("/api/meetings")
        assert r.status_code == 401
        assert r.json() == {"error": "not_authenticated"}

    def test_session_without_access_token_returns_401(self, client, login):
        login(tokens={"refresh_token": "only-refresh"})
        r = client.get("/api/meetings")
        assert r.status_code == 401
        assert r.json() == {"error": "not_authenticated"}

    def test_forged_cookie_returns_401(self, client, config):
        client.cookies.set(config.session_cookie_name, "sid.forged.signature")
        r = client.get("/api/meetings")
        assert r.status_code == 401

    def test_returns_classified_meetings(self, app, client, login):
        primary = _StaticSource("primary", meetings=[
            _meeting("past-1", -1),
            _meeting("future-2", 2),
            _meeting("future-1", 1),
            _meeting("past-3", -3),
        ])
        fallback = _StaticSource("fallback")
        _use_sources(app, primary, fallback)
        login()

        r = client.get("/api/meetings")

        assert r.status_code == 200
        body = r.json()
        assert [m["id"] for m in body["upcoming"]] == ["future-1", "future-2"]
        assert [m["id"] for m in body["past"]] == ["past-1", "past-3"]
        first = body["upcoming"][0]
        assert first["title"] == "Meeting future-1"
        assert first["startTime"] == "2024-06-01T13:00:00Z"
        assert first["endTime"] == "2024-06-01T13:30:00Z"
        assert first["attendees"] == ["a@x.com"]
        assert primary.tokens == ["user-access-token"]
        assert fallback.tokens == []

    def test_uses_fallback_when_primary_fails(self, app, client, login):
        primary = _StaticSource("primary", error=PrimarySourceError("down"))
        fallback = _StaticSource("fallback", meetings=[_meeting("f", 5)])
        _use_sources(app, primary, fallback)
        login()

        r = client.get("/api/meetings")

        assert r.status_code == 200
        assert [m["id"] for m in r.json()["upcoming"]] == ["f"]
        assert fallback.tokens == ["user-access-token"]

    def test_both_sources_failing_returns_500(self, app, client, login):
        _use_sources(
            app,
            _StaticSource("primary", error=PrimarySourceError("upstream said: secret detail")),
            _StaticSource("fallback", error=FallbackSourceError("401 from google")),
        )
        login()

        r = client.get("/api/meetings")

        assert r.status_code == 500
        assert r.json() == {"error": "failed_to_fetch_events"}
        assert "secret detail" not in r.text

    def test_caps_each_list_at_five(self, app, client, login):
        meetings = [_meeting(f"u{i}", i + 1) for i in range(7)] + [_meeting(f"p{i}", -(i + 1)) for i in range(7)]
        _use_sources(app, _StaticSource("primary", meetings=meetings))
        login()

        body = client.get("/api/meetings").json()

        assert [m["id"] for m in body["upcoming"]] == ["u0", "u1", "u2", "u3", "u4"]
        assert [m["id"] for m in body["past"]] == ["p0", "p1", "p2", "p3", "p4"]
