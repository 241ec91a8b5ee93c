"""Analytics Stats — pure aggregations used by the dashboards.

Tests:
    - summarize: completion rate, average duration, top domains ("unknown" excluded)
    - Empty input yields zeros
    - journey_funnel counts distinct visits per step in funnel order
    - conversion_trend covers every day, oldest first
    - media_type_stats percentages
"""

from datetime import date, datetime, timezone

from boothboss.core.analytics_stats import (
    FUNNEL_STEPS, conversion_trend, distinct_event_types, email_domain,
    event_label, journey_funnel, media_type_stats, percentage, summarize,
)


def test_summarize():
    rows = [
        {"event_type": "session_complete", "duration_ms": 1000, "email_domain": "gmail.com"},
        {"event_type": "session_complete", "duration_ms": 3000, "email_domain": "gmail.com"},
        {"event_type": "session_start", "email_domain": "unknown"},
        {"event_type": "session_start", "email_domain": "acme.io"},
    ]
    summary = summarize(rows)
    assert summary["total_sessions"] == 4
    assert summary["completed_sessions"] == 2
    assert summary["completion_rate"] == 50
    assert summary["avg_completion_time_ms"] == 2000
    assert summary["top_email_domains"] == [
        {"domain": "gmail.com", "count": 2},
        {"domain": "acme.io", "count": 1},
    ]


def test_summarize_empty():
    assert summarize([]) == {
        "total_sessions": 0,
        "completed_sessions": 0,
        "completion_rate": 0,
        "avg_completion_time_ms": 0,
        "top_email_domains": [],
    }


def test_percentage_rounds():
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(5, 0) == 0


def test_email_domain():
    assert email_domain("Guest@Example.COM") == "example.com"
    assert email_domain("no-at-sign") is None
    assert email_domain(None) is None


def test_journey_funnel_counts_distinct_visits():
    logs = [
        {"analytics_id": "a", "event_type": "view_start"},
        {"analytics_id": "a", "event_type": "view_start"},
        {"analytics_id": "b", "event_type": "view_start"},
        {"analytics_id": "a", "event_type": "photo_captured"},
        {"analytics_id": "a", "event_type": "media_upload"},
    ]
    funnel = journey_funnel(logs)
    assert [s["step"] for s in funnel] == [s.event_type for s in FUNNEL_STEPS]
    counts = {s["step"]: s["count"] for s in funnel}
    assert counts["view_start"] == 2
    assert counts["photo_captured"] == 1
    assert counts["email_sent"] == 0


def test_conversion_trend_fills_gaps():
    rows = [
        {"event_type": "session_complete", "timestamp": datetime(2026, 3, 10, 9, tzinfo=timezone.utc)},
        {"event_type": "session_start", "timestamp": datetime(2026, 3, 10, 11, tzinfo=timezone.utc)},
        {"event_type": "session_start", "timestamp": datetime(2026, 3, 8, 11, tzinfo=timezone.utc)},
        {"event_type": "session_start", "timestamp": None},
    ]
    trend = conversion_trend(rows, days=3, today=date(2026, 3, 10))
    assert [t["date"] for t in trend] == ["2026-03-08", "2026-03-09", "2026-03-10"]
    assert [t["total_sessions"] for t in trend] == [1, 0, 2]
    assert trend[2]["completion_rate"] == 50
    assert trend[1]["completion_rate"] == 0


def test_media_type_stats():
    stats = media_type_stats(["photo", "photo", "photo", "video", None])
    assert stats == {
        "photo_count": 3,
        "video_count": 1,
        "total": 4,
        "photo_percentage": 75,
        "video_percentage": 25,
    }


def test_labels_and_distinct_types():
    assert event_label("photo_captured") == "Photo Taken"
    assert event_label("custom_thing") == "custom thing"
    events = [{"event_type": "b"}, {"event_type": "a"}, {"event_type": "b"}, {}]
    assert distinct_event_types(events) == ["b", "a"]
