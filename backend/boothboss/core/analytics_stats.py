"""Analytics Stats — pure aggregations over booth analytics rows.

Invariants:
    - Inputs are plain dicts (services convert ORM rows); no IO, no clock reads
    - Rates are rounded integer percentages; empty input yields zeros, never ZeroDivisionError
    - Funnel counts distinct analytics sessions per step, in FUNNEL_STEPS order
    - Trend has exactly `days` entries, oldest first, including days with no data
"""

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Mapping, Any

COMPLETED_EVENT = "session_complete"


@dataclass(frozen=True)
class FunnelStep:
    event_type: str
    label: str
    color: str


FUNNEL_STEPS: tuple[FunnelStep, ...] = (
    FunnelStep("view_start", "Page Visit", "#3B82F6"),
    FunnelStep("splash_complete", "Splash Screen", "#60A5FA"),
    FunnelStep("info_submitted", "Info Submitted", "#93C5FD"),
    FunnelStep("journey_complete", "Journey Completed", "#BFDBFE"),
    FunnelStep("photo_captured", "Photo Taken", "#10B981"),
    FunnelStep("photo_approved", "Photo Approved", "#34D399"),
    FunnelStep("video_captured", "Video Recorded", "#F59E0B"),
    FunnelStep("video_approved", "Video Approved", "#FBBF24"),
    FunnelStep("email_sent", "Email Sent", "#6EE7B7"),
)

EVENT_LABELS: dict[str, str] = {
    **{step.event_type: step.label for step in FUNNEL_STEPS},
    "retake_photo": "Photo Retaken",
    "retake_video": "Video Retaken",
}


def event_label(event_type: str) -> str:
    return EVENT_LABELS.get(event_type, event_type.replace("_", " "))


def percentage(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole else 0


def email_domain(email: str | None) -> str | None:
    if not email or "@" not in email:
        return None
    return email.rsplit("@", 1)[1].strip().lower() or None


def summarize(rows: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Totals, completion rate, average duration and top email domains."""
    rows = list(rows)
    completed = [r for r in rows if r.get("event_type") == COMPLETED_EVENT]
    durations = [r["duration_ms"] for r in completed if r.get("duration_ms")]
    domains = Counter(
        r["email_domain"] for r in rows
        if r.get("email_domain") and r["email_domain"] != "unknown"
    )
    return {
        "total_sessions": len(rows),
        "completed_sessions": len(completed),
        "completion_rate": percentage(len(completed), len(rows)),
        "avg_completion_time_ms": (
            round(sum(durations) / len(durations)) if durations else 0
        ),
        "top_email_domains": [
            {"domain": domain, "count": count}
            for domain, count in domains.most_common(5)
        ],
    }


def journey_funnel(logs: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Distinct sessions that reached each funnel step."""
    reached: dict[str, set] = {step.event_type: set() for step in FUNNEL_STEPS}
    for log in logs:
        bucket = reached.get(log.get("event_type"))
        if bucket is not None:
            bucket.add(log.get("analytics_id"))
    return [
        {
            "step": step.event_type,
            "label": step.label,
            "color": step.color,
            "count": len(reached[step.event_type]),
        }
        for step in FUNNEL_STEPS
    ]


def _as_date(value: datetime | date) -> date:
    return value.date() if isinstance(value, datetime) else value


def conversion_trend(
    rows: Iterable[Mapping[str, Any]], days: int, today: date,
) -> list[dict[str, Any]]:
    """Per-day totals/completions for the `days` days ending today."""
    first_day = today - timedelta(days=days - 1)
    totals: Counter = Counter()
    completions: Counter = Counter()
    for row in rows:
        ts = row.get("timestamp")
        if ts is None:
            continue
        day = _as_date(ts)
        totals[day] += 1
        if row.get("event_type") == COMPLETED_EVENT:
            completions[day] += 1
    trend = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        trend.append({
            "date": day.isoformat(),
            "total_sessions": totals[day],
            "completed_sessions": completions[day],
            "completion_rate": percentage(completions[day], totals[day]),
        })
    return trend


def media_type_stats(media_types: Iterable[str | None]) -> dict[str, Any]:
    counts = Counter(m for m in media_types if m)
    photos, videos = counts.get("photo", 0), counts.get("video", 0)
    total = photos + videos
    return {
        "photo_count": photos,
        "video_count": videos,
        "total": total,
        "photo_percentage": percentage(photos, total),
        "video_percentage": percentage(videos, total),
    }


def distinct_event_types(events: Iterable[Mapping[str, Any]]) -> list[str]:
    seen: dict[str, None] = {}
    for e in events:
        if e.get("event_type"):
            seen.setdefault(e["event_type"], None)
    return list(seen)
