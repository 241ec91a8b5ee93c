"""Analytics Routes — visit tracking and dashboards.

Tests:
    - session_start is idempotent per client session key and attributes the owner
    - Unknown event URLs are 400; completing an unknown visit is 404
    - Dashboards need analytics_access (FREE is 403, BRONZE sees its own visits)
    - The admin dashboard is admin-only and system-wide
"""

from boothboss.core.domain_types import SubscriptionTier


async def _start(client, key: str, url_path: str | None = "summer-party"):
    res = await client.post(
        "/api/v1/analytics/track",
        json={"event": "session_start", "session_id": key, "url_path": url_path},
        headers={"User-Agent": "BoothKiosk/1.0"},
    )
    assert res.status_code == 200
    return res.json()["analytics_id"]


async def test_session_start_idempotent(client, event_url):
    first = await _start(client, "visit-1")
    again = await _start(client, "visit-1")
    assert first == again


async def test_unknown_url_path_rejected(client):
    res = await client.post(
        "/api/v1/analytics/track",
        json={"event": "session_start", "session_id": "v", "url_path": "no-such-booth"},
    )
    assert res.status_code == 400


async def test_complete_requires_analytics_id(client):
    res = await client.post("/api/v1/analytics/track", json={"event": "session_complete"})
    assert res.status_code == 400

    res = await client.post(
        "/api/v1/analytics/track",
        json={"event": "session_complete", "analytics_id": "5f0c6d1e-3a43-4b43-9d1e-000000000000"},
    )
    assert res.status_code == 404


async def test_free_tier_has_no_dashboard(client, customer_headers):
    res = await client.get("/api/v1/analytics/dashboard", headers=customer_headers)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FEATURE_NOT_AVAILABLE"


async def test_owner_dashboard_counts_visits(client, make_user, auth_headers):
    owner = await make_user("bronze@example.com", tier=SubscriptionTier.BRONZE)
    headers = auth_headers(owner)
    created = await client.post(
        "/api/v1/event-urls",
        json={"url_path": "bronze-bash", "event_name": "Bronze Bash"},
        headers=headers,
    )
    assert created.status_code == 201

    done = await _start(client, "visit-a", "bronze-bash")
    await _start(client, "visit-b", "bronze-bash")
    await _start(client, "visit-elsewhere", None)
    await client.post(
        "/api/v1/analytics/track",
        json={"event": "event", "analytics_id": done, "event_type": "photo_captured"},
    )
    await client.post(
        "/api/v1/analytics/track",
        json={
            "event": "session_complete", "analytics_id": done,
            "email": "guest@Gmail.com", "duration_ms": 42000, "media_type": "photo",
        },
    )

    res = await client.get("/api/v1/analytics/dashboard", headers=headers)
    assert res.status_code == 200
    body = res.json()
    summary = body["monthly_summary"]
    assert summary["total_sessions"] == 2
    assert summary["completed_sessions"] == 1
    assert summary["completion_rate"] == 50
    assert summary["avg_completion_time_ms"] == 42000
    assert summary["top_email_domains"] == [{"domain": "gmail.com", "count": 1}]
    funnel = {step["step"]: step["count"] for step in body["journey_funnel"]}
    assert funnel["photo_captured"] == 1
    assert body["event_types"] == ["photo_captured"]
    assert len(body["conversion_trend"]) == 30


async def test_custom_range_dashboard(client, admin_headers):
    res = await client.get(
        "/api/v1/analytics/admin",
        params={"start_date": "2026-01-01", "end_date": "2026-01-07"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["period"]["days"] == 7
    assert len(body["conversion_trend"]) == 7

    res = await client.get(
        "/api/v1/analytics/admin",
        params={"start_date": "2026-01-07", "end_date": "2026-01-01"},
        headers=admin_headers,
    )
    assert res.status_code == 400


async def test_admin_dashboard_forbidden_for_customers(client, customer_headers):
    res = await client.get("/api/v1/analytics/admin", headers=customer_headers)
    assert res.status_code == 403
