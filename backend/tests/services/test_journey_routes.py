"""Journey Routes — saved journeys and activation onto booth settings.

Tests:
    - Save creates, then upserts by id; list is owner-scoped
    - Activation needs journey_builder (FREE 403, GOLD allowed)
    - Activation copies pages into settings and enables the custom journey
    - Activating for an event URL writes event-specific settings only
"""

from boothboss.core.domain_types import SubscriptionTier

PAGES = [
    {"id": "welcome", "title": "Welcome!", "content": "Strike a pose", "button_text": "Start"},
    {"id": "rules", "title": "Rules", "content": "One photo each"},
]


async def _save(client, headers, **extra):
    res = await client.post(
        "/api/v1/journeys", json={"name": "Party Flow", "pages": PAGES, **extra},
        headers=headers,
    )
    assert res.status_code == 200
    return res.json()


async def test_save_then_update(client, customer_headers):
    created = await _save(client, customer_headers)
    assert [p["id"] for p in created["pages"]] == ["welcome", "rules"]

    updated = await _save(client, customer_headers, id=created["id"], pages=PAGES[:1])
    assert updated["id"] == created["id"]
    assert len(updated["pages"]) == 1

    listed = (await client.get("/api/v1/journeys", headers=customer_headers)).json()
    assert [j["id"] for j in listed] == [created["id"]]


async def test_foreign_journey_forbidden(client, customer_headers, make_user, auth_headers):
    journey = await _save(client, customer_headers)
    other = await make_user("other@example.com")
    res = await client.get(f"/api/v1/journeys/{journey['id']}", headers=auth_headers(other))
    assert res.status_code == 403


async def test_activation_requires_journey_builder(client, customer_headers):
    journey = await _save(client, customer_headers)
    res = await client.post(
        f"/api/v1/journeys/{journey['id']}/activate", json={}, headers=customer_headers,
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FEATURE_NOT_AVAILABLE"


async def test_activation_copies_pages(client, make_user, auth_headers):
    gold = await make_user("gold@example.com", tier=SubscriptionTier.GOLD)
    headers = auth_headers(gold)
    journey = await _save(client, headers)

    res = await client.post(
        f"/api/v1/journeys/{journey['id']}/activate", json={}, headers=headers,
    )
    assert res.status_code == 200
    settings = res.json()["settings"]
    assert settings["custom_journey_enabled"] is True
    assert settings["active_journey_id"] == journey["id"]
    assert settings["journey_name"] == "Party Flow"
    assert [p["id"] for p in settings["journey_pages"]] == ["welcome", "rules"]


async def test_activation_for_event_url(client, make_user, auth_headers):
    gold = await make_user("gold@example.com", tier=SubscriptionTier.GOLD)
    headers = auth_headers(gold)
    event = (await client.post(
        "/api/v1/event-urls", json={"url_path": "gold-gala", "event_name": "Gold Gala"},
        headers=headers,
    )).json()
    journey = await _save(client, headers)

    res = await client.post(
        f"/api/v1/journeys/{journey['id']}/activate",
        json={"event_url_id": event["id"]}, headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["settings"]["event_url_id"] == event["id"]

    base = (await client.get("/api/v1/settings", headers=headers)).json()
    assert base["custom_journey_enabled"] is False

    booth = (await client.get("/api/v1/booth/gold-gala")).json()
    assert [p["id"] for p in booth["settings"]["journey_pages"]] == ["welcome", "rules"]


async def test_delete_journey(client, customer_headers):
    journey = await _save(client, customer_headers)
    res = await client.delete(f"/api/v1/journeys/{journey['id']}", headers=customer_headers)
    assert res.status_code == 204
    res = await client.get(f"/api/v1/journeys/{journey['id']}", headers=customer_headers)
    assert res.status_code == 404
