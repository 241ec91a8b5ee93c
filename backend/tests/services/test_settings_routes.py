"""Settings Routes — base settings, per-event forks and feature gates.

Tests:
    - A user with no settings row reads the defaults, never the SMTP password
    - PUT creates/updates base settings
    - Event-scoped PUT forks a copy linked to the event; base settings stay unchanged
    - Gated changes (branding removal, long videos) need the tier; admins bypass
    - Theme presets drive theme_colors in the response
    - Settings resolve from a booth path regardless of case and padding
    - Linking settings to an event URL leaves exactly one active link
"""

import uuid

from sqlalchemy import select

from boothboss.core.domain_types import SubscriptionTier
from boothboss.models.event_url_settings import EventUrlSettings
from boothboss.services.settings_service import (
    create_base_settings, get_settings_by_event_url_id, get_settings_by_url_path,
    link_settings_to_event_url,
)


async def test_defaults_without_settings_row(client, customer_headers):
    res = await client.get("/api/v1/settings", headers=customer_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["event_name"] == "Photo Booth Event"
    assert "smtp_password" not in body
    assert body["journey_pages"] == []
    assert body["theme_colors"]["primary"] == "#3B82F6"
    assert body["theme_css"].startswith(":root {")


async def test_update_base_settings(client, customer_headers):
    res = await client.put(
        "/api/v1/settings",
        json={"countdown_time": 5, "company_name": "Acme", "printer_enabled": "true"},
        headers=customer_headers,
    )
    assert res.status_code == 200
    assert res.json()["countdown_time"] == 5
    assert res.json()["printer_enabled"] is True

    res = await client.get("/api/v1/settings", headers=customer_headers)
    assert res.json()["company_name"] == "Acme"


async def test_out_of_range_values_rejected(client, customer_headers):
    res = await client.put(
        "/api/v1/settings", json={"countdown_time": 42}, headers=customer_headers,
    )
    assert res.status_code == 400
    res = await client.put(
        "/api/v1/settings", json={"primary_color": "blue"}, headers=customer_headers,
    )
    assert res.status_code == 400


async def test_event_update_forks_base(client, event_url, customer_headers):
    await client.put(
        "/api/v1/settings", json={"company_name": "Acme"}, headers=customer_headers,
    )
    res = await client.put(
        "/api/v1/settings",
        params={"event_url_id": event_url["id"]},
        json={"email_subject": "Summer pics!"},
        headers=customer_headers,
    )
    assert res.status_code == 200
    fork = res.json()
    assert fork["email_subject"] == "Summer pics!"
    assert fork["company_name"] == "Acme"
    assert fork["event_name"] == "Summer Party"

    base = (await client.get("/api/v1/settings", headers=customer_headers)).json()
    assert base["email_subject"] == "Your Photo Booth Pictures"

    scoped = (await client.get(
        "/api/v1/settings", params={"event_url_id": event_url["id"]},
        headers=customer_headers,
    )).json()
    assert scoped["id"] == fork["id"]

    # A second event-scoped update edits the fork instead of forking again
    res = await client.put(
        "/api/v1/settings",
        params={"event_url_id": event_url["id"]},
        json={"reset_time": 60},
        headers=customer_headers,
    )
    assert res.json()["id"] == fork["id"]
    all_rows = (await client.get("/api/v1/settings/all", headers=customer_headers)).json()
    assert len(all_rows["settings"]) == 2


async def test_event_update_for_foreign_url_is_404(client, event_url, make_user, auth_headers):
    other = await make_user("other@example.com")
    res = await client.put(
        "/api/v1/settings",
        params={"event_url_id": event_url["id"]},
        json={"reset_time": 60},
        headers=auth_headers(other),
    )
    assert res.status_code == 404


async def test_branding_removal_requires_tier(client, customer_headers, make_user, auth_headers):
    res = await client.put(
        "/api/v1/settings", json={"show_booth_boss_logo": False}, headers=customer_headers,
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FEATURE_NOT_AVAILABLE"

    gold = await make_user("gold@example.com", tier=SubscriptionTier.GOLD)
    res = await client.put(
        "/api/v1/settings", json={"show_booth_boss_logo": False}, headers=auth_headers(gold),
    )
    assert res.status_code == 200
    assert res.json()["show_booth_boss_logo"] is False


async def test_video_duration_capped_by_tier(client, customer_headers, admin_headers):
    res = await client.put(
        "/api/v1/settings", json={"video_duration": 30}, headers=customer_headers,
    )
    assert res.status_code == 403

    res = await client.put(
        "/api/v1/settings", json={"video_duration": 30}, headers=admin_headers,
    )
    assert res.status_code == 200


async def test_unchanged_gated_value_is_allowed(client, customer_headers):
    # filters_enabled defaults to True, so re-sending it needs no filter_access
    res = await client.put(
        "/api/v1/settings", json={"filters_enabled": True}, headers=customer_headers,
    )
    assert res.status_code == 200


async def test_theme_preset_colors(client, customer_headers):
    res = await client.put(
        "/api/v1/settings", json={"theme": "midnight"}, headers=customer_headers,
    )
    assert res.json()["theme_colors"]["primary"] == "#5b21b6"

    themes = (await client.get("/api/v1/settings/themes")).json()["themes"]
    assert set(themes) == {"midnight", "pastel", "bw", "custom"}


async def test_settings_lookup_by_url_path(client, event_url, customer, test_db):
    settings = await get_settings_by_url_path(test_db, "  SUMMER-Party ")
    assert settings is not None
    assert settings.user_id == customer.id
    assert await get_settings_by_url_path(test_db, "no-such-booth") is None


async def test_linking_settings_deactivates_other_links(client, event_url, customer, test_db):
    event_url_id = uuid.UUID(event_url["id"])
    first = await create_base_settings(test_db, customer.id, event_name="First")
    second = await create_base_settings(test_db, customer.id, event_name="Second")
    await test_db.commit()

    assert await link_settings_to_event_url(test_db, first.id, event_url_id)
    assert await link_settings_to_event_url(test_db, second.id, event_url_id)
    assert await link_settings_to_event_url(test_db, first.id, event_url_id)

    test_db.expire_all()
    links = (await test_db.execute(
        select(EventUrlSettings).where(EventUrlSettings.event_url_id == event_url_id),
    )).scalars().all()
    active = [link.settings_id for link in links if link.is_active]
    assert active == [first.id]
    assert [link.settings_id for link in links].count(first.id) == 1
    assert (await get_settings_by_event_url_id(test_db, event_url_id)).event_name == "First"

    assert not await link_settings_to_event_url(test_db, uuid.uuid4(), event_url_id)
