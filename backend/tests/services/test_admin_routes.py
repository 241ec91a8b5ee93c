"""Admin Routes — user management and system reporting.

Tests:
    - Every admin endpoint is 403 for customers; /admin/check reports the role
    - Users list supports search and carries per-user counts and tier
    - Admin-created users are verified and can log in immediately
    - Tier changes reset the subscription features
    - Admins cannot demote or delete themselves; deleting a user removes owned data
    - ADMIN_EMAIL grants admin rights without the ADMIN role
"""

import pytest

from boothboss.api.deps import get_app_settings
from boothboss.config import Settings
from boothboss.main import app


@pytest.mark.parametrize("method,path", [
    ("get", "/api/v1/admin/users"),
    ("get", "/api/v1/admin/event-urls"),
    ("get", "/api/v1/admin/sessions"),
    ("get", "/api/v1/admin/analytics"),
])
async def test_customers_forbidden(client, customer_headers, method, path):
    res = await getattr(client, method)(path, headers=customer_headers)
    assert res.status_code == 403


async def test_admin_check(client, customer_headers, admin_headers):
    assert (await client.get("/api/v1/admin/check", headers=customer_headers)).json() == {
        "is_admin": False,
    }
    assert (await client.get("/api/v1/admin/check", headers=admin_headers)).json() == {
        "is_admin": True,
    }


async def test_list_users_with_search(client, admin_headers, customer, event_url):
    res = await client.get("/api/v1/admin/users", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["pagination"]["total_count"] == 2

    res = await client.get(
        "/api/v1/admin/users", params={"search": "OWNER"}, headers=admin_headers,
    )
    users = res.json()["users"]
    assert [u["email"] for u in users] == ["owner@example.com"]
    assert users[0]["event_url_count"] == 1
    assert users[0]["session_count"] == 0
    assert users[0]["tier"] == "FREE"


async def test_create_user_can_log_in(client, admin_headers):
    res = await client.post(
        "/api/v1/admin/users",
        json={"name": "New Host", "email": "host@example.com", "password": "host-pass"},
        headers=admin_headers,
    )
    assert res.status_code == 201
    assert res.json()["user"]["email_verified"] is True

    login = await client.post(
        "/api/v1/auth/login", json={"email": "host@example.com", "password": "host-pass"},
    )
    assert login.status_code == 200


async def test_change_tier(client, admin_headers, customer):
    res = await client.patch(
        f"/api/v1/admin/users/{customer.id}",
        json={"tier": "PLATINUM", "duration": "ANNUAL"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    subscription = res.json()["subscription"]
    assert subscription["tier"] == "PLATINUM"
    assert subscription["duration"] == "ANNUAL"
    assert subscription["status"] == "ACTIVE"
    assert subscription["features"]["priority_support"] is True
    assert subscription["limits"]["max_media"] == 10000


async def test_admin_cannot_demote_or_delete_self(client, admin, admin_headers):
    res = await client.patch(
        f"/api/v1/admin/users/{admin.id}", json={"role": "CUSTOMER"}, headers=admin_headers,
    )
    assert res.status_code == 400
    res = await client.delete(f"/api/v1/admin/users/{admin.id}", headers=admin_headers)
    assert res.status_code == 400


async def test_delete_user_removes_owned_data(
    client, admin_headers, customer, customer_headers, event_url,
):
    await client.put("/api/v1/settings", json={"company_name": "Acme"}, headers=customer_headers)
    await client.post(
        "/api/v1/booth/capture",
        data={"name": "Guest", "email": "guest@example.com", "url_path": "summer-party"},
        files={"photo": ("a.jpg", b"jpeg", "image/jpeg")},
    )

    res = await client.delete(f"/api/v1/admin/users/{customer.id}", headers=admin_headers)
    assert res.status_code == 204

    assert (await client.get("/api/v1/booth/summer-party")).status_code == 404
    stats = (await client.get("/api/v1/admin/analytics", headers=admin_headers)).json()
    assert stats["total_users"] == 1
    assert stats["total_event_urls"] == 0
    assert stats["total_sessions"] == 0


async def test_system_analytics(client, admin_headers, customer, event_url):
    await client.post(
        "/api/v1/booth/capture",
        data={"name": "Guest", "email": "guest@example.com", "url_path": "summer-party"},
        files={"photo": ("a.jpg", b"jpeg", "image/jpeg")},
    )
    stats = (await client.get("/api/v1/admin/analytics", headers=admin_headers)).json()
    assert stats["total_users"] == 2
    assert stats["photo_sessions"] == 1
    assert stats["emails_sent"] == 1
    assert stats["tier_distribution"] == {"ADMIN": 1, "FREE": 1}
    assert stats["last_capture_at"] is not None


async def test_configured_admin_email_is_admin(client, customer, customer_headers):
    app.dependency_overrides[get_app_settings] = lambda: Settings(admin_email="Owner@Example.com")
    res = await client.get("/api/v1/admin/users", headers=customer_headers)
    assert res.status_code == 200
