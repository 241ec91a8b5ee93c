"""Account Routes — profile, password, first-run setup and the subscription endpoints.

Tests:
    - GET /account returns profile plus plan and usage
    - Username changes are unique (409)
    - Password change verifies the current password (401) and takes effect
    - Setup creates an event URL with branded base settings linked to it
    - Tier table lists the public tiers with display prices
"""


async def test_get_account(client, customer_headers):
    res = await client.get("/api/v1/account", headers=customer_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["email"] == "owner@example.com"
    assert body["user"]["is_admin"] is False
    assert body["subscription"]["tier"] == "FREE"
    assert body["subscription"]["usage"] == {
        "media_count": 0, "max_media": 5, "emails_sent": 0, "max_emails": 5,
    }


async def test_username_must_be_unique(client, customer_headers, make_user, auth_headers):
    await make_user("taken@example.com")
    res = await client.patch(
        "/api/v1/account", json={"username": "taken"}, headers=customer_headers,
    )
    assert res.status_code == 409

    other = await make_user("fresh@example.com")
    res = await client.patch(
        "/api/v1/account", json={"username": "Party_Host", "industry": "Weddings"},
        headers=auth_headers(other),
    )
    assert res.status_code == 200
    assert res.json()["user"]["username"] == "party_host"
    assert res.json()["user"]["industry"] == "Weddings"


async def test_change_password(client, customer, customer_headers):
    res = await client.post(
        "/api/v1/account/password",
        json={"current_password": "wrong-one", "new_password": "brand-new-pass"},
        headers=customer_headers,
    )
    assert res.status_code == 401

    res = await client.post(
        "/api/v1/account/password",
        json={"current_password": "secret123", "new_password": "brand-new-pass"},
        headers=customer_headers,
    )
    assert res.status_code == 200

    login = await client.post(
        "/api/v1/auth/login",
        json={"email": customer.email, "password": "brand-new-pass"},
    )
    assert login.status_code == 200



async def test_change_password_rejects_overlong(client, customer_headers):
    res = await client.post(
        "/api/v1/account/password",
        json={"current_password": "secret123", "new_password": "p" * 100},
        headers=customer_headers,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"

async def test_account_setup(client, customer_headers):
    res = await client.post(
        "/api/v1/account/setup",
        json={
            "url_path": "Launch-Night",
            "event_name": "Launch Night",
            "company_name": "Acme",
            "primary_color": "#FF0000",
        },
        headers=customer_headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["event_url"]["url_path"] == "launch-night"

    booth = (await client.get("/api/v1/booth/launch-night")).json()
    assert booth["settings"]["id"] == body["settings_id"]
    assert booth["settings"]["company_name"] == "Acme"
    assert booth["settings"]["button_color"] == "#FF0000"


async def test_account_setup_respects_url_rules(client, customer_headers):
    res = await client.post(
        "/api/v1/account/setup",
        json={"url_path": "admin", "event_name": "Launch Night"},
        headers=customer_headers,
    )
    assert res.status_code == 400
    listed = await client.get("/api/v1/event-urls", headers=customer_headers)
    assert listed.json() == []


async def test_tier_table(client):
    res = await client.get("/api/v1/subscription/tiers")
    tiers = {t["tier"]: t for t in res.json()["tiers"]}
    assert list(tiers) == ["FREE", "BRONZE", "SILVER", "GOLD", "PLATINUM"]
    assert tiers["GOLD"]["display_pricing"]["MONTHLY"] == "$99.00"
    assert tiers["GOLD"]["features"]["journey_builder"] is True


async def test_my_subscription(client, customer_headers):
    res = await client.get("/api/v1/subscription", headers=customer_headers)
    assert res.status_code == 200
    assert res.json()["tier_name"] == "Free Trial"
    assert res.json()["features"]["analytics_access"] is False
