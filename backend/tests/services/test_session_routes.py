"""Booth Session Routes — listing, ownership, deletion and email resend.

Tests:
    - Customers list only their own sessions, newest first, paginated and filterable
    - Reading someone else's session is 403; a missing one is 404
    - Delete removes the row and the stored media file
    - Resend emails the attendee and counts against emails_sent; no email is 400
    - Bulk delete is admin-only
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from boothboss.core.repository_protocols import UploadOptions
from boothboss.models.booth_session import BoothSession
from boothboss.models.user import User


@pytest.fixture
def add_session(test_db, storage):
    async def _add(owner, *, media_type="photo", email="guest@example.com", age_minutes=0):
        stored = await storage.local.upload_file(
            b"media", f"{uuid.uuid4().hex}.jpg", UploadOptions(directory="booth"),
        )
        session = BoothSession(
            user_id=owner.id if owner else None,
            user_name="Guest",
            user_email=email,
            media_url=stored.url,
            media_type=media_type,
            created_at=datetime.now(timezone.utc) - timedelta(minutes=age_minutes),
        )
        test_db.add(session)
        await test_db.commit()
        return session
    return _add


async def test_list_own_sessions_only(client, customer, customer_headers, make_user, add_session):
    other = await make_user("other@example.com")
    older = await add_session(customer, age_minutes=10)
    newer = await add_session(customer, media_type="video")
    await add_session(other)

    res = await client.get("/api/v1/sessions", headers=customer_headers)
    assert res.status_code == 200
    body = res.json()
    assert [s["id"] for s in body["sessions"]] == [str(newer.id), str(older.id)]
    assert body["pagination"] == {"total_count": 2, "page": 1, "limit": 20, "total_pages": 1}

    videos = await client.get(
        "/api/v1/sessions", params={"media_type": "video"}, headers=customer_headers,
    )
    assert [s["id"] for s in videos.json()["sessions"]] == [str(newer.id)]

    page = await client.get(
        "/api/v1/sessions", params={"limit": 1, "page": 2}, headers=customer_headers,
    )
    assert [s["id"] for s in page.json()["sessions"]] == [str(older.id)]
    assert page.json()["pagination"]["total_pages"] == 2


async def test_foreign_session_forbidden(client, customer_headers, make_user, add_session):
    other = await make_user("other@example.com")
    theirs = await add_session(other)
    res = await client.get(f"/api/v1/sessions/{theirs.id}", headers=customer_headers)
    assert res.status_code == 403

    res = await client.get(f"/api/v1/sessions/{uuid.uuid4()}", headers=customer_headers)
    assert res.status_code == 404


async def test_delete_removes_media(client, customer, customer_headers, add_session, storage, test_db):
    session = await add_session(customer)
    assert await storage.local.file_exists(session.media_url)

    res = await client.delete(f"/api/v1/sessions/{session.id}", headers=customer_headers)
    assert res.status_code == 204
    assert not await storage.local.file_exists(session.media_url)
    test_db.expire_all()
    assert await test_db.get(BoothSession, session.id) is None


async def test_resend_email(client, customer, customer_headers, add_session, mailer, test_db):
    session = await add_session(customer)
    res = await client.post(
        f"/api/v1/sessions/{session.id}/resend-email", headers=customer_headers,
    )
    assert res.status_code == 200
    assert res.json()["session"]["email_sent"] is True
    mail = mailer.to("guest@example.com")[0]
    assert f"http://localhost:3000{session.media_url}" in mail.html

    test_db.expire_all()
    assert (await test_db.get(User, customer.id)).emails_sent == 1


async def test_resend_without_email_is_400(client, customer, customer_headers, add_session):
    session = await add_session(customer, email="")
    res = await client.post(
        f"/api/v1/sessions/{session.id}/resend-email", headers=customer_headers,
    )
    assert res.status_code == 400


async def test_bulk_delete_admin_only(client, customer, customer_headers, admin_headers, add_session):
    ids = [str((await add_session(customer)).id) for _ in range(3)]

    res = await client.post(
        "/api/v1/admin/sessions/bulk-delete", json={"ids": ids}, headers=customer_headers,
    )
    assert res.status_code == 403

    res = await client.post(
        "/api/v1/admin/sessions/bulk-delete", json={"ids": ids[:2]}, headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json() == {"success": True, "deleted": 2}

    listed = await client.get("/api/v1/admin/sessions", headers=admin_headers)
    assert [s["id"] for s in listed.json()["sessions"]] == [ids[2]]
