"""Mail Transport — delivery switch, preview store and MIME assembly.

Tests:
    - Development without EMAIL_ENABLED_IN_DEV stores a preview instead of sending
    - EMAIL_FORCE_DISABLED wins in every environment
    - Preview store is bounded and lists newest first
    - build_message adds a text part, the HTML alternative and attachments
    - SMTP failures and header values with line breaks become MailDeliveryError
"""

import smtplib

import pytest

from boothboss.config import Settings
from boothboss.core.errors import MailDeliveryError
from boothboss.core.repository_protocols import MailAttachment, OutgoingMail, SmtpConfig
from boothboss.infrastructure import mailer as mailer_module
from boothboss.infrastructure.mailer import (
    EmailPreviewStore, Mailer, build_message, html_to_text,
)

MAIL = OutgoingMail(to="guest@example.com", subject="Hi", html="<h2>Hello</h2><p>World</p>")
SMTP = SmtpConfig(
    host="smtp.test", port=587, user="u", password="p",
    from_name="Acme", from_address="booth@acme.test",
)


def test_development_disables_delivery():
    previews = EmailPreviewStore()
    mailer = Mailer(Settings(environment="development"), previews)
    assert mailer.delivery_enabled is False


async def test_disabled_send_returns_mock_id():
    previews = EmailPreviewStore()
    mailer = Mailer(Settings(environment="development"), previews)
    result = await mailer.send(MAIL, SMTP)
    assert result.delivered is False
    assert result.message_id.startswith("mock-id-")
    preview = previews.get(result.preview_id)
    assert preview.to == "guest@example.com"
    assert preview.from_address == "Acme <booth@acme.test>"
    assert preview.sent is False


def test_delivery_switch():
    assert Mailer(Settings(environment="production"), EmailPreviewStore()).delivery_enabled
    assert Mailer(
        Settings(environment="development", email_enabled_in_dev=True), EmailPreviewStore(),
    ).delivery_enabled
    assert not Mailer(
        Settings(environment="production", email_force_disabled=True), EmailPreviewStore(),
    ).delivery_enabled


def test_preview_store_is_bounded():
    store = EmailPreviewStore(capacity=2)
    ids = [store.store(MAIL, "from@test", sent=False).id for _ in range(3)]
    assert [p.id for p in store.list()] == [ids[2], ids[1]]
    assert store.get(ids[0]) is None
    assert store.mark_sent(ids[2]) is True
    assert store.get(ids[2]).sent is True
    store.clear()
    assert store.list() == []


def test_build_message():
    mail = OutgoingMail(
        to="guest@example.com", subject="Your photo", html="<p>Here</p>",
        attachments=[MailAttachment("photo.jpg", b"jpeg", "image/jpeg")],
    )
    msg = build_message(mail, SMTP)
    assert msg["From"] == "Acme <booth@acme.test>"
    assert msg["Message-ID"].endswith("@acme.test>")
    parts = [part.get_content_type() for part in msg.walk()]
    assert "text/plain" in parts
    assert "text/html" in parts
    assert "image/jpeg" in parts


def test_html_to_text():
    assert html_to_text("<h2>Hello</h2><p>World</p>") == "Hello\n\nWorld"


async def test_smtp_failure_raises(monkeypatch):
    def refuse(msg, smtp, timeout):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr(mailer_module, "_deliver", refuse)
    mailer = Mailer(Settings(environment="production"), EmailPreviewStore())
    with pytest.raises(MailDeliveryError) as exc:
        await mailer.send(MAIL, SMTP)
    assert "authentication failed" in exc.value.message


async def test_production_send_records_no_preview(monkeypatch):
    sent = []
    monkeypatch.setattr(mailer_module, "_deliver", lambda msg, smtp, timeout: sent.append(msg))
    previews = EmailPreviewStore()
    result = await Mailer(Settings(environment="production"), previews).send(MAIL, SMTP)
    assert result.delivered is True
    assert result.preview_id is None
    assert previews.list() == []
    assert sent[0]["To"] == "guest@example.com"


async def test_header_injection_raises_mail_delivery_error(monkeypatch):
    sent = []
    monkeypatch.setattr(mailer_module, "_deliver", lambda msg, smtp, timeout: sent.append(msg))
    mailer = Mailer(Settings(environment="production"), EmailPreviewStore())
    mail = OutgoingMail(
        to="guest@example.com", subject="Hi\nBcc: victim@example.com", html="<p>x</p>",
    )
    with pytest.raises(MailDeliveryError):
        await mailer.send(mail, SMTP)
    assert sent == []
