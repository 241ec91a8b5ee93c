"""Mail Transport — SMTP delivery with a development preview store.

Invariants:
    - Delivery is disabled when email_force_disabled, or in development unless
      email_enabled_in_dev; disabled sends are stored as previews and return a mock id
    - In development every message (sent or not) is recorded in the preview store
    - The preview store holds at most `capacity` messages, evicting the oldest
    - SMTP runs in a worker thread (smtplib is blocking); port 465 uses implicit TLS,
      other ports STARTTLS when the server offers it
    - SMTP failures surface as MailDeliveryError with an actionable message;
      the SMTP password is never logged
    - Header values containing line breaks are refused with MailDeliveryError
"""

import asyncio
import logging
import re
import smtplib
import ssl
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

from boothboss.config import Settings
from boothboss.core.errors import MailDeliveryError
from boothboss.core.repository_protocols import (
    MailResult, OutgoingMail, SmtpConfig,
)

logger = logging.getLogger(__name__)

_TAGS = re.compile(r"<[^>]+>")


@dataclass
class EmailPreview:
    id: str
    to: str
    from_address: str
    subject: str
    html: str
    attachments: list[str]
    sent: bool
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "to": self.to,
            "from": self.from_address,
            "subject": self.subject,
            "html": self.html,
            "attachments": self.attachments,
            "sent": self.sent,
            "created_at": self.created_at.isoformat(),
        }


class EmailPreviewStore:
    """Bounded in-memory record of outgoing mail for local development."""

    def __init__(self, capacity: int = 50):
        self.capacity = capacity
        self._emails: OrderedDict[str, EmailPreview] = OrderedDict()

    def store(self, mail: OutgoingMail, from_address: str, sent: bool) -> EmailPreview:
        preview = EmailPreview(
            id=f"email-{uuid.uuid4().hex[:12]}",
            to=mail.to,
            from_address=from_address,
            subject=mail.subject,
            html=mail.html,
            attachments=[a.filename for a in mail.attachments],
            sent=sent,
        )
        self._emails[preview.id] = preview
        while len(self._emails) > self.capacity:
            self._emails.popitem(last=False)
        return preview

    def list(self) -> list[EmailPreview]:
        """Newest first."""
        return list(reversed(self._emails.values()))

    def get(self, preview_id: str) -> EmailPreview | None:
        return self._emails.get(preview_id)

    def mark_sent(self, preview_id: str) -> bool:
        preview = self._emails.get(preview_id)
        if preview is None:
            return False
        preview.sent = True
        return True

    def clear(self) -> None:
        self._emails.clear()


def html_to_text(html: str) -> str:
    return re.sub(r"\n{3,}", "\n\n", _TAGS.sub("\n", html)).strip()


def build_message(mail: OutgoingMail, smtp: SmtpConfig) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = mail.subject
    msg["From"] = formataddr((smtp.from_name, smtp.from_address))
    msg["To"] = mail.to
    msg["Message-ID"] = make_msgid(domain=smtp.from_address.rpartition("@")[2] or None)
    msg.set_content(html_to_text(mail.html))
    msg.add_alternative(mail.html, subtype="html")
    for attachment in mail.attachments:
        maintype, _, subtype = attachment.content_type.partition("/")
        msg.add_attachment(
            attachment.content, maintype=maintype, subtype=subtype or "octet-stream",
            filename=attachment.filename,
        )
    return msg


def _deliver(msg: EmailMessage, smtp: SmtpConfig, timeout: int) -> None:
    context = ssl.create_default_context()
    if smtp.use_ssl:
        server: smtplib.SMTP = smtplib.SMTP_SSL(
            smtp.host, smtp.port, timeout=timeout, context=context,
        )
    else:
        server = smtplib.SMTP(smtp.host, smtp.port, timeout=timeout)
    with server:
        if not smtp.use_ssl:
            server.ehlo()
            if server.has_extn("starttls"):
                server.starttls(context=context)
                server.ehlo()
        if smtp.user:
            server.login(smtp.user, smtp.password)
        server.send_message(msg)


def _describe_failure(exc: Exception, smtp: SmtpConfig) -> str:
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return "SMTP authentication failed, check the SMTP username and password"
    if isinstance(exc, ConnectionRefusedError):
        return f"connection refused by {smtp.host}:{smtp.port}, check SMTP host and port"
    if isinstance(exc, ssl.SSLError):
        return "TLS negotiation failed, check the SMTP port and certificate"
    if isinstance(exc, smtplib.SMTPRecipientsRefused):
        return "recipient address was rejected"
    return "SMTP server error"


class Mailer:
    """Async facade over smtplib implementing the MailTransport protocol."""

    def __init__(self, app_settings: Settings, previews: EmailPreviewStore):
        self.settings = app_settings
        self.previews = previews

    @property
    def delivery_enabled(self) -> bool:
        if self.settings.email_force_disabled:
            return False
        if self.settings.is_development:
            return self.settings.email_enabled_in_dev
        return True

    def system_smtp(self) -> SmtpConfig:
        s = self.settings
        return SmtpConfig(
            host=s.smtp_host, port=s.smtp_port, user=s.smtp_user,
            password=s.smtp_password, from_name=s.smtp_from_name,
            from_address=s.smtp_from_address,
        )

    async def send(self, mail: OutgoingMail, smtp: SmtpConfig | None = None) -> MailResult:
        smtp = smtp or self.system_smtp()
        from_header = formataddr((smtp.from_name, smtp.from_address))
        if not self.delivery_enabled:
            preview = self.previews.store(mail, from_header, sent=False)
            logger.info(
                f"Email delivery disabled, stored preview {preview.id}",
                extra={"recipient": mail.to},
            )
            return MailResult(
                message_id=f"mock-id-{uuid.uuid4().hex}", delivered=False,
                preview_id=preview.id,
            )

        try:
            msg = build_message(mail, smtp)
        except ValueError as e:
            logger.error(f"Rejected outgoing mail headers: {e}", extra={"recipient": mail.to})
            raise MailDeliveryError("Email headers contain invalid characters")
        try:
            await asyncio.to_thread(
                _deliver, msg, smtp, self.settings.smtp_timeout_seconds,
            )
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                f"SMTP delivery via {smtp.host}:{smtp.port} failed: {type(e).__name__}",
                extra={"recipient": mail.to},
            )
            raise MailDeliveryError(_describe_failure(e, smtp))
        logger.info("Email sent", extra={"recipient": mail.to})

        preview_id = None
        if self.settings.is_development:
            preview_id = self.previews.store(mail, from_header, sent=True).id
        return MailResult(
            message_id=msg["Message-ID"], delivered=True, preview_id=preview_id,
        )
