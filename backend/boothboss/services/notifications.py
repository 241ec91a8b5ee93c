"""Notifications — compose and send account and booth emails.

Invariants:
    - Tenant booth mail uses the tenant's SMTP settings unless they are empty or the
      placeholder host, in which case the system transport is used
    - From name is the tenant company name for booth mail, the system name otherwise
    - Functions return the MailResult; they never swallow MailDeliveryError
"""

import logging
from datetime import datetime
from typing import Any

from boothboss.config import Settings
from boothboss.core import email_templates
from boothboss.core.repository_protocols import (
    MailAttachment, MailResult, MailTransport, OutgoingMail, SmtpConfig,
)
from boothboss.core.settings_rules import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


def tenant_smtp(settings: dict[str, Any], app_settings: Settings) -> SmtpConfig:
    """SMTP transport for a tenant's booth emails."""
    host = (settings.get("smtp_host") or "").strip()
    company = settings.get("company_name") or app_settings.smtp_from_name
    if not host or host == DEFAULT_SETTINGS["smtp_host"]:
        return SmtpConfig(
            host=app_settings.smtp_host, port=app_settings.smtp_port,
            user=app_settings.smtp_user, password=app_settings.smtp_password,
            from_name=company, from_address=app_settings.smtp_from_address,
        )
    user = settings.get("smtp_user") or ""
    return SmtpConfig(
        host=host,
        port=int(settings.get("smtp_port") or 587),
        user=user,
        password=settings.get("smtp_password") or "",
        from_name=company,
        from_address=user if "@" in user else app_settings.smtp_from_address,
    )


async def send_verification_email(
    mailer: MailTransport, app_settings: Settings, to: str, name: str, token: str,
) -> MailResult:
    url = f"{app_settings.public_base_url.rstrip('/')}/verify-email?token={token}"
    content = email_templates.verification_email(name, url)
    return await mailer.send(OutgoingMail(to=to, subject=content.subject, html=content.html))


async def send_welcome_email(
    mailer: MailTransport, app_settings: Settings, to: str, name: str,
    trial_end: datetime,
) -> MailResult:
    base = app_settings.public_base_url.rstrip("/")
    content = email_templates.welcome_email(name, f"{base}/login", f"{base}/dashboard", trial_end)
    return await mailer.send(OutgoingMail(to=to, subject=content.subject, html=content.html))


async def send_booth_media_email(
    mailer: MailTransport, app_settings: Settings, settings: dict[str, Any],
    to: str, user_name: str, media_url: str, is_video: bool,
    photo: MailAttachment | None = None,
) -> MailResult:
    """Attendee delivery: photo attached, video linked."""
    if is_video:
        content = email_templates.booth_video_email(
            user_name, settings["email_subject"], settings["email_template"],
            settings.get("event_name"), media_url, settings["company_name"],
            settings.get("button_color") or DEFAULT_SETTINGS["button_color"],
        )
        attachments = []
    else:
        content = email_templates.booth_photo_email(
            user_name, settings["email_subject"], settings["email_template"],
            settings.get("event_name"), media_url,
        )
        attachments = [photo] if photo else []
    return await mailer.send(
        OutgoingMail(to=to, subject=content.subject, html=content.html, attachments=attachments),
        tenant_smtp(settings, app_settings),
    )


async def send_admin_notification(
    mailer: MailTransport, app_settings: Settings, settings: dict[str, Any],
    user_name: str, user_email: str, session_id: str, media_url: str, is_video: bool,
) -> MailResult | None:
    admin_email = settings.get("admin_email")
    if not admin_email:
        return None
    content = email_templates.admin_session_notification(
        user_name, user_email, session_id, media_url, is_video,
    )
    return await mailer.send(
        OutgoingMail(to=admin_email, subject=content.subject, html=content.html),
        tenant_smtp(settings, app_settings),
    )


async def send_session_resend_email(
    mailer: MailTransport, app_settings: Settings, settings: dict[str, Any],
    to: str, user_name: str, media_url: str, is_video: bool,
) -> MailResult:
    content = email_templates.session_resend_email(
        user_name, settings["email_subject"], settings["email_template"],
        settings.get("event_name"), media_url, is_video, settings["company_name"],
    )
    return await mailer.send(
        OutgoingMail(to=to, subject=content.subject, html=content.html),
        tenant_smtp(settings, app_settings),
    )
