"""Email Templates — HTML bodies for account and booth emails.

Invariants:
    - Every user-supplied value is HTML-escaped before interpolation
    - Each builder returns an EmailContent (subject + html); sending lives in infrastructure/mailer.py
    - Tenant placeholders {{eventName}}, {{userName}}, {{photoUrl}} are substituted
      in tenant-authored subject/template text before escaping
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str


def _wrap(body: str) -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f"{body}</div>"
    )


def _button(url: str, label: str, color: str = "#3B82F6") -> str:
    return (
        f'<p style="margin: 30px 0;"><a href="{escape(url)}" '
        f'style="background-color: {escape(color)}; color: white; padding: 12px 24px; '
        f'text-decoration: none; border-radius: 4px;">{escape(label)}</a></p>'
    )


def render_placeholders(text: str, **values: str | None) -> str:
    """Replace {{name}} tokens with plain values (escaping happens at render time)."""
    for key, value in values.items():
        text = text.replace("{{" + key + "}}", value or "")
    return text


def verification_email(name: str, verify_url: str) -> EmailContent:
    body = (
        f"<h2>Welcome to BoothBoss, {escape(name)}!</h2>"
        "<p>Please confirm your email address to activate your account.</p>"
        f"{_button(verify_url, 'Verify Email')}"
        "<p>If the button above doesn't work, copy and paste this link into your browser:</p>"
        f'<p><a href="{escape(verify_url)}">{escape(verify_url)}</a></p>'
        "<p>This link expires in 24 hours.</p>"
    )
    return EmailContent("Verify your BoothBoss email address", _wrap(body))


def welcome_email(
    name: str, login_url: str, dashboard_url: str, trial_end: datetime,
) -> EmailContent:
    trial_end_text = trial_end.strftime("%A, %B %d, %Y")
    body = (
        f"<h2>Welcome aboard, {escape(name)}!</h2>"
        "<p>Your free trial is active. You can create an event URL, "
        "customize your booth and start capturing right away.</p>"
        f"<p>Your trial ends on <strong>{escape(trial_end_text)}</strong>.</p>"
        f"{_button(dashboard_url, 'Go to Dashboard')}"
        f'<p>Log in any time at <a href="{escape(login_url)}">{escape(login_url)}</a>.</p>'
    )
    return EmailContent("Welcome to BoothBoss!", _wrap(body))


def _tenant_copy(
    subject: str, template: str, event_name: str | None,
    user_name: str, media_url: str,
) -> tuple[str, str]:
    values = {"eventName": event_name, "userName": user_name, "photoUrl": media_url}
    return (
        render_placeholders(subject, **values),
        render_placeholders(template, **values),
    )


def booth_photo_email(
    user_name: str, subject: str, template: str,
    event_name: str | None, media_url: str,
) -> EmailContent:
    subject, message = _tenant_copy(subject, template, event_name, user_name, media_url)
    body = (
        f"<h2>Hello {escape(user_name)}!</h2>"
        f"<p>{escape(message)}</p>"
        "<p>Your photo is attached. Don't forget to share it and tag us!</p>"
    )
    return EmailContent(subject, _wrap(body))


def booth_video_email(
    user_name: str, subject: str, template: str,
    event_name: str | None, video_url: str, company_name: str,
    button_color: str = "#3B82F6",
) -> EmailContent:
    subject, message = _tenant_copy(subject, template, event_name, user_name, video_url)
    body = (
        f"<h2>Hello {escape(user_name)}!</h2>"
        f"<p>{escape(message)}</p>"
        "<p>Thank you for using our video booth. Your video is ready to view and download!</p>"
        f"{_button(video_url, 'View Your Video', button_color)}"
        "<p>If the button above doesn't work, copy and paste this link into your browser:</p>"
        f'<p><a href="{escape(video_url)}">{escape(video_url)}</a></p>'
        f"<p>Best regards,<br>{escape(company_name)} Team</p>"
    )
    return EmailContent(subject, _wrap(body))


def admin_session_notification(
    user_name: str, user_email: str, session_id: str,
    media_url: str, is_video: bool,
) -> EmailContent:
    kind = "Video" if is_video else "Photo"
    verb = "recorded and a link was sent to" if is_video else "taken and sent to"
    body = (
        f"<h2>New {kind} Booth Session</h2>"
        f"<p>A new {kind.lower()} was {verb}:</p>"
        "<ul>"
        f"<li>Name: {escape(user_name)}</li>"
        f"<li>Email: {escape(user_email)}</li>"
        f"<li>Session ID: {escape(session_id)}</li>"
        "</ul>"
        f'<p>{kind} URL: <a href="{escape(media_url)}">{escape(media_url)}</a></p>'
    )
    return EmailContent(f"New {kind} Booth Session: {user_name}", _wrap(body))


def session_resend_email(
    user_name: str, subject: str, template: str, event_name: str | None,
    media_url: str, is_video: bool, company_name: str,
) -> EmailContent:
    """Re-delivery from the dashboard: media embedded (photo) or linked (video)."""
    subject, message = _tenant_copy(subject, template, event_name, user_name, media_url)
    if is_video:
        media = _button(media_url, "View Your Video")
    else:
        media = (
            f'<p><img src="{escape(media_url)}" alt="Your photo" '
            'style="max-width: 100%; border-radius: 8px;"></p>'
        )
    body = (
        f"<h2>Hello {escape(user_name)}!</h2>"
        f"<p>{escape(message)}</p>"
        f"{media}"
        f"<p>Best regards,<br>{escape(company_name)} Team</p>"
    )
    return EmailContent(subject, _wrap(body))
