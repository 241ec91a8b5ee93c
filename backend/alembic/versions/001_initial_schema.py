"""Initial schema — users, subscriptions, event URLs, settings, journeys, sessions, analytics.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(60), nullable=True, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="CUSTOMER"),
        sa.Column("email_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verification_token", sa.String(64), nullable=True),
        sa.Column("verification_token_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("organization_name", sa.String(200), nullable=True),
        sa.Column("organization_size", sa.String(50), nullable=True),
        sa.Column("industry", sa.String(100), nullable=True),
        sa.Column("media_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("emails_sent", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_verification_token", "users", ["verification_token"])

    op.create_table(
        "subscriptions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("tier", sa.String(20), nullable=False, server_default="FREE"),
        sa.Column("duration", sa.String(20), nullable=False, server_default="TRIAL"),
        sa.Column("status", sa.String(20), nullable=False, server_default="TRIAL"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("trial_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_media", sa.Integer, nullable=True),
        sa.Column("max_emails", sa.Integer, nullable=True),
        sa.Column("max_video_duration", sa.Integer, nullable=True),
        sa.Column("max_days", sa.Integer, nullable=True),
        sa.Column("custom_domain", sa.Boolean, nullable=True),
        sa.Column("analytics_access", sa.Boolean, nullable=True),
        sa.Column("filter_access", sa.Boolean, nullable=True),
        sa.Column("video_access", sa.Boolean, nullable=True),
        sa.Column("ai_enhancement", sa.Boolean, nullable=True),
        sa.Column("journey_builder", sa.Boolean, nullable=True),
        sa.Column("branding_removal", sa.Boolean, nullable=True),
        sa.Column("priority_support", sa.Boolean, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "event_urls",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("url_path", sa.String(30), nullable=False),
        sa.Column("event_name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("event_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("event_end_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_event_urls_url_path", "event_urls", ["url_path"], unique=True)
    op.create_index("ix_event_urls_user_id", "event_urls", ["user_id"])

    op.create_table(
        "settings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True,
        ),
        sa.Column(
            "event_url_id", UUID(as_uuid=True),
            sa.ForeignKey("event_urls.id", ondelete="CASCADE"), nullable=True,
        ),
        sa.Column("is_default", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("event_name", sa.String(200), nullable=False, server_default="Photo Booth Event"),
        sa.Column("admin_email", sa.String(255), nullable=False, server_default=""),
        sa.Column("countdown_time", sa.Integer, nullable=False, server_default="3"),
        sa.Column("reset_time", sa.Integer, nullable=False, server_default="30"),
        sa.Column("email_subject", sa.String(255), nullable=False, server_default="Your Photo Booth Pictures"),
        sa.Column("email_template", sa.Text, nullable=False),
        sa.Column("smtp_host", sa.String(255), nullable=False, server_default="smtp.example.com"),
        sa.Column("smtp_port", sa.Integer, nullable=False, server_default="587"),
        sa.Column("smtp_user", sa.String(255), nullable=False, server_default="user"),
        sa.Column("smtp_password", sa.String(255), nullable=False, server_default="password"),
        sa.Column("company_name", sa.String(200), nullable=False, server_default="Bureau of Internet Culture"),
        sa.Column("company_logo", sa.Text, nullable=True),
        sa.Column("theme", sa.String(20), nullable=False, server_default="custom"),
        sa.Column("primary_color", sa.String(9), nullable=False, server_default="#3B82F6"),
        sa.Column("secondary_color", sa.String(9), nullable=False, server_default="#1E40AF"),
        sa.Column("background_color", sa.String(9), nullable=False, server_default="#FFFFFF"),
        sa.Column("border_color", sa.String(9), nullable=False, server_default="#E5E7EB"),
        sa.Column("button_color", sa.String(9), nullable=False, server_default="#3B82F6"),
        sa.Column("text_color", sa.String(9), nullable=False, server_default="#111827"),
        sa.Column("show_booth_boss_logo", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("custom_css", sa.Text, nullable=True),
        sa.Column("custom_journey_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("journey_config", sa.JSON, nullable=False),
        sa.Column("active_journey_id", sa.String(64), nullable=True),
        sa.Column("journey_name", sa.String(200), nullable=True),
        sa.Column("splash_page_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("splash_page_title", sa.String(200), nullable=True),
        sa.Column("splash_page_content", sa.Text, nullable=True),
        sa.Column("splash_page_image", sa.Text, nullable=True),
        sa.Column("splash_page_button_text", sa.String(100), nullable=True),
        sa.Column("capture_mode", sa.String(10), nullable=False, server_default="photo"),
        sa.Column("photo_orientation", sa.String(40), nullable=False, server_default="portrait-standard"),
        sa.Column("photo_device", sa.String(40), nullable=False, server_default="ipad"),
        sa.Column("photo_resolution", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("photo_effect", sa.String(40), nullable=False, server_default="none"),
        sa.Column("printer_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("ai_image_correction", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("video_orientation", sa.String(40), nullable=False, server_default="portrait-standard"),
        sa.Column("video_device", sa.String(40), nullable=False, server_default="ipad"),
        sa.Column("video_resolution", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("video_effect", sa.String(40), nullable=False, server_default="none"),
        sa.Column("video_duration", sa.Integer, nullable=False, server_default="10"),
        sa.Column("filters_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("enabled_filters", sa.Text, nullable=True),
        sa.Column("storage_provider", sa.String(10), nullable=False, server_default="auto"),
        sa.Column("blob_vercel_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("local_upload_path", sa.String(200), nullable=False, server_default="uploads"),
        sa.Column("storage_base_url", sa.String(500), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_settings_user_id", "settings", ["user_id"])
    op.create_index("ix_settings_event_url_id", "settings", ["event_url_id"])

    op.create_table(
        "event_url_settings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "event_url_id", UUID(as_uuid=True),
            sa.ForeignKey("event_urls.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "settings_id", UUID(as_uuid=True),
            sa.ForeignKey("settings.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("event_url_id", "settings_id", name="uq_event_url_settings_pair"),
    )
    op.create_index("ix_event_url_settings_event_url_id", "event_url_settings", ["event_url_id"])
    op.create_index("ix_event_url_settings_settings_id", "event_url_settings", ["settings_id"])

    op.create_table(
        "journeys",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("pages", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_journeys_user_id", "journeys", ["user_id"])

    op.create_table(
        "booth_sessions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True,
        ),
        sa.Column(
            "event_url_id", UUID(as_uuid=True),
            sa.ForeignKey("event_urls.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("event_url_path", sa.String(30), nullable=True),
        sa.Column("user_name", sa.String(200), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False, server_default=""),
        sa.Column("media_url", sa.Text, nullable=False),
        sa.Column("media_type", sa.String(10), nullable=False, server_default="photo"),
        sa.Column("filter", sa.String(40), nullable=False, server_default="normal"),
        sa.Column("storage_provider", sa.String(10), nullable=False, server_default="local"),
        sa.Column("event_name", sa.String(200), nullable=True),
        sa.Column("template_used", sa.String(100), nullable=True),
        sa.Column("email_sent", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("shared", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_booth_sessions_user_id", "booth_sessions", ["user_id"])
    op.create_index("ix_booth_sessions_event_url_id", "booth_sessions", ["event_url_id"])
    op.create_index("ix_booth_sessions_created_at", "booth_sessions", ["created_at"])

    op.create_table(
        "booth_analytics",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("session_id", sa.String(64), nullable=False, unique=True),
        sa.Column(
            "booth_session_id", UUID(as_uuid=True),
            sa.ForeignKey("booth_sessions.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True,
        ),
        sa.Column("event_url_path", sa.String(30), nullable=True),
        sa.Column("event_type", sa.String(40), nullable=False, server_default="session_start"),
        sa.Column("media_type", sa.String(10), nullable=True),
        sa.Column("filter", sa.String(40), nullable=True),
        sa.Column("user_agent", sa.Text, nullable=True),
        sa.Column("email_domain", sa.String(255), nullable=True),
        sa.Column("duration_ms", sa.Integer, nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_booth_analytics_user_id", "booth_analytics", ["user_id"])
    op.create_index("ix_booth_analytics_timestamp", "booth_analytics", ["timestamp"])

    op.create_table(
        "booth_event_logs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "analytics_id", UUID(as_uuid=True),
            sa.ForeignKey("booth_analytics.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("event_type", sa.String(40), nullable=False),
        sa.Column("metadata", sa.Text, nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_booth_event_logs_analytics_id", "booth_event_logs", ["analytics_id"])
    op.create_index("ix_booth_event_logs_timestamp", "booth_event_logs", ["timestamp"])


def downgrade() -> None:
    op.drop_table("booth_event_logs")
    op.drop_table("booth_analytics")
    op.drop_table("booth_sessions")
    op.drop_table("journeys")
    op.drop_table("event_url_settings")
    op.drop_table("settings")
    op.drop_table("event_urls")
    op.drop_table("subscriptions")
    op.drop_table("users")
