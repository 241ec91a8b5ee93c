"""Settings Rules — defaults, boolean coercion, journey parsing and client shaping.

Tests:
    - ensure_boolean accepts bools, numbers and "true"/"1" strings
    - parse_journey_config never raises and always yields a list
    - build_default_settings returns independent copies
    - sanitize_update drops protected keys
    - Client/public views hide secrets and private fields
    - required_features maps changes to subscription flags
"""

import pytest

from boothboss.core.settings_rules import (
    DEFAULT_SETTINGS, build_default_settings, changed_fields, ensure_boolean,
    parse_enabled_filters, parse_journey_config, process_settings_for_client,
    public_booth_settings, required_features, sanitize_update,
)


@pytest.mark.parametrize("value,expected", [
    (True, True), (False, False), (1, True), (0, False), (2.5, True),
    ("true", True), ("TRUE ", True), ("1", True), ("false", False),
    ("yes", False), (None, False), ([], False),
])
def test_ensure_boolean(value, expected):
    assert ensure_boolean(value) is expected


@pytest.mark.parametrize("value,expected", [
    (None, []),
    ("", []),
    ("not json", []),
    ('[{"id": "a"}]', [{"id": "a"}]),
    ('{"id": "a"}', [{"id": "a"}]),
    ({"id": "a"}, [{"id": "a"}]),
    ([{"id": "b"}], [{"id": "b"}]),
    ("42", []),
])
def test_parse_journey_config(value, expected):
    assert parse_journey_config(value) == expected


def test_defaults_are_copies():
    first = build_default_settings()
    first["journey_config"].append({"id": "x"})
    first["event_name"] = "Changed"
    assert build_default_settings()["journey_config"] == []
    assert DEFAULT_SETTINGS["event_name"] == "Photo Booth Event"


def test_defaults_accept_overrides():
    data = build_default_settings(event_name="Gala", printer_enabled="1")
    assert data["event_name"] == "Gala"
    assert data["printer_enabled"] is True


def test_sanitize_update_drops_protected_fields():
    clean = sanitize_update({
        "id": "x", "user_id": "y", "is_default": True,
        "countdown_time": 5, "splash_page_enabled": "true",
        "journey_config": '[{"id": "p1"}]',
    })
    assert clean == {
        "countdown_time": 5,
        "splash_page_enabled": True,
        "journey_config": [{"id": "p1"}],
    }


def test_client_view_hides_smtp_password():
    processed = process_settings_for_client(
        {**build_default_settings(), "journey_config": '[{"id": "p"}]'}, now_ms=123,
    )
    assert "smtp_password" not in processed
    assert processed["journey_pages"] == [{"id": "p"}]
    assert processed["cache_version"] == 123
    assert process_settings_for_client(None) is None


def test_public_view_strips_private_fields():
    processed = process_settings_for_client(
        build_default_settings(journey_config=[{"id": "p"}], enabled_filters="bw, sepia"),
    )
    public = public_booth_settings(processed)
    for private in ("smtp_host", "smtp_user", "admin_email", "notes", "storage_provider"):
        assert private not in public
    # Journey pages are only served when the custom journey is on
    assert public["journey_pages"] == []
    assert public["enabled_filters"] == ["bw", "sepia"]


def test_parse_enabled_filters():
    assert parse_enabled_filters(None) == []
    assert parse_enabled_filters("a,,b ") == ["a", "b"]


def test_changed_fields_and_required_features():
    current = build_default_settings()
    changes = changed_fields(current, {
        "filters_enabled": True,
        "show_booth_boss_logo": False,
        "custom_journey_enabled": True,
        "capture_mode": "video",
    })
    assert "filters_enabled" not in changes
    assert sorted(required_features(changes)) == [
        "branding_removal", "journey_builder", "video_access",
    ]
    assert required_features({"filters_enabled": True}) == ["filter_access"]
    assert required_features({"show_booth_boss_logo": True}) == []
