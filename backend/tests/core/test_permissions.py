"""Permissions — ownership policy for every resource type.

Tests:
    - Admins (role or configured system admin) may do anything
    - Owners get their per-resource action set; non-owners are denied
    - Ownerless targets are "not found"; unknown actions are denied
    - require_permission / require_admin raise PermissionDeniedError
"""

from uuid import uuid4

import pytest

from boothboss.core.domain_types import Action, ResourceType, UserRole
from boothboss.core.errors import PermissionDeniedError
from boothboss.core.permissions import (
    Actor, PermissionTarget, check_permission, require_admin, require_permission,
)

OWNER = Actor(id=uuid4(), role=UserRole.CUSTOMER)
STRANGER = Actor(id=uuid4(), role=UserRole.CUSTOMER)
ADMIN = Actor(id=uuid4(), role=UserRole.ADMIN)


def _target(resource: ResourceType, owner=OWNER.id) -> PermissionTarget:
    return PermissionTarget(resource, owner, "r-1")


@pytest.mark.parametrize("resource", list(ResourceType))
def test_admin_allowed_everywhere(resource):
    decision = check_permission(ADMIN, _target(resource), Action.MANAGE)
    assert decision.allowed
    assert decision.reason == "admin"


def test_system_admin_by_email_flag():
    actor = Actor(id=uuid4(), role=UserRole.CUSTOMER, is_system_admin=True)
    assert actor.is_admin
    assert check_permission(actor, _target(ResourceType.SESSION), Action.DELETE).allowed


@pytest.mark.parametrize("resource,action", [
    (ResourceType.EVENT_URL, Action.DELETE),
    (ResourceType.SESSION, Action.EMAIL),
    (ResourceType.SETTINGS, Action.UPDATE),
    (ResourceType.JOURNEY, Action.CREATE),
    (ResourceType.USER, Action.READ),
])
def test_owner_allowed(resource, action):
    assert check_permission(OWNER, _target(resource), action).allowed


@pytest.mark.parametrize("resource,action", [
    (ResourceType.USER, Action.DELETE),
    (ResourceType.SESSION, Action.UPDATE),
    (ResourceType.SETTINGS, Action.DELETE),
])
def test_owner_denied_admin_actions(resource, action):
    decision = check_permission(OWNER, _target(resource), action)
    assert not decision.allowed
    assert "requires admin" in decision.reason


def test_stranger_denied():
    decision = check_permission(STRANGER, _target(ResourceType.EVENT_URL), Action.READ)
    assert not decision.allowed
    assert decision.reason == "not the owner of this event_url"


def test_ownerless_target_is_not_found():
    decision = check_permission(OWNER, _target(ResourceType.SESSION, owner=None), Action.READ)
    assert decision == type(decision)(False, "not found")


def test_unknown_action_denied():
    assert not check_permission(ADMIN, _target(ResourceType.SESSION), "explode").allowed


def test_require_helpers_raise():
    with pytest.raises(PermissionDeniedError) as exc:
        require_permission(STRANGER, _target(ResourceType.JOURNEY), Action.READ)
    assert exc.value.http_status == 403
    assert exc.value.context.resource_id == "r-1"

    require_admin(ADMIN)
    with pytest.raises(PermissionDeniedError):
        require_admin(OWNER)
