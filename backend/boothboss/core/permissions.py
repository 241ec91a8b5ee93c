"""Authorization Policy — one pure decision function for every ownership check.

Invariants:
    - Admins (role ADMIN or the configured system admin) are allowed everything
    - Customers are allowed only on resources whose owner_id equals their id
    - A target without an owner (missing resource) is denied with reason "not found"
    - Unknown resource types or actions are denied
    - check_permission never raises; require_permission raises PermissionDeniedError

Design Decisions:
    - Services resolve ownership (e.g. a booth session's owner is the owner of
      its event URL) and hand this module a PermissionTarget; no DB access here
"""

from dataclasses import dataclass
from uuid import UUID

from boothboss.core.domain_types import Action, ResourceType, UserRole
from boothboss.core.errors import PermissionDeniedError, ErrorContext

# Actions a customer may take on their own resources, per resource type.
OWNER_ACTIONS: dict[ResourceType, frozenset[Action]] = {
    ResourceType.USER: frozenset({Action.READ, Action.UPDATE}),
    ResourceType.EVENT_URL: frozenset({
        Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE, Action.MANAGE,
    }),
    ResourceType.SESSION: frozenset({Action.READ, Action.DELETE, Action.EMAIL}),
    ResourceType.SETTINGS: frozenset({
        Action.READ, Action.CREATE, Action.UPDATE, Action.MANAGE,
    }),
    ResourceType.JOURNEY: frozenset({
        Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE,
    }),
}


@dataclass(frozen=True)
class Actor:
    id: UUID
    role: UserRole
    is_system_admin: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN or self.is_system_admin


@dataclass(frozen=True)
class PermissionTarget:
    resource_type: ResourceType
    owner_id: UUID | None
    resource_id: str | None = None


@dataclass(frozen=True)
class PermissionDecision:
    allowed: bool
    reason: str


def check_permission(
    actor: Actor, target: PermissionTarget, action: Action | str,
) -> PermissionDecision:
    """Decide whether actor may perform action on target."""
    try:
        action = Action(action)
        resource_type = ResourceType(target.resource_type)
    except ValueError:
        return PermissionDecision(False, "unknown resource or action")

    if actor.is_admin:
        return PermissionDecision(True, "admin")
    if target.owner_id is None:
        return PermissionDecision(False, "not found")
    if target.owner_id != actor.id:
        return PermissionDecision(False, f"not the owner of this {resource_type.value}")
    if action not in OWNER_ACTIONS[resource_type]:
        return PermissionDecision(
            False, f"{action.value} on {resource_type.value} requires admin",
        )
    return PermissionDecision(True, "owner")


def require_permission(
    actor: Actor, target: PermissionTarget, action: Action | str,
) -> None:
    decision = check_permission(actor, target, action)
    if not decision.allowed:
        raise PermissionDeniedError(
            decision.reason,
            ErrorContext(user_id=str(actor.id), resource_id=target.resource_id),
        )


def require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        raise PermissionDeniedError(
            "admin access required", ErrorContext(user_id=str(actor.id)),
        )
