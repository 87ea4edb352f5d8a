"""
Admin permission table and resolver.

Each admin carries a nested table ``resource -> action -> bool``. A
``super_admin`` skips the table entirely; everyone else is allowed only what
the table explicitly grants. A missing resource or action is a denial, never
an error.
"""
from typing import Any, Dict, Mapping, Optional

from fastapi import Depends

from edupro.core.exceptions import ForbiddenError, InvalidInputError
from edupro.core.logging_config import logger

RESOURCES = ("students", "courses", "sports", "library", "attendance", "results", "coaches")
ACTIONS = ("view", "create", "edit", "delete")

SUPER_ADMIN = "super_admin"

PermissionTable = Dict[str, Dict[str, bool]]


def default_permissions(granted: bool = True) -> PermissionTable:
    """Fresh table with every (resource, action) set to ``granted``"""
    return {resource: {action: granted for action in ACTIONS} for resource in RESOURCES}


def has_permission(role: Any, permissions: Optional[Mapping[str, Any]], resource: str, action: str) -> bool:
    role_value = getattr(role, "value", role)
    if role_value == SUPER_ADMIN:
        return True

    if not isinstance(permissions, Mapping):
        return False
    actions = permissions.get(resource)
    if not isinstance(actions, Mapping):
        return False
    return bool(actions.get(action, False))


def merge_permissions(current: Optional[Mapping[str, Any]], changes: Mapping[str, Mapping[str, bool]]) -> PermissionTable:
    """
    Apply a partial update to a permission table.

    Unknown resources or actions are rejected so a typo cannot silently
    leave a permission in its old state.
    """
    merged = default_permissions(granted=False)
    if isinstance(current, Mapping):
        for resource, actions in current.items():
            if resource in merged and isinstance(actions, Mapping):
                for action, allowed in actions.items():
                    if action in merged[resource]:
                        merged[resource][action] = bool(allowed)

    for resource, actions in changes.items():
        if resource not in merged:
            raise InvalidInputError(f"Unknown permission resource '{resource}'", field="permissions")
        for action, allowed in actions.items():
            if action not in merged[resource]:
                raise InvalidInputError(f"Unknown permission action '{action}'", field="permissions")
            merged[resource][action] = bool(allowed)

    return merged


def require_permission(resource: str, action: str):
    """
    Dependency factory gating a route on one (resource, action) pair.

    Usage:
        @router.delete("/students/{id}")
        async def delete_student(
            admin: Admin = Depends(require_permission("students", "delete"))
        ):
            ...
    """
    if resource not in RESOURCES or action not in ACTIONS:
        raise ValueError(f"Unknown permission {resource}.{action}")

    # Imported here: the auth dependencies import the models, which import this module
    from edupro.modules.auth.dependencies import get_current_admin

    async def permission_checker(admin=Depends(get_current_admin)):
        return ensure_permission(admin, resource, action)

    return permission_checker


def ensure_permission(admin, resource: str, action: str):
    """Raise ForbiddenError unless ``admin`` may perform ``action`` on ``resource``"""
    if not admin.has_permission(resource, action):
        logger.log_permission_denied(resource, action, getattr(admin.role, "value", admin.role))
        raise ForbiddenError(f"Access denied: {action} permission required for {resource}")
    return admin
