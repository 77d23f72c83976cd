"""Role-based permission model with ownership overrides.

The model is a static ``Role x ResourceType -> {Action}`` table plus a partial
table of actions a resource owner may always perform. Evaluation is pure and
total: unknown combinations deny, they never raise.

- ``has_permission``: action-level check
- ``can_access_resource``: visibility check based on caller-supplied memberships
- ``filter_resources``: order-preserving visibility filter
- ``has_permissions``: conjunction over several requirements
"""

from .checks import (
    can_create_project,
    can_create_task,
    can_create_team,
    can_delete_project,
    can_delete_task,
    can_delete_team,
    can_edit_project,
    can_edit_task,
    can_edit_team,
    can_manage_team,
    can_view_project,
    can_view_task,
    can_view_team,
    highest_role,
)
from .enums import Action, ResourceType, Role
from .matrix import OWNERSHIP_PERMISSIONS, PERMISSION_MATRIX
from .models import PermissionRequirement, ResourceContext, UserContext
from .service import can_access_resource, filter_resources, has_permission, has_permissions, resource_context_of

__all__ = [
    "Action",
    "OWNERSHIP_PERMISSIONS",
    "PERMISSION_MATRIX",
    "PermissionRequirement",
    "ResourceContext",
    "ResourceType",
    "Role",
    "UserContext",
    "can_access_resource",
    "can_create_project",
    "can_create_task",
    "can_create_team",
    "can_delete_project",
    "can_delete_task",
    "can_delete_team",
    "can_edit_project",
    "can_edit_task",
    "can_edit_team",
    "can_manage_team",
    "can_view_project",
    "can_view_task",
    "can_view_team",
    "filter_resources",
    "has_permission",
    "has_permissions",
    "highest_role",
    "resource_context_of",
]
