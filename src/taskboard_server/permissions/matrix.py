"""Static permission tables.

``PERMISSION_MATRIX`` is total: every ``(Role, ResourceType)`` pair maps to a
(possibly empty) frozenset of actions. ``OWNERSHIP_PERMISSIONS`` is partial and
lists the actions a resource owner may always perform regardless of role.

Both tables are built once at import time and never mutated.
"""

from collections.abc import Mapping
from types import MappingProxyType

from .enums import Action, ResourceType, Role

_CRUD = frozenset({Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE})
_CRUD_MANAGE = _CRUD | {Action.MANAGE}
_READ_ONLY = frozenset({Action.READ})


def _freeze(table: dict[ResourceType, frozenset[Action]]) -> Mapping[ResourceType, frozenset[Action]]:
    # Fill in every resource type so lookups never miss
    complete = {resource_type: table.get(resource_type, frozenset()) for resource_type in ResourceType}
    return MappingProxyType(complete)


PERMISSION_MATRIX: Mapping[Role, Mapping[ResourceType, frozenset[Action]]] = MappingProxyType(
    {
        Role.ADMIN: _freeze(
            {
                ResourceType.PROJECT: _CRUD_MANAGE,
                ResourceType.TEAM: _CRUD_MANAGE,
                ResourceType.TASK: _CRUD_MANAGE,
                ResourceType.COMMENT: _CRUD,
                ResourceType.ATTACHMENT: _CRUD,
                ResourceType.USER: frozenset({Action.READ, Action.MANAGE}),
            }
        ),
        Role.MANAGER: _freeze(
            {
                ResourceType.PROJECT: _READ_ONLY,
                ResourceType.TEAM: _CRUD_MANAGE,
                ResourceType.TASK: _CRUD_MANAGE,
                ResourceType.COMMENT: _CRUD,
                ResourceType.ATTACHMENT: _CRUD,
                ResourceType.USER: _READ_ONLY,
            }
        ),
        Role.MEMBER: _freeze(
            {
                ResourceType.PROJECT: _READ_ONLY,
                ResourceType.TEAM: _READ_ONLY,
                ResourceType.TASK: _CRUD,
                ResourceType.COMMENT: _CRUD,
                ResourceType.ATTACHMENT: _CRUD,
                ResourceType.USER: _READ_ONLY,
            }
        ),
    }
)

OWNERSHIP_PERMISSIONS: Mapping[ResourceType, frozenset[Action]] = MappingProxyType(
    {
        ResourceType.PROJECT: frozenset({Action.UPDATE, Action.DELETE, Action.MANAGE}),
        ResourceType.TASK: frozenset({Action.UPDATE, Action.DELETE}),
        ResourceType.COMMENT: frozenset({Action.UPDATE, Action.DELETE}),
        ResourceType.ATTACHMENT: frozenset({Action.UPDATE, Action.DELETE}),
    }
)


def role_permissions(role: Role | str, resource_type: ResourceType | str) -> frozenset[Action]:
    """Return the actions ``role`` may perform on ``resource_type``.

    Unknown roles or resource types yield an empty set instead of raising.
    """
    return PERMISSION_MATRIX.get(role, {}).get(resource_type, frozenset())


def owner_permissions(resource_type: ResourceType | str) -> frozenset[Action]:
    """Return the actions an owner may always perform on ``resource_type``."""
    return OWNERSHIP_PERMISSIONS.get(resource_type, frozenset())
