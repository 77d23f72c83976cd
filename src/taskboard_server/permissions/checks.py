"""Shortcuts for the permission checks routes perform most often."""

from collections.abc import Iterable

from .enums import Action, ResourceType, Role
from .models import ResourceContext, UserContext
from .service import has_permission

_ROLE_PRECEDENCE = (Role.ADMIN, Role.MANAGER, Role.MEMBER)


def highest_role(roles: Iterable[Role | str]) -> Role:
    """Return the strongest role in ``roles``, MEMBER when there is none."""
    present = set(roles)
    for role in _ROLE_PRECEDENCE:
        if role in present:
            return role
    return Role.MEMBER


def can_create_project(user: UserContext) -> bool:
    return has_permission(user, Action.CREATE, ResourceType.PROJECT)


def can_view_project(user: UserContext, project: ResourceContext | None = None) -> bool:
    return has_permission(user, Action.READ, ResourceType.PROJECT, project)


def can_edit_project(user: UserContext, project: ResourceContext) -> bool:
    return has_permission(user, Action.UPDATE, ResourceType.PROJECT, project)


def can_delete_project(user: UserContext, project: ResourceContext) -> bool:
    return has_permission(user, Action.DELETE, ResourceType.PROJECT, project)


def can_create_team(user: UserContext) -> bool:
    return has_permission(user, Action.CREATE, ResourceType.TEAM)


def can_view_team(user: UserContext, team: ResourceContext | None = None) -> bool:
    return has_permission(user, Action.READ, ResourceType.TEAM, team)


def can_edit_team(user: UserContext, team: ResourceContext) -> bool:
    return has_permission(user, Action.UPDATE, ResourceType.TEAM, team)


def can_delete_team(user: UserContext, team: ResourceContext) -> bool:
    return has_permission(user, Action.DELETE, ResourceType.TEAM, team)


def can_manage_team(user: UserContext, team: ResourceContext | None = None) -> bool:
    """Managing a team covers inviting and removing members."""
    return has_permission(user, Action.MANAGE, ResourceType.TEAM, team)


def can_create_task(user: UserContext) -> bool:
    return has_permission(user, Action.CREATE, ResourceType.TASK)


def can_view_task(user: UserContext, task: ResourceContext | None = None) -> bool:
    return has_permission(user, Action.READ, ResourceType.TASK, task)


def can_edit_task(user: UserContext, task: ResourceContext) -> bool:
    return has_permission(user, Action.UPDATE, ResourceType.TASK, task)


def can_delete_task(user: UserContext, task: ResourceContext) -> bool:
    return has_permission(user, Action.DELETE, ResourceType.TASK, task)
