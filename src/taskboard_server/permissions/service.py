"""Permission evaluation.

Pure, deterministic functions over the static tables in ``matrix``. None of
them raise for missing data: an absent resource context, an unknown owner or
an unknown resource type simply means "no special grant".

Example:
    ```python
    user = UserContext(id="u1", role=Role.MEMBER)

    has_permission(user, Action.DELETE, ResourceType.PROJECT, ResourceContext(owner_id="u1"))  # True
    has_permission(user, Action.DELETE, ResourceType.PROJECT, ResourceContext(owner_id="u2"))  # False
    ```
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from functools import partial
from typing import Any

from .enums import Action, ResourceType
from .matrix import owner_permissions, role_permissions
from .models import PermissionRequirement, ResourceContext, UserContext

_CONTEXT_FIELDS = ("owner_id", "team_id", "project_id")
_SELF_ID_FIELDS = {ResourceType.PROJECT: "project_id", ResourceType.TEAM: "team_id"}


def _is_owner(user: UserContext, resource_context: ResourceContext | None) -> bool:
    if resource_context is None or not resource_context.owner_id:
        return False
    return resource_context.owner_id == user.id


def has_permission(
    user: UserContext,
    action: Action | str,
    resource_type: ResourceType | str,
    resource_context: ResourceContext | None = None,
) -> bool:
    """Check whether ``user`` may perform ``action`` on ``resource_type``.

    The role matrix is consulted first. If it does not grant the action and the
    user owns the resource, the ownership table is consulted. Ownership only
    ever adds permissions.

    Args:
        user: The acting user
        action: Requested action
        resource_type: Type of the targeted resource
        resource_context: Optional facts about the resource instance

    Returns:
        True if the action is allowed, False otherwise
    """
    if action in role_permissions(user.role, resource_type):
        return True

    if _is_owner(user, resource_context):
        return action in owner_permissions(resource_type)

    return False


def can_access_resource(user: UserContext, resource_type: ResourceType | str, resource_context: ResourceContext) -> bool:
    """Decide whether a resource is visible to ``user`` at all.

    Owners always see their resources. Otherwise visibility is decided by the
    membership sets carried on the ``UserContext``:

    - PROJECT: the project id must be one of ``user.project_ids``
    - TEAM: the team id must be one of ``user.team_ids``
    - TASK, COMMENT, ATTACHMENT: team membership when the resource belongs to a
      team, project membership otherwise
    - USER: always visible

    Args:
        user: The acting user with resolved memberships
        resource_type: Type of the resource
        resource_context: Facts about the resource instance

    Returns:
        True if the resource should appear for this user
    """
    if _is_owner(user, resource_context):
        return True

    match resource_type:
        case ResourceType.PROJECT:
            return resource_context.project_id in user.project_ids
        case ResourceType.TEAM:
            return resource_context.team_id in user.team_ids
        case ResourceType.TASK | ResourceType.COMMENT | ResourceType.ATTACHMENT:
            if resource_context.team_id:
                return resource_context.team_id in user.team_ids
            return resource_context.project_id in user.project_ids
        case ResourceType.USER:
            return True
        case _:
            return False


def _field(resource: Any, name: str) -> Any:
    if isinstance(resource, Mapping):
        return resource.get(name)
    return getattr(resource, name, None)


def resource_context_of(resource: Any, resource_type: ResourceType | str | None = None) -> ResourceContext:
    """Build a ``ResourceContext`` from a model, mapping or context.

    Identifier values are converted to strings so UUID columns compare equal to
    the string ids carried on ``UserContext``. When ``resource_type`` is PROJECT
    or TEAM, the resource's own ``id`` stands in for a missing ``project_id`` or
    ``team_id``, so ``Project`` and ``Team`` rows can be passed as they are.
    """
    if isinstance(resource, ResourceContext):
        return resource

    values = {name: _field(resource, name) for name in _CONTEXT_FIELDS}
    self_field = _SELF_ID_FIELDS.get(resource_type)
    if self_field is not None and values[self_field] is None:
        values[self_field] = _field(resource, "id")

    return ResourceContext(**{name: str(value) if value is not None else None for name, value in values.items()})


def filter_resources[T](
    user: UserContext,
    resources: Iterable[T],
    resource_type: ResourceType | str,
    context_of: Callable[[T], ResourceContext] | None = None,
) -> list[T]:
    """Keep only the resources visible to ``user``, preserving order.

    Args:
        user: The acting user
        resources: Resources to filter (left untouched)
        resource_type: Type shared by all resources
        context_of: Extracts the ``ResourceContext`` of one resource; defaults
            to ``resource_context_of`` for ``resource_type``

    Returns:
        A new list with the visible resources in their original order
    """
    if context_of is None:
        context_of = partial(resource_context_of, resource_type=resource_type)
    return [resource for resource in resources if can_access_resource(user, resource_type, context_of(resource))]


def has_permissions(user: UserContext, requirements: Sequence[PermissionRequirement]) -> bool:
    """Return True only if every requirement is granted."""
    return all(
        has_permission(user, requirement.action, requirement.resource_type, requirement.resource_context)
        for requirement in requirements
    )
