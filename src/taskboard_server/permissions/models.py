"""Inputs of the permission model.

All models are frozen: callers build them per request from data they already
loaded from the persistence layer.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import Action, ResourceType, Role


class UserContext(BaseModel):
    """The acting user.

    ``project_ids`` and ``team_ids`` are the memberships the caller resolved for
    this user. They drive visibility checks in ``can_access_resource``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    project_ids: frozenset[str] = Field(default_factory=frozenset)
    team_ids: frozenset[str] = Field(default_factory=frozenset)


class ResourceContext(BaseModel):
    """Facts about the specific resource instance being acted on."""

    model_config = ConfigDict(frozen=True)

    owner_id: str | None = None
    team_id: str | None = None
    project_id: str | None = None


class PermissionRequirement(BaseModel):
    """One ``(action, resource type, context)`` triple for ``has_permissions``."""

    model_config = ConfigDict(frozen=True)

    action: Action
    resource_type: ResourceType
    resource_context: ResourceContext | None = None
