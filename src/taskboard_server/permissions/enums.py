"""Enums for the permission model.

Kept separate so that models, handlers and routes can import the closed
vocabularies without pulling in the permission tables.
"""

from enum import StrEnum


class ResourceType(StrEnum):
    """Kinds of resources an action can target."""

    PROJECT = "PROJECT"
    TEAM = "TEAM"
    TASK = "TASK"
    COMMENT = "COMMENT"
    ATTACHMENT = "ATTACHMENT"
    USER = "USER"


class Action(StrEnum):
    """Operations a user may attempt on a resource."""

    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    MANAGE = "MANAGE"


class Role(StrEnum):
    """Team-level authorization roles, strongest first."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    MEMBER = "MEMBER"
