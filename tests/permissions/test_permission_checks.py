"""Tests for the permission shortcuts."""

from taskboard_server.permissions import (
    ResourceContext,
    Role,
    UserContext,
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

ADMIN = UserContext(id="a", role=Role.ADMIN)
MANAGER = UserContext(id="m", role=Role.MANAGER)
MEMBER = UserContext(id="u", role=Role.MEMBER)


def test_project_checks():
    others = ResourceContext(owner_id="someone-else")
    own = ResourceContext(owner_id="u")

    assert can_create_project(ADMIN)
    assert not can_create_project(MANAGER)
    assert can_view_project(MEMBER)
    assert can_edit_project(ADMIN, others)
    assert not can_edit_project(MANAGER, others)
    assert can_edit_project(MEMBER, own)
    assert can_delete_project(MEMBER, own)
    assert not can_delete_project(MEMBER, others)


def test_team_checks():
    team = ResourceContext(team_id="t1")

    assert can_create_team(MANAGER)
    assert not can_create_team(MEMBER)
    assert can_view_team(MEMBER, team)
    assert can_edit_team(MANAGER, team)
    assert not can_edit_team(MEMBER, team)
    assert can_delete_team(ADMIN, team)
    assert can_manage_team(MANAGER, team)
    assert not can_manage_team(MEMBER, team)


def test_team_ownership_grants_nothing():
    assert not can_manage_team(MEMBER, ResourceContext(owner_id="u", team_id="t1"))


def test_task_checks():
    task = ResourceContext(owner_id="x", project_id="p1")

    assert can_create_task(MEMBER)
    assert can_view_task(MEMBER, task)
    assert can_edit_task(MEMBER, task)
    assert can_delete_task(MANAGER, task)


def test_highest_role():
    assert highest_role([Role.MEMBER, Role.ADMIN, Role.MANAGER]) == Role.ADMIN
    assert highest_role(["MANAGER", "MEMBER"]) == Role.MANAGER
    assert highest_role([]) == Role.MEMBER
