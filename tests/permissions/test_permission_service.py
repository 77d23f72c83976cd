"""Tests for permission evaluation."""

import itertools
from uuid import uuid4

import pytest

from taskboard_server.models.db_model import Project, Team
from taskboard_server.permissions import (
    OWNERSHIP_PERMISSIONS,
    PERMISSION_MATRIX,
    Action,
    PermissionRequirement,
    ResourceContext,
    ResourceType,
    Role,
    UserContext,
    can_access_resource,
    filter_resources,
    has_permission,
    has_permissions,
    resource_context_of,
)

ALL_COMBINATIONS = list(itertools.product(Role, ResourceType, Action))


def member(user_id: str = "u1", **memberships) -> UserContext:
    return UserContext(id=user_id, role=Role.MEMBER, **memberships)


class TestPermissionTables:
    def test_matrix_is_total(self):
        for role in Role:
            assert set(PERMISSION_MATRIX[role]) == set(ResourceType)
            for resource_type in ResourceType:
                assert isinstance(PERMISSION_MATRIX[role][resource_type], frozenset)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            PERMISSION_MATRIX[Role.MEMBER] = {}  # type: ignore[index]
        with pytest.raises(TypeError):
            OWNERSHIP_PERMISSIONS[ResourceType.TEAM] = frozenset()  # type: ignore[index]

    def test_ownership_table_is_partial(self):
        assert set(OWNERSHIP_PERMISSIONS) == {
            ResourceType.PROJECT,
            ResourceType.TASK,
            ResourceType.COMMENT,
            ResourceType.ATTACHMENT,
        }


class TestHasPermission:
    @pytest.mark.parametrize("role,resource_type,action", ALL_COMBINATIONS)
    def test_lookup_is_total(self, role, resource_type, action):
        user = UserContext(id="u1", role=role)
        for context in (None, ResourceContext(), ResourceContext(owner_id="u1"), ResourceContext(owner_id="u2")):
            assert has_permission(user, action, resource_type, context) in (True, False)

    @pytest.mark.parametrize("role,resource_type,action", ALL_COMBINATIONS)
    def test_ownership_never_revokes(self, role, resource_type, action):
        user = UserContext(id="u1", role=role)
        granted = has_permission(user, action, resource_type)

        if granted:
            assert has_permission(user, action, resource_type, ResourceContext(owner_id="u2"))
            assert has_permission(user, action, resource_type, ResourceContext(owner_id="u1"))

    def test_owner_may_delete_own_project(self):
        assert has_permission(member(), Action.DELETE, ResourceType.PROJECT, ResourceContext(owner_id="u1")) is True

    def test_non_owner_member_may_not_delete_project(self):
        assert has_permission(member(), Action.DELETE, ResourceType.PROJECT, ResourceContext(owner_id="u2")) is False

    def test_string_inputs_are_accepted(self):
        assert has_permission(member(), "DELETE", "PROJECT", ResourceContext(owner_id="u1")) is True
        assert has_permission(member(), "READ", "PROJECT") is True

    def test_unknown_values_deny(self):
        assert has_permission(member(), "EXPLODE", ResourceType.PROJECT) is False
        assert has_permission(member(), Action.READ, "SPACESHIP", ResourceContext(owner_id="u1")) is False

    def test_missing_context_means_no_ownership(self):
        assert has_permission(member(), Action.UPDATE, ResourceType.PROJECT) is False
        assert has_permission(member(), Action.UPDATE, ResourceType.PROJECT, ResourceContext(owner_id=None)) is False

    def test_empty_owner_id_is_not_ownership(self):
        user = UserContext(id="", role=Role.MEMBER)
        assert has_permission(user, Action.UPDATE, ResourceType.PROJECT, ResourceContext(owner_id="")) is False

    def test_owner_override_limited_to_table(self):
        # Owners get UPDATE/DELETE/MANAGE on projects, but ownership grants nothing on teams
        owned = ResourceContext(owner_id="u1")
        assert has_permission(member(), Action.MANAGE, ResourceType.PROJECT, owned) is True
        assert has_permission(member(), Action.UPDATE, ResourceType.TEAM, owned) is False
        assert has_permission(member(), Action.MANAGE, ResourceType.TASK, owned) is False

    @pytest.mark.parametrize(
        "role,action,resource_type,expected",
        [
            (Role.ADMIN, Action.DELETE, ResourceType.PROJECT, True),
            (Role.ADMIN, Action.MANAGE, ResourceType.USER, True),
            (Role.ADMIN, Action.MANAGE, ResourceType.COMMENT, False),
            (Role.MANAGER, Action.MANAGE, ResourceType.TEAM, True),
            (Role.MANAGER, Action.UPDATE, ResourceType.PROJECT, False),
            (Role.MANAGER, Action.CREATE, ResourceType.TASK, True),
            (Role.MEMBER, Action.READ, ResourceType.TEAM, True),
            (Role.MEMBER, Action.MANAGE, ResourceType.TEAM, False),
            (Role.MEMBER, Action.DELETE, ResourceType.TASK, True),
            (Role.MEMBER, Action.CREATE, ResourceType.USER, False),
        ],
    )
    def test_matrix_examples(self, role, action, resource_type, expected):
        assert has_permission(UserContext(id="x", role=role), action, resource_type) is expected


class TestHasPermissions:
    def test_all_granted(self):
        requirements = [
            PermissionRequirement(action=Action.READ, resource_type=ResourceType.PROJECT),
            PermissionRequirement(
                action=Action.DELETE,
                resource_type=ResourceType.PROJECT,
                resource_context=ResourceContext(owner_id="u1"),
            ),
        ]
        assert has_permissions(member(), requirements) is True

    def test_one_denied(self):
        requirements = [
            PermissionRequirement(action=Action.READ, resource_type=ResourceType.PROJECT),
            PermissionRequirement(action=Action.DELETE, resource_type=ResourceType.TEAM),
        ]
        assert has_permissions(member(), requirements) is False

    def test_empty_requirements(self):
        assert has_permissions(member(), []) is True


class TestCanAccessResource:
    def test_owner_always_sees(self):
        assert can_access_resource(member(), ResourceType.PROJECT, ResourceContext(owner_id="u1", project_id="p9"))

    def test_project_visibility_uses_project_memberships(self):
        user = member(project_ids=frozenset({"p1"}))
        assert can_access_resource(user, ResourceType.PROJECT, ResourceContext(project_id="p1"))
        assert not can_access_resource(user, ResourceType.PROJECT, ResourceContext(project_id="p2"))

    def test_admin_gets_no_shortcut(self):
        admin = UserContext(id="a1", role=Role.ADMIN)
        assert not can_access_resource(admin, ResourceType.PROJECT, ResourceContext(project_id="p1"))
        assert not can_access_resource(admin, ResourceType.TEAM, ResourceContext(team_id="t1"))

    def test_team_visibility_uses_team_memberships(self):
        user = member(team_ids=frozenset({"t1"}))
        assert can_access_resource(user, ResourceType.TEAM, ResourceContext(team_id="t1"))
        assert not can_access_resource(user, ResourceType.TEAM, ResourceContext(team_id="t2"))

    @pytest.mark.parametrize("resource_type", [ResourceType.TASK, ResourceType.COMMENT, ResourceType.ATTACHMENT])
    def test_child_resources_prefer_team(self, resource_type):
        user = member(team_ids=frozenset({"t1"}), project_ids=frozenset({"p1"}))
        assert can_access_resource(user, resource_type, ResourceContext(team_id="t1", project_id="p2"))
        assert not can_access_resource(user, resource_type, ResourceContext(team_id="t2", project_id="p1"))
        assert can_access_resource(user, resource_type, ResourceContext(project_id="p1"))
        assert not can_access_resource(user, resource_type, ResourceContext(project_id="p2"))

    def test_users_are_visible(self):
        assert can_access_resource(member(), ResourceType.USER, ResourceContext())

    def test_empty_context_denies(self):
        assert not can_access_resource(member(), ResourceType.PROJECT, ResourceContext())
        assert not can_access_resource(member(), "SPACESHIP", ResourceContext(project_id="p1"))


class TestFilterResources:
    def test_filter_preserves_order_and_input(self):
        user = member(project_ids=frozenset({"p1", "p3"}))
        resources = [
            {"project_id": "p3", "name": "third"},
            {"project_id": "p2", "name": "second"},
            {"project_id": "p1", "name": "first"},
            {"project_id": "p4", "owner_id": "u1", "name": "owned"},
        ]
        snapshot = list(resources)

        visible = filter_resources(user, resources, ResourceType.PROJECT)

        assert [r["name"] for r in visible] == ["third", "first", "owned"]
        assert resources == snapshot

    def test_filter_with_custom_context(self):
        user = member(team_ids=frozenset({"t1"}))
        teams = ["t1", "t2", "t1"]

        visible = filter_resources(user, teams, ResourceType.TEAM, lambda team_id: ResourceContext(team_id=team_id))

        assert visible == ["t1", "t1"]

    def test_filter_empty(self):
        assert filter_resources(member(), [], ResourceType.PROJECT) == []

    def test_filter_project_rows_with_default_context(self):
        owner = uuid4()
        shared = Project(name="Shared", owner_id=owner, team_id=uuid4())
        hidden = Project(name="Hidden", owner_id=owner)
        user = member(project_ids=frozenset({str(shared.id)}))

        assert filter_resources(user, [hidden, shared], ResourceType.PROJECT) == [shared]

    def test_filter_team_rows_with_default_context(self):
        core = Team(name="Core")
        other = Team(name="Other")
        user = member(team_ids=frozenset({str(core.id)}))

        assert filter_resources(user, [other, core], ResourceType.TEAM) == [core]


class TestResourceContextOf:
    def test_from_object_stringifies_ids(self):
        class Row:
            owner_id = 7
            team_id = None
            project_id = "p1"

        assert resource_context_of(Row()) == ResourceContext(owner_id="7", team_id=None, project_id="p1")

    def test_own_id_stands_in_for_project_and_team(self):
        project = Project(name="Board", team_id=uuid4())
        team = Team(name="Core")

        project_context = resource_context_of(project, ResourceType.PROJECT)
        assert project_context.project_id == str(project.id)
        assert project_context.team_id == str(project.team_id)
        assert resource_context_of(team, ResourceType.TEAM).team_id == str(team.id)

    def test_explicit_fields_win_over_own_id(self):
        row = {"id": "row-1", "project_id": "p1"}
        assert resource_context_of(row, ResourceType.PROJECT).project_id == "p1"
        assert resource_context_of(row).project_id == "p1"

    def test_context_passes_through(self):
        context = ResourceContext(owner_id="u1")
        assert resource_context_of(context) is context
