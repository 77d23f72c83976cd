"""Fixtures shared by the API tests: an app client and a small populated world."""

import pytest
from fastapi.testclient import TestClient

from taskboard_server.app import create_app
from taskboard_server.permissions import Role
from taskboard_server.services.project_service import ProjectService
from taskboard_server.services.team_service import TeamService
from taskboard_server.services.token_service import TokenService
from taskboard_server.services.user_service import UserService
from taskboard_server.utils.clock import expires_in


def make_user(session, username: str, role: Role = Role.MEMBER):
    user = UserService().create_user(
        session,
        first_name=username.capitalize(),
        last_name="Tester",
        username=username,
        email=f"{username}@example.com",
        password_hash="x",
        otp="123456",
        otp_expires_at=expires_in(minutes=10),
    )
    user.role = role
    user.is_verified = True
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def client(settings, engine, mail_sender):
    with TestClient(create_app(settings=settings, engine=engine, mail_sender=mail_sender)) as client:
        yield client


@pytest.fixture
def world(sessions, settings):
    """ada (MEMBER) owns one project and belongs to bob's team, which owns another; carol's is foreign.

    carol is a global ADMIN and erin a global MANAGER; neither belongs to a team.
    """
    tokens = TokenService(settings)
    teams = TeamService()
    projects = ProjectService()
    with sessions.session() as session:
        ada = make_user(session, "ada")
        bob = make_user(session, "bob")
        carol = make_user(session, "carol", Role.ADMIN)
        erin = make_user(session, "erin", Role.MANAGER)
        team = teams.create_team(session, "Core", created_by=bob.id)
        teams.add_member(session, team.id, ada.id, Role.MEMBER)
        own = projects.create_project(session, "Ada's", owner_id=ada.id)
        shared = projects.create_project(session, "Team", owner_id=bob.id, team_id=team.id)
        foreign = projects.create_project(session, "Carol's", owner_id=carol.id)
        world = {
            "team": str(team.id),
            "own": str(own.id),
            "shared": str(shared.id),
            "foreign": str(foreign.id),
        }
        for user in (ada, bob, carol, erin):
            world[f"{user.username}_id"] = str(user.id)
            world[user.username] = {"Authorization": f"Bearer {tokens.create_token_pair(user).access_token}"}
        return world
