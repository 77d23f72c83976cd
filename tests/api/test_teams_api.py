"""Tests for the team endpoints and the metadata stamped on their commands."""

from uuid import uuid4

from taskboard_server.api.dependencies import CurrentUser, authenticated_metadata, message_metadata
from taskboard_server.cqrs import EventBus, MessageType
from taskboard_server.models.db_model import User
from taskboard_server.permissions import Role, UserContext
from taskboard_server.services.registry import get_service_registry


class TestCreateTeam:
    def test_manager_creates_team_and_becomes_admin(self, client, world):
        response = client.post("/api/teams", headers=world["erin"], json={"name": " Platform ", "description": "Infra"})

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "teamCreatedSuccessfully"
        assert body["data"]["name"] == "Platform"
        assert body["data"]["created_by_id"] == world["erin_id"]

        detail = client.get(f"/api/teams/{body['data']['id']}", headers=world["erin"]).json()["data"]
        assert [(member["user_id"], member["role"]) for member in detail["members"]] == [(world["erin_id"], "ADMIN")]

    def test_admin_creates_team(self, client, world):
        assert client.post("/api/teams", headers=world["carol"], json={"name": "Ops"}).status_code == 201

    def test_member_may_not_create(self, client, world):
        response = client.post("/api/teams", headers=world["ada"], json={"name": "Rogue"})

        assert response.status_code == 403
        assert response.json()["message"] == "forbidden"

    def test_blank_name_is_rejected(self, client, world):
        response = client.post("/api/teams", headers=world["erin"], json={"name": ""})

        assert response.status_code == 400
        assert response.json()["message"] == "allFieldsAreRequired"


class TestReadTeams:
    def test_list_is_filtered_by_membership(self, client, world):
        response = client.get("/api/teams", headers=world["ada"])

        assert response.status_code == 200
        assert response.json()["message"] == "teamsRetrievedSuccessfully"
        assert [team["id"] for team in response.json()["data"]] == [world["team"]]

    def test_new_team_appears_in_creators_list(self, client, world):
        assert client.get("/api/teams", headers=world["erin"]).json()["data"] == []

        created = client.post("/api/teams", headers=world["erin"], json={"name": "Platform"}).json()["data"]

        listed = client.get("/api/teams", headers=world["erin"]).json()["data"]
        assert [team["id"] for team in listed] == [created["id"]]

    def test_member_sees_team_with_members(self, client, world):
        response = client.get(f"/api/teams/{world['team']}", headers=world["ada"])

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Core"
        roles = {member["user_id"]: member["role"] for member in data["members"]}
        assert roles == {world["bob_id"]: "ADMIN", world["ada_id"]: "MEMBER"}

    def test_admin_role_does_not_reveal_other_teams(self, client, world):
        response = client.get(f"/api/teams/{world['team']}", headers=world["carol"])

        assert response.status_code == 404
        assert response.json() == {"message": "teamsNotFound", "statusCode": 404, "error": "Not Found"}

    def test_unknown_team(self, client, world):
        assert client.get(f"/api/teams/{uuid4()}", headers=world["ada"]).status_code == 404

    def test_malformed_team_id(self, client, world):
        assert client.get("/api/teams/not-a-uuid", headers=world["ada"]).status_code == 400

    def test_teams_require_authentication(self, client, world):
        assert client.get("/api/teams").status_code == 401


def test_team_admin_can_invite(client, world, mail_sender):
    response = client.post(
        f"/api/teams/{world['team']}/invites", headers=world["bob"], json={"email": "dave@example.com", "role": "MEMBER"}
    )

    assert response.status_code == 201
    assert response.json()["message"] == "inviteSentSuccessfully"
    assert response.json()["data"]["added"] is False
    assert [message.to for message in mail_sender.sent] == ["dave@example.com"]


def test_team_member_cannot_invite(client, world):
    response = client.post(
        f"/api/teams/{world['team']}/invites", headers=world["ada"], json={"email": "dave@example.com"}
    )

    assert response.status_code == 403


def test_inviting_existing_user_adds_member(client, world):
    response = client.post(
        f"/api/teams/{world['team']}/invites", headers=world["bob"], json={"email": "carol@example.com"}
    )

    assert response.status_code == 201
    assert response.json()["message"] == "memberAddedSuccessfully"
    assert response.json()["data"]["added"] is True


def test_invite_metadata_carries_the_inviter(client, world):
    seen = []
    get_service_registry().get(EventBus).subscribe(MessageType.TEAM_INVITE_SENT_EVENT, seen.append)

    client.post(f"/api/teams/{world['team']}/invites", headers=world["bob"], json={"email": "dave@example.com"})

    assert len(seen) == 1
    assert seen[0].metadata.user_id == world["bob_id"]
    assert seen[0].metadata.source == "api"
    assert seen[0].metadata.correlation_id


class TestMessageMetadata:
    def test_authenticated_metadata_uses_the_caller(self):
        user = User(first_name="Ada", last_name="Tester", username="ada", email="ada@example.com", password_hash="x")
        auth = CurrentUser(user=user, context=UserContext(id=str(user.id), role=Role.MEMBER))

        metadata = authenticated_metadata(auth)

        assert metadata.user_id == str(user.id)
        assert metadata.source == "api"
        assert metadata.correlation_id

    def test_anonymous_metadata_has_no_user(self):
        first, second = message_metadata(), message_metadata()

        assert first.user_id is None
        assert first.correlation_id != second.correlation_id
