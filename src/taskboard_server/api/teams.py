"""
Teams API - team creation, membership-filtered reads and member invitations.

Single-team reads answer 404 for teams the caller is not a member of, so
hidden teams are indistinguishable from missing ones.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlmodel import Session

from taskboard_server.api.dependencies import (
    CurrentUser,
    authenticated_metadata,
    command_bus,
    current_user,
    db_session,
    service,
)
from taskboard_server.commands.types import InviteTeamMemberCommand, InviteTeamMemberPayload
from taskboard_server.cqrs import CommandBus, MessageMetadata
from taskboard_server.exceptions import PermissionDeniedError, ResourceNotFoundError, ValidationError
from taskboard_server.messages import ErrorMessage, SuccessMessage
from taskboard_server.models.api_model import (
    ApiResponse,
    InviteInput,
    InviteResult,
    TeamCreateInput,
    TeamDetailResponse,
    TeamMemberResponse,
    TeamResponse,
)
from taskboard_server.permissions import (
    ResourceType,
    can_access_resource,
    can_create_team,
    can_view_team,
    filter_resources,
    resource_context_of,
)
from taskboard_server.services.team_service import TeamService

router = APIRouter(prefix="/teams")


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_team(
    body: TeamCreateInput,
    auth: CurrentUser = Depends(current_user),
    session: Session = Depends(db_session),
    teams: TeamService = Depends(service(TeamService)),
) -> ApiResponse:
    """Create a team; the creator becomes its first ADMIN member."""
    if not can_create_team(auth.context):
        raise PermissionDeniedError()
    if not body.name.strip():
        raise ValidationError(ErrorMessage.ALL_FIELDS_ARE_REQUIRED)

    description = body.description.strip() if body.description else None
    team = teams.create_team(session, body.name.strip(), created_by=auth.user.id, description=description)
    logger.info(f"User {auth.context.id} created team {team.id}")
    return ApiResponse(
        message=SuccessMessage.TEAM_CREATED,
        status_code=status.HTTP_201_CREATED,
        data=TeamResponse.model_validate(team),
    )


@router.get("", response_model=ApiResponse)
def list_teams(
    auth: CurrentUser = Depends(current_user),
    session: Session = Depends(db_session),
    teams: TeamService = Depends(service(TeamService)),
) -> ApiResponse:
    visible = filter_resources(auth.context, teams.list_teams(session), ResourceType.TEAM)
    data = [TeamResponse.model_validate(team) for team in visible]
    return ApiResponse(message=SuccessMessage.TEAMS_FETCHED, status_code=status.HTTP_200_OK, data=data)


@router.get("/{team_id}", response_model=ApiResponse)
def get_team(
    team_id: UUID,
    auth: CurrentUser = Depends(current_user),
    session: Session = Depends(db_session),
    teams: TeamService = Depends(service(TeamService)),
) -> ApiResponse:
    team = teams.get_team(session, team_id)
    visible = team is not None and can_access_resource(
        auth.context, ResourceType.TEAM, resource_context_of(team, ResourceType.TEAM)
    )
    if not visible:
        raise ResourceNotFoundError(ErrorMessage.TEAM_NOT_FOUND, "Team", str(team_id))
    if not can_view_team(auth.context):
        raise PermissionDeniedError()

    members = [TeamMemberResponse.model_validate(member) for member in teams.list_members(session, team.id)]
    data = TeamDetailResponse(**TeamResponse.model_validate(team).model_dump(), members=members)
    return ApiResponse(message=SuccessMessage.TEAMS_FETCHED, status_code=status.HTTP_200_OK, data=data)


@router.post("/{team_id}/invites", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def invite_member(
    team_id: str,
    body: InviteInput,
    auth: CurrentUser = Depends(current_user),
    bus: CommandBus = Depends(command_bus),
    metadata: MessageMetadata = Depends(authenticated_metadata),
) -> ApiResponse:
    """Invite an email address to the team.

    Existing users are added directly and no invitation email is sent.
    """
    payload = InviteTeamMemberPayload(team_id=team_id, email=body.email, role=body.role, invited_by_id=auth.context.id)
    result: InviteResult = await bus.execute(InviteTeamMemberCommand(payload=payload, metadata=metadata))
    message = SuccessMessage.MEMBER_ADDED if result.added else SuccessMessage.INVITE_SENT
    return ApiResponse(message=message, status_code=status.HTTP_201_CREATED, data=result)
