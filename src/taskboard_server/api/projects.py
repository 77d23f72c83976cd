"""
Projects API - permission-checked project creation, reads and updates.

Listing is filtered by membership; single-project endpoints first check that
the project is visible to the caller (404 otherwise, so hidden projects are
indistinguishable from missing ones) and then check the action itself.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlmodel import Session

from taskboard_server.api.dependencies import CurrentUser, current_user, db_session, service
from taskboard_server.exceptions import PermissionDeniedError, ResourceNotFoundError, ValidationError
from taskboard_server.messages import ErrorMessage, SuccessMessage
from taskboard_server.models.api_model import ApiResponse, ProjectCreateInput, ProjectResponse, ProjectUpdateInput
from taskboard_server.models.db_model import Project
from taskboard_server.permissions import (
    ResourceContext,
    ResourceType,
    can_access_resource,
    can_create_project,
    can_edit_project,
    can_view_project,
    filter_resources,
    resource_context_of,
)
from taskboard_server.services.project_service import ProjectService

router = APIRouter(prefix="/projects")


def project_context(project: Project) -> ResourceContext:
    return resource_context_of(project, ResourceType.PROJECT)


def _visible_project(session: Session, projects: ProjectService, auth: CurrentUser, project_id: UUID) -> Project:
    project = projects.get_project(session, project_id)
    if project is None or not can_access_resource(auth.context, ResourceType.PROJECT, project_context(project)):
        raise ResourceNotFoundError(ErrorMessage.PROJECT_NOT_FOUND, "Project", str(project_id))
    return project


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    body: ProjectCreateInput,
    auth: CurrentUser = Depends(current_user),
    session: Session = Depends(db_session),
    projects: ProjectService = Depends(service(ProjectService)),
) -> ApiResponse:
    """Create a project owned by the caller, optionally inside one of the caller's teams."""
    if not can_create_project(auth.context):
        raise PermissionDeniedError()
    if not body.name.strip():
        raise ValidationError(ErrorMessage.ALL_FIELDS_ARE_REQUIRED)
    if body.team_id is not None and str(body.team_id) not in auth.context.team_ids:
        raise ResourceNotFoundError(ErrorMessage.TEAM_NOT_FOUND, "Team", str(body.team_id))

    project = projects.create_project(
        session,
        body.name.strip(),
        owner_id=auth.user.id,
        team_id=body.team_id,
        description=body.description.strip() if body.description else None,
    )
    logger.info(f"User {auth.context.id} created project {project.id}")
    return ApiResponse(
        message=SuccessMessage.PROJECT_CREATED,
        status_code=status.HTTP_201_CREATED,
        data=ProjectResponse.model_validate(project),
    )


@router.get("", response_model=ApiResponse)
def list_projects(
    auth: CurrentUser = Depends(current_user),
    session: Session = Depends(db_session),
    projects: ProjectService = Depends(service(ProjectService)),
) -> ApiResponse:
    visible = filter_resources(auth.context, projects.list_projects(session), ResourceType.PROJECT)
    data = [ProjectResponse.model_validate(project) for project in visible]
    return ApiResponse(message=SuccessMessage.PROJECTS_FETCHED, status_code=status.HTTP_200_OK, data=data)


@router.get("/{project_id}", response_model=ApiResponse)
def get_project(
    project_id: UUID,
    auth: CurrentUser = Depends(current_user),
    session: Session = Depends(db_session),
    projects: ProjectService = Depends(service(ProjectService)),
) -> ApiResponse:
    project = _visible_project(session, projects, auth, project_id)
    if not can_view_project(auth.context, project_context(project)):
        raise PermissionDeniedError()
    return ApiResponse(
        message=SuccessMessage.PROJECT_FETCHED,
        status_code=status.HTTP_200_OK,
        data=ProjectResponse.model_validate(project),
    )


@router.patch("/{project_id}", response_model=ApiResponse)
def update_project(
    project_id: UUID,
    body: ProjectUpdateInput,
    auth: CurrentUser = Depends(current_user),
    session: Session = Depends(db_session),
    projects: ProjectService = Depends(service(ProjectService)),
) -> ApiResponse:
    """Update a project. Allowed for roles with UPDATE on projects and for the project owner."""
    project = _visible_project(session, projects, auth, project_id)
    if not can_edit_project(auth.context, project_context(project)):
        raise PermissionDeniedError()
    project = projects.update_project(session, project, body)
    return ApiResponse(
        message=SuccessMessage.PROJECT_UPDATED,
        status_code=status.HTTP_200_OK,
        data=ProjectResponse.model_validate(project),
    )
