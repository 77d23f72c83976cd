"""Service for project persistence."""

from functools import lru_cache
from uuid import UUID

from loguru import logger
from sqlmodel import Session, col, select

from taskboard_server.models.api_model import ProjectUpdateInput
from taskboard_server.models.db_model import Project
from taskboard_server.utils.clock import utcnow


class ProjectService:
    """Service for project-related operations."""

    def get_project(self, session: Session, project_id: UUID) -> Project | None:
        return session.get(Project, project_id)

    def list_projects(self, session: Session) -> list[Project]:
        """All projects, newest first. Callers filter by visibility."""
        return list(session.exec(select(Project).order_by(col(Project.created_at).desc())).all())

    def create_project(
        self,
        session: Session,
        name: str,
        owner_id: UUID | None,
        team_id: UUID | None = None,
        description: str | None = None,
    ) -> Project:
        project = Project(name=name, owner_id=owner_id, team_id=team_id, description=description)
        session.add(project)
        session.commit()
        session.refresh(project)
        logger.debug(f"Service: create_project - created project {project.id}")
        return project

    def update_project(self, session: Session, project: Project, changes: ProjectUpdateInput) -> Project:
        """Apply the fields present in ``changes`` to the project."""
        for field, value in changes.model_dump(exclude_unset=True).items():
            setattr(project, field, value)
        project.updated_at = utcnow()
        session.add(project)
        session.commit()
        session.refresh(project)
        logger.debug(f"Service: update_project - updated project {project.id}")
        return project


@lru_cache
def get_project_service() -> ProjectService:
    """Get a singleton instance of the project service."""
    return ProjectService()
