"""Service for project ownership and capability checks."""
from __future__ import annotations

from typing import Optional

from vaev.db.models import Project
from vaev.db.repositories.projects import ProjectRepository
from vaev.domain.entities import UserRecord
from vaev.domain.errors import NotFoundError, UnauthorizedError
from vaev.domain.permissions import ProjectPermission, has_permission


class ProjectAccessService:
    """Centralizes project ownership checks to avoid controller duplication."""

    def __init__(self, projects: ProjectRepository) -> None:
        self._projects = projects

    def require_project_exists(self, project_id: str) -> Project:
        """Raise NotFoundError if project doesn't exist."""
        project = self._projects.get_project(project_id) if project_id else None
        if not project:
            raise NotFoundError(f"Project not found: {project_id}")
        return project

    def require_owned_project(
        self,
        project_id: str,
        user: UserRecord,
        capability: Optional[ProjectPermission] = None,
    ) -> Project:
        """Raise NotFoundError if project doesn't exist, UnauthorizedError if not the caller's."""
        project = self.require_project_exists(project_id)
        if project.owner != user["id"]:
            raise UnauthorizedError(f"User {user['id']} does not own project {project_id}")
        if capability is not None and not has_permission(project.permissions, capability):
            raise UnauthorizedError(f"Project {project_id} lacks capability {capability!r}")
        return project
