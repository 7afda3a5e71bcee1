from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from vaev.config import Settings
from vaev.db.database import get_db
from vaev.db.models import Project
from vaev.db.repositories import NodeRepository, ProjectRepository, TypeRepository
from vaev.domain.entities import UserRecord
from vaev.domain.permissions import ProjectPermission
from vaev.security.identity import get_user
from vaev.services.identity_provider import IdentityProvider
from vaev.application.graph_service import GraphService
from vaev.application.project_access_service import ProjectAccessService
from vaev.application.project_bootstrap_service import ProjectBootstrapService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_current_user(request: Request) -> Optional[UserRecord]:
    return get_user(request)


def get_project_access_service(db: Session = Depends(get_db)) -> ProjectAccessService:
    return ProjectAccessService(ProjectRepository(db))


def get_project_bootstrap_service(db: Session = Depends(get_db)) -> ProjectBootstrapService:
    return ProjectBootstrapService(ProjectRepository(db), TypeRepository(db))


def get_graph_service(db: Session = Depends(get_db)) -> GraphService:
    return GraphService(NodeRepository(db), TypeRepository(db))


def owned_project(
    guard: Callable[[Request], UserRecord],
    capability: Optional[ProjectPermission] = None,
) -> Callable[..., Project]:
    """Dependency loading the project named by the ``id`` path parameter.

    The guard runs first, so anonymous callers never reach the lookup.
    """

    def dependency(
        id: str,
        user: UserRecord = Depends(guard),
        access: ProjectAccessService = Depends(get_project_access_service),
    ) -> Project:
        return access.require_owned_project(id, user, capability)

    return dependency
