from sqlalchemy.orm import Session
from vaev.db.models import Project, utc_timestamp
from typing import List, Optional


class ProjectRepository:
    """Repository for project operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_project(self, owner: str, name: str, permissions: int = None) -> Project:
        """
        Create a new project owned by a user.

        Args:
            owner: Owning user ID
            name: Project name
            permissions: Capability bits (optional, defaults to all)

        Returns:
            Created project
        """
        now = utc_timestamp()
        project = Project(owner=owner, name=name, created=now, updated=now)
        if permissions is not None:
            project.permissions = permissions
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        """
        Get a project by ID.

        Args:
            project_id: Project ID

        Returns:
            Project if found, None otherwise
        """
        return self.db.query(Project).filter(Project.id == project_id).first()

    def get_owner_projects(self, owner: str) -> List[Project]:
        """
        Get all projects owned by a user, newest first.

        Args:
            owner: User ID

        Returns:
            List of the user's projects
        """
        return (
            self.db.query(Project)
            .filter(Project.owner == owner)
            .order_by(Project.created.desc())
            .all()
        )
