"""Service for creating projects from the default type catalogs."""
from __future__ import annotations

import logging

from vaev.db.models import Project
from vaev.db.repositories.projects import ProjectRepository
from vaev.db.repositories.types import TypeRepository
from vaev.domain.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_PROJECT_NAME_LENGTH = 255


class ProjectBootstrapService:
    """Creates a project and clones every default node/edge type into it."""

    def __init__(self, projects: ProjectRepository, types: TypeRepository) -> None:
        self._projects = projects
        self._types = types

    def validate_name(self, name: str) -> str:
        """Validate and normalize project name."""
        if not name or not name.strip():
            raise ValidationError("Project name is required and cannot be empty")
        name = name.strip()
        if len(name) > MAX_PROJECT_NAME_LENGTH:
            raise ValidationError(f"Project name must be at most {MAX_PROJECT_NAME_LENGTH} characters")
        return name

    def create_project(self, owner_id: str, name: str) -> Project:
        """
        Insert the project, then one node type per default node type and one
        edge type per default edge type, each named ``"<project> - <default>"``.

        Every insert commits on its own; a failure part-way leaves the rows
        written so far in place.
        """
        name = self.validate_name(name)
        project = self._projects.create_project(owner=owner_id, name=name)

        node_types = 0
        for default in self._types.get_default_node_types():
            self._types.create_node_type(
                project.id,
                name=f"{name} - {default.name}",
                fill_color=default.fill_color,
                stroke_color=default.stroke_color,
                stroke_width=default.stroke_width,
                shape=default.shape,
                metadata=default.metadata_,
            )
            node_types += 1

        edge_types = 0
        for default in self._types.get_default_edge_types():
            self._types.create_edge_type(
                project.id,
                name=f"{name} - {default.name}",
                stroke_color=default.stroke_color,
                stroke_width=default.stroke_width,
                line_dash=b"",
                metadata=default.metadata_,
            )
            edge_types += 1

        logger.info(
            "Created project %s for %s with %d node types and %d edge types",
            project.id, owner_id, node_types, edge_types,
        )
        return project
