"""Tests for application services."""
import pytest

from vaev.application.graph_service import GraphService
from vaev.application.project_access_service import ProjectAccessService
from vaev.application.project_bootstrap_service import MAX_PROJECT_NAME_LENGTH, ProjectBootstrapService
from vaev.db.repositories import NodeRepository, ProjectRepository, TypeRepository
from vaev.domain.errors import NotFoundError, UnauthorizedError, ValidationError
from vaev.domain.permissions import ProjectPermission
from vaev.schemas.api_schemas import EdgeCreate, EdgeUpdate, NodeCreate, NodePosition


def _record(user):
    return {"id": user.id, "email": user.email, "name": user.name}


class TestProjectAccessService:
    """Test project ownership checks."""

    def test_owner_gets_project(self, db, user, project):
        access = ProjectAccessService(ProjectRepository(db))
        assert access.require_owned_project(project.id, _record(user)).id == project.id

    def test_missing_project(self, db, user):
        access = ProjectAccessService(ProjectRepository(db))
        with pytest.raises(NotFoundError):
            access.require_owned_project("missing", _record(user))

    def test_empty_id_is_missing(self, db):
        with pytest.raises(NotFoundError):
            ProjectAccessService(ProjectRepository(db)).require_project_exists("")

    def test_other_owner(self, db, other_user, project):
        access = ProjectAccessService(ProjectRepository(db))
        with pytest.raises(UnauthorizedError):
            access.require_owned_project(project.id, _record(other_user))

    def test_capability_bits_are_independent(self, db, user):
        projects = ProjectRepository(db)
        project = projects.create_project(owner=user.id, name="Edges only",
                                          permissions=int(ProjectPermission.EDIT_CONNECTION))
        access = ProjectAccessService(projects)

        access.require_owned_project(project.id, _record(user), ProjectPermission.EDIT_CONNECTION)
        with pytest.raises(UnauthorizedError):
            access.require_owned_project(project.id, _record(user), ProjectPermission.EDIT_NODES)


class TestProjectBootstrapService:
    """Test project creation from the default catalogs."""

    def _service(self, db):
        return ProjectBootstrapService(ProjectRepository(db), TypeRepository(db))

    def test_name_is_trimmed(self, db):
        assert self._service(db).validate_name("  Demo  ") == "Demo"

    @pytest.mark.parametrize("name", ["", "   ", "x" * (MAX_PROJECT_NAME_LENGTH + 1)])
    def test_invalid_names(self, db, name):
        with pytest.raises(ValidationError):
            self._service(db).validate_name(name)

    def test_clones_every_default(self, db, user):
        types = TypeRepository(db)
        project = self._service(db).create_project(user.id, "Demo")

        node_types = types.get_project_node_types(project.id)
        edge_types = types.get_project_edge_types(project.id)
        assert len(node_types) == len(types.get_default_node_types())
        assert len(edge_types) == len(types.get_default_edge_types())
        assert project.owner == user.id
        assert project.permissions == int(ProjectPermission.EDIT_CONNECTION
                                          | ProjectPermission.EDIT_NODES
                                          | ProjectPermission.MANAGE_PROJECT)


class TestGraphService:
    """Test bulk graph mutations."""

    def _service(self, db):
        return GraphService(NodeRepository(db), TypeRepository(db))

    def test_create_nodes_echoes_temp_ids(self, db, project, node_type):
        created = self._service(db).create_nodes(project.id, [
            NodeCreate(x=1, y=2, name="a", type=node_type.id, temp_id="t1"),
            NodeCreate(x=3, y=4, name="b", type=node_type.id, id="local"),
            NodeCreate(x=5, y=6, name="c", type=node_type.id),
        ])
        assert [row.temp_id for row in created] == ["t1", "local", None]
        assert len({row.id for row in created}) == 3

    def test_create_nodes_stops_at_first_bad_element(self, db, project, node_type):
        service = self._service(db)
        with pytest.raises(ValidationError):
            service.create_nodes(project.id, [
                NodeCreate(x=0, y=0, name="kept", type=node_type.id),
                NodeCreate(x=0, y=0, name="bad", type="unknown"),
            ])
        assert [row.name for row in service.nodes(project.id)] == ["kept"]

    def test_edges_require_nodes_of_the_project(self, db, project, node_type, edge_type):
        service = self._service(db)
        first, second = service.create_nodes(project.id, [
            NodeCreate(x=0, y=0, name="a", type=node_type.id),
            NodeCreate(x=0, y=0, name="b", type=node_type.id),
        ])

        created = service.create_edges(project.id, [
            EdgeCreate(start_id=first.id, end_id=second.id, type=edge_type.id, temp_id="e"),
        ])
        assert created[0].temp_id == "e"

        with pytest.raises(ValidationError):
            service.create_edges(project.id, [EdgeCreate(start_id=first.id, end_id="ghost", type=edge_type.id)])
        with pytest.raises(ValidationError):
            service.update_edges(project.id, [
                EdgeUpdate(id=created[0].id, type=edge_type.id, start_id="ghost", end_id=second.id),
            ])

    def test_counts_skip_unknown_ids(self, db, project, node_type):
        service = self._service(db)
        node = service.create_nodes(project.id, [NodeCreate(x=0, y=0, name="a", type=node_type.id)])[0]

        assert service.update_node_positions(project.id, [
            NodePosition(id=node.id, x=9, y=9), NodePosition(id="ghost", x=1, y=1),
        ]) == 1
        assert service.delete_nodes(project.id, ["ghost", node.id]) == 1
        assert service.delete_edges(project.id, ["ghost"]) == 0

    def test_snapshot_shape(self, db, project, edge_type):
        snapshot = self._service(db).snapshot(project)
        assert snapshot["project"]["name"] == "Atlas"
        assert snapshot["currentedgetype"] == edge_type.id
        assert snapshot["edgeTypes"][0]["line_dash"] == "BAI="
