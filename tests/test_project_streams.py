"""Tests for project creation and the project event streams."""
import json

from vaev.db.models import DefaultNodeType, Project
from vaev.db.repositories import NodeRepository, ProjectRepository, TypeRepository
from vaev.db.init_db import DEFAULT_EDGE_TYPES, DEFAULT_NODE_TYPES

from tests.helpers import CSRF_TOKEN


def _signals(response):
    for line in response.text.splitlines():
        if line.startswith("data: signals "):
            return json.loads(line[len("data: signals "):])
    raise AssertionError("no signals event in response")


class TestCreateProject:
    """POST /sse/project/create."""

    def test_project_bootstrapped_from_defaults(self, auth_client, db, user):
        response = auth_client.post(
            "/sse/project/create", files={"project-name": (None, "Demo"), "CSRF-Token": (None, CSRF_TOKEN)},
        )

        assert response.status_code == 200
        assert "event: datastar-merge-fragments" in response.text
        assert "data: selector #projects-list" in response.text
        assert "data: mergeMode append" in response.text
        assert "Demo" in response.text

        project = db.query(Project).filter(Project.owner == user.id, Project.name == "Demo").one()
        assert project.permissions == 7
        types = TypeRepository(db)
        node_names = sorted(row.name for row in types.get_project_node_types(project.id))
        edge_types = types.get_project_edge_types(project.id)
        assert node_names == sorted(f"Demo - {row['name']}" for row in DEFAULT_NODE_TYPES)
        assert len(node_names) + len(edge_types) == len(DEFAULT_NODE_TYPES) + len(DEFAULT_EDGE_TYPES)
        assert all(row.name.startswith("Demo - ") for row in edge_types)
        assert all(row.line_dash == b"" for row in edge_types)

    def test_colors_and_shape_preserved(self, auth_client, db, user):
        auth_client.post("/sse/project/create", data={"project-name": "Demo", "CSRF-Token": CSRF_TOKEN})

        project = db.query(Project).filter(Project.name == "Demo").one()
        person = db.query(DefaultNodeType).filter(DefaultNodeType.name == "Person").one()
        cloned = [row for row in TypeRepository(db).get_project_node_types(project.id)
                  if row.name == "Demo - Person"][0]
        assert (cloned.fill_color, cloned.stroke_color, cloned.stroke_width, cloned.shape) == (
            person.fill_color, person.stroke_color, person.stroke_width, person.shape,
        )

    def test_empty_name_toasts(self, auth_client, db):
        response = auth_client.post("/sse/project/create", data={"project-name": "  ", "CSRF-Token": CSRF_TOKEN})

        assert response.status_code == 200
        assert "data: selector #toaster" in response.text
        assert db.query(Project).count() == 0

    def test_anonymous_is_redirected(self, client):
        response = client.post(
            "/sse/project/create", data={"project-name": "Demo", "CSRF-Token": CSRF_TOKEN}, follow_redirects=False,
        )
        assert response.status_code == 303


class TestSnapshot:
    """GET /sse/project/{id} and the type pickers."""

    def test_snapshot_carries_whole_graph(self, auth_client, db, project, node_type, edge_type):
        repo = NodeRepository(db)
        first = repo.create_node(project.id, node_type.id, "a", 1, 2)
        second = repo.create_node(project.id, node_type.id, "b", 3, 4)
        repo.create_edge(project.id, edge_type.id, first.id, second.id)

        response = auth_client.get(f"/sse/project/{project.id}")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert "event: datastar-merge-signals" in response.text
        signals = _signals(response)
        assert set(signals) == {"project", "nodeTypes", "edgeTypes", "nodes", "edges", "currentedgetype"}
        assert signals["project"]["id"] == project.id
        assert sorted(node["name"] for node in signals["nodes"]) == ["a", "b"]
        assert len(signals["edges"]) == 1
        assert signals["currentedgetype"] == edge_type.id

    def test_snapshot_without_edge_types_omits_current(self, auth_client, db, user):
        empty = ProjectRepository(db).create_project(owner=user.id, name="Empty")
        signals = _signals(auth_client.get(f"/sse/project/{empty.id}"))
        assert "currentedgetype" not in signals
        assert signals["nodes"] == []

    def test_node_select_fragment(self, auth_client, project, node_type):
        response = auth_client.get(f"/sse/project/{project.id}/node-select")
        assert "data: selector #node-select" in response.text
        assert node_type.id in response.text

    def test_edge_select_fragment(self, auth_client, project, edge_type):
        response = auth_client.get(f"/sse/project/{project.id}/edge-select")
        assert "data: selector #edge-select" in response.text
        assert edge_type.id in response.text

    def test_editor_page(self, auth_client, project):
        response = auth_client.get(f"/project/{project.id}")
        assert response.status_code == 200
        assert f'content="{CSRF_TOKEN}"' in response.text
        assert f"/sse/project/{project.id}" in response.text
