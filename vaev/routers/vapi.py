"""
Project-scoped graph API used by the editor front-end.

Every route runs the JSON guard and the owner check for the ``id`` path
parameter before touching the store.
"""
from typing import List

from fastapi import APIRouter, Body, Depends

from vaev.application.graph_service import GraphService
from vaev.db.models import Project
from vaev.dependencies import get_graph_service, owned_project
from vaev.domain.permissions import ProjectPermission
from vaev.schemas.api_schemas import (
    EdgeCreate,
    EdgeCreated,
    EdgeSchema,
    EdgeTypeSchema,
    EdgeUpdate,
    GraphSignals,
    MessageResponse,
    NodeCreate,
    NodeCreated,
    NodePosition,
    NodeSchema,
    NodeTypeSchema,
    ProjectSchema,
)
from vaev.security.guards import json_guard

router = APIRouter(prefix="/v-api/project")

require_user = json_guard()
project_reader = owned_project(require_user)
node_editor = owned_project(require_user, ProjectPermission.EDIT_NODES)
edge_editor = owned_project(require_user, ProjectPermission.EDIT_CONNECTION)


@router.get("/{id}", response_model=ProjectSchema)
def get_project(project: Project = Depends(project_reader)):
    return ProjectSchema.from_row(project)


@router.post("/{id}/save", response_model=MessageResponse)
def save_graph(
    signals: GraphSignals,
    project: Project = Depends(node_editor),
    graph: GraphService = Depends(get_graph_service),
):
    """
    Persist the node positions of a full editor snapshot. Other fields are ignored.
    """
    count = graph.update_node_positions(project.id, signals.nodes)
    return MessageResponse(message=f"Saved {count} nodes")


@router.get("/{id}/node-types", response_model=List[NodeTypeSchema])
def get_node_types(
    project: Project = Depends(project_reader),
    graph: GraphService = Depends(get_graph_service),
):
    return graph.node_types(project.id)


@router.get("/{id}/edge-types", response_model=List[EdgeTypeSchema])
def get_edge_types(
    project: Project = Depends(project_reader),
    graph: GraphService = Depends(get_graph_service),
):
    return graph.edge_types(project.id)


@router.get("/{id}/nodes", response_model=List[NodeSchema])
def get_nodes(
    project: Project = Depends(project_reader),
    graph: GraphService = Depends(get_graph_service),
):
    return graph.nodes(project.id)


@router.get("/{id}/edges", response_model=List[EdgeSchema])
def get_edges(
    project: Project = Depends(project_reader),
    graph: GraphService = Depends(get_graph_service),
):
    return graph.edges(project.id)


@router.put("/{id}/update-nodes", response_model=MessageResponse)
def update_nodes(
    positions: List[NodePosition],
    project: Project = Depends(node_editor),
    graph: GraphService = Depends(get_graph_service),
):
    """
    Move nodes. Only ``id``, ``x`` and ``y`` of each element are read.
    """
    count = graph.update_node_positions(project.id, positions)
    return MessageResponse(message=f"Updated {count} nodes")


@router.put("/{id}/update-edges", response_model=MessageResponse)
def update_edges(
    edges: List[EdgeUpdate],
    project: Project = Depends(edge_editor),
    graph: GraphService = Depends(get_graph_service),
):
    count = graph.update_edges(project.id, edges)
    return MessageResponse(message=f"Updated {count} edges")


@router.delete("/{id}/delete-nodes", response_model=MessageResponse)
def delete_nodes(
    node_ids: List[str] = Body(...),
    project: Project = Depends(node_editor),
    graph: GraphService = Depends(get_graph_service),
):
    """
    Delete nodes together with the edges attached to them.
    """
    count = graph.delete_nodes(project.id, node_ids)
    return MessageResponse(message=f"Deleted {count} nodes")


@router.delete("/{id}/delete-edges", response_model=MessageResponse)
def delete_edges(
    edge_ids: List[str] = Body(...),
    project: Project = Depends(edge_editor),
    graph: GraphService = Depends(get_graph_service),
):
    count = graph.delete_edges(project.id, edge_ids)
    return MessageResponse(message=f"Deleted {count} edges")


@router.post("/{id}/create-nodes", response_model=List[NodeCreated])
def create_nodes(
    nodes: List[NodeCreate],
    project: Project = Depends(node_editor),
    graph: GraphService = Depends(get_graph_service),
):
    """
    Insert nodes in request order. Each result carries the request's ``temp_id``
    next to the new server ``id``.
    """
    return graph.create_nodes(project.id, nodes)


@router.post("/{id}/create-edges", response_model=List[EdgeCreated])
def create_edges(
    edges: List[EdgeCreate],
    project: Project = Depends(edge_editor),
    graph: GraphService = Depends(get_graph_service),
):
    return graph.create_edges(project.id, edges)
