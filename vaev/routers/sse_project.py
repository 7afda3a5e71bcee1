"""
Project event streams: creation, the graph snapshot and the type pickers.
"""
import logging

from fastapi import APIRouter, Depends, Form

from vaev.application.graph_service import GraphService
from vaev.application.project_bootstrap_service import ProjectBootstrapService
from vaev.db.models import Project
from vaev.dependencies import get_graph_service, get_project_bootstrap_service, owned_project
from vaev.domain.entities import UserRecord
from vaev.domain.errors import ValidationError
from vaev.security.guards import redirect_guard
from vaev.sse import MERGE_MODE_APPEND, ServerSentEventGenerator
from vaev.templating import render_fragment, send_error_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sse/project")

require_login = redirect_guard()


@router.post("/create")
def create_project(
    name: str = Form("", alias="project-name"),
    user: UserRecord = Depends(require_login),
    bootstrap: ProjectBootstrapService = Depends(get_project_bootstrap_service),
):
    """
    Create a project seeded with the default type catalogs and append it to
    ``#projects-list``.
    """
    sse = ServerSentEventGenerator()
    try:
        project = bootstrap.create_project(user["id"], name)
    except ValidationError as exc:
        send_error_message(sse, str(exc))
        return sse.response()

    sse.merge_fragments(
        render_fragment("project_list_item.html", project=project),
        selector="#projects-list",
        merge_mode=MERGE_MODE_APPEND,
    )
    return sse.response()


@router.get("/{id}")
def project_snapshot(
    project: Project = Depends(owned_project(require_login)),
    graph: GraphService = Depends(get_graph_service),
):
    """
    Stream the whole graph as a single signals event.
    """
    sse = ServerSentEventGenerator()
    signals = graph.snapshot(project)
    logger.info(
        "Snapshot of project %s: %d nodes, %d edges",
        project.id, len(signals["nodes"]), len(signals["edges"]),
    )
    sse.merge_signals(signals)
    return sse.response()


@router.get("/{id}/node-select")
def node_type_select(
    project: Project = Depends(owned_project(require_login)),
    graph: GraphService = Depends(get_graph_service),
):
    sse = ServerSentEventGenerator()
    fragment = render_fragment("node_type_select.html", node_types=graph.node_types(project.id))
    sse.merge_fragments(fragment, selector="#node-select")
    return sse.response()


@router.get("/{id}/edge-select")
def edge_type_select(
    project: Project = Depends(owned_project(require_login)),
    graph: GraphService = Depends(get_graph_service),
):
    sse = ServerSentEventGenerator()
    fragment = render_fragment("edge_type_select.html", edge_types=graph.edge_types(project.id))
    sse.merge_fragments(fragment, selector="#edge-select")
    return sse.response()
