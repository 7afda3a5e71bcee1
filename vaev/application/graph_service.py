"""Service for project-scoped graph reads and bulk mutations."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from vaev.db.models import Project
from vaev.db.repositories.nodes import NodeRepository
from vaev.db.repositories.types import TypeRepository
from vaev.domain.errors import ValidationError
from vaev.schemas.api_schemas import (
    EdgeCreate,
    EdgeCreated,
    EdgeSchema,
    EdgeTypeSchema,
    EdgeUpdate,
    NodeCreate,
    NodeCreated,
    NodePosition,
    NodeSchema,
    NodeTypeSchema,
    ProjectSchema,
    encode_bytes,
)

logger = logging.getLogger(__name__)


class GraphService:
    """Bulk operations run one statement per element, in input order.

    A failing element stops the batch; elements before it stay committed.
    """

    def __init__(self, nodes: NodeRepository, types: TypeRepository) -> None:
        self._nodes = nodes
        self._types = types

    # Reads
    def node_types(self, project_id: str) -> List[NodeTypeSchema]:
        return [NodeTypeSchema.from_row(row) for row in self._types.get_project_node_types(project_id)]

    def edge_types(self, project_id: str) -> List[EdgeTypeSchema]:
        return [EdgeTypeSchema.from_row(row) for row in self._types.get_project_edge_types(project_id)]

    def nodes(self, project_id: str) -> List[NodeSchema]:
        return [NodeSchema.from_row(row) for row in self._nodes.get_project_nodes(project_id)]

    def edges(self, project_id: str) -> List[EdgeSchema]:
        return [EdgeSchema.from_row(row) for row in self._nodes.get_project_edges(project_id)]

    def snapshot(self, project: Project) -> Dict[str, Any]:
        """The full graph as one signals payload."""
        edge_types = self.edge_types(project.id)
        signals: Dict[str, Any] = {
            "project": ProjectSchema.from_row(project).model_dump(),
            "nodeTypes": [row.model_dump() for row in self.node_types(project.id)],
            "edgeTypes": [row.model_dump() for row in edge_types],
            "nodes": [row.model_dump() for row in self.nodes(project.id)],
            "edges": [row.model_dump() for row in self.edges(project.id)],
        }
        if edge_types:
            signals["currentedgetype"] = edge_types[0].id
        return signals

    # Nodes
    def create_nodes(self, project_id: str, items: List[NodeCreate]) -> List[NodeCreated]:
        created = []
        for item in items:
            if self._types.get_node_type(project_id, item.type) is None:
                raise ValidationError(f"Unknown node type: {item.type}")

            node = self._nodes.create_node(
                project_id, type_id=item.type, name=item.name, x=item.x, y=item.y,
                metadata=item.metadata,
            )
            created.append(NodeCreated(
                id=node.id,
                x=node.x,
                y=node.y,
                name=node.name,
                type=node.type,
                metadata=encode_bytes(node.metadata_),
                temp_id=item.client_temp_id,
            ))

        logger.info("Created %d nodes in project %s", len(created), project_id)
        return created

    def update_node_positions(self, project_id: str, items: List[NodePosition]) -> int:
        count = 0
        for item in items:
            if self._nodes.update_node_position(project_id, item.id, item.x, item.y):
                count += 1

        logger.info("Updated %d of %d nodes in project %s", count, len(items), project_id)
        return count

    def delete_nodes(self, project_id: str, node_ids: List[str]) -> int:
        count = 0
        for node_id in node_ids:
            if self._nodes.delete_node(project_id, node_id):
                count += 1

        logger.info("Deleted %d of %d nodes in project %s", count, len(node_ids), project_id)
        return count

    # Edges
    def _require_connection(self, project_id: str, type_id: str, start_id: str, end_id: str) -> None:
        if self._types.get_edge_type(project_id, type_id) is None:
            raise ValidationError(f"Unknown edge type: {type_id}")
        for node_id in (start_id, end_id):
            if self._nodes.get_node(project_id, node_id) is None:
                raise ValidationError(f"Unknown node: {node_id}")

    def create_edges(self, project_id: str, items: List[EdgeCreate]) -> List[EdgeCreated]:
        created = []
        for item in items:
            self._require_connection(project_id, item.type, item.start_id, item.end_id)
            edge = self._nodes.create_edge(
                project_id, type_id=item.type, start_id=item.start_id, end_id=item.end_id,
            )
            created.append(EdgeCreated(
                id=edge.id,
                start_id=edge.start_id,
                end_id=edge.end_id,
                type=edge.type,
                temp_id=item.client_temp_id,
            ))

        logger.info("Created %d edges in project %s", len(created), project_id)
        return created

    def update_edges(self, project_id: str, items: List[EdgeUpdate]) -> int:
        count = 0
        for item in items:
            self._require_connection(project_id, item.type, item.start_id, item.end_id)
            if self._nodes.update_edge(project_id, item.id, item.type, item.start_id, item.end_id):
                count += 1

        logger.info("Updated %d of %d edges in project %s", count, len(items), project_id)
        return count

    def delete_edges(self, project_id: str, edge_ids: List[str]) -> int:
        count = 0
        for edge_id in edge_ids:
            if self._nodes.delete_edge(project_id, edge_id):
                count += 1

        logger.info("Deleted %d of %d edges in project %s", count, len(edge_ids), project_id)
        return count
