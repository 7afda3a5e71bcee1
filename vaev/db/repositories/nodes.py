from sqlalchemy import or_
from sqlalchemy.orm import Session
from vaev.db.models import Edge, Node, utc_timestamp
from typing import List, Optional


class NodeRepository:
    """Repository for node and edge operations.

    Every statement is scoped to a project; ids belonging to another project
    are never touched.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_node(self, project_id: str, type_id: str, name: str, x: int, y: int,
                    metadata: bytes = b"") -> Node:
        """
        Create a new node in a project.

        Args:
            project_id: Project ID
            type_id: Node type ID
            name: Node name
            x: World x coordinate
            y: World y coordinate
            metadata: Opaque node payload (optional)

        Returns:
            Created node
        """
        now = utc_timestamp()
        node = Node(
            project=project_id,
            type=type_id,
            name=name,
            x=x,
            y=y,
            metadata_=metadata or b"",
            created=now,
            updated=now,
        )
        self.db.add(node)
        self.db.commit()
        self.db.refresh(node)
        return node

    def get_node(self, project_id: str, node_id: str) -> Optional[Node]:
        """
        Get a node by ID within a project.

        Args:
            project_id: Project ID
            node_id: Node ID

        Returns:
            Node if found, None otherwise
        """
        return (
            self.db.query(Node)
            .filter(Node.id == node_id, Node.project == project_id)
            .first()
        )

    def update_node_position(self, project_id: str, node_id: str, x: int, y: int) -> bool:
        """
        Move a node.

        Args:
            project_id: Project ID
            node_id: Node ID
            x: New x coordinate
            y: New y coordinate

        Returns:
            True if a node was updated, False otherwise
        """
        count = (
            self.db.query(Node)
            .filter(Node.id == node_id, Node.project == project_id)
            .update({"x": x, "y": y, "updated": utc_timestamp()}, synchronize_session=False)
        )
        self.db.commit()
        return count > 0

    def delete_node(self, project_id: str, node_id: str) -> bool:
        """
        Delete a node and the edges incident to it.

        Args:
            project_id: Project ID
            node_id: Node ID

        Returns:
            True if node was deleted, False otherwise
        """
        self.db.query(Edge).filter(
            Edge.project == project_id,
            or_(Edge.start_id == node_id, Edge.end_id == node_id),
        ).delete(synchronize_session=False)
        count = (
            self.db.query(Node)
            .filter(Node.id == node_id, Node.project == project_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count > 0

    def get_project_nodes(self, project_id: str) -> List[Node]:
        """
        Get all nodes in a project.

        Args:
            project_id: Project ID

        Returns:
            List of nodes in the project
        """
        return self.db.query(Node).filter(Node.project == project_id).all()

    def create_edge(self, project_id: str, type_id: str, start_id: str, end_id: str) -> Edge:
        """
        Create a new edge between nodes.

        Args:
            project_id: Project ID
            type_id: Edge type ID
            start_id: Start node ID
            end_id: End node ID

        Returns:
            Created edge
        """
        now = utc_timestamp()
        edge = Edge(
            project=project_id,
            type=type_id,
            start_id=start_id,
            end_id=end_id,
            created=now,
            updated=now,
        )
        self.db.add(edge)
        self.db.commit()
        self.db.refresh(edge)
        return edge

    def update_edge(self, project_id: str, edge_id: str, type_id: str,
                    start_id: str, end_id: str) -> bool:
        """
        Re-type or re-connect an edge.

        Returns:
            True if an edge was updated, False otherwise
        """
        count = (
            self.db.query(Edge)
            .filter(Edge.id == edge_id, Edge.project == project_id)
            .update(
                {"type": type_id, "start_id": start_id, "end_id": end_id, "updated": utc_timestamp()},
                synchronize_session=False,
            )
        )
        self.db.commit()
        return count > 0

    def delete_edge(self, project_id: str, edge_id: str) -> bool:
        """
        Delete an edge by ID.

        Returns:
            True if edge was deleted, False otherwise
        """
        count = (
            self.db.query(Edge)
            .filter(Edge.id == edge_id, Edge.project == project_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return count > 0

    def get_project_edges(self, project_id: str) -> List[Edge]:
        """
        Get all edges in a project.

        Args:
            project_id: Project ID

        Returns:
            List of edges in the project
        """
        return self.db.query(Edge).filter(Edge.project == project_id).all()
