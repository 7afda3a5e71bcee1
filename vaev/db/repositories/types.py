from sqlalchemy.orm import Session
from vaev.db.models import DefaultEdgeType, DefaultNodeType, EdgeType, NodeType
from typing import List, Optional


class TypeRepository:
    """Repository for project node/edge types and the default catalogs."""

    def __init__(self, db: Session):
        self.db = db

    def create_node_type(self, project_id: str, name: str, fill_color: str = "",
                         stroke_color: str = "", stroke_width: int = 1, shape: int = 0,
                         metadata: str = "") -> NodeType:
        """
        Create a node type inside a project.

        Args:
            project_id: Owning project ID
            name: Display name
            fill_color: Fill colour (CSS)
            stroke_color: Stroke colour (CSS)
            stroke_width: Stroke width, 0-255
            shape: Shape enum value
            metadata: Free-form text

        Returns:
            Created node type
        """
        node_type = NodeType(
            project=project_id,
            name=name,
            fill_color=fill_color,
            stroke_color=stroke_color,
            stroke_width=stroke_width,
            shape=shape,
            metadata_=metadata,
        )
        self.db.add(node_type)
        self.db.commit()
        self.db.refresh(node_type)
        return node_type

    def create_edge_type(self, project_id: str, name: str, stroke_color: str = "",
                         stroke_width: int = 1, line_dash: bytes = b"",
                         metadata: str = "") -> EdgeType:
        """
        Create an edge type inside a project.

        Args:
            project_id: Owning project ID
            name: Display name
            stroke_color: Stroke colour (CSS)
            stroke_width: Stroke width, 0-255
            line_dash: Encoded dash pattern
            metadata: Free-form text

        Returns:
            Created edge type
        """
        edge_type = EdgeType(
            project=project_id,
            name=name,
            stroke_color=stroke_color,
            stroke_width=stroke_width,
            line_dash=line_dash,
            metadata_=metadata,
        )
        self.db.add(edge_type)
        self.db.commit()
        self.db.refresh(edge_type)
        return edge_type

    def get_project_node_types(self, project_id: str) -> List[NodeType]:
        return self.db.query(NodeType).filter(NodeType.project == project_id).all()

    def get_project_edge_types(self, project_id: str) -> List[EdgeType]:
        return self.db.query(EdgeType).filter(EdgeType.project == project_id).all()

    def get_node_type(self, project_id: str, type_id: str) -> Optional[NodeType]:
        return (
            self.db.query(NodeType)
            .filter(NodeType.id == type_id, NodeType.project == project_id)
            .first()
        )

    def get_edge_type(self, project_id: str, type_id: str) -> Optional[EdgeType]:
        return (
            self.db.query(EdgeType)
            .filter(EdgeType.id == type_id, EdgeType.project == project_id)
            .first()
        )

    def get_default_node_types(self) -> List[DefaultNodeType]:
        return self.db.query(DefaultNodeType).all()

    def get_default_edge_types(self) -> List[DefaultEdgeType]:
        return self.db.query(DefaultEdgeType).all()
