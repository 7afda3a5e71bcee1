"""
API Request/Response Schemas using Pydantic.

Structure of the JSON bodies exchanged with the graph editor. Byte fields
(node metadata, edge dash patterns) travel as standard base64 strings.
"""
import base64
import binascii
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional

from vaev.db.models import Edge, EdgeType, Node, NodeType, Project

# Node coordinates are stored in 32-bit integer columns
COORDINATE_MIN = -(2 ** 31)
COORDINATE_MAX = 2 ** 31 - 1


def encode_bytes(value: Optional[bytes]) -> Optional[str]:
    if not value:
        return None
    return base64.b64encode(value).decode("ascii")


def decode_bytes(value: Any) -> bytes:
    if value is None or value == "":
        return b""
    if isinstance(value, bytes):
        return value
    if not isinstance(value, str):
        raise ValueError("must be a base64 string")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("must be a base64 string") from exc


# Read models
class ProjectSchema(BaseModel):
    id: str = Field(..., description="Unique identifier for the project")
    owner: str = Field(..., description="ID of the owning user")
    name: str = Field(..., description="Name of the project")
    permissions: int = Field(..., description="Capability bits")
    created: str = Field(..., description="Creation timestamp")
    updated: str = Field(..., description="Last update timestamp")

    @classmethod
    def from_row(cls, row: Project) -> "ProjectSchema":
        return cls(
            id=row.id, owner=row.owner, name=row.name, permissions=row.permissions,
            created=row.created, updated=row.updated,
        )


class NodeTypeSchema(BaseModel):
    id: str
    name: str
    fill_color: str
    stroke_color: str
    stroke_width: int = Field(..., ge=0, le=255)
    shape: int
    metadata: str = ""

    @classmethod
    def from_row(cls, row: NodeType) -> "NodeTypeSchema":
        return cls(
            id=row.id, name=row.name, fill_color=row.fill_color, stroke_color=row.stroke_color,
            stroke_width=row.stroke_width, shape=row.shape, metadata=row.metadata_ or "",
        )


class EdgeTypeSchema(BaseModel):
    id: str
    name: str
    stroke_color: str
    stroke_width: int = Field(..., ge=0, le=255)
    line_dash: Optional[str] = Field(None, description="Base64 dash pattern, null when solid")
    metadata: str = ""

    @classmethod
    def from_row(cls, row: EdgeType) -> "EdgeTypeSchema":
        return cls(
            id=row.id, name=row.name, stroke_color=row.stroke_color, stroke_width=row.stroke_width,
            line_dash=encode_bytes(row.line_dash), metadata=row.metadata_ or "",
        )


class NodeSchema(BaseModel):
    id: str
    type: str
    name: str
    x: int
    y: int
    metadata: Optional[str] = Field(None, description="Base64 node payload")
    created: Optional[str] = None
    updated: Optional[str] = None

    @classmethod
    def from_row(cls, row: Node) -> "NodeSchema":
        return cls(
            id=row.id, type=row.type, name=row.name, x=row.x, y=row.y,
            metadata=encode_bytes(row.metadata_), created=row.created, updated=row.updated,
        )


class EdgeSchema(BaseModel):
    id: str
    type: str
    start_id: str
    end_id: str
    created: Optional[str] = None
    updated: Optional[str] = None

    @classmethod
    def from_row(cls, row: Edge) -> "EdgeSchema":
        return cls(
            id=row.id, type=row.type, start_id=row.start_id, end_id=row.end_id,
            created=row.created, updated=row.updated,
        )


# Bulk mutation requests
class NodeCreate(BaseModel):
    x: int = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX, description="World x coordinate")
    y: int = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX, description="World y coordinate")
    name: str = Field(..., description="Display name of the node")
    type: str = Field(..., description="ID of the node type")
    metadata: bytes = Field(b"", description="Base64 node payload")
    temp_id: Optional[str] = Field(None, description="Client placeholder id, echoed back")
    id: Optional[str] = Field(None, description="Client placeholder id when temp_id is absent")

    @field_validator("metadata", mode="before")
    @classmethod
    def _decode_metadata(cls, value: Any) -> bytes:
        return decode_bytes(value)

    @property
    def client_temp_id(self) -> Optional[str]:
        return self.temp_id if self.temp_id is not None else self.id


class NodeCreated(BaseModel):
    id: str
    x: int
    y: int
    name: str
    type: str
    metadata: Optional[str] = None
    temp_id: Optional[str] = None


class NodePosition(BaseModel):
    id: str
    x: int = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX)
    y: int = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX)


class EdgeCreate(BaseModel):
    start_id: str
    end_id: str
    type: str
    temp_id: Optional[str] = None
    id: Optional[str] = None

    @property
    def client_temp_id(self) -> Optional[str]:
        return self.temp_id if self.temp_id is not None else self.id


class EdgeCreated(BaseModel):
    id: str
    start_id: str
    end_id: str
    type: str
    temp_id: Optional[str] = None


class EdgeUpdate(BaseModel):
    id: str
    type: str
    start_id: str
    end_id: str


class GraphSignals(BaseModel):
    """The whole editor state; only node positions are persisted from it."""
    project: Optional[Dict[str, Any]] = None
    nodeTypes: List[Dict[str, Any]] = Field(default_factory=list)
    edgeTypes: List[Dict[str, Any]] = Field(default_factory=list)
    nodes: List[NodePosition] = Field(default_factory=list)
    edges: List[Dict[str, Any]] = Field(default_factory=list)
    currentedgetype: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
