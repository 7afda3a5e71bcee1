"""
Database Models using SQLAlchemy.

These define the schema for users, projects, the per-project type catalogs
(node types and edge types), the graph itself (nodes and edges), and the
global default catalogs cloned into every new project.
They are NOT related to:
- API schemas (see vaev.schemas.api_schemas)
- Client-side temp ids, which are never stored
"""
from sqlalchemy import Column, ForeignKey, Integer, LargeBinary, String, Text
from sqlalchemy.orm import declarative_base, relationship
import datetime
import uuid

from vaev.domain.permissions import ALL_PERMISSIONS

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


def format_timestamp(moment: datetime.datetime) -> str:
    """Render a UTC timestamp as ``YYYY-MM-DD HH:MM:SS.sssZ``."""
    moment = moment.astimezone(datetime.timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def utc_timestamp() -> str:
    return format_timestamp(datetime.datetime.now(datetime.timezone.utc))


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False, default="")
    password_hash = Column(String, nullable=False)
    # Rotating this invalidates every auth token minted for the user
    token_key = Column(String, nullable=False, default=generate_uuid)
    created = Column(String, default=utc_timestamp)
    updated = Column(String, default=utc_timestamp, onupdate=utc_timestamp)

    projects = relationship("Project", back_populates="owner_user")


class Project(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=generate_uuid)
    owner = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    permissions = Column(Integer, nullable=False, default=int(ALL_PERMISSIONS))
    created = Column(String, default=utc_timestamp)
    updated = Column(String, default=utc_timestamp, onupdate=utc_timestamp)

    # Relationships
    owner_user = relationship("User", back_populates="projects")
    node_types = relationship("NodeType", back_populates="project_ref", cascade="all, delete-orphan")
    edge_types = relationship("EdgeType", back_populates="project_ref", cascade="all, delete-orphan")
    nodes = relationship("Node", back_populates="project_ref", cascade="all, delete-orphan")
    edges = relationship("Edge", back_populates="project_ref", cascade="all, delete-orphan")


class NodeType(Base):
    __tablename__ = "node_types"

    id = Column(String, primary_key=True, default=generate_uuid)
    project = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    fill_color = Column(String, nullable=False, default="")
    stroke_color = Column(String, nullable=False, default="")
    stroke_width = Column(Integer, nullable=False, default=1)
    shape = Column(Integer, nullable=False, default=0)
    metadata_ = Column("metadata", Text, nullable=False, default="")

    project_ref = relationship("Project", back_populates="node_types")


class EdgeType(Base):
    __tablename__ = "edge_types"

    id = Column(String, primary_key=True, default=generate_uuid)
    project = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    stroke_color = Column(String, nullable=False, default="")
    stroke_width = Column(Integer, nullable=False, default=1)
    line_dash = Column(LargeBinary, nullable=False, default=b"")
    metadata_ = Column("metadata", Text, nullable=False, default="")

    project_ref = relationship("Project", back_populates="edge_types")


class Node(Base):
    __tablename__ = "nodes"

    id = Column(String, primary_key=True, default=generate_uuid)
    project = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, ForeignKey("node_types.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False, default="")
    x = Column(Integer, nullable=False, default=0)
    y = Column(Integer, nullable=False, default=0)
    metadata_ = Column("metadata", LargeBinary, nullable=False, default=b"")
    created = Column(String, default=utc_timestamp)
    updated = Column(String, default=utc_timestamp, onupdate=utc_timestamp)

    project_ref = relationship("Project", back_populates="nodes")


class Edge(Base):
    __tablename__ = "edges"

    id = Column(String, primary_key=True, default=generate_uuid)
    project = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, ForeignKey("edge_types.id", ondelete="CASCADE"), nullable=False)
    start_id = Column(String, ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False)
    end_id = Column(String, ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False)
    created = Column(String, default=utc_timestamp)
    updated = Column(String, default=utc_timestamp, onupdate=utc_timestamp)

    project_ref = relationship("Project", back_populates="edges")


class DefaultNodeType(Base):
    __tablename__ = "default_node_types"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    fill_color = Column(String, nullable=False, default="")
    stroke_color = Column(String, nullable=False, default="")
    stroke_width = Column(Integer, nullable=False, default=1)
    shape = Column(Integer, nullable=False, default=0)
    metadata_ = Column("metadata", Text, nullable=False, default="")


class DefaultEdgeType(Base):
    __tablename__ = "default_edge_types"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    stroke_color = Column(String, nullable=False, default="")
    stroke_width = Column(Integer, nullable=False, default=1)
    metadata_ = Column("metadata", Text, nullable=False, default="")
