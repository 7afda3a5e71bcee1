from vaev.db.repositories.projects import ProjectRepository
from vaev.db.repositories.types import TypeRepository
from vaev.db.repositories.nodes import NodeRepository
from vaev.db.repositories.users import UserRepository

__all__ = ['ProjectRepository', 'TypeRepository', 'NodeRepository', 'UserRepository']
