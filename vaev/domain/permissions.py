"""Project capability bits."""
from __future__ import annotations

from enum import IntFlag


class ProjectPermission(IntFlag):
    EDIT_CONNECTION = 1
    EDIT_NODES = 2
    MANAGE_PROJECT = 4


ALL_PERMISSIONS = (
    ProjectPermission.EDIT_CONNECTION
    | ProjectPermission.EDIT_NODES
    | ProjectPermission.MANAGE_PROJECT
)


def has_permission(bits: int, capability: ProjectPermission) -> bool:
    """A capability is granted only when every bit it names is set."""
    return (int(bits) & int(capability)) == int(capability)
