"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .polling_dto import (
    PollerStatusDTO,
    PollerListDTO,
    DatabaseInfoDTO,
    WorkspaceUrlDTO,
)

__all__ = [
    "PollerStatusDTO",
    "PollerListDTO",
    "DatabaseInfoDTO",
    "WorkspaceUrlDTO",
]
