"""
DTOs del poller de Notion y de la database del template.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PollerStatusDTO(BaseModel):
    """Estado actual de un poller (nunca incluye el token)."""

    poller_id: str = Field(..., description="Identificador estable derivado de la credencial")
    status: str = Field(..., description="running | stopped")
    interval_seconds: float
    cycles: int = 0
    failed_cycles: int = 0
    processed_total: int = 0
    in_flight: bool = False
    created_at: datetime
    updated_at: datetime
    last_run_at: Optional[datetime] = None
    last_error: Optional[str] = None


class PollerListDTO(BaseModel):
    pollers: list[PollerStatusDTO]
    total: int


class DatabaseInfoDTO(BaseModel):
    """Database Notion localizada por el término de búsqueda."""

    database_id: str
    title: Optional[str] = None
    url: Optional[str] = None


class WorkspaceUrlDTO(BaseModel):
    url: str
