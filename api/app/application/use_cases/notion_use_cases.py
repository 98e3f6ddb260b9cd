"""
Casos de uso de consulta sobre el workspace Notion del usuario.

Cada llamada usa la credencial del request y cierra su cliente al terminar.
"""
from __future__ import annotations

from typing import Callable, Optional

from app.application.dto.polling_dto import DatabaseInfoDTO, WorkspaceUrlDTO
from app.infrastructure.external.notion.sync_service import FairnessIndicatorSync, build_from_settings


class NotionWorkspaceUseCases:
    """Lectura de la database del template y de su URL navegable."""

    def __init__(self, sync_factory: Optional[Callable[[str], FairnessIndicatorSync]] = None) -> None:
        self._sync_factory = sync_factory or build_from_settings

    async def get_database(self, token: str) -> DatabaseInfoDTO:
        service = self._sync_factory(token)
        try:
            database = await service.find_or_create_database()
        finally:
            await service.aclose()
        return DatabaseInfoDTO(
            database_id=database.database_id,
            title=database.title,
            url=database.url,
        )

    async def get_workspace_url(self, token: str) -> WorkspaceUrlDTO:
        service = self._sync_factory(token)
        try:
            url = await service.get_workspace_url()
        finally:
            await service.aclose()
        return WorkspaceUrlDTO(url=url)
