"""
Dependencias para inyeccion de casos de uso y de la credencial de Notion.
"""
from typing import Optional

from fastapi import Header

from app.application.use_cases.notion_use_cases import NotionWorkspaceUseCases
from app.application.use_cases.polling_use_cases import FairnessPollerUseCases
from app.shared.exceptions.auth import MissingNotionTokenException


def get_notion_token(authorization: Optional[str] = Header(default=None)) -> str:
    """
    Extrae el bearer token de Notion del header Authorization.

    Raises:
        MissingNotionTokenException: Si el header falta o no es Bearer
    """
    if not authorization:
        raise MissingNotionTokenException()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise MissingNotionTokenException()
    return token.strip()


def get_poller_use_cases() -> FairnessPollerUseCases:
    """
    Dependencia para obtener los casos de uso del poller.
    
    Returns:
        FairnessPollerUseCases: Instancia (el estado es compartido por clase)
    """
    return FairnessPollerUseCases()


def get_notion_use_cases() -> NotionWorkspaceUseCases:
    return NotionWorkspaceUseCases()
