"""
Casos de uso de la aplicacion.
"""
from .notion_use_cases import NotionWorkspaceUseCases
from .polling_use_cases import FairnessPollerUseCases

__all__ = ["NotionWorkspaceUseCases", "FairnessPollerUseCases"]
