"""
Excepciones relacionadas con la sincronización Notion <-> CFI.
"""
from typing import Any, Optional

from app.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""
    
    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None, status_code: int = 400):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details
        )


class DatabaseNotFoundException(DomainException):
    """
    La database de Notion no existe en el workspace del usuario.

    No es recuperable con reintentos: el usuario debe duplicar el template.
    """
    
    def __init__(
        self,
        message: str = "No database found. Please duplicate the template.",
        search_term: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code="DATABASE_NOT_FOUND",
            details={"search_term": search_term} if search_term else None,
            status_code=404,
        )


class NotionApiException(AppException):
    """Cualquier fallo de la API de Notion (HTTP no-2xx o error de transporte)."""
    
    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="NOTION_API_ERROR",
            details={"upstream_status": upstream_status} if upstream_status else None,
        )
        self.upstream_status = upstream_status


class FairnessScoringException(AppException):
    """El servicio CFI falló o devolvió un payload inutilizable."""
    
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="FAIRNESS_SCORING_ERROR",
            details=details,
        )


class PollerNotFoundException(DomainException):
    """Excepcion cuando no existe un poller con el ID indicado."""
    
    def __init__(self, poller_id: str):
        super().__init__(
            message=f"Poller con ID '{poller_id}' no encontrado",
            error_code="POLLER_NOT_FOUND",
            details={"poller_id": poller_id},
            status_code=404,
        )
