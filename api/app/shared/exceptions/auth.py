"""
Excepciones relacionadas con la credencial de Notion que envía el caller.
"""
from app.shared.exceptions.base import AppException


class AuthException(AppException):
    """Excepción base para errores de autenticación."""
    
    def __init__(self, message: str, error_code: str = "AUTH_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=401,
            error_code=error_code,
            details=details
        )


class MissingNotionTokenException(AuthException):
    """El request no trae `Authorization: Bearer <token>`."""
    
    def __init__(self):
        super().__init__(
            message="Falta el token de Notion (Authorization: Bearer <token>)",
            error_code="MISSING_NOTION_TOKEN"
        )
