"""
Configuracion central del servicio.
Gestiona variables de entorno y configuraciones globales.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Clase de configuracion del servicio.
    Lee variables de entorno y proporciona valores por defecto.

    Notion:
    - NOTION_TOKEN es opcional: solo se usa para arrancar el poller al inicio
      (POLLING_AUTOSTART=true). Normalmente el token llega en cada request.
    - POLL_INTERVAL_SECONDS controla la pausa entre ciclos del poller.
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="CompX Fairness Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Notion
    NOTION_TOKEN: str = Field(default="")
    NOTION_API_BASE_URL: str = Field(default="https://api.notion.com/v1")
    NOTION_VERSION: str = Field(default="2022-06-28")
    NOTION_TIMEOUT_SECONDS: float = Field(default=30.0)
    NOTION_DATABASE_SEARCH_TERM: str = Field(default="CompX Fairness Indicator")
    NOTION_WORKSPACE_HOST: str = Field(default="www.notion.so")

    # Poller
    POLL_INTERVAL_SECONDS: float = Field(default=10.0, gt=0)
    POLLING_AUTOSTART: bool = Field(default=False)

    # Servicio CFI (scoring)
    CFI_SERVICE_URL: str = Field(default="")
    CFI_TIMEOUT_SECONDS: float = Field(default=60.0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
