"""
Manejadores de eventos de inicio y cierre del servicio.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from loguru import logger

from app.core.config import settings
from app.application.use_cases.polling_use_cases import FairnessPollerUseCases


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio del servicio.
    
    Args:
        app: Instancia de FastAPI
        
    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Configura logging y, si corresponde, arranca el poller."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")
            
            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )
            
            _validate_config()
            
            if settings.POLLING_AUTOSTART and settings.NOTION_TOKEN:
                status = await FairnessPollerUseCases().start_polling(settings.NOTION_TOKEN)
                logger.info(f"Poller iniciado al arranque: {status.poller_id}")
            
            logger.success("Servicio iniciado correctamente")
            
        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise
    
    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []
    
    if not settings.CFI_SERVICE_URL:
        warnings.append("CFI_SERVICE_URL no configurada - las evaluaciones fallaran")
    
    if settings.POLLING_AUTOSTART and not settings.NOTION_TOKEN:
        warnings.append("POLLING_AUTOSTART=true sin NOTION_TOKEN - el poller no se inicia")
    
    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre del servicio.
    
    Args:
        app: Instancia de FastAPI
        
    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Detiene los pollers y cierra sus clientes HTTP."""
        logger.info("Cerrando servicio...")
        
        stopped = await FairnessPollerUseCases().stop_all()
        logger.info(f"Pollers detenidos: {stopped}")
        
        logger.success("Servicio cerrado correctamente")
    
    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Ciclo de vida del servicio: startup antes de aceptar requests, shutdown al cerrar."""
    await startup_handler(app)()
    yield
    await shutdown_handler(app)()
