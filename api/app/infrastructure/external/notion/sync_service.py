"""
Servicio de sincronización Notion <-> CFI.

Diseño (resumen):
- Localiza la database "CompX Fairness Indicator" por búsqueda
- Consulta las filas completas y sin Fairness Indicator
- Pide al CFI la clasificación de cada fila (secuencial)
- Escribe Fairness Indicator, Assessment Remarks, Status y Justification

Estrategia de idempotencia:
- El Fairness Indicator vacío es la marca de "pendiente". Al escribirlo la
  fila sale del filtro; no hay tabla de control local.
- Filas que pasan el filtro pero tienen un tipo de propiedad inesperado se
  saltan sin error y se reintentan en el siguiente ciclo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from app.shared.exceptions.domain import DatabaseNotFoundException

from app.infrastructure.external.cfi.cfi_client import CfiHttpScorer, FairnessScorer
from .notion_client import NotionClient, NotionCredentials, build_pending_entries_filter
from .page_properties import (
    build_fairness_properties,
    build_justification_file_name,
    build_justification_properties,
)
from .sync_config import FairnessDatabaseConfig, fairness_database_config_from_settings
from .types import (
    NotionDatabase,
    NotionPage,
    get_number_property,
    get_select_property,
    get_text_property,
)


@dataclass(frozen=True)
class SyncResult:
    found: int
    processed: int
    skipped: int


class FairnessIndicatorSync:
    """
    Orquestador del sync para una credencial de Notion.
    """

    def __init__(
        self,
        *,
        notion: NotionClient,
        scorer: FairnessScorer,
        config: Optional[FairnessDatabaseConfig] = None,
    ) -> None:
        self._notion = notion
        self._scorer = scorer
        self._config = config or FairnessDatabaseConfig()

    async def aclose(self) -> None:
        await self._notion.aclose()

    async def find_or_create_database(self) -> NotionDatabase:
        """
        Localiza la database del template. No la crea: si no existe, el
        usuario tiene que duplicar el template en su workspace.
        """
        try:
            database = await self._find_database()
            if database:
                logger.info(f"[notion-sync] Database encontrada: {database.database_id}")
                return database
            raise DatabaseNotFoundException(search_term=self._config.search_term)
        except Exception as e:
            logger.error(f"[notion-sync] Error buscando la database: {e}")
            raise

    async def _find_database(self) -> Optional[NotionDatabase]:
        results = await self._notion.search(self._config.search_term, object_type="database")
        return NotionDatabase.from_api(results[0]) if results else None

    async def get_workspace_url(self) -> str:
        """URL navegable de la database: https://<host>/<id sin guiones>."""
        try:
            database = await self._find_database()
            if database is None:
                raise DatabaseNotFoundException(
                    message=f"No {self._config.search_term} database found.",
                    search_term=self._config.search_term,
                )
            return build_workspace_url(self._config.workspace_host, database.database_id)
        except Exception as e:
            logger.error(f"[notion-sync] Error obteniendo la URL del workspace: {e}")
            raise

    async def fetch_pending_entries(self, database: NotionDatabase) -> list[NotionPage]:
        pages = await self._notion.query_database(
            database.database_id,
            filter=build_pending_entries_filter(self._config),
        )
        logger.info(f"[notion-sync] {len(pages)} entradas nuevas para procesar")
        return pages

    async def process_page(self, page: NotionPage) -> bool:
        """
        Evalúa una fila y escribe el resultado.

        Returns:
            True si se escribió la evaluación, False si la fila se saltó.
        """
        cfg = self._config
        job_title = get_select_property(page.properties.get(cfg.job_title_property))
        location = get_text_property(page.properties.get(cfg.location_property))
        state = get_select_property(page.properties.get(cfg.state_property))
        compensation = get_number_property(page.properties.get(cfg.compensation_property))

        logger.info(f"[notion-sync] Procesando página: {page.page_id}")
        logger.debug(
            f"[notion-sync] Job Title={job_title!r} Location={location!r} "
            f"State={state!r} Compensation Offered={compensation!r}"
        )

        if not job_title or not location or not state or compensation is None:
            # Tipo de propiedad inesperado: se reintenta en el próximo ciclo.
            logger.debug(f"[notion-sync] Página {page.page_id} incompleta o con tipos inesperados, se omite")
            return False

        assessment = await self._scorer.get_fairness_indicator(job_title, location, state, compensation)

        # Fairness Indicator va al final: es lo que saca la fila del filtro.
        await self.append_file_to_database(
            page.page_id,
            assessment.artifact_url,
            build_justification_file_name(job_title, location, state, page.page_id),
        )
        await self.update_fairness_indicator(page.page_id, assessment.label, assessment.explanation_text)
        return True

    async def update_fairness_indicator(
        self,
        page_id: str,
        fairness_indicator: str,
        assessment_remarks: str,
    ) -> dict[str, Any]:
        properties = build_fairness_properties(
            self._config,
            fairness_indicator=fairness_indicator,
            assessment_remarks=assessment_remarks,
        )
        try:
            response = await self._notion.update_page(page_id, properties)
        except Exception as e:
            logger.error(f"[notion-sync] Error actualizando Fairness Indicator de {page_id}: {e}")
            raise
        logger.info(f"[notion-sync] Fairness Indicator actualizado en página: {page_id}")
        return response

    async def append_file_to_database(self, page_id: str, file_url: str, file_name: str) -> dict[str, Any]:
        properties = build_justification_properties(self._config, file_url=file_url, file_name=file_name)
        try:
            return await self._notion.update_page(page_id, properties)
        except Exception as e:
            logger.error(f"[notion-sync] Error adjuntando Justification a {page_id}: {e}")
            raise

    async def run_once(self) -> SyncResult:
        """
        Ejecuta un ciclo completo. Las páginas se procesan en el orden que
        devuelve Notion, una a la vez.
        """
        database = await self.find_or_create_database()
        pages = await self.fetch_pending_entries(database)

        processed = 0
        for page in pages:
            if await self.process_page(page):
                processed += 1

        result = SyncResult(found=len(pages), processed=processed, skipped=len(pages) - processed)
        logger.info(
            f"[notion-sync] Ciclo completado. encontradas={result.found}, "
            f"procesadas={result.processed}, omitidas={result.skipped}"
        )
        return result


def build_workspace_url(host: str, database_id: str) -> str:
    return f"https://{host}/{database_id.replace('-', '')}"


def build_from_settings(token: str, settings=None) -> FairnessIndicatorSync:
    """
    Constructor "oficial" del sync para una credencial.

    El token lo entrega el caller; el resto sale de Settings.
    """
    if settings is None:
        from app.core.config import settings

    notion = NotionClient(
        NotionCredentials(token=token, notion_version=settings.NOTION_VERSION),
        base_url=settings.NOTION_API_BASE_URL,
        timeout_s=settings.NOTION_TIMEOUT_SECONDS,
    )
    scorer = CfiHttpScorer(settings.CFI_SERVICE_URL, timeout_s=settings.CFI_TIMEOUT_SECONDS)
    return FairnessIndicatorSync(
        notion=notion,
        scorer=scorer,
        config=fairness_database_config_from_settings(settings),
    )
