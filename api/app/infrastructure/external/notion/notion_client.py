"""
Cliente mínimo de la API REST de Notion (sin SDKs externos).

Requisitos cubiertos:
- httpx (async)
- búsqueda de databases por nombre
- query de databases con filtro y paginación por cursor
- actualización de propiedades de páginas

No hay reintentos ni backoff: un fallo se reporta al caller y el siguiente
ciclo del poller vuelve a intentarlo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx
from loguru import logger

from app.shared.exceptions.domain import NotionApiException

from .sync_config import FairnessDatabaseConfig
from .types import NotionPage


DEFAULT_BASE_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"


@dataclass(frozen=True)
class NotionCredentials:
    token: str
    notion_version: str = DEFAULT_NOTION_VERSION


def build_pending_entries_filter(config: FairnessDatabaseConfig) -> dict[str, Any]:
    """
    Filtro compuesto para traer solo filas listas para evaluar:

    - Job Title, Location, State y Compensation Offered con valor
    - Fairness Indicator vacío

    El Fairness Indicator vacío funciona como marca de "no procesado": una vez
    escrito, la fila deja de aparecer en la query sin necesidad de estado local.
    """
    return {
        "and": [
            {"property": config.job_title_property, "select": {"is_not_empty": True}},
            {"property": config.location_property, "rich_text": {"is_not_empty": True}},
            {"property": config.state_property, "select": {"is_not_empty": True}},
            {"property": config.compensation_property, "number": {"is_not_empty": True}},
            {"property": config.fairness_indicator_property, "rich_text": {"is_empty": True}},
        ]
    }


class NotionClient:
    """
    Cliente HTTP de Notion.

    Se construye una vez por credencial y se reutiliza; el caller es
    responsable de llamar a `aclose()` (o usar `async with`).
    """

    def __init__(
        self,
        credentials: NotionCredentials,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._http = http_client or httpx.AsyncClient(timeout=timeout_s)

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def search(self, query: str, *, object_type: str = "database") -> list[dict[str, Any]]:
        """
        Busca objetos por texto. Retorna los resultados en el orden de Notion.
        """
        body = {
            "query": query,
            "filter": {"value": object_type, "property": "object"},
        }
        payload = await self._request_json("POST", "/search", body=body)
        return list(payload.get("results") or [])

    async def query_database(
        self,
        database_id: str,
        *,
        filter: Optional[dict[str, Any]] = None,
        page_size: int = 100,
    ) -> list[NotionPage]:
        """
        Consulta una database siguiendo la paginación (`has_more`/`next_cursor`).

        Los objetos parciales (sin `properties`) se descartan.
        """
        pages: list[NotionPage] = []
        cursor: Optional[str] = None

        while True:
            body: dict[str, Any] = {"page_size": page_size}
            if filter:
                body["filter"] = filter
            if cursor:
                body["start_cursor"] = cursor

            payload = await self._request_json("POST", f"/databases/{database_id}/query", body=body)
            for result in payload.get("results") or []:
                page = NotionPage.from_api(result)
                if page is None:
                    logger.debug(f"[notion] Objeto parcial ignorado: {result.get('id')}")
                    continue
                pages.append(page)

            cursor = payload.get("next_cursor")
            if not payload.get("has_more") or not cursor:
                break

        return pages

    async def update_page(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        return await self._request_json("PATCH", f"/pages/{page_id}", body={"properties": properties})

    async def _request_json(self, method: str, path: str, *, body: dict[str, Any]) -> dict[str, Any]:
        """
        Request HTTP contra Notion. Cualquier respuesta no-2xx o error de
        transporte se traduce a NotionApiException.
        """
        headers = {
            "Authorization": f"Bearer {self._creds.token}",
            "Notion-Version": self._creds.notion_version,
            "Content-Type": "application/json",
        }
        url = f"{self._base_url}{path}"

        try:
            resp = await self._http.request(method, url, json=body, headers=headers)
        except httpx.HTTPError as e:
            raise NotionApiException(f"Notion request {method} {path} falló: {e}") from e

        if 200 <= resp.status_code < 300:
            try:
                return resp.json()
            except ValueError as e:
                raise NotionApiException(
                    f"Notion request {method} {path} devolvió un cuerpo no JSON",
                    upstream_status=resp.status_code,
                ) from e

        raise NotionApiException(
            f"Notion request {method} {path} falló {resp.status_code}: {resp.text}",
            upstream_status=resp.status_code,
        )
