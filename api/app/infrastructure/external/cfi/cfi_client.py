"""
Cliente del servicio CFI (Compensation Fairness Indicator).

El motor de scoring es externo: este módulo solo define el contrato que
consume el sync (`FairnessScorer`) y un adaptador HTTP simple.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import httpx
from loguru import logger

from app.shared.exceptions.domain import FairnessScoringException


@dataclass(frozen=True)
class FairnessAssessment:
    """Resultado transitorio del CFI para una fila."""

    label: str
    explanation_text: str
    artifact_url: str


class FairnessScorer(Protocol):
    async def get_fairness_indicator(
        self,
        job_title: str,
        location: str,
        state: str,
        compensation_offered: float,
    ) -> FairnessAssessment:
        ...


class CfiHttpScorer:
    """
    Adaptador HTTP del CFI.

    Request:  POST {service_url} {job_title, location, state, compensation_offered}
    Response: {signal, assessment, pdf_url}
    """

    def __init__(self, service_url: str, *, timeout_s: float = 60.0, http_client: Optional[httpx.AsyncClient] = None):
        self.service_url = service_url
        self._timeout_s = timeout_s
        self._http = http_client

    async def get_fairness_indicator(
        self,
        job_title: str,
        location: str,
        state: str,
        compensation_offered: float,
    ) -> FairnessAssessment:
        if not self.service_url:
            raise FairnessScoringException("CFI_SERVICE_URL no configurada")

        payload = {
            "job_title": job_title,
            "location": location,
            "state": state,
            "compensation_offered": compensation_offered,
        }

        try:
            if self._http is not None:
                response = await self._http.post(self.service_url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                    response = await client.post(self.service_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"[cfi] Error llamando al servicio CFI: {e}")
            raise FairnessScoringException(f"Error llamando al servicio CFI: {e}") from e
        except ValueError as e:
            logger.error("[cfi] Respuesta del CFI no es JSON valido")
            raise FairnessScoringException("Respuesta del CFI no es JSON valido") from e

        return parse_assessment(data)


def parse_assessment(data: object) -> FairnessAssessment:
    """Valida la respuesta del CFI; signal y pdf_url son obligatorios."""
    if not isinstance(data, dict):
        raise FairnessScoringException("Respuesta del CFI no es un objeto JSON")

    signal = data.get("signal")
    pdf_url = data.get("pdf_url") or data.get("pdfUrl")
    if not signal or not pdf_url:
        raise FairnessScoringException(
            "Respuesta del CFI incompleta",
            details={"keys": sorted(data.keys())},
        )

    return FairnessAssessment(
        label=str(signal),
        explanation_text=str(data.get("assessment") or ""),
        artifact_url=str(pdf_url),
    )
