"""
Configuración del sync (database Notion de CompX).

Aquí viven los nombres de propiedades y los valores fijos que se escriben.
Si el template de Notion cambia de nombres, este es el único lugar a tocar.

Este módulo no realiza I/O: solo define configuración.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FairnessDatabaseConfig:
    """
    Config de la database "CompX Fairness Indicator".

    - search_term: texto con el que se localiza la database en el workspace
    - *_property: nombres de las propiedades leídas/escritas
    - completed_status_*: valor de Status al terminar una evaluación
    """

    search_term: str = "CompX Fairness Indicator"
    workspace_host: str = "www.notion.so"

    job_title_property: str = "Job Title"
    location_property: str = "Location"
    state_property: str = "State"
    compensation_property: str = "Compensation Offered"

    fairness_indicator_property: str = "Fairness Indicator"
    assessment_remarks_property: str = "Assessment Remarks"
    status_property: str = "Status"
    justification_property: str = "Justification"

    completed_status_name: str = "Evaluation Complete!"
    completed_status_color: str = "green"


def fairness_database_config_from_settings(settings) -> FairnessDatabaseConfig:
    return FairnessDatabaseConfig(
        search_term=settings.NOTION_DATABASE_SEARCH_TERM,
        workspace_host=settings.NOTION_WORKSPACE_HOST,
    )
