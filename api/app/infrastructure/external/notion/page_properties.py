"""
Payloads de propiedades que el sync escribe en las páginas de Notion.

Funciones puras: reciben valores y devuelven el dict que espera
`PATCH /pages/{id}`.
"""

from __future__ import annotations

from typing import Any

from .sync_config import FairnessDatabaseConfig


DEFAULT_COLOR = "gray"

# Color de fondo para los dos campos generados, según el label del CFI.
FAIRNESS_COLORS: dict[str, str] = {
    "Fair": "yellow_background",
    "Solid (Hindi Users: हार्ड :))": "purple_background",
    "Very Solid": "blue_background",
    "Lottery": "green_background",
    "Underpaid": "pink_background",
    "Undervalued": "orange_background",
    "Lowballed!": "red_background",
}


def label_to_color(label: str) -> str:
    """Retorna el color Notion del label; cualquier label desconocido va en gris."""
    return FAIRNESS_COLORS.get(label, DEFAULT_COLOR)


def _colored_rich_text(content: str, color: str) -> dict[str, Any]:
    return {
        "rich_text": [
            {
                "text": {"content": content},
                "annotations": {"color": color},
            }
        ]
    }


def build_fairness_properties(
    config: FairnessDatabaseConfig,
    *,
    fairness_indicator: str,
    assessment_remarks: str,
) -> dict[str, Any]:
    """
    Fairness Indicator y Assessment Remarks comparten el color del label;
    Status pasa al valor de "evaluación completa".
    """
    color = label_to_color(fairness_indicator)
    return {
        config.fairness_indicator_property: _colored_rich_text(fairness_indicator, color),
        config.assessment_remarks_property: _colored_rich_text(assessment_remarks, color),
        config.status_property: {
            "status": {
                "name": config.completed_status_name,
                "color": config.completed_status_color,
            }
        },
    }


def build_justification_properties(
    config: FairnessDatabaseConfig,
    *,
    file_url: str,
    file_name: str,
) -> dict[str, Any]:
    return {
        config.justification_property: {
            "files": [
                {
                    "name": file_name,
                    "type": "external",
                    "external": {"url": file_url},
                }
            ]
        }
    }


def build_justification_file_name(job_title: str, location: str, state: str, page_id: str) -> str:
    return f"{job_title}_{location}_{state}_{page_id}"
