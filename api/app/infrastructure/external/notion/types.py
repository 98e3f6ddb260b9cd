"""
Tipos y utilidades puras para la integracion con Notion.

Notion devuelve cada propiedad de una pagina como un objeto etiquetado por
`type` (select, rich_text, number, files, ...). Aqui se modela como
una union etiquetada: una dataclass por tipo, y un accessor por tipo esperado
que retorna el valor o None si el tipo declarado no coincide.

Se mantienen libres de I/O para poder testearlos facilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class SelectValue:
    """Propiedad `select`: nombre de la opcion elegida (None si vacia)."""

    name: Optional[str]


@dataclass(frozen=True)
class RichTextValue:
    """Propiedad `rich_text`: solo interesa el contenido del primer bloque."""

    text: Optional[str]


@dataclass(frozen=True)
class NumberValue:
    number: Optional[float]


@dataclass(frozen=True)
class UnsupportedValue:
    """Cualquier tipo de propiedad que este servicio no interpreta."""

    type: Optional[str]


PropertyValue = Union[
    SelectValue,
    RichTextValue,
    NumberValue,
    UnsupportedValue,
]


def _first_text(blocks: Any) -> Optional[str]:
    if not isinstance(blocks, list) or not blocks:
        return None
    first = blocks[0]
    if not isinstance(first, dict):
        return None
    text = first.get("text")
    content = text.get("content") if isinstance(text, dict) else None
    if content is None:
        content = first.get("plain_text")
    return content


def _option_name(option: Any) -> Optional[str]:
    return option.get("name") if isinstance(option, dict) else None


def parse_property(raw: Any) -> PropertyValue:
    """
    Convierte el objeto crudo de una propiedad Notion en su variante tipada.

    Nunca lanza: payloads desconocidos o incompletos terminan en
    UnsupportedValue o en una variante con valor None.
    """
    if not isinstance(raw, dict):
        return UnsupportedValue(type=None)

    kind = raw.get("type")
    if kind == "select":
        return SelectValue(name=_option_name(raw.get("select")))
    if kind == "rich_text":
        return RichTextValue(text=_first_text(raw.get("rich_text")))
    if kind == "number":
        value = raw.get("number")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            value = None
        return NumberValue(number=value)
    return UnsupportedValue(type=kind)


def get_select_property(raw: Any) -> Optional[str]:
    value = parse_property(raw)
    return value.name if isinstance(value, SelectValue) else None


def get_text_property(raw: Any) -> Optional[str]:
    value = parse_property(raw)
    if isinstance(value, RichTextValue) and value.text:
        return value.text
    return None


def get_number_property(raw: Any) -> Optional[float]:
    value = parse_property(raw)
    return value.number if isinstance(value, NumberValue) else None


@dataclass(frozen=True)
class NotionDatabase:
    """Database Notion minima: solo lo que necesita el sync."""

    database_id: str
    title: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "NotionDatabase":
        title = _first_text(payload.get("title"))
        return cls(
            database_id=str(payload["id"]),
            title=title,
            url=payload.get("url"),
        )


@dataclass(frozen=True)
class NotionPage:
    """Pagina (fila) de una database Notion con sus propiedades crudas."""

    page_id: str
    properties: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Optional["NotionPage"]:
        """
        Retorna None para objetos parciales (sin `properties`), que Notion
        puede devolver cuando la integracion no tiene acceso completo.
        """
        if "properties" not in payload:
            return None
        return cls(page_id=str(payload["id"]), properties=dict(payload["properties"] or {}))
