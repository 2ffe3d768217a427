"""
===============================================================================
MÓDULO: Utilidades de paginación (cursor base64)
===============================================================================

Paginación consistente para los listados de tareas y usuarios:
- cursor opaco que codifica un offset
- response genérico Page[T] con total

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  paginate + encode/decode_cursor

Responsabilidades:
  - Codificar/decodificar cursor (cursor inválido -> InvalidCursorError)
  - Armar metadata has_next/has_prev, cursors y total
===============================================================================
"""

from __future__ import annotations

import base64
import binascii
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

_CURSOR_PREFIX = "offset:"


class InvalidCursorError(ValueError):
    """El cursor recibido no fue emitido por esta API."""


class PageInfo(BaseModel):
    has_next: bool = Field(description="Hay más items después de esta página")
    has_prev: bool = Field(description="Hay items antes de esta página")
    next_cursor: Optional[str] = Field(
        None, description="Cursor para la próxima página"
    )
    prev_cursor: Optional[str] = Field(
        None, description="Cursor para la página anterior"
    )
    total: Optional[int] = Field(None, description="Total de items del listado")


class Page(BaseModel, Generic[T]):
    items: List[T] = Field(description="Items de la página actual")
    page_info: PageInfo = Field(description="Metadatos de paginación")


def encode_cursor(offset: int) -> str:
    raw = f"{_CURSOR_PREFIX}{max(0, int(offset))}".encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("utf-8")


def decode_cursor(cursor: str | None) -> int:
    """Devuelve el offset del cursor; None o "" significan primera página."""
    if not cursor:
        return 0
    try:
        decoded = base64.urlsafe_b64decode(cursor.encode("utf-8")).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise InvalidCursorError("cursor inválido") from exc

    prefix, _, raw_offset = decoded.partition(":")
    if f"{prefix}:" != _CURSOR_PREFIX or not raw_offset.isdigit():
        raise InvalidCursorError("cursor inválido")
    return int(raw_offset)


def paginate(
    items: List[T],
    *,
    limit: int,
    offset: int,
    total: int,
) -> Page[T]:
    """Arma una página a partir del slice ya consultado y el total del filtro."""
    limit = max(1, int(limit))
    offset = max(0, int(offset))

    has_next = offset + len(items) < total
    has_prev = offset > 0

    return Page(
        items=items,
        page_info=PageInfo(
            has_next=has_next,
            has_prev=has_prev,
            next_cursor=encode_cursor(offset + limit) if has_next else None,
            prev_cursor=encode_cursor(max(0, offset - limit)) if has_prev else None,
            total=total,
        ),
    )
