"""
Proyección de FlatRows sobre el header unificado.

Cada celda se renderiza como texto:
- clave ausente o None -> ""
- listas / dicts -> JSON (ObjectId como hex, fechas en ISO 8601);
  si aun así no serializa, str(valor)
- datetime / date -> ISO 8601
- resto de escalares -> str(valor)
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Iterable

from bson import ObjectId
from loguru import logger

from mongo_sheets_sync.domain.entities import FlatRow, Header


def _json_default(value: Any) -> str:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} no es serializable a JSON")


def render_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, Mapping)):
        try:
            return json.dumps(value, ensure_ascii=False, default=_json_default)
        except (TypeError, ValueError) as e:
            logger.debug(f"Valor no serializable a JSON, se usa str(): {e}")
            return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def materialize_row(flat: FlatRow, header: Header) -> list[str]:
    return [render_cell(flat.get(column)) for column in header]


def materialize_rows(flat_rows: Iterable[FlatRow], header: Header) -> list[list[str]]:
    return [materialize_row(flat, header) for flat in flat_rows]
