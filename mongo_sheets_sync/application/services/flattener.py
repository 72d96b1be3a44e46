"""
Aplanado de documentos Mongo a filas con claves punteadas.

{"user": {"name": "A", "tags": ["x"]}, "city": None}
--> {"user.name": "A", "user.tags": ["x"], "city": None}

Reglas:
- None y cualquier valor no-mapping (str, números, fechas, ObjectId, listas)
  son hojas bajo el path actual.
- Las listas NO se expanden: evita explosión combinatoria de columnas.
- Los mappings se recorren en orden de inserción.

Limitación conocida: si un nombre de campo contiene "." puede colisionar con
un path anidado. No se corrige en silencio.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from mongo_sheets_sync.domain.entities import ID_FIELD, FlatRow, Record

PATH_SEPARATOR = "."


def flatten(value: Any, prefix: str = "", out: Optional[FlatRow] = None) -> FlatRow:
    """Aplana `value` bajo `prefix`. Puro y determinista."""
    if out is None:
        out = {}

    if not isinstance(value, Mapping):
        out[prefix] = value
        return out

    for key, child in value.items():
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else str(key)
        flatten(child, path, out)
    return out


def flatten_record(record: Record, id_field: str = ID_FIELD) -> FlatRow:
    """
    Aplana un documento, convirtiendo antes el _id a su forma canónica (hex).

    El documento original no se modifica.
    """
    copy = dict(record)
    if copy.get(id_field) is not None:
        copy[id_field] = str(copy[id_field])
    return flatten(copy)
