"""
Decide qué candidatos de la ventana son realmente nuevos para la hoja.
"""

from __future__ import annotations

from typing import Iterable

from mongo_sheets_sync.domain.entities import ID_FIELD, DedupStrategy, Record


def resolve_new_records(
    candidates: Iterable[Record],
    *,
    strategy: DedupStrategy,
    existing_ids: frozenset[str] = frozenset(),
    id_field: str = ID_FIELD,
) -> list[Record]:
    """
    Filtra candidatos preservando el orden de entrada.

    - WINDOW: todos los candidatos se consideran nuevos.
    - IDENTIFIERS: se descartan los que ya tienen su _id en la hoja.
    """
    if strategy is DedupStrategy.WINDOW:
        return list(candidates)

    return [doc for doc in candidates if str(doc.get(id_field)) not in existing_ids]


def parse_identifier_column(rows: list[list[str]]) -> frozenset[str]:
    """Convierte las filas de la columna de ids en un set, ignorando celdas vacías."""
    ids = set()
    for row in rows:
        if row and str(row[0]).strip():
            ids.add(str(row[0]).strip())
    return frozenset(ids)
