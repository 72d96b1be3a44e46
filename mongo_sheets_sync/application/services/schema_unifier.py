"""
Unión del header existente con las claves descubiertas en esta corrida.

Invariante: una columna existente nunca cambia de posición; las nuevas se
agregan al final en orden de primera aparición.
"""

from __future__ import annotations

from typing import Iterable

from mongo_sheets_sync.domain.entities import FlatRow, Header, HeaderPlan


def observed_keys(flat_rows: Iterable[FlatRow]) -> list[str]:
    """Claves de todas las filas, sin repetir, en orden de primera aparición."""
    seen: dict[str, None] = {}
    for row in flat_rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def unify_header(existing: Header, flat_rows: Iterable[FlatRow]) -> HeaderPlan:
    keys = observed_keys(flat_rows)

    if not existing:
        return HeaderPlan(header=keys, added=list(keys), changed=bool(keys))

    present = set(existing)
    added = [k for k in keys if k not in present]
    return HeaderPlan(header=list(existing) + added, added=added, changed=bool(added))
