"""
Entidades del exportador Mongo -> Google Sheets.

Tipos puros, sin I/O, compartidos por los servicios y los casos de uso.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

# Documento tal como lo devuelve pymongo. Solo lectura una vez seleccionado.
Record = dict[str, Any]

# Claves con path punteado -> valor hoja.
FlatRow = dict[str, Any]

# Fila 1 de la hoja: nombres de columna únicos, en orden.
Header = list[str]

ID_FIELD = "_id"


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normaliza datetime a UTC (aware)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class DedupStrategy(str, Enum):
    """
    Estrategia para decidir qué candidatos son realmente nuevos.

    - WINDOW: confía en que la ventana no se solapa con la corrida anterior.
    - IDENTIFIERS: lee todos los _id ya presentes en la hoja y los descarta.
    """

    WINDOW = "window"
    IDENTIFIERS = "ids"


@dataclass(frozen=True)
class SheetRead:
    """
    Resultado explícito de una lectura de rango en la hoja.

    Un rango sin valores es un estado legítimo (hoja recién creada) y se
    representa con `rows == []`. Los errores de red/auth NO llegan aquí:
    se propagan como SinkReadError.
    """

    rows: list[list[str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @classmethod
    def empty(cls) -> "SheetRead":
        return cls(rows=[])


@dataclass(frozen=True)
class DestinationState:
    """Header actual + ids ya exportados. Se lee una sola vez por corrida."""

    header: Header
    existing_ids: frozenset[str] = frozenset()


@dataclass(frozen=True)
class HeaderPlan:
    """Header unificado y si hay que reescribir la fila 1."""

    header: Header
    added: list[str]
    changed: bool


@dataclass(frozen=True)
class SyncResult:
    """Resumen de una corrida, pensado para logging."""

    candidates: int
    new_records: int
    appended_rows: int
    header_updated: bool
    added_columns: list[str] = field(default_factory=list)
    dry_run: bool = False
    cutoff: Optional[datetime] = None
