"""
Lectura del estado de la hoja destino y escritura de header + filas nuevas.

Orden de escritura:
1. Sobrescribe la fila 1 solo si el header cambió.
2. Agrega las filas con INSERT_ROWS (desplaza, no sobrescribe).

Si (2) falla después de (1) queda el header actualizado sin filas nuevas:
la próxima corrida con dedup por ids vuelve a encontrar esos documentos.
"""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from mongo_sheets_sync.application.interfaces.export_ports import TabularSink
from mongo_sheets_sync.application.services.dedup_resolver import parse_identifier_column
from mongo_sheets_sync.domain.entities import (
    ID_FIELD,
    DedupStrategy,
    DestinationState,
    Header,
    HeaderPlan,
)


def col_letter(n: int) -> str:
    """1 -> A, 26 -> Z, 27 -> AA."""
    s = ""
    while n > 0:
        n, r = divmod(n - 1, 26)
        s = chr(65 + r) + s
    return s


def quote_title(title: str) -> str:
    """
    Formatea el nombre de la pestaña para notación A1.

    Siempre entre comillas: un nombre como "A1" o "AB12" sin comillas se
    confunde con una celda.
    """
    escaped = (title or "").strip().replace("'", "''")
    return f"'{escaped}'"


class SheetDestination:
    """Operaciones de alto nivel del pipeline sobre una pestaña concreta."""

    def __init__(self, sink: TabularSink, sheet_name: str, *, id_field: str = ID_FIELD) -> None:
        self._sink = sink
        self._title = quote_title(sheet_name)
        self._id_field = id_field

    def header_range(self) -> str:
        return f"{self._title}!A1:1"

    def identifier_range(self, column_index: int) -> str:
        col = col_letter(column_index + 1)
        return f"{self._title}!{col}2:{col}"

    def read_header(self) -> Header:
        read = self._sink.read_range(self.header_range())
        if read.is_empty:
            return []
        return [str(cell) for cell in read.rows[0]]

    def read_identifiers(self, header: Header) -> frozenset[str]:
        """Lee la columna _id completa (todas las filas, no solo la ventana)."""
        if self._id_field not in header:
            if header:
                logger.warning(
                    f"El header existente no tiene columna '{self._id_field}'. "
                    "No hay ids previos para deduplicar."
                )
            return frozenset()

        read = self._sink.read_range(self.identifier_range(header.index(self._id_field)))
        return parse_identifier_column(read.rows)

    def read_state(self, strategy: DedupStrategy) -> DestinationState:
        header = self.read_header()
        if strategy is DedupStrategy.WINDOW:
            return DestinationState(header=header)

        logger.info(f"Leyendo lista de '{self._id_field}' existentes en la hoja...")
        ids = self.read_identifiers(header)
        logger.info(f"Encontrados {len(ids)} ids ya presentes en la hoja.")
        return DestinationState(header=header, existing_ids=ids)

    def write(self, plan: HeaderPlan, rows: Sequence[Sequence[str]]) -> int:
        if plan.changed:
            logger.info(f"Actualizando header: +{len(plan.added)} columnas {plan.added}")
            self._sink.update_range(f"{self._title}!A1", [plan.header])

        if not rows:
            return 0
        return self._sink.append_rows(f"{self._title}!A1", rows)
