"""
Caso de uso: exportar a Google Sheets los documentos Mongo recientes.

Diseño (resumen):
- Lee el estado de la hoja UNA vez (header + ids existentes según estrategia)
- Consulta Mongo por la ventana (_id >= ObjectId sintético del cutoff)
- Descarta los documentos ya presentes en la hoja
- Aplana, une el header y materializa las filas
- Reescribe el header solo si cambió y agrega las filas con INSERT_ROWS

Estrategia de idempotencia:
- Con DedupStrategy.IDENTIFIERS se puede ejecutar N veces sin duplicar filas.
- Corridas concurrentes NO se coordinan: el caller debe serializarlas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from mongo_sheets_sync.application.interfaces.export_ports import RecordStore, TabularSink
from mongo_sheets_sync.application.services.dedup_resolver import resolve_new_records
from mongo_sheets_sync.application.services.flattener import flatten_record
from mongo_sheets_sync.application.services.row_materializer import materialize_rows
from mongo_sheets_sync.application.services.schema_unifier import unify_header
from mongo_sheets_sync.application.services.sink_writer import SheetDestination
from mongo_sheets_sync.application.services.window_selector import WindowSelector
from mongo_sheets_sync.core.config import ExportConfig
from mongo_sheets_sync.domain.entities import SyncResult, utc_now


class MongoToSheetsExport:
    """
    Orquestador del pipeline para una colección y una pestaña.
    """

    def __init__(
        self,
        *,
        store: RecordStore,
        sink: TabularSink,
        config: ExportConfig,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._config = config
        self._selector = WindowSelector(store, lookback=config.lookback, clock=clock)
        self._destination = SheetDestination(sink, config.sheet_name)

    def run_once(self, *, dry_run: bool = False, now: Optional[datetime] = None) -> SyncResult:
        """
        Ejecuta una corrida incremental completa.
        """
        strategy = self._config.dedup_strategy
        logger.info(
            f"Sync: Mongo '{self._config.mongo_db}.{self._config.mongo_collection}' -> "
            f"Sheet '{self._config.sheet_name}' (dedup={strategy.value})"
        )

        state = self._destination.read_state(strategy)

        selection = self._selector.select(now)
        new_docs = resolve_new_records(
            selection.records,
            strategy=strategy,
            existing_ids=state.existing_ids,
        )
        logger.info(f"Docs nuevos a agregar: {len(new_docs)}")

        if not new_docs:
            logger.info("No hay registros nuevos. Saliendo.")
            return SyncResult(
                candidates=len(selection.records),
                new_records=0,
                appended_rows=0,
                header_updated=False,
                dry_run=dry_run,
                cutoff=selection.cutoff,
            )

        flat_rows = [flatten_record(doc) for doc in new_docs]
        plan = unify_header(state.header, flat_rows)
        values = materialize_rows(flat_rows, plan.header)

        if dry_run:
            logger.info(
                f"DRY-RUN: se agregarian {len(values)} filas "
                f"(header {'cambia' if plan.changed else 'sin cambios'}, +{len(plan.added)} columnas)"
            )
            appended = 0
        else:
            appended = self._destination.write(plan, values)
            logger.success(f"Se agregaron {appended} filas nuevas.")

        return SyncResult(
            candidates=len(selection.records),
            new_records=len(new_docs),
            appended_rows=appended,
            header_updated=plan.changed and not dry_run,
            added_columns=plan.added,
            dry_run=dry_run,
            cutoff=selection.cutoff,
        )
