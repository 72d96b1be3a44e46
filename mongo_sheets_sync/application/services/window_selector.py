"""
Selección de documentos "nuevos desde la última corrida" por ventana de tiempo.

El _id de Mongo codifica su segundo de creación, así que la ventana se
traduce a un _id sintético mínimo: el menor ObjectId posible para
floor(cutoff). Puede admitir documentos del mismo segundo que el cutoff;
el dedup posterior se encarga de ellos.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from bson import ObjectId
from loguru import logger

from mongo_sheets_sync.application.interfaces.export_ports import RecordStore
from mongo_sheets_sync.domain.entities import Record, ensure_utc, utc_now

DEFAULT_LOOKBACK = timedelta(hours=6)
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def object_id_floor(cutoff: datetime) -> ObjectId:
    """
    Menor ObjectId cuyo timestamp es floor(cutoff).

    ObjectId.from_datetime deja en cero los 8 bytes de unicidad, por lo que
    cualquier _id generado en ese segundo o después compara >=.
    Un cutoff anterior a 1970 se acota al ObjectId cero (todos los documentos).
    """
    return ObjectId.from_datetime(max(ensure_utc(cutoff), EPOCH))


@dataclass(frozen=True)
class WindowSelection:
    cutoff: datetime
    min_id: ObjectId
    records: list[Record]


class WindowSelector:
    """Consulta el RecordStore por todo lo creado en la ventana [now - lookback, ...)."""

    def __init__(
        self,
        store: RecordStore,
        *,
        lookback: timedelta = DEFAULT_LOOKBACK,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._lookback = lookback
        self._clock = clock

    def cutoff(self, now: Optional[datetime] = None) -> datetime:
        current = ensure_utc(now or self._clock())
        # Una ventana mas larga que la era Unix equivale a "todo".
        if self._lookback >= current - EPOCH:
            return EPOCH
        return current - self._lookback

    def select(self, now: Optional[datetime] = None) -> WindowSelection:
        cutoff = self.cutoff(now)
        min_id = object_id_floor(cutoff)
        records = list(self._store.find_since(min_id))
        logger.info(f"Mongo devolvio {len(records)} docs (cutoff >= {cutoff.isoformat()})")
        return WindowSelection(cutoff=cutoff, min_id=min_id, records=records)
