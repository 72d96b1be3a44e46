from mongo_sheets_sync.domain.entities.export import (
    ID_FIELD,
    DedupStrategy,
    DestinationState,
    FlatRow,
    Header,
    HeaderPlan,
    Record,
    SheetRead,
    SyncResult,
    ensure_utc,
    utc_now,
)

__all__ = [
    "ID_FIELD",
    "DedupStrategy",
    "DestinationState",
    "FlatRow",
    "Header",
    "HeaderPlan",
    "Record",
    "SheetRead",
    "SyncResult",
    "ensure_utc",
    "utc_now",
]
