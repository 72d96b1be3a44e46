from __future__ import annotations

from datetime import datetime, timedelta, timezone

from bson import ObjectId

from fakes import NOW, InMemoryRecordStore, oid_at
from mongo_sheets_sync.application.services.window_selector import (
    EPOCH,
    WindowSelector,
    object_id_floor,
)


def test_object_id_floor_is_minimum_id_for_cutoff_second() -> None:
    cutoff = NOW.replace(microsecond=750000)
    floor = object_id_floor(cutoff)
    assert floor.generation_time == NOW
    assert floor.binary[4:] == b"\x00" * 8
    assert oid_at(NOW, counter=0) == floor
    assert oid_at(NOW, counter=1) > floor


def test_select_only_records_inside_six_hour_window() -> None:
    old = {"_id": oid_at(NOW - timedelta(hours=7)), "n": "T-7h"}
    mid = {"_id": oid_at(NOW - timedelta(hours=5)), "n": "T-5h"}
    recent = {"_id": oid_at(NOW - timedelta(hours=1)), "n": "T-1h"}
    store = InMemoryRecordStore([recent, old, mid])

    selection = WindowSelector(store, lookback=timedelta(hours=6)).select(NOW)

    assert [d["n"] for d in selection.records] == ["T-5h", "T-1h"]
    assert selection.cutoff == NOW - timedelta(hours=6)
    assert store.queries == [selection.min_id]


def test_select_admits_records_in_same_second_as_cutoff() -> None:
    cutoff = NOW - timedelta(hours=6)
    same_second = {"_id": oid_at(cutoff, counter=42)}
    store = InMemoryRecordStore([same_second])

    selection = WindowSelector(store).select(NOW + timedelta(milliseconds=900))

    assert selection.records == [same_second]


def test_select_uses_injected_clock_and_returns_empty_list() -> None:
    store = InMemoryRecordStore([])
    selector = WindowSelector(store, lookback=timedelta(hours=2), clock=lambda: NOW)

    selection = selector.select()

    assert selection.records == []
    assert isinstance(selection.min_id, ObjectId)
    assert selection.min_id.generation_time == NOW - timedelta(hours=2)


def test_object_id_floor_before_epoch_is_zero_id() -> None:
    cutoff = datetime(1960, 1, 1, tzinfo=timezone.utc)
    assert object_id_floor(cutoff) == ObjectId("0" * 24)


def test_lookback_longer_than_unix_era_selects_everything() -> None:
    docs = [
        {"_id": ObjectId("0" * 24), "n": "epoch"},
        {"_id": oid_at(NOW - timedelta(days=3650)), "n": "hace 10 anios"},
        {"_id": oid_at(NOW - timedelta(hours=1)), "n": "T-1h"},
    ]
    store = InMemoryRecordStore(docs)

    selection = WindowSelector(store, lookback=timedelta(hours=500000)).select(NOW)

    assert selection.cutoff == EPOCH
    assert selection.min_id == ObjectId("0" * 24)
    assert [d["n"] for d in selection.records] == ["epoch", "hace 10 anios", "T-1h"]
