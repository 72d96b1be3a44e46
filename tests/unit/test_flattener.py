from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId

from mongo_sheets_sync.application.services.flattener import flatten, flatten_record


def _count_scalar_leaves(value) -> int:
    if isinstance(value, dict):
        return sum(_count_scalar_leaves(v) for v in value.values())
    return 1


def test_flatten_nested_dict_uses_dotted_paths() -> None:
    doc = {"user": {"name": "A", "age": 12}, "city": "Delhi"}
    assert flatten(doc) == {"user.name": "A", "user.age": 12, "city": "Delhi"}


def test_flatten_keeps_lists_and_dates_as_opaque_leaves() -> None:
    created = datetime(2025, 1, 1, tzinfo=timezone.utc)
    doc = {"tags": ["a", {"b": 1}], "meta": {"createdAt": created}}
    flat = flatten(doc)
    assert flat == {"tags": ["a", {"b": 1}], "meta.createdAt": created}


def test_flatten_emits_null_leaves() -> None:
    flat = flatten({"a": None, "b": {"c": None}})
    assert flat == {"a": None, "b.c": None}


def test_flatten_preserves_insertion_order() -> None:
    flat = flatten({"z": 1, "a": {"y": 2, "b": 3}, "m": 4})
    assert list(flat) == ["z", "a.y", "a.b", "m"]


def test_flatten_leaf_count_matches_scalar_leaves() -> None:
    doc = {
        "a": 1,
        "b": {"c": None, "d": {"e": "x", "f": True, "g": 2.5}},
        "h": {"i": {"j": {"k": 0}}},
    }
    assert len(flatten(doc)) == _count_scalar_leaves(doc) == 6


def test_flatten_empty_nested_object_contributes_no_keys() -> None:
    assert flatten({"a": {}, "b": 1}) == {"b": 1}


def test_flatten_record_converts_id_to_hex_without_mutating() -> None:
    oid = ObjectId("65a1b2c3d4e5f60718293a4b")
    ref = ObjectId("65a1b2c3d4e5f60718293a4c")
    doc = {"_id": oid, "ref": ref, "profile": {"name": "Ana"}}

    flat = flatten_record(doc)

    assert flat["_id"] == "65a1b2c3d4e5f60718293a4b"
    assert list(flat)[0] == "_id"
    # Solo el _id se convierte; otros ObjectId quedan como hoja.
    assert flat["ref"] == ref
    assert flat["profile.name"] == "Ana"
    assert doc["_id"] is oid
