"""
Tests for the in-memory wallet registry.
"""

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from models import MODE_LOCAL, MODE_VIEW_KEY


def test_register_and_lookup(registry):
    record = registry.register("a" * 20, "b" * 20, 100)

    assert registry.lookup(record.id) is record
    assert record.id in registry
    assert len(registry) == 1
    assert record.mode == MODE_VIEW_KEY
    assert record.restore_height == 100
    assert record.created_at.endswith("Z")


def test_lookup_unknown_returns_none(registry):
    assert registry.lookup("missing") is None
    assert "missing" not in registry


def test_ids_are_unique_under_concurrency(registry):
    with ThreadPoolExecutor(max_workers=8) as pool:
        records = list(pool.map(lambda i: registry.register(f"{i:020d}"), range(200)))

    assert len({r.id for r in records}) == 200
    assert len(registry) == 200


def test_records_are_immutable(registry):
    record = registry.register("a" * 20)
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.address = "c" * 20


def test_view_key_never_leaves_the_record(registry):
    record = registry.register("a" * 20, "secretviewkey-" + "b" * 10)

    public = record.to_public_dict()
    assert set(public) == {"id", "address", "restoreHeight", "createdAt"}
    assert "secretviewkey" not in repr(record)
    assert record.view_key.startswith("secretviewkey")


def test_register_local_uses_placeholder_address(registry):
    record = registry.register_local("savings", 42)

    assert record.mode == MODE_LOCAL
    assert record.label == "savings"
    assert record.view_key is None
    assert record.address == f"pending-address:savings:{record.id}"
    assert registry.lookup(record.id) is record
