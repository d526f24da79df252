"""Tests for the in-memory store and its change feed."""

import pytest

from surgery_agenda.exceptions import StoreUnavailableError, StoreWriteError
from surgery_agenda.store import InMemorySurgeryStore, SurgeryCollection, SurgeryDeleted, SurgeryInserted, SurgeryUpdated


@pytest.fixture
def store(make_surgery, doctors, hospitals, insurance_plans):
    return InMemorySurgeryStore([make_surgery("a")], doctors, hospitals, insurance_plans)


def test_load_snapshot(store):
    snapshot = store.load_snapshot()
    assert [s.id for s in snapshot.surgeries] == ["a"]
    assert len(snapshot.doctors) == 3
    assert snapshot.loaded_at is not None


def test_save_emits_insert_then_update(store, make_surgery):
    deltas = []
    store.subscribe(deltas.append)

    store.save_surgery(make_surgery("b"))
    store.save_surgery(make_surgery("b", notes="x"))

    assert [type(d) for d in deltas] == [SurgeryInserted, SurgeryUpdated]
    assert store.write_count == 2


def test_delete_emits_delta(store):
    deltas = []
    store.subscribe(deltas.append)

    assert store.delete_surgery("a") is True
    assert store.delete_surgery("a") is False
    assert deltas == [SurgeryDeleted(surgery_id="a")]


def test_feed_keeps_collection_in_sync(store, make_surgery):
    collection = SurgeryCollection(store.load_snapshot())
    store.subscribe(collection.apply)

    store.save_surgery(make_surgery("b"))
    store.save_surgery(make_surgery("a", status="Completed"))
    store.delete_surgery("b")

    assert collection.surgeries == store.load_snapshot().surgeries


def test_closed_subscription_stops_delivery(store, make_surgery):
    deltas = []
    subscription = store.subscribe(deltas.append)
    subscription.close()

    store.save_surgery(make_surgery("b"))

    assert deltas == []


def test_transient_failure(store, make_surgery):
    deltas = []
    store.subscribe(deltas.append)
    store.fail_next_writes(1)

    with pytest.raises(StoreUnavailableError):
        store.save_surgery(make_surgery("b"))
    store.save_surgery(make_surgery("b"))

    assert len(deltas) == 1
    assert [s.id for s in store.load_snapshot().surgeries] == ["a", "b"]


def test_permanent_failure_is_not_unavailable(store, make_surgery):
    store.fail_next_writes(1, transient=False)

    with pytest.raises(StoreWriteError) as exc_info:
        store.save_surgery(make_surgery("b"))

    assert not isinstance(exc_info.value, StoreUnavailableError)
    assert exc_info.value.operation == "save_surgery"


def test_catalog_writes(store):
    from surgery_agenda.models import Hospital

    store.save_hospital(Hospital(id="h3", name="Sul"))
    assert store.delete_hospital("h1") is True
    assert store.delete_hospital("h1") is False
    assert {h.id for h in store.load_snapshot().hospitals} == {"h2", "h3"}
